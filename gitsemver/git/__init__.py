from .history import (
    collect_version_tags,
    open_repository,
    read_repository_state,
    walk_history,
)

__all__ = [
    "collect_version_tags",
    "open_repository",
    "read_repository_state",
    "walk_history",
]
