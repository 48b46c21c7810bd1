"""Read-only views of commits and tag references produced by the history walker."""

from dataclasses import dataclass, field
from typing import Tuple

TAG_REF_PREFIX = "refs/tags/"


@dataclass(frozen=True)
class TagRef:
    """A tag reference: its raw name and the object id it points to.

    For an annotated tag the object id is the id of the tag object itself,
    for a lightweight tag it is the id of the tagged commit.
    """

    name: str
    object_id: str

    @property
    def tag_name(self) -> str:
        """Tag name without the ``refs/tags/`` prefix."""
        return self.name.replace(TAG_REF_PREFIX, "")


@dataclass(frozen=True)
class Commit:
    """A commit together with the version tags reachable at it."""

    sha: str
    annotated_tags: Tuple[TagRef, ...] = field(default_factory=tuple)
    light_tags: Tuple[TagRef, ...] = field(default_factory=tuple)
    head_distance: int = 0

    def __post_init__(self):
        # accept lists from callers, keep the snapshot immutable
        object.__setattr__(self, "annotated_tags", tuple(self.annotated_tags))
        object.__setattr__(self, "light_tags", tuple(self.light_tags))

    def short_sha(self, length: int = 8) -> str:
        return self.sha[:length]

    @property
    def has_tags(self) -> bool:
        return bool(self.annotated_tags or self.light_tags)
