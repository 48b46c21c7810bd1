"""
Read the commit and tag graph of a git repository with GitPython.

The walker materializes the head commit and the candidate base commits a
version strategy needs, honouring the strategy's search mode and depth.
"""

import logging
from collections import deque
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from gitsemver.versioning.commit import Commit, TagRef
from gitsemver.versioning.exceptions import GitRepositoryError
from gitsemver.versioning.strategy import (
    RepositoryState,
    StrategySearchMode,
    VersionStrategy,
)

logger = logging.getLogger(__name__)

# commit sha -> (annotated tags, lightweight tags)
TagIndex = Dict[str, Tuple[List[TagRef], List[TagRef]]]


def open_repository(path: Union[str, Path]) -> Repo:
    """
    Open the git repository containing ``path``.

    Raises:
        GitRepositoryError: If path is not inside a git repository, or the
            repository has no commit yet
    """
    try:
        repo = Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise GitRepositoryError(str(path)) from e

    if not repo.head.is_valid():
        raise GitRepositoryError(str(path), "repository has no commits")
    return repo


def read_repository_state(
    repo: Repo, branch_override: Optional[str] = None
) -> RepositoryState:
    """
    Snapshot the working tree state.

    Args:
        repo: Git repository
        branch_override: Branch name to use instead of the checked out one,
            typically provided by CI systems building a detached HEAD

    Returns:
        RepositoryState for the strategies
    """
    detached = repo.head.is_detached
    branch = branch_override
    if branch is None and not detached:
        branch = repo.active_branch.name

    state = RepositoryState(dirty=repo.is_dirty(), branch=branch, detached=detached)
    logger.debug(f"Repository state: {state}")
    return state


def collect_version_tags(repo: Repo, strategy: VersionStrategy) -> TagIndex:
    """
    Index the version tags of the repository by commit.

    Only tags accepted by ``strategy.consider_tag_as_a_version_one`` are kept.
    """
    index: TagIndex = {}
    for tag_ref in repo.tags:
        ref = TagRef(tag_ref.path, tag_ref.object.hexsha)
        if not strategy.consider_tag_as_a_version_one(ref):
            logger.debug(f"Tag {ref.tag_name} does not match the search pattern")
            continue

        try:
            commit = tag_ref.commit
        except ValueError:
            # tag on a tree or blob
            logger.debug(f"Tag {ref.tag_name} does not point to a commit")
            continue

        annotated, light = index.setdefault(commit.hexsha, ([], []))
        if tag_ref.tag is not None:
            annotated.append(ref)
        else:
            light.append(ref)
    return index


def walk_history(
    repo: Repo, strategy: VersionStrategy, tags: Optional[TagIndex] = None
) -> Tuple[Commit, List[Commit]]:
    """
    Walk history breadth-first from HEAD looking for tagged commits.

    In STOP_AT_FIRST mode the ancestry of a tagged commit is not followed.
    In DEPTH mode every tagged commit within the search depth limit is
    collected; past the limit the walk goes on only until one is found.
    When history holds no tagged commit the last root commit reached is
    returned as the only candidate.

    Returns:
        The head commit and the non-empty list of candidate base commits
    """
    if tags is None:
        tags = collect_version_tags(repo, strategy)

    mode = strategy.search_mode()
    limit = strategy.search_depth_limit()

    def to_commit(git_commit, distance: int) -> Commit:
        annotated, light = tags.get(git_commit.hexsha, ([], []))
        return Commit(git_commit.hexsha, annotated, light, distance)

    head_commit = repo.head.commit
    queue = deque([(head_commit, 0)])
    seen = {head_commit.hexsha}
    found: List[Commit] = []
    root = None

    while queue:
        git_commit, distance = queue.popleft()
        if mode is StrategySearchMode.DEPTH and found and distance >= limit:
            break

        commit = to_commit(git_commit, distance)
        if commit.has_tags:
            found.append(commit)
            if mode is StrategySearchMode.STOP_AT_FIRST:
                continue

        if not git_commit.parents:
            root = (git_commit, distance)

        for parent in git_commit.parents:
            if parent.hexsha not in seen:
                seen.add(parent.hexsha)
                queue.append((parent, distance + 1))

    if not found and root is not None:
        found.append(to_commit(*root))

    logger.debug(
        f"Found {len(found)} candidate base commit(s) from {head_commit.hexsha[:8]}"
    )
    return to_commit(head_commit, 0), found
