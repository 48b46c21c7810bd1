"""
Tag selection and merge resolution.

These functions pick the tag a base version is read from:

- ``max_version_tag`` keeps the tag with the greatest decoded version;
- ``find_tag_to_use`` decides whether annotated or lightweight tags are
  tried first, depending on whether the base commit is a clean head;
- ``find_version_commit`` chooses, for a merge, the parent whose tags
  yield the greatest version.
"""

import logging
from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

from .commit import Commit, TagRef
from .exceptions import VersionCalculationError, VersionFormatError
from .metadata import TagType
from .naming import VersionNamingConfiguration
from .version import Version

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class VersionTarget(Generic[T]):
    """A payload paired with the version it decodes to, ordered by version only."""

    version: Version
    target: T

    def __lt__(self, other: "VersionTarget") -> bool:
        return self.version < other.version


def _max_target(targets: List[VersionTarget[T]]) -> Optional[T]:
    # max() keeps the first of equal elements, so ties resolve to input order
    if not targets:
        return None
    return max(targets, key=lambda t: t.version).target


def tag_to_version(tag_name: str, naming: VersionNamingConfiguration) -> Version:
    """
    Decode a tag name into a Version using the naming configuration.

    Raises:
        VersionCalculationError: If the extracted text is not a version
    """
    extracted = naming.extract_version_from(tag_name)
    try:
        return Version.parse(extracted)
    except VersionFormatError as e:
        raise VersionCalculationError(
            f"Tag '{tag_name}' does not hold a valid version: {e}"
        ) from e


def max_version_tag(
    tags: Sequence[TagRef], naming: VersionNamingConfiguration
) -> Optional[TagRef]:
    """
    Return the tag with the greatest decoded version.

    Tags whose name cannot be decoded are left out of the comparison.

    Args:
        tags: Candidate tags
        naming: Naming configuration used to decode tag names

    Returns:
        The winning tag, or None when no tag decodes
    """
    targets = []
    for tag in tags:
        try:
            targets.append(VersionTarget(tag_to_version(tag.tag_name, naming), tag))
        except VersionCalculationError as e:
            logger.warning(f"Ignoring tag {tag.tag_name}: {e}")
    return _max_target(targets)


def max_version_tag_with_fallback(
    primary: Sequence[TagRef],
    secondary: Sequence[TagRef],
    naming: VersionNamingConfiguration,
) -> Optional[TagRef]:
    """Prefer the max tag of ``primary``; use ``secondary`` only when it yields none."""
    tag = max_version_tag(primary, naming)
    if tag is not None:
        return tag
    return max_version_tag(secondary, naming)


def is_base_commit_on_head(head: Commit, base: Commit) -> bool:
    return head.sha == base.sha


def find_tag_to_use(
    head: Commit, base: Commit, naming: VersionNamingConfiguration, dirty: bool
) -> Optional[TagRef]:
    """
    Find the tag of ``base`` that gives the base version.

    On a clean head annotated tags win over lightweight ones; anywhere else
    lightweight tags are tried first.
    """
    if is_base_commit_on_head(head, base) and not dirty:
        return max_version_tag_with_fallback(
            base.annotated_tags, base.light_tags, naming
        )
    return max_version_tag_with_fallback(base.light_tags, base.annotated_tags, naming)


def find_max_version_commit(
    head: Commit,
    parents: Sequence[Commit],
    naming: VersionNamingConfiguration,
    dirty: bool,
) -> Commit:
    """Return the parent whose tag yields the greatest version.

    Only parents with a usable tag compete; when none has one the first
    parent is returned.
    """
    targets = []
    for parent in parents:
        tag = find_tag_to_use(head, parent, naming, dirty)
        if tag is not None:
            targets.append(VersionTarget(tag_to_version(tag.tag_name, naming), parent))

    winner = _max_target(targets)
    return winner if winner is not None else parents[0]


def find_version_commit(
    head: Commit,
    parents: Sequence[Commit],
    naming: VersionNamingConfiguration,
    dirty: bool,
) -> Commit:
    """
    Select the base commit among the candidate parents.

    Raises:
        VersionCalculationError: If no candidate commit is given
    """
    if not parents:
        raise VersionCalculationError(
            "Cannot compute a version without any candidate base commit"
        )
    if len(parents) == 1:
        return parents[0]

    base = find_max_version_commit(head, parents, naming, dirty)
    logger.debug(
        f"Resolved base commit {base.short_sha()} among {len(parents)} candidates"
    )
    return base


def compute_tag_type(tag: TagRef, max_annotated_tag: Optional[TagRef]) -> TagType:
    """Classify ``tag`` by comparing it with the max annotated tag of its commit."""
    if max_annotated_tag is not None and tag.object_id == max_annotated_tag.object_id:
        return TagType.ANNOTATED
    return TagType.LIGHTWEIGHT
