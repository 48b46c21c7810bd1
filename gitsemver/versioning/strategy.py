"""
Version strategies.

A strategy turns the head commit and the candidate base commits found in
history into a Version, recording the metadata that explains the result.
All strategies share the same first steps (base commit, tag, base version)
and differ in how the base version is enhanced.
"""

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Type

from .commit import Commit, TagRef
from .exceptions import ConfigurationError
from .metadata import Metadatas, MetadataRegistrar, TagType
from .naming import VersionNamingConfiguration
from .selection import (
    compute_tag_type,
    find_tag_to_use,
    find_version_commit,
    is_base_commit_on_head,
    max_version_tag,
    tag_to_version,
)
from .version import SNAPSHOT, Version

logger = logging.getLogger(__name__)

DIRTY_QUALIFIER = "dirty"


class StrategySearchMode(str, Enum):
    """How far history is searched for commits carrying version tags."""

    # stop on the first commit having at least one version tag
    STOP_AT_FIRST = "STOP_AT_FIRST"
    # collect every tagged commit up to the search depth limit
    DEPTH = "DEPTH"


@dataclass(frozen=True)
class RepositoryState:
    """Working tree facts a strategy needs besides the commit graph."""

    dirty: bool = False
    branch: Optional[str] = None
    detached: bool = False


@dataclass(frozen=True)
class VersionResult:
    """A computed version and the metadata explaining it."""

    version: Version
    metadata: Dict[Metadatas, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return str(self.version)


def base_version_and_register(
    base: Commit,
    tag: Optional[TagRef],
    naming: VersionNamingConfiguration,
    registrar: MetadataRegistrar,
) -> Tuple[Version, Optional[TagType]]:
    """
    Decode the base version from ``tag`` and register it.

    Without tag the default version is used. The base version and its
    components are registered in every case, the tag name and type only
    when a tag exists.

    Returns:
        The base version and the type of the tag it comes from (None
        without tag)
    """
    base_version = Version.DEFAULT_VERSION
    tag_type = None

    if tag is not None:
        tag_type = compute_tag_type(tag, max_version_tag(base.annotated_tags, naming))
        base_version = tag_to_version(tag.tag_name, naming)

        registrar.register_metadata(Metadatas.BASE_TAG_TYPE, tag_type.value)
        registrar.register_metadata(Metadatas.BASE_TAG, tag.tag_name)

    registrar.register_metadata(Metadatas.BASE_VERSION, base_version)
    registrar.register_metadata(Metadatas.CURRENT_VERSION_MAJOR, base_version.major)
    registrar.register_metadata(Metadatas.CURRENT_VERSION_MINOR, base_version.minor)
    registrar.register_metadata(Metadatas.CURRENT_VERSION_PATCH, base_version.patch)

    return base_version, tag_type


def enhance_version_with_branch(
    version: Version,
    branch: str,
    naming: VersionNamingConfiguration,
    registrar: MetadataRegistrar,
) -> Version:
    """Append the qualifier computed for ``branch``, if any."""
    registrar.register_metadata(Metadatas.BRANCH_NAME, branch)

    qualifier = naming.branch_qualifier(branch)
    if qualifier:
        registrar.register_metadata(Metadatas.QUALIFIED_BRANCH_NAME, qualifier)
        version = version.add_qualifier(qualifier)
    return version


def register_commit_metadata(
    head: Commit, base: Commit, registrar: MetadataRegistrar
) -> None:
    registrar.register_metadata(Metadatas.COMMIT_DISTANCE, base.head_distance)
    registrar.register_metadata(Metadatas.GIT_SHA1_FULL, head.sha)
    registrar.register_metadata(Metadatas.GIT_SHA1_8, head.short_sha(8))


class VersionStrategy(ABC):
    """
    Base of the strategy family.

    Args:
        naming: Naming configuration used to read tags and branches
        state: Working tree state (dirtiness, current branch)
        search_mode: Overrides the strategy's default search mode
        max_search_depth: Preferred number of commits to inspect in DEPTH
            mode; None means the whole history
    """

    name = ""
    default_search_mode = StrategySearchMode.STOP_AT_FIRST

    def __init__(
        self,
        naming: VersionNamingConfiguration,
        state: Optional[RepositoryState] = None,
        search_mode: Optional[StrategySearchMode] = None,
        max_search_depth: Optional[int] = None,
    ):
        if max_search_depth is not None and max_search_depth < 1:
            raise ConfigurationError(
                f"max_search_depth must be a strictly positive integer, got {max_search_depth}"
            )
        self.naming = naming
        self.state = state or RepositoryState()
        self._search_mode = StrategySearchMode(search_mode or self.default_search_mode)
        self._max_search_depth = max_search_depth

    @abstractmethod
    def build(self, head: Commit, parents: Sequence[Commit]) -> VersionResult:
        """
        Build a version from the head commit and the candidate base commits.

        Args:
            head: The commit being versioned
            parents: Non-empty list of candidate base commits; contains the
                first commit of the repository when no tagged commit exists

        Raises:
            VersionCalculationError: If the version cannot be computed
        """

    def search_depth_limit(self) -> int:
        """
        Number of commits from HEAD the history search should inspect.

        Only a preference: when no tagged commit is found within the limit
        the search continues until one is found or the first commit is
        reached.
        """
        if self._max_search_depth is None:
            return sys.maxsize
        return self._max_search_depth

    def search_mode(self) -> StrategySearchMode:
        return self._search_mode

    def consider_tag_as_a_version_one(self, tag: TagRef) -> bool:
        return bool(self.naming.get_search_pattern().fullmatch(tag.tag_name))

    def _resolve_base(
        self, head: Commit, parents: Sequence[Commit], registrar: MetadataRegistrar
    ) -> Tuple[Commit, Version, Optional[TagType]]:
        dirty = self.state.dirty
        base = find_version_commit(head, parents, self.naming, dirty)
        tag = find_tag_to_use(head, base, self.naming, dirty)
        base_version, tag_type = base_version_and_register(
            base, tag, self.naming, registrar
        )
        register_commit_metadata(head, base, registrar)

        logger.debug(
            f"Base commit {base.short_sha()} tag={tag.tag_name if tag else None} "
            f"type={tag_type.value if tag_type else None} version={base_version}"
        )
        return base, base_version, tag_type

    @classmethod
    def from_options(
        cls,
        naming: VersionNamingConfiguration,
        state: Optional[RepositoryState],
        options: Mapping[str, Any],
    ) -> "VersionStrategy":
        return cls(
            naming,
            state,
            search_mode=options.get("search_mode"),
            max_search_depth=options.get("max_search_depth"),
        )


class ConfigurableVersionStrategy(VersionStrategy):
    """
    Base version enhanced with configurable qualifiers.

    Qualifiers are appended in this order: branch, commit distance, short
    commit id, dirty marker. Distance and commit id are only added when HEAD
    is past the base commit, unless the long format is requested.
    """

    name = "CONFIGURABLE"

    def __init__(
        self,
        naming: VersionNamingConfiguration,
        state: Optional[RepositoryState] = None,
        auto_increment_patch: bool = False,
        use_distance: bool = True,
        use_git_commit_id: bool = False,
        git_commit_id_length: int = 8,
        use_dirty: bool = False,
        use_long_format: bool = False,
        use_default_branching_policy: bool = True,
        **kwargs,
    ):
        super().__init__(naming, state, **kwargs)
        if not 1 <= git_commit_id_length <= 40:
            raise ConfigurationError(
                f"git_commit_id_length must be between 1 and 40, got {git_commit_id_length}"
            )
        self.auto_increment_patch = auto_increment_patch
        self.use_distance = use_distance
        self.use_git_commit_id = use_git_commit_id
        self.git_commit_id_length = git_commit_id_length
        self.use_dirty = use_dirty
        self.use_long_format = use_long_format
        self.use_default_branching_policy = use_default_branching_policy

    @classmethod
    def from_options(cls, naming, state, options):
        return cls(
            naming,
            state,
            auto_increment_patch=options.get("auto_increment_patch", False),
            use_distance=options.get("use_distance", True),
            use_git_commit_id=options.get("use_git_commit_id", False),
            git_commit_id_length=options.get("git_commit_id_length", 8),
            use_dirty=options.get("use_dirty", False),
            use_long_format=options.get("use_long_format", False),
            use_default_branching_policy=options.get(
                "use_default_branching_policy", True
            ),
            search_mode=options.get("search_mode"),
            max_search_depth=options.get("max_search_depth"),
        )

    def build(self, head: Commit, parents: Sequence[Commit]) -> VersionResult:
        registrar = MetadataRegistrar()
        base, version, tag_type = self._resolve_base(head, parents, registrar)

        distance = base.head_distance
        past_base = distance > 0 or self.use_long_format

        if self.auto_increment_patch and tag_type is TagType.ANNOTATED:
            if distance > 0 or self.state.dirty:
                version = version.increment_patch()

        if self.use_default_branching_policy and self.state.branch:
            version = enhance_version_with_branch(
                version, self.state.branch, self.naming, registrar
            )

        if self.use_distance and past_base:
            version = version.add_qualifier(str(distance))

        if self.use_git_commit_id and past_base:
            version = version.add_qualifier(head.short_sha(self.git_commit_id_length))

        if self.use_dirty and self.state.dirty:
            version = version.add_qualifier(DIRTY_QUALIFIER)

        return VersionResult(version, registrar.as_dict())


class MavenVersionStrategy(VersionStrategy):
    """
    Maven-like versions: releases on annotated tags, SNAPSHOT elsewhere.

    An annotated tag marks a released version, so commits after it build the
    next patch version. A lightweight tag names the version being prepared
    and is used as is.
    """

    name = "MAVEN"

    def build(self, head: Commit, parents: Sequence[Commit]) -> VersionResult:
        registrar = MetadataRegistrar()
        base, version, tag_type = self._resolve_base(head, parents, registrar)

        released = (
            tag_type is TagType.ANNOTATED
            and is_base_commit_on_head(head, base)
            and not self.state.dirty
        )
        if released:
            if self.state.branch:
                registrar.register_metadata(Metadatas.BRANCH_NAME, self.state.branch)
            return VersionResult(version, registrar.as_dict())

        if tag_type is TagType.ANNOTATED:
            version = version.increment_patch()

        if self.state.branch:
            version = enhance_version_with_branch(
                version, self.state.branch, self.naming, registrar
            )

        version = version.add_qualifier(SNAPSHOT)
        return VersionResult(version, registrar.as_dict())


STRATEGIES: Dict[str, Type[VersionStrategy]] = {
    ConfigurableVersionStrategy.name: ConfigurableVersionStrategy,
    MavenVersionStrategy.name: MavenVersionStrategy,
}


def build_strategy(
    name: str,
    naming: VersionNamingConfiguration,
    state: Optional[RepositoryState] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> VersionStrategy:
    """
    Instantiate the strategy registered under ``name``.

    Raises:
        ConfigurationError: If no strategy has that name
    """
    try:
        strategy_cls = STRATEGIES[name.upper()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown version strategy '{name}'. "
            f"Available strategies: {', '.join(sorted(STRATEGIES))}"
        )
    return strategy_cls.from_options(naming, state, options or {})
