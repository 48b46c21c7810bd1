"""
Compute the version of a git working tree.

GitVersionCalculator ties together the repository, its configuration and
the configured strategy:

    calculator = GitVersionCalculator("path/to/repo")
    print(calculator.get_version())
"""

import logging
from pathlib import Path
from typing import Optional, Union

from gitsemver.config import GitSemverConfig, load_config
from gitsemver.git.history import open_repository, read_repository_state, walk_history
from gitsemver.versioning.exceptions import ConfigurationError
from gitsemver.versioning.metadata import Metadatas
from gitsemver.versioning.strategy import VersionResult
from gitsemver.versioning.version import to_pep440

logger = logging.getLogger(__name__)


class GitVersionCalculator:
    """
    Computes versions for the working tree of a git repository.

    The repository is only read, never modified.
    """

    def __init__(
        self,
        repo_path: Union[str, Path] = ".",
        config: Optional[GitSemverConfig] = None,
        config_path: Optional[Union[str, Path]] = None,
        branch: Optional[str] = None,
        strategy: Optional[str] = None,
    ):
        """
        Args:
            repo_path: Path inside the working tree
            config: Configuration to use instead of the repository's file
            config_path: Explicit configuration file
            branch: Branch name overriding the checked out branch
            strategy: Strategy name overriding the configured one

        Raises:
            GitRepositoryError: If repo_path is not in a git repository
            ConfigurationError: If the configuration is invalid
        """
        self.repo = open_repository(repo_path)
        self.repo_root = Path(self.repo.working_tree_dir or self.repo.git_dir)

        if config is None:
            config = load_config(self.repo_root, config_path)
        if strategy is not None:
            try:
                config = GitSemverConfig.model_validate(
                    {**config.model_dump(), "strategy": strategy}
                )
            except ValueError as e:
                raise ConfigurationError(f"Invalid strategy override:\n{e}") from e

        self.config = config
        self.branch = branch

    def compute(self) -> VersionResult:
        """Compute the version and the full metadata of the working tree."""
        state = read_repository_state(self.repo, self.branch)
        strategy = self.config.build_strategy(state)

        head, parents = walk_history(self.repo, strategy)
        result = strategy.build(head, parents)

        version = result.version
        metadata = dict(result.metadata)
        metadata[Metadatas.DIRTY] = str(state.dirty).lower()
        metadata[Metadatas.DETACHED_HEAD] = str(state.detached).lower()
        metadata[Metadatas.CALCULATED_VERSION] = str(version)
        metadata[Metadatas.NEXT_MAJOR_VERSION] = str(version.increment_major())
        metadata[Metadatas.NEXT_MINOR_VERSION] = str(version.increment_minor())
        metadata[Metadatas.NEXT_PATCH_VERSION] = str(version.increment_patch())

        logger.debug(f"Computed version {version} with {strategy.name} strategy")
        return VersionResult(version, metadata)

    def get_version(self, pep440: bool = False) -> str:
        """
        Return the version string of the working tree.

        Args:
            pep440: Render the version for Python packaging
        """
        version = self.compute().version
        if pep440:
            return str(to_pep440(version))
        return str(version)
