"""Configuration of gitsemver, read from a YAML file at the repository root."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gitsemver.versioning.exceptions import ConfigurationError
from gitsemver.versioning.naming import (
    DEFAULT_NON_QUALIFIER_BRANCHES,
    DEFAULT_SEARCH_PATTERN,
    BranchingPolicy,
    BranchNameTransformation,
    VersionNamingConfiguration,
)
from gitsemver.versioning.strategy import (
    STRATEGIES,
    RepositoryState,
    StrategySearchMode,
    VersionStrategy,
    build_strategy,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gitsemver.yaml"


def _validate_regex(v: str) -> str:
    try:
        re.compile(v)
    except re.error as e:
        raise ValueError(f"invalid regular expression '{v}': {e}")
    return v


class BranchPolicyConfig(BaseModel):
    """A branch name pattern and the transformations building its qualifier."""

    model_config = ConfigDict(extra="forbid")

    pattern: str
    transformations: List[BranchNameTransformation] = Field(
        default_factory=lambda: [
            BranchNameTransformation.REPLACE_UNEXPECTED_CHARS_UNDERSCORE,
            BranchNameTransformation.LOWERCASE,
        ]
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        return _validate_regex(v)


class NamingConfig(BaseModel):
    """Tag and branch naming rules."""

    model_config = ConfigDict(extra="forbid")

    tag_pattern: str = DEFAULT_SEARCH_PATTERN
    non_qualifier_branches: List[str] = Field(
        default_factory=lambda: list(DEFAULT_NON_QUALIFIER_BRANCHES)
    )
    branch_policies: List[BranchPolicyConfig] = Field(
        default_factory=lambda: [BranchPolicyConfig(pattern="(.*)")]
    )

    @field_validator("tag_pattern")
    @classmethod
    def validate_tag_pattern(cls, v: str) -> str:
        return _validate_regex(v)

    def to_naming(self) -> VersionNamingConfiguration:
        return VersionNamingConfiguration(
            search_pattern=self.tag_pattern,
            branch_policies=[
                BranchingPolicy(p.pattern, tuple(p.transformations))
                for p in self.branch_policies
            ],
            non_qualifier_branches=tuple(self.non_qualifier_branches),
        )


class StrategyOptions(BaseModel):
    """Strategy options. Options a strategy does not know are ignored by it."""

    model_config = ConfigDict(extra="forbid")

    auto_increment_patch: bool = False
    use_distance: bool = True
    use_git_commit_id: bool = False
    git_commit_id_length: int = Field(8, ge=1, le=40)
    use_dirty: bool = False
    use_long_format: bool = False
    use_default_branching_policy: bool = True
    search_mode: Optional[StrategySearchMode] = None
    max_search_depth: Optional[int] = Field(None, ge=1)


class GitSemverConfig(BaseModel):
    """Top level configuration."""

    model_config = ConfigDict(extra="forbid")

    strategy: str = "CONFIGURABLE"
    naming: NamingConfig = Field(default_factory=NamingConfig)
    options: StrategyOptions = Field(default_factory=StrategyOptions)

    @field_validator("strategy")
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        name = v.upper()
        if name not in STRATEGIES:
            raise ValueError(
                f"unknown strategy '{v}', expected one of {', '.join(sorted(STRATEGIES))}"
            )
        return name

    @classmethod
    def from_yaml(cls, path_or_content: Union[str, Path]) -> "GitSemverConfig":
        """
        Load configuration from a YAML file or string content.

        Raises:
            ConfigurationError: If the YAML is malformed or fails validation
        """
        try:
            if isinstance(path_or_content, Path) or "\n" not in str(path_or_content):
                with open(path_or_content, "r") as f:
                    data = yaml.safe_load(f)
            else:
                data = yaml.safe_load(str(path_or_content))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed configuration: {e}") from e

        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration:\n{e}") from e

    def build_strategy(self, state: Optional[RepositoryState] = None) -> VersionStrategy:
        return build_strategy(
            self.strategy,
            self.naming.to_naming(),
            state,
            self.options.model_dump(),
        )


def load_config(
    repo_root: Union[str, Path], config_path: Optional[Union[str, Path]] = None
) -> GitSemverConfig:
    """
    Load the configuration of a repository.

    Args:
        repo_root: Working tree root, searched for .gitsemver.yaml
        config_path: Explicit configuration file; must exist when given

    Returns:
        The loaded configuration, or the defaults when no file exists
    """
    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
    else:
        path = Path(repo_root) / CONFIG_FILE_NAME
        if not path.is_file():
            logger.debug(f"No {CONFIG_FILE_NAME} in {repo_root}, using defaults")
            return GitSemverConfig()

    logger.debug(f"Loading configuration from {path}")
    return GitSemverConfig.from_yaml(path)
