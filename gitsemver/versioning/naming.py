"""
Naming rules: which tags carry a version and how branch names become qualifiers.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Pattern, Sequence

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PATTERN = r"v?([0-9]+(?:\.[0-9]+){0,2}(?:-[a-zA-Z0-9\-_]+)?)"
DEFAULT_NON_QUALIFIER_BRANCHES = ("main", "master")

_UNEXPECTED_CHARS = re.compile(r"[^a-zA-Z0-9_]")


class BranchNameTransformation(str, Enum):
    """Transformations applied to a branch name to build a qualifier."""

    REPLACE_UNEXPECTED_CHARS_UNDERSCORE = "REPLACE_UNEXPECTED_CHARS_UNDERSCORE"
    REPLACE_UNEXPECTED_CHARS_HYPHEN = "REPLACE_UNEXPECTED_CHARS_HYPHEN"
    REMOVE_UNEXPECTED_CHARS = "REMOVE_UNEXPECTED_CHARS"
    LOWERCASE = "LOWERCASE"
    UPPERCASE = "UPPERCASE"
    IGNORE = "IGNORE"

    def apply(self, value: str) -> Optional[str]:
        if self is BranchNameTransformation.REPLACE_UNEXPECTED_CHARS_UNDERSCORE:
            return _UNEXPECTED_CHARS.sub("_", value)
        if self is BranchNameTransformation.REPLACE_UNEXPECTED_CHARS_HYPHEN:
            return _UNEXPECTED_CHARS.sub("-", value)
        if self is BranchNameTransformation.REMOVE_UNEXPECTED_CHARS:
            return _UNEXPECTED_CHARS.sub("", value)
        if self is BranchNameTransformation.LOWERCASE:
            return value.lower()
        if self is BranchNameTransformation.UPPERCASE:
            return value.upper()
        return None


@dataclass(frozen=True)
class BranchingPolicy:
    """
    Maps branch names matching ``pattern`` to a qualifier.

    The qualifier is the first capture group of the pattern (or the whole
    branch name when the pattern has no group), passed through the
    transformations in order.
    """

    pattern: str
    transformations: Sequence[BranchNameTransformation] = (
        BranchNameTransformation.REPLACE_UNEXPECTED_CHARS_UNDERSCORE,
        BranchNameTransformation.LOWERCASE,
    )

    def qualifier(self, branch: str) -> Optional[str]:
        match = re.fullmatch(self.pattern, branch)
        if not match:
            return None

        value: Optional[str] = match.group(1) if match.groups() else match.group(0)
        for transformation in self.transformations:
            if value is None:
                break
            value = BranchNameTransformation(transformation).apply(value)
        return value or None


DEFAULT_FALLBACK_POLICY = BranchingPolicy(r"(.*)")


@dataclass
class VersionNamingConfiguration:
    """Version naming rules consumed by the version strategies."""

    search_pattern: str = DEFAULT_SEARCH_PATTERN
    branch_policies: List[BranchingPolicy] = field(
        default_factory=lambda: [DEFAULT_FALLBACK_POLICY]
    )
    non_qualifier_branches: Sequence[str] = DEFAULT_NON_QUALIFIER_BRANCHES

    def __post_init__(self):
        self._compiled = re.compile(self.search_pattern)

    def get_search_pattern(self) -> Pattern[str]:
        return self._compiled

    def extract_version_from(self, tag_name: str) -> str:
        """Return the version part of a tag name.

        The first capture group of the search pattern is used when the
        pattern matches the whole tag name, otherwise the name is returned
        unchanged.
        """
        match = self._compiled.fullmatch(tag_name)
        if match and match.groups() and match.group(1) is not None:
            return match.group(1)
        return tag_name

    def branch_qualifier(self, branch: str) -> Optional[str]:
        """Return the qualifier for a branch, or None when it gets none."""
        if branch in self.non_qualifier_branches:
            return None

        for policy in self.branch_policies:
            if re.fullmatch(policy.pattern, branch):
                qualifier = policy.qualifier(branch)
                logger.debug(
                    f"Branch '{branch}' matched policy '{policy.pattern}' -> {qualifier}"
                )
                return qualifier
        return None
