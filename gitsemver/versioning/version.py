"""
Version value type used by the version strategies.

A version is a numeric ``major.minor.patch`` triple followed by an ordered
list of qualifiers (``1.2.3-SNAPSHOT``, ``1.2.3-feature_x-4-a1b2c3d4``).
Rendering for Python packaging goes through the standard packaging.version
library so the result is always a valid PEP 440 version.
"""

import re
from typing import Iterable, Tuple

from packaging.version import Version as PackagingVersion, InvalidVersion

from .exceptions import VersionFormatError

_VERSION_PATTERN = re.compile(
    r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?"
    r"(?:-([0-9A-Za-z_.]+(?:-[0-9A-Za-z_.]+)*))?$"
)

SNAPSHOT = "SNAPSHOT"


def _qualifier_key(qualifier: str) -> Tuple[int, int, str]:
    # numeric identifiers rank below alphanumeric ones
    if qualifier.isdigit():
        return (0, int(qualifier), "")
    return (1, 0, qualifier)


class Version:
    """
    A semantic version with optional qualifiers.

    Instances are immutable: every operation returns a new Version.
    """

    DEFAULT_VERSION: "Version"

    def __init__(
        self, major: int, minor: int = 0, patch: int = 0, qualifiers: Iterable[str] = ()
    ):
        if min(major, minor, patch) < 0:
            raise VersionFormatError(f"{major}.{minor}.{patch}")
        self._major = int(major)
        self._minor = int(minor)
        self._patch = int(patch)
        self._qualifiers = tuple(qualifiers)
        for qualifier in self._qualifiers:
            if not qualifier:
                raise VersionFormatError(str(self), "non-empty qualifiers")

    @classmethod
    def parse(cls, version_string: str) -> "Version":
        """
        Parse a version string.

        Args:
            version_string: Version string in format "M", "M.m" or "M.m.p",
                optionally followed by "-qualifier[-qualifier...]"

        Returns:
            Version object

        Raises:
            VersionFormatError: If version string is invalid
        """
        text = str(version_string).strip()
        match = _VERSION_PATTERN.match(text)
        if not match:
            raise VersionFormatError(text)

        major, minor, patch, qualifiers = match.groups()
        return cls(
            int(major),
            int(minor or 0),
            int(patch or 0),
            qualifiers.split("-") if qualifiers else (),
        )

    @property
    def major(self) -> int:
        """Major version component."""
        return self._major

    @property
    def minor(self) -> int:
        """Minor version component."""
        return self._minor

    @property
    def patch(self) -> int:
        """Patch version component."""
        return self._patch

    @property
    def qualifiers(self) -> Tuple[str, ...]:
        return self._qualifiers

    @property
    def is_qualified(self) -> bool:
        return bool(self._qualifiers)

    def add_qualifier(self, qualifier: str) -> "Version":
        """
        Return a new Version with the qualifier appended.

        A qualifier containing "-" is split into one qualifier per part, so
        the result renders and parses back to an equal Version.
        """
        return Version(
            self._major,
            self._minor,
            self._patch,
            self._qualifiers + tuple(qualifier.split("-")),
        )

    def remove_qualifier(self, qualifier: str) -> "Version":
        """Return a new Version without any occurrence of the qualifier."""
        return Version(
            self._major,
            self._minor,
            self._patch,
            [q for q in self._qualifiers if q != qualifier],
        )

    def no_qualifier(self) -> "Version":
        return Version(self._major, self._minor, self._patch)

    def increment_major(self) -> "Version":
        """Return a new Version with incremented major version."""
        return Version(self._major + 1, 0, 0)

    def increment_minor(self) -> "Version":
        """Return a new Version with incremented minor version."""
        return Version(self._major, self._minor + 1, 0)

    def increment_patch(self) -> "Version":
        """Return a new Version with incremented patch version."""
        return Version(self._major, self._minor, self._patch + 1)

    def _key(self):
        return (
            self._major,
            self._minor,
            self._patch,
            0 if self._qualifiers else 1,
            tuple(_qualifier_key(q) for q in self._qualifiers),
        )

    def __str__(self) -> str:
        core = f"{self._major}.{self._minor}.{self._patch}"
        if self._qualifiers:
            return "-".join((core,) + self._qualifiers)
        return core

    def __repr__(self) -> str:
        return f"Version('{str(self)}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return False
        return self._key() == other._key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(self._key())


Version.DEFAULT_VERSION = Version(0, 0, 0)


def to_pep440(version: Version) -> PackagingVersion:
    """
    Convert a Version into a PEP 440 compliant packaging version.

    A SNAPSHOT qualifier becomes a development release, every other
    qualifier is folded into the local version label.

    Args:
        version: Version to convert

    Returns:
        packaging.version.Version instance

    Raises:
        VersionFormatError: If the result is not a valid PEP 440 version
    """
    text = f"{version.major}.{version.minor}.{version.patch}"

    local_parts = []
    dev = False
    for qualifier in version.qualifiers:
        if qualifier.upper() == SNAPSHOT:
            dev = True
            continue
        cleaned = re.sub(r"[^0-9A-Za-z]+", ".", qualifier).strip(".")
        if cleaned:
            local_parts.append(cleaned)

    if dev:
        text += ".dev0"
    if local_parts:
        text += "+" + ".".join(local_parts)

    try:
        return PackagingVersion(text)
    except InvalidVersion as e:
        raise VersionFormatError(text, "PEP 440") from e
