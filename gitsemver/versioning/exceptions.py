"""
Exception classes for the versioning module.
"""


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class VersionFormatError(VersioningError):
    """Raised when a version string has an invalid format."""

    def __init__(self, version_string: str, expected_format: str = "M[.m[.p]][-q]"):
        self.version_string = version_string
        self.expected_format = expected_format
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            f"Expected format: {expected_format}"
        )


class VersionCalculationError(VersioningError):
    """Raised when a version cannot be computed from the given history."""

    pass


class ConfigurationError(VersioningError):
    """Raised when the versioning configuration is invalid."""

    pass


class GitRepositoryError(VersioningError):
    """Raised when a path cannot be read as a git repository."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        if message:
            super().__init__(f"Git repository error for {path}: {message}")
        else:
            super().__init__(f"Not a git repository: {path}")
