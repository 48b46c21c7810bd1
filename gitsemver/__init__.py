"""gitsemver: semantic versions computed from git tags and history."""

__version__ = "0.3.0"
