"""Metadata recorded while a version is computed."""

from enum import Enum
from typing import Dict


class Metadatas(str, Enum):
    """Keys of the metadata explaining why a version was chosen."""

    BASE_TAG_TYPE = "BASE_TAG_TYPE"
    BASE_TAG = "BASE_TAG"
    BASE_VERSION = "BASE_VERSION"
    CURRENT_VERSION_MAJOR = "CURRENT_VERSION_MAJOR"
    CURRENT_VERSION_MINOR = "CURRENT_VERSION_MINOR"
    CURRENT_VERSION_PATCH = "CURRENT_VERSION_PATCH"
    BRANCH_NAME = "BRANCH_NAME"
    QUALIFIED_BRANCH_NAME = "QUALIFIED_BRANCH_NAME"

    COMMIT_DISTANCE = "COMMIT_DISTANCE"
    GIT_SHA1_FULL = "GIT_SHA1_FULL"
    GIT_SHA1_8 = "GIT_SHA1_8"
    DIRTY = "DIRTY"
    DETACHED_HEAD = "DETACHED_HEAD"
    CALCULATED_VERSION = "CALCULATED_VERSION"
    NEXT_MAJOR_VERSION = "NEXT_MAJOR_VERSION"
    NEXT_MINOR_VERSION = "NEXT_MINOR_VERSION"
    NEXT_PATCH_VERSION = "NEXT_PATCH_VERSION"


class TagType(str, Enum):
    """Kind of the tag a base version was read from."""

    ANNOTATED = "ANNOTATED"
    LIGHTWEIGHT = "LIGHTWEIGHT"


class MetadataRegistrar:
    """
    Write-only accumulator of metadata for a single version computation.

    Values are stored as strings. A later registration of the same key
    replaces the earlier one.
    """

    def __init__(self):
        self._metadata: Dict[Metadatas, str] = {}

    def register_metadata(self, key: Metadatas, value) -> None:
        self._metadata[Metadatas(key)] = str(value)

    def as_dict(self) -> Dict[Metadatas, str]:
        """Return a snapshot of the registered metadata."""
        return dict(self._metadata)
