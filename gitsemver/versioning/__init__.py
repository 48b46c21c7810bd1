"""
Versioning core of gitsemver.

The core computes a version from commits and tags that were already read
from the repository. It never touches git itself, which keeps every
computation a pure function of its inputs.

LAYERS:
=======

1. **Version value** (version.py):
   - Version: semantic version with ordered qualifiers
   - to_pep440: rendition for Python packaging

2. **History views** (commit.py):
   - Commit and TagRef snapshots built by the history walker

3. **Naming rules** (naming.py):
   - Which tags carry a version, how to extract it, how branch names
     become qualifiers

4. **Selection** (selection.py):
   - Max version tag, annotated/lightweight priority, merge resolution

5. **Strategies** (strategy.py):
   - ConfigurableVersionStrategy and MavenVersionStrategy, each returning
     the version together with the metadata explaining it

6. **Exception Hierarchy** (exceptions.py)
"""

from .commit import Commit, TagRef
from .exceptions import (
    VersioningError,
    VersionFormatError,
    VersionCalculationError,
    ConfigurationError,
    GitRepositoryError,
)
from .metadata import Metadatas, MetadataRegistrar, TagType
from .naming import (
    BranchingPolicy,
    BranchNameTransformation,
    VersionNamingConfiguration,
)
from .strategy import (
    ConfigurableVersionStrategy,
    MavenVersionStrategy,
    RepositoryState,
    StrategySearchMode,
    VersionResult,
    VersionStrategy,
    build_strategy,
)
from .version import Version, to_pep440

__all__ = [
    # Strategies
    "VersionStrategy",
    "ConfigurableVersionStrategy",
    "MavenVersionStrategy",
    "StrategySearchMode",
    "RepositoryState",
    "VersionResult",
    "build_strategy",
    # Values and views
    "Version",
    "to_pep440",
    "Commit",
    "TagRef",
    # Naming
    "VersionNamingConfiguration",
    "BranchingPolicy",
    "BranchNameTransformation",
    # Metadata
    "Metadatas",
    "MetadataRegistrar",
    "TagType",
    # Exceptions
    "VersioningError",
    "VersionFormatError",
    "VersionCalculationError",
    "ConfigurationError",
    "GitRepositoryError",
]
