"""
dupcheck: find groups of files with identical content.

Core features:
- Two-tier hashing: a cheap prefix hash buckets candidates, an optional full hash confirms them
- Bounded-parallelism scan: subdirectories and batches of top-level files run as concurrent units
- Read-only: duplicates are reported, never moved, linked or deleted
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("dupcheck")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API, only what users should import directly
from dupcheck.commands import DuplicateScanCommand
from dupcheck.core import (
    ScanParams, ScanResult, DuplicateGroup, FileRef, ErrorPolicy, HashAlgorithmName,
    DupCheckError, ConfigError, PathError, ScanIOError)
from dupcheck.utils.convert_utils import ConvertUtils

__all__ = [
    "DuplicateScanCommand",
    "ScanParams",
    "ScanResult",
    "DuplicateGroup",
    "FileRef",
    "ErrorPolicy",
    "HashAlgorithmName",
    "DupCheckError",
    "ConfigError",
    "PathError",
    "ScanIOError",
    "ConvertUtils",
    "__version__",
]
