"""
Core duplicate scan engine: hasher, scan units, scheduler, merger and verifier.

This package contains the performance-critical foundation of dupcheck:
- ContentHasher + XXHash128AlgorithmImpl / MD5AlgorithmImpl: streaming prefix and full content hashing
- DirectoryUnit / FileBatchUnit: independently schedulable pieces of the scan
- WorkScheduler: plans units from the starting directory and runs them with bounded concurrency
- ResultMerger: unions unit results and keeps hashes shared by two or more files
- FullVerifier: re-buckets candidates by full content hash
- Models: FileRef, DuplicateGroup, ScanParams, ScanResult and statistics

All components are pure Python with no console dependencies.
"""

from .exceptions import DupCheckError, ConfigError, PathError, ScanIOError
from .hasher import ContentHasher, XXHash128AlgorithmImpl, MD5AlgorithmImpl, algorithm_for
from .units import DirectoryUnit, FileBatchUnit
from .scheduler import WorkScheduler
from .merger import ResultMerger
from .verifier import FullVerifier
from .models import (
    FileRef, SkippedPath, UnitResult, DuplicateGroup, ScanParams, ScanResult, ScanStats,
    ErrorPolicy, HashAlgorithmName, Stage)

__all__ = [
    "DupCheckError",
    "ConfigError",
    "PathError",
    "ScanIOError",
    "ContentHasher",
    "XXHash128AlgorithmImpl",
    "MD5AlgorithmImpl",
    "algorithm_for",
    "DirectoryUnit",
    "FileBatchUnit",
    "WorkScheduler",
    "ResultMerger",
    "FullVerifier",
    "FileRef",
    "SkippedPath",
    "UnitResult",
    "DuplicateGroup",
    "ScanParams",
    "ScanResult",
    "ScanStats",
    "ErrorPolicy",
    "HashAlgorithmName",
    "Stage",
]
