"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scan engine.

Key Components:
---------------
- HashAlgorithm: factory for streaming digests (xxHash 128, MD5, ...).
- Hasher: computes prefix and full content hashes of a file.
- ScanUnit: an independently schedulable piece of the scan.
"""

from typing import Protocol, Optional, Callable
from dupcheck.core.models import FileRef, UnitResult


class Digest(Protocol):
    """Incremental digest object, as returned by hashlib and xxhash constructors."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different streaming hash functions without affecting
    the rest of the scan logic.
    """
    name: str
    digest_size: int

    def new(self) -> Digest:
        """Returns a fresh incremental digest."""
        ...


class Hasher(Protocol):
    """Interface for hashing a prefix or the whole content of a file."""
    def compute_hash(self, file: FileRef, limit: int, full: bool = False) -> bytes: ...
    def compute_prefix_hash(self, file: FileRef) -> bytes: ...
    def compute_full_hash(self, file: FileRef) -> bytes: ...


class ScanUnit(Protocol):
    """
    Interface for one unit of scan work.

    A unit builds its own hash -> files mapping and hands it back as a value;
    it never touches another unit's state.
    """
    label: str

    def run(self, stopped_flag: Optional[Callable[[], bool]] = None) -> UnitResult:
        """
        Hash every eligible file the unit covers.

        Args:
            stopped_flag: Function that returns True if the scan should stop.

        Returns:
            UnitResult with the local mapping and any skipped paths.
        """
        ...
