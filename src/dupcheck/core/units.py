"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/units.py
Units of scan work dispatched to the worker pool.

CLASS HIERARCHY
---------------
ScanUnitBase   : Filters entries, prefix-hashes them and records skipped paths
DirectoryUnit  : Recursively covers one immediate subdirectory of the root
FileBatchUnit  : Covers a contiguous batch of the root's own files

UNIT CONTRACT
-------------
Each unit builds a private hash -> files mapping and returns it as a value.
A file gets the same treatment whether it is reached by recursion or by a
batch, so the merged result does not depend on how work was split.
"""

import logging
import os
import stat
from typing import Callable, FrozenSet, Iterator, List, Optional

from dupcheck.core.exceptions import ScanIOError
from dupcheck.core.interfaces import Hasher, ScanUnit
from dupcheck.core.models import ErrorPolicy, FileRef, SkippedPath, UnitResult

logger = logging.getLogger(__name__)


class ScanUnitBase(ScanUnit):
    """
    Base class for scan units.
    Subclasses only decide which paths to visit; filtering, hashing and
    error handling are shared.
    """
    label = "unit"

    def __init__(
            self,
            hasher: Hasher,
            ignore_extensions: FrozenSet[str] = frozenset(),
            error_policy: ErrorPolicy = ErrorPolicy.SKIP
    ):
        self.hasher = hasher
        self.ignore_extensions = ignore_extensions
        self.error_policy = error_policy

    def _iter_paths(self, result: UnitResult) -> Iterator[str]:
        """
        Yields candidate file paths covered by this unit.
        Must be implemented by subclasses.
        """
        raise NotImplementedError

    def run(self, stopped_flag: Optional[Callable[[], bool]] = None) -> UnitResult:
        result = UnitResult()
        if stopped_flag and stopped_flag():
            logger.debug(f"Unit {self.label} cancelled before start")
            return result

        for path in self._iter_paths(result):
            if stopped_flag and stopped_flag():
                logger.debug(f"Unit {self.label} interrupted")
                break

            file = self._accept(path, result)
            if file is None:
                continue

            try:
                digest = self.hasher.compute_prefix_hash(file)
            except ScanIOError as e:
                self._handle_error(e, result)
                continue
            result.add(digest, file)

        logger.debug(f"Unit {self.label} hashed {result.files_hashed} files")
        return result

    def _accept(self, path: str, result: UnitResult) -> Optional[FileRef]:
        """Returns a FileRef for a regular, non-ignored file, else None."""
        if self._is_ignored(path):
            logger.debug(f"Skipping {path} (ignored extension)")
            return None

        try:
            st = os.lstat(path)
        except OSError as e:
            self._handle_error(ScanIOError(path, e), result)
            return None

        if stat.S_ISLNK(st.st_mode):
            logger.debug(f"Skipping symbolic link: {path}")
            return None
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        return FileRef(path=path, size=st.st_size)

    def _is_ignored(self, path: str) -> bool:
        if not self.ignore_extensions:
            return False
        return FileRef(path).extension in self.ignore_extensions

    def _handle_error(self, error: ScanIOError, result: UnitResult) -> None:
        """Applies the scan's error policy to one unreadable path."""
        if self.error_policy is ErrorPolicy.ABORT:
            raise error
        logger.warning(f"Skipping unreadable path {error.path}: {error.reason}")
        result.skipped.append(SkippedPath(path=error.path, reason=error.reason))

    def __repr__(self):
        return f"<{type(self).__name__} {self.label}>"


class DirectoryUnit(ScanUnitBase):
    """Hashes every file under one subdirectory, recursively."""

    def __init__(self, directory: str, hasher: Hasher, **kwargs):
        super().__init__(hasher, **kwargs)
        self.directory = directory
        self.label = directory

    def _iter_paths(self, result: UnitResult) -> Iterator[str]:
        def on_walk_error(error: OSError) -> None:
            self._handle_error(ScanIOError(error.filename or self.directory, error), result)

        # os.walk does not descend into symlinked directories
        for root, dirs, files in os.walk(self.directory, onerror=on_walk_error):
            dirs.sort()
            for filename in sorted(files):
                yield os.path.join(root, filename)


class FileBatchUnit(ScanUnitBase):
    """Hashes a fixed batch of files from the root directory, without recursion."""

    def __init__(self, files: List[str], hasher: Hasher, index: int = 0, **kwargs):
        super().__init__(hasher, **kwargs)
        self.files = list(files)
        self.label = f"batch {index} ({len(self.files)} files)"

    def _iter_paths(self, result: UnitResult) -> Iterator[str]:
        return iter(self.files)
