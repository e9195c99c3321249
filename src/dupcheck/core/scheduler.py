"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scheduler.py
Splits the starting directory into scan units and runs them on a bounded
worker pool.

PLANNING
--------
The root is listed once. Each immediate subdirectory becomes one
DirectoryUnit. The root's own files, in name order, are cut into contiguous
batches; the number of batches never exceeds the concurrency bound.

EXECUTION
---------
Units run on a ThreadPoolExecutor with `max_concurrency` workers, so no more
than that many units are active at any instant. Queued units start as
running ones finish, and every unit runs exactly once. Results are collected
as values and returned only after every unit has completed. If any unit
failed, the first failure is re-raised after the others have finished.
On KeyboardInterrupt queued units are cancelled and running units stop at
their next file before the interrupt propagates.
"""

import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional

from dupcheck.core.exceptions import ConfigError, PathError, ScanIOError
from dupcheck.core.interfaces import Hasher, ScanUnit
from dupcheck.core.models import ErrorPolicy, Stage, UnitResult
from dupcheck.core.units import DirectoryUnit, FileBatchUnit

logger = logging.getLogger(__name__)


class WorkScheduler:
    """
    Plans and executes scan units with bounded concurrency.

    Attributes:
        max_concurrency: Maximum number of units running at once
        peak_concurrency: Highest number of simultaneously active units seen in the last run
    """

    def __init__(
            self,
            hasher: Hasher,
            max_concurrency: int = 1,
            ignore_extensions: FrozenSet[str] = frozenset(),
            error_policy: ErrorPolicy = ErrorPolicy.SKIP
    ):
        if max_concurrency < 1:
            raise ConfigError(f"Concurrency must be at least 1, got {max_concurrency}")
        self.hasher = hasher
        self.max_concurrency = max_concurrency
        self.ignore_extensions = ignore_extensions
        self.error_policy = error_policy
        self.peak_concurrency = 0
        self._active = 0
        self._lock = threading.Lock()

    @staticmethod
    def split_batches(files: List[str], max_batches: int) -> List[List[str]]:
        """Cuts files into at most `max_batches` contiguous, non-empty batches."""
        if not files:
            return []
        batch_size = math.ceil(len(files) / max_batches)
        return [files[i:i + batch_size] for i in range(0, len(files), batch_size)]

    def plan(self, root_dir: str) -> List[ScanUnit]:
        """
        Lists the root once and builds one unit per subdirectory plus
        the file batches.

        Raises:
            PathError: if root_dir is missing or not a directory.
            ScanIOError: if root_dir itself cannot be listed.
        """
        root_path = Path(root_dir)
        if not root_path.exists():
            raise PathError(root_dir, "Directory does not exist")
        if not root_path.is_dir():
            raise PathError(root_dir, "Not a directory")
        root = str(root_path.resolve())

        try:
            with os.scandir(root) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise ScanIOError(root, e) from e

        unit_options = dict(ignore_extensions=self.ignore_extensions, error_policy=self.error_policy)
        units: List[ScanUnit] = []
        files: List[str] = []
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            if is_dir:
                units.append(DirectoryUnit(entry.path, self.hasher, **unit_options))
            else:
                files.append(entry.path)

        for index, batch in enumerate(self.split_batches(files, self.max_concurrency)):
            units.append(FileBatchUnit(batch, self.hasher, index=index, **unit_options))

        logger.debug(f"Planned {len(units)} units for {root} ({len(files)} top-level files)")
        return units

    def run(
            self,
            units: List[ScanUnit],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[UnitResult]:
        """
        Runs every unit with at most `max_concurrency` active at once.
        Returns unit results in completion order.
        """
        self.peak_concurrency = 0
        self._active = 0
        if not units:
            return []

        results: List[UnitResult] = []
        errors: List[BaseException] = []
        total = len(units)
        interrupted = threading.Event()

        def unit_stopped() -> bool:
            return interrupted.is_set() or bool(stopped_flag and stopped_flag())

        with ThreadPoolExecutor(max_workers=self.max_concurrency, thread_name_prefix="dupcheck") as executor:
            futures = {executor.submit(self._run_unit, unit, unit_stopped): unit for unit in units}
            try:
                for done, future in enumerate(as_completed(futures), 1):
                    unit = futures[future]
                    try:
                        results.append(future.result())
                    except Exception as e:
                        logger.error(f"Unit {unit.label} failed: {e}")
                        errors.append(e)
                    if progress_callback:
                        progress_callback(Stage.PREFIX.value, done, total)
            except KeyboardInterrupt:
                # Queued units never start; running ones stop at their next file
                interrupted.set()
                executor.shutdown(wait=False, cancel_futures=True)
                raise

        if errors:
            raise errors[0]
        return results

    def scan(
            self,
            root_dir: str,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[UnitResult]:
        """Plans and runs the units for root_dir."""
        return self.run(self.plan(root_dir), stopped_flag=stopped_flag, progress_callback=progress_callback)

    def _run_unit(self, unit: ScanUnit, stopped_flag: Optional[Callable[[], bool]]) -> UnitResult:
        with self._lock:
            self._active += 1
            self.peak_concurrency = max(self.peak_concurrency, self._active)
        try:
            return unit.run(stopped_flag)
        finally:
            with self._lock:
                self._active -= 1
