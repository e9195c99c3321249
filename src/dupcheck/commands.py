"""
Unified command orchestrator for duplicate scanning.
This is the single entry point for the scan workflow, used by the CLI and by library callers.
"""
import logging
import time
from typing import Callable, List, Optional

from dupcheck.core.hasher import ContentHasher, algorithm_for
from dupcheck.core.interfaces import Hasher
from dupcheck.core.merger import ResultMerger
from dupcheck.core.models import ScanParams, ScanResult, ScanStats, SkippedPath, Stage
from dupcheck.core.scheduler import WorkScheduler
from dupcheck.core.verifier import FullVerifier

logger = logging.getLogger(__name__)


class DuplicateScanCommand:
    """
    Orchestrates the whole scan:
    1. Plan units from the starting directory and prefix-hash them concurrently
    2. Merge unit results and keep hashes shared by two or more files
    3. Optionally re-hash candidates in full and split false positives

    Usage:
        params = ScanParams(root_dir="/data", max_concurrency=4, full_verification=True)
        result = DuplicateScanCommand().execute(params)
        for group in result.groups:
            print(group.hex_hash, [f.path for f in group.files])
    """

    def __init__(self, hasher: Optional[Hasher] = None):
        self._hasher = hasher

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> ScanResult:
        """
        Execute a scan with given parameters.

        Args:
            params: Validated scan parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            ScanResult; `cancelled` is set and the map is empty if stopped_flag fired

        Raises:
            PathError: If the starting path is missing or not a directory
            ScanIOError: If a path cannot be read and the error policy is ABORT
        """
        stats = ScanStats()
        total_start_time = time.time()
        hasher = self._hasher or ContentHasher(
            algorithm=algorithm_for(params.algorithm),
            prefix_limit=params.prefix_limit,
            chunk_size=params.chunk_size
        )

        # Step 1: prefix-hash every unit
        scheduler = WorkScheduler(
            hasher,
            max_concurrency=params.max_concurrency,
            ignore_extensions=params.ignore_extensions,
            error_policy=params.error_policy
        )
        logger.info(f"Scanning {params.root_dir} with up to {params.max_concurrency} concurrent units")

        start_time = time.time()
        units = scheduler.plan(params.root_dir)
        unit_results = scheduler.run(units, stopped_flag=stopped_flag, progress_callback=progress_callback)

        skipped: List[SkippedPath] = [s for r in unit_results for s in r.skipped]
        stats.units_total = len(units)
        stats.peak_concurrency = scheduler.peak_concurrency
        stats.files_hashed = sum(r.files_hashed for r in unit_results)
        stats.update_stage(
            Stage.PREFIX.value,
            groups_found=sum(len(r.hashes) for r in unit_results),
            files_processed=stats.files_hashed,
            duration=time.time() - start_time
        )

        if self._is_stopped(stopped_flag):
            return self._cancelled(stats, skipped, total_start_time)

        # Step 2: merge and keep candidate groups
        start_time = time.time()
        duplicates = ResultMerger.merge_duplicates(r.hashes for r in unit_results)
        stats.update_stage(
            Stage.MERGE.value,
            groups_found=len(duplicates),
            files_processed=sum(len(files) for files in duplicates.values()),
            duration=time.time() - start_time
        )
        logger.info(f"Prefix pass found {len(duplicates)} candidate groups")

        # Step 3: full verification
        if params.full_verification:
            start_time = time.time()
            verifier = FullVerifier(hasher, max_workers=params.max_concurrency, error_policy=params.error_policy)
            duplicates, verify_skipped = verifier.verify(
                duplicates,
                stopped_flag=stopped_flag,
                progress_callback=progress_callback
            )
            skipped.extend(verify_skipped)
            stats.update_stage(
                Stage.FULL.value,
                groups_found=len(duplicates),
                files_processed=sum(len(files) for files in duplicates.values()),
                duration=time.time() - start_time
            )
            if self._is_stopped(stopped_flag):
                return self._cancelled(stats, skipped, total_start_time)
            logger.info(f"Full verification confirmed {len(duplicates)} groups")

        stats.total_time = time.time() - total_start_time
        return ScanResult(
            duplicates=duplicates,
            skipped=sorted(skipped, key=lambda s: s.path),
            stats=stats
        )

    @staticmethod
    def _is_stopped(stopped_flag: Optional[Callable[[], bool]]) -> bool:
        return bool(stopped_flag and stopped_flag())

    @staticmethod
    def _cancelled(stats: ScanStats, skipped: List[SkippedPath], total_start_time: float) -> ScanResult:
        logger.info("Scan cancelled")
        stats.total_time = time.time() - total_start_time
        return ScanResult(skipped=sorted(skipped, key=lambda s: s.path), stats=stats, cancelled=True)
