"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/verifier.py
Full-content verification of prefix-hash candidate groups.

Every file of every candidate group is hashed in full and placed into a new
map keyed by that full hash. The candidate map is only read; the new map
replaces it once verification is done. Groups left with fewer than two files
are dropped. A file whose full hash differs from the rest of its prefix
group is an expected prefix collision, not an error.
"""

import logging
import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Tuple

from dupcheck.core.exceptions import ScanIOError
from dupcheck.core.interfaces import Hasher
from dupcheck.core.merger import ResultMerger
from dupcheck.core.models import DuplicateMap, ErrorPolicy, FileRef, SkippedPath, Stage

logger = logging.getLogger(__name__)


class FullVerifier:
    """
    Re-buckets candidate files by full content hash.
    Files are hashed on a pool of at most `max_workers` threads.
    """

    def __init__(
            self,
            hasher: Hasher,
            max_workers: int = 1,
            error_policy: ErrorPolicy = ErrorPolicy.SKIP
    ):
        self.hasher = hasher
        self.max_workers = max_workers
        self.error_policy = error_policy

    def verify(
            self,
            candidates: DuplicateMap,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[DuplicateMap, List[SkippedPath]]:
        """
        Returns the verified duplicate map and the files that could not be re-read.
        """
        if stopped_flag and stopped_flag():
            return {}, []

        files = sorted({file for group in candidates.values() for file in group})
        total_files = len(files)
        verified = defaultdict(set)
        skipped: List[SkippedPath] = []
        if not files:
            return {}, skipped

        interrupted = threading.Event()

        def file_stopped() -> bool:
            return interrupted.is_set() or bool(stopped_flag and stopped_flag())

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="dupcheck-verify") as executor:
            futures = {executor.submit(self._full_hash, file, file_stopped): file for file in files}
            try:
                for processed_files, future in enumerate(as_completed(futures), 1):
                    file = futures[future]
                    try:
                        digest = future.result()
                    except ScanIOError as e:
                        if self.error_policy is ErrorPolicy.ABORT:
                            raise
                        logger.warning(f"Skipping unreadable path {e.path}: {e.reason}")
                        skipped.append(SkippedPath(path=e.path, reason=e.reason))
                    else:
                        if digest is not None:
                            verified[digest].add(file)

                    if progress_callback:
                        progress_callback(Stage.FULL.value, processed_files, total_files)
            except KeyboardInterrupt:
                interrupted.set()
                executor.shutdown(wait=False, cancel_futures=True)
                raise

        if stopped_flag and stopped_flag():
            return {}, skipped

        result = ResultMerger.filter_duplicates(verified)
        logger.debug(
            f"Full verification: {len(candidates)} candidate groups -> {len(result)} confirmed groups"
        )
        return result, skipped

    def _full_hash(self, file: FileRef, stopped_flag: Optional[Callable[[], bool]]) -> Optional[bytes]:
        if stopped_flag and stopped_flag():
            return None
        return self.hasher.compute_full_hash(file)
