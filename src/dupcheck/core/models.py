"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for duplicate scanning: file references, duplicate maps,
per-unit results, statistics and scan parameters.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Set, FrozenSet, Union
import os
from enum import Enum

from dupcheck.core.exceptions import ConfigError
from dupcheck.utils.convert_utils import ConvertUtils


PREFIX_LIMIT = 100 * 1024  # Bytes hashed per file in the bucketing pass
READ_CHUNK_SIZE = 10 * 1024  # Streaming read buffer


# =============================
# Enums
# =============================

class ErrorPolicy(Enum):
    """
    What happens when a file or directory cannot be read during a scan.
    Chosen once per scan and applied by every unit and by the verifier.
    """
    SKIP = "skip"
    ABORT = "abort"

    def __repr__(self) -> str:
        return self.value


class HashAlgorithmName(Enum):
    XXH128 = "xxh128"
    MD5 = "md5"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            HashAlgorithmName.XXH128: "xxHash 128",
            HashAlgorithmName.MD5: "MD5",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    PREFIX = "Prefix hash"
    MERGE = "Merge"
    FULL = "Full hash"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True, order=True)
class FileRef:
    """
    A regular file found during the scan.
    Identity and ordering are by path; size is metadata from the scan's lstat.
    """
    path: str
    size: int = field(default=0, compare=False)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def extension(self) -> str:
        _, ext = os.path.splitext(self.name)
        return ext.lower()

    def __repr__(self):
        return f"<FileRef path={self.path}, size={self.size}>"


# Hash -> files, as built by one unit before merging
LocalHashMap = Dict[bytes, Set[FileRef]]
# Hash -> files, merged and read-only
DuplicateMap = Dict[bytes, FrozenSet[FileRef]]


@dataclass(frozen=True)
class SkippedPath:
    """A file or directory left out of the scan because it could not be read."""
    path: str
    reason: str


@dataclass
class UnitResult:
    """Output of one scan unit, owned by the unit until it is merged."""
    hashes: LocalHashMap = field(default_factory=dict)
    skipped: List[SkippedPath] = field(default_factory=list)
    files_hashed: int = 0

    def add(self, digest: bytes, file: FileRef) -> None:
        self.hashes.setdefault(digest, set()).add(file)
        self.files_hashed += 1


@dataclass
class DuplicateGroup:
    """
    Files sharing one content hash, ready for display.
    Files are kept sorted by path.
    """
    hash: bytes
    files: List[FileRef]

    def __post_init__(self):
        self.files = sorted(self.files)

    @property
    def hex_hash(self) -> str:
        return ConvertUtils.hash_to_hex(self.hash)

    @property
    def size(self) -> int:
        return self.files[0].size if self.files else 0

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def wasted_bytes(self) -> int:
        """Space taken by every copy beyond the first."""
        return self.size * max(0, self.duplicate_count - 1)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup hash={self.hex_hash}, count={len(self.files)}>"


@dataclass
class ScanStats:
    """
    Statistics collected during a scan.
    """
    total_time: float = 0.0
    units_total: int = 0
    peak_concurrency: int = 0
    files_hashed: int = 0
    stage_stats: Dict[str, Dict[str, Union[int, float]]] = field(default_factory=dict)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        labels = {
            Stage.PREFIX.value: "📄 Prefix Hash Buckets",
            Stage.MERGE.value: "🧩 Candidate Groups",
            Stage.FULL.value: "🔍 Full Content Hash Groups",
        }

        lines = [
            "📊 Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Units: {self.units_total} (peak concurrency {self.peak_concurrency})",
            f"Files hashed: {self.files_hashed}\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage, stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class ScanResult:
    """
    Final output of a scan: every group of two or more files with equal hash,
    the paths that were skipped, and run statistics.
    """
    duplicates: DuplicateMap = field(default_factory=dict)
    skipped: List[SkippedPath] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)
    cancelled: bool = False

    @property
    def group_count(self) -> int:
        return len(self.duplicates)

    @property
    def groups(self) -> List[DuplicateGroup]:
        """Groups ordered by hex hash, files ordered by path."""
        groups = [DuplicateGroup(hash=digest, files=list(files))
                  for digest, files in self.duplicates.items()]
        return sorted(groups, key=lambda g: g.hex_hash)

    def to_hex_dict(self) -> Dict[str, List[str]]:
        return {group.hex_hash: [f.path for f in group.files] for group in self.groups}


# ======================
#  Scan parameters
# ======================

def normalize_extensions(extensions: List[str]) -> FrozenSet[str]:
    """Lowercase each extension and make sure it starts with a dot."""
    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if ext and not ext.startswith('.'):
            ext = f".{ext}"
        if ext:
            normalized.add(ext)
    return frozenset(normalized)


@dataclass
class ScanParams:
    """Parameters for one duplicate scan, validated on creation."""
    root_dir: str
    max_concurrency: int = 1
    ignore_extensions: FrozenSet[str] = field(default_factory=frozenset)
    full_verification: bool = False
    prefix_limit: int = PREFIX_LIMIT
    chunk_size: int = READ_CHUNK_SIZE
    algorithm: HashAlgorithmName = HashAlgorithmName.XXH128
    error_policy: ErrorPolicy = ErrorPolicy.SKIP

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ConfigError("Root directory cannot be empty")

        if isinstance(self.max_concurrency, bool) or not isinstance(self.max_concurrency, int):
            raise ConfigError(f"Concurrency must be an integer, got {self.max_concurrency!r}")
        if self.max_concurrency < 1:
            raise ConfigError(f"Concurrency must be at least 1, got {self.max_concurrency}")

        if self.prefix_limit < 1:
            raise ConfigError("Prefix limit must be at least 1 byte")

        if self.chunk_size < 1:
            raise ConfigError("Read chunk size must be at least 1 byte")

        if not isinstance(self.algorithm, HashAlgorithmName):
            raise ConfigError(f"Unknown hash algorithm: {self.algorithm!r}")

        self.ignore_extensions = normalize_extensions(list(self.ignore_extensions))

    @staticmethod
    def from_human_readable(
            root_dir: str,
            threads: int = 1,
            ignore_str: str = "",
            full: bool = False,
            limit_str: str = "100KB",
            algorithm: HashAlgorithmName = HashAlgorithmName.XXH128,
            error_policy: ErrorPolicy = ErrorPolicy.SKIP,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        The ignore list accepts ';' or ',' separators, e.g. ".exe;.class".
        """
        try:
            limit = ConvertUtils.human_to_bytes(limit_str)
        except ValueError as e:
            raise ConfigError(f"Invalid prefix limit: {e}") from e

        ext_list = [
            ext for ext in ignore_str.replace(",", ";").split(";") if ext.strip()
        ] if ignore_str else []

        return ScanParams(
            root_dir=root_dir,
            max_concurrency=threads,
            ignore_extensions=frozenset(ext_list),
            full_verification=full,
            prefix_limit=limit,
            algorithm=algorithm,
            error_policy=error_policy,
        )
