"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/merger.py
Combines per-unit hash maps into one duplicate map.
"""

from collections import defaultdict
from typing import Iterable, Mapping, Set

from dupcheck.core.models import DuplicateMap, FileRef


class ResultMerger:
    """
    Unions unit mappings and keeps only hashes shared by two or more files.
    Union is commutative and idempotent, so unit order never matters.
    """

    @staticmethod
    def merge(mappings: Iterable[Mapping[bytes, Set[FileRef]]]) -> DuplicateMap:
        """Set union of every unit's files under each hash."""
        merged = defaultdict(set)
        for mapping in mappings:
            for digest, files in mapping.items():
                merged[digest].update(files)
        return {digest: frozenset(files) for digest, files in merged.items()}

    @staticmethod
    def filter_duplicates(mapping: Mapping[bytes, Set[FileRef]]) -> DuplicateMap:
        """Drops every hash with fewer than two files."""
        return {digest: frozenset(files) for digest, files in mapping.items() if len(files) >= 2}

    @classmethod
    def merge_duplicates(cls, mappings: Iterable[Mapping[bytes, Set[FileRef]]]) -> DuplicateMap:
        return cls.filter_duplicates(cls.merge(mappings))
