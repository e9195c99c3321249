"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements streaming content hashing with pluggable hash algorithms.

ContentHasher reads a file in fixed-size chunks and feeds them to an
incremental digest, so memory use does not depend on file size. A prefix
hash covers at most `limit` bytes; a full hash covers the whole file.
"""

import hashlib

import xxhash

from dupcheck.core.exceptions import ConfigError, ScanIOError
from dupcheck.core.interfaces import Hasher, HashAlgorithm, Digest
from dupcheck.core.models import FileRef, HashAlgorithmName, PREFIX_LIMIT, READ_CHUNK_SIZE


# Use the same way to implement and use any other hashing algorithm
class XXHash128AlgorithmImpl(HashAlgorithm):
    name = "xxh128"
    digest_size = 16

    def new(self) -> Digest:
        return xxhash.xxh128()


class MD5AlgorithmImpl(HashAlgorithm):
    name = "md5"
    digest_size = 16

    def new(self) -> Digest:
        return hashlib.md5()


ALGORITHMS = {
    HashAlgorithmName.XXH128: XXHash128AlgorithmImpl,
    HashAlgorithmName.MD5: MD5AlgorithmImpl,
}


def algorithm_for(name: HashAlgorithmName) -> HashAlgorithm:
    """Returns an algorithm instance for the given name."""
    try:
        return ALGORITHMS[name]()
    except KeyError:
        raise ConfigError(f"Unknown hash algorithm: {name!r}")


class ContentHasher(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Hashing is a pure function of the bytes read: the same byte range of the same
    file always produces the same digest.
    """

    def __init__(
            self,
            algorithm: HashAlgorithm = None,
            prefix_limit: int = PREFIX_LIMIT,
            chunk_size: int = READ_CHUNK_SIZE
    ):
        self.algorithm = algorithm or XXHash128AlgorithmImpl()
        self.prefix_limit = prefix_limit
        self.chunk_size = chunk_size

    def compute_hash(self, file: FileRef, limit: int, full: bool = False) -> bytes:
        """
        Hash the first `limit` bytes of a file, or all of it when `full` is set.

        A file shorter than `limit` is hashed as far as it goes.

        Raises:
            ScanIOError: if the file cannot be opened or a read fails midway.
                No partial digest is returned.
        """
        digest = self.algorithm.new()
        remaining = None if full else limit
        try:
            with open(file.path, 'rb') as f:
                while remaining is None or remaining > 0:
                    to_read = self.chunk_size if remaining is None else min(self.chunk_size, remaining)
                    chunk = f.read(to_read)
                    if not chunk:
                        break
                    digest.update(chunk)
                    if remaining is not None:
                        remaining -= len(chunk)
        except OSError as e:
            raise ScanIOError(file.path, e) from e
        return digest.digest()

    def compute_prefix_hash(self, file: FileRef) -> bytes:
        """Hash of the first `prefix_limit` bytes."""
        return self.compute_hash(file, self.prefix_limit)

    def compute_full_hash(self, file: FileRef) -> bytes:
        """Hash of the entire file content."""
        return self.compute_hash(file, 0, full=True)
