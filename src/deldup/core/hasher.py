"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements streaming file checksums with pluggable hash algorithms.

ChecksumComputerImpl reads files in fixed-size chunks, checks for cancellation
between chunks, and caches results on Entry objects so each file is hashed at
most once per run.
"""

import hashlib
import logging
from typing import Callable, Dict, Optional

import xxhash

from deldup.core.interfaces import ChecksumComputer, HashAlgorithm, StreamingHash
from deldup.core.models import Checksum, DeletionStats, Entry, HashAlgorithmName

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024  # input buffer size in bytes
BIG_FILE_SIZE = 5 * 1024 * 1024  # report progress every time this much is read


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxh128"

    def new(self) -> StreamingHash:
        return xxhash.xxh128()


class MD5AlgorithmImpl(HashAlgorithm):
    name = "md5"

    def new(self) -> StreamingHash:
        return hashlib.md5()


_ALGORITHMS: Dict[HashAlgorithmName, Callable[[], HashAlgorithm]] = {
    HashAlgorithmName.XXH128: XXHashAlgorithmImpl,
    HashAlgorithmName.MD5: MD5AlgorithmImpl,
}


def algorithm_for(name: HashAlgorithmName) -> HashAlgorithm:
    """Returns the HashAlgorithm implementation for the given enum value."""
    return _ALGORITHMS[name]()


class ChecksumComputerImpl(ChecksumComputer):
    """
    Computes content checksums by streaming files through a HashAlgorithm.

    Failures are per-file: an unreadable file yields an UNKNOWN checksum instead of
    an exception, and a cancelled read yields a CANCELLED checksum that is never
    cached.
    """

    def __init__(
        self,
        algorithm: Optional[HashAlgorithm] = None,
        stats: Optional[DeletionStats] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None,
        chunk_size: int = CHUNK_SIZE,
    ):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.stats = stats if stats is not None else DeletionStats()
        self.stopped_flag = stopped_flag
        self.progress_callback = progress_callback
        self.chunk_size = chunk_size

    def compute(self, path: str) -> Checksum:
        """Streams one file and returns its checksum outcome."""
        hasher = self.algorithm.new()
        size_done = 0
        size_reported = 0

        try:
            with open(path, "rb") as f:
                while True:
                    if self.stopped_flag and self.stopped_flag():
                        logger.debug(f"Checksum cancelled after {size_done} bytes: {path}")
                        return Checksum.cancelled(f"cancelled by user for {path}")

                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    hasher.update(chunk)
                    size_done += len(chunk)

                    if self.progress_callback and size_done - size_reported > BIG_FILE_SIZE:
                        self.progress_callback("checksum", size_done, None)
                        size_reported = size_done
        except OSError as e:
            logger.warning(f"Error reading {path}: {e}")
            return Checksum.unknown(f"file I/O error for {path}")

        result = Checksum.ok(hasher.digest())
        self.stats.add_checksum(size_done)
        logger.debug(f"{path} size {size_done} checksum {result}")
        return result

    def ensure(self, entry: Entry) -> Checksum:
        """Computes and caches the entry's checksum on first use."""
        if entry.checksum is not None:
            return entry.checksum
        result = self.compute(entry.path)
        if not result.is_cancelled:
            entry.checksum = result
        return result
