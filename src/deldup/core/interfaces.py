"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deletion engine.
These protocols enforce structural typing using Python's `typing.Protocol` so the
scanner, resolver and gate can be swapped or mocked independently.

Key Components:
---------------
- HashAlgorithm / StreamingHash: Pluggable streaming hash functions (xxHash, MD5).
- ChecksumComputer: Computes and caches content checksums of entries.
- TreeScanner: Walks a file tree in deterministic order and calls back per file.
- MatchResolver: Finds the first same-size, same-checksum entry for a candidate.
- Confirmer: External decision provider asked before each deletion.
- DeletionGate: Applies protections and confirmation, then deletes.
"""

from pathlib import Path
from typing import Protocol, Optional, Callable
from deldup.core.models import (
    Checksum,
    ConfirmationRequest,
    Decision,
    DeletionStats,
    Entry,
    GateOutcome,
    MatchResult,
)

# Signature shared by every report sink: one line of text per notable event
ReportSink = Callable[[str], None]


# ===== Interfaces =====

class StreamingHash(Protocol):
    """Incremental hash object (the hashlib / xxhash object shape)."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like MD5 or xxHash
    without affecting the rest of the matching logic.
    """
    name: str

    def new(self) -> StreamingHash:
        """Returns a fresh incremental hash object."""
        ...


class ChecksumComputer(Protocol):
    """Interface for computing content checksums of files and entries."""
    def compute(self, path: str) -> Checksum: ...
    def ensure(self, entry: Entry) -> Checksum: ...


class TreeScanner(Protocol):
    """
    Interface for walking one trusted or unknown tree.

    Methods:
        scan: Visits every accepted file below root and calls on_file(path, size).
    """
    def scan(
        self,
        root: Path,
        on_file: Callable[[Path, int], Optional[bool]],
        boundary: Optional[Path] = None,
        stats: Optional[DeletionStats] = None,
        label: str = "unknown",
    ) -> None:
        ...


class MatchResolver(Protocol):
    """Interface for first-match lookup of an unknown entry in its size bucket."""
    def resolve(self, entry: Entry) -> MatchResult: ...


class Confirmer(Protocol):
    """
    External collaborator deciding whether one duplicate may be deleted.

    Attributes:
        apply_to_all: When set, the gate reuses the last answer given while set.
    """
    apply_to_all: bool

    def confirm(self, request: ConfirmationRequest) -> Decision: ...


class DeletionGate(Protocol):
    """Interface for the deletion policy applied to each confirmed duplicate."""
    def decide(self, candidate: Entry, matched: Entry) -> GateOutcome: ...
