"""
Core deletion engine: scanner, size index, checksums, resolver and gate.

- TreeScannerImpl: deterministic walk of one trusted or unknown tree
- SizeIndex: size buckets of entries in insertion order
- ChecksumComputerImpl: lazy, cancellable, streamed checksums (xxHash128 / MD5)
- MatchResolverImpl: first same-size, same-checksum entry wins
- DeletionGateImpl: read-only/hidden protection, confirmation, deletion
- DuplicateDeleterImpl: the two-pass run
- CancellationToken / ConfirmationChannel: the cross-thread surfaces

Pure Python with no GUI dependencies.
"""

from .models import (
    Checksum, ChecksumStatus, ConfirmationRequest, Decision, DeletionParams,
    DeletionStats, Entry, GateOutcome, HashAlgorithmName, MatchResult)
from .channels import AutoConfirmer, CancellationToken, ConfirmationChannel
from .hasher import ChecksumComputerImpl, XXHashAlgorithmImpl, MD5AlgorithmImpl, algorithm_for
from .index import SizeIndex
from .scanner import TreeScannerImpl
from .resolver import MatchResolverImpl
from .gate import DeletionGateImpl
from .deleter import DuplicateDeleterImpl

__all__ = [
    "Checksum",
    "ChecksumStatus",
    "ConfirmationRequest",
    "Decision",
    "DeletionParams",
    "DeletionStats",
    "Entry",
    "GateOutcome",
    "HashAlgorithmName",
    "MatchResult",
    "AutoConfirmer",
    "CancellationToken",
    "ConfirmationChannel",
    "ChecksumComputerImpl",
    "XXHashAlgorithmImpl",
    "MD5AlgorithmImpl",
    "algorithm_for",
    "SizeIndex",
    "TreeScannerImpl",
    "MatchResolverImpl",
    "DeletionGateImpl",
    "DuplicateDeleterImpl",
]
