"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for trusted/unknown duplicate detection and deletion.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional
from enum import Enum

from deldup.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class HashAlgorithmName(Enum):
    """
    Content digest used to prove two same-size files identical.
    """
    XXH128 = "xxh128"
    MD5 = "md5"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            HashAlgorithmName.XXH128: "xxHash128",
            HashAlgorithmName.MD5: "MD5",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class ChecksumStatus(Enum):
    OK = "ok"
    UNKNOWN = "unknown"
    CANCELLED = "cancelled"


class Decision(Enum):
    """Answer of the confirmation collaborator for one duplicate."""
    DELETE = "delete"
    SKIP = "skip"
    CANCELLED = "cancelled"


class GateOutcome(Enum):
    DELETED = "deleted"
    SIMULATED = "simulated"
    REFUSED_READONLY = "refused-readonly"
    REFUSED_HIDDEN = "refused-hidden"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    FAILED = "failed"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class Checksum:
    """
    Outcome of one checksum computation.

    Only OK checksums carry a digest. UNKNOWN (I/O failure) and CANCELLED
    outcomes carry a reason and never match anything, not even each other.
    """
    status: ChecksumStatus
    digest: bytes = b""
    reason: str = ""

    def __post_init__(self):
        if not isinstance(self.digest, bytes):
            raise ValueError("Checksum digest must be bytes")
        if self.status is ChecksumStatus.OK and not self.digest:
            raise ValueError("OK checksum requires a digest")

    @classmethod
    def ok(cls, digest: bytes) -> 'Checksum':
        return cls(ChecksumStatus.OK, digest=digest)

    @classmethod
    def unknown(cls, reason: str) -> 'Checksum':
        return cls(ChecksumStatus.UNKNOWN, reason=reason)

    @classmethod
    def cancelled(cls, reason: str) -> 'Checksum':
        return cls(ChecksumStatus.CANCELLED, reason=reason)

    @property
    def is_known(self) -> bool:
        return self.status is ChecksumStatus.OK

    @property
    def is_cancelled(self) -> bool:
        return self.status is ChecksumStatus.CANCELLED

    def matches(self, other: Optional['Checksum']) -> bool:
        """True only when both digests were computed and are equal."""
        if other is None or not self.is_known or not other.is_known:
            return False
        return self.digest == other.digest

    def __str__(self) -> str:
        if self.is_known:
            return self.digest.hex()
        return f"{self.status.value}: {self.reason}"


@dataclass
class Entry:
    """
    One file held in a size bucket: path, size and a lazily computed checksum.
    """
    path: str
    size: int  # in bytes
    checksum: Optional[Checksum] = None

    def __post_init__(self):
        if self.size < 0:
            raise ValueError("File size cannot be negative")

    def __repr__(self):
        return f"<Entry path={self.path}, size={self.size}>"


@dataclass
class MatchResult:
    """Result of looking up one unknown entry in its size bucket."""
    candidate: Entry
    matched: Optional[Entry] = None
    cancelled: bool = False

    @property
    def is_duplicate(self) -> bool:
        return self.matched is not None and not self.cancelled


@dataclass(frozen=True)
class ConfirmationRequest:
    """Everything the confirmation collaborator is shown about one duplicate."""
    candidate_path: str
    matched_path: str
    checksum: str
    size: int
    modified_time: float
    is_hidden: bool = False
    is_readonly: bool = False

    @property
    def tag(self) -> str:
        """Short marker for hidden or read-only files, empty otherwise."""
        if self.is_hidden and self.is_readonly:
            return "(hidden, read-only)"
        if self.is_hidden:
            return "(hidden file)"
        if self.is_readonly:
            return "(read-only file)"
        return ""


@dataclass
class DeletionStats:
    """
    Counters collected during one run. Only the worker writes them;
    other threads read a snapshot().
    """
    checksum_files: int = 0
    checksum_bytes: int = 0
    unknown_files: int = 0
    unknown_bytes: int = 0
    unknown_folders: int = 0
    duplicate_files: int = 0
    duplicate_bytes: int = 0
    deleted_files: int = 0
    deleted_bytes: int = 0
    deletion_errors: int = 0
    cancelled: bool = False
    total_time: float = 0.0

    def add_checksum(self, size: int) -> None:
        self.checksum_files += 1
        self.checksum_bytes += size

    def add_unknown_file(self, size: int) -> None:
        self.unknown_files += 1
        self.unknown_bytes += size

    def add_unknown_folder(self) -> None:
        self.unknown_folders += 1

    def add_duplicate(self, size: int) -> None:
        self.duplicate_files += 1
        self.duplicate_bytes += size

    def add_deleted(self, size: int) -> None:
        self.deleted_files += 1
        self.deleted_bytes += size

    def add_deletion_error(self) -> None:
        self.deletion_errors += 1

    def snapshot(self) -> 'DeletionStats':
        """Independent copy, safe to hand to another thread."""
        return replace(self)

    def summary_lines(self) -> List[str]:
        plural = ConvertUtils.plural
        return [
            f"Deleted {plural(self.deleted_files, 'file')} using "
            f"{plural(self.deleted_bytes, 'byte')}, with "
            f"{plural(self.deletion_errors, 'error')}.",
            f"Found {plural(self.duplicate_files, 'duplicate file')} using "
            f"{plural(self.duplicate_bytes, 'byte')}.",
            f"Calculated {plural(self.checksum_files, 'checksum')} with "
            f"{plural(self.checksum_bytes, 'byte')}.",
            f"{'Found' if self.cancelled else 'Finished'} "
            f"{plural(self.unknown_folders, 'unknown folder')} and "
            f"{plural(self.unknown_files, 'file')} using "
            f"{plural(self.unknown_bytes, 'byte')}.",
        ]

    def print_summary(self) -> str:
        return "\n".join(self.summary_lines())


"""
DTO for run parameters with built-in validation.
Interface-agnostic: used by both the Qt worker and the CLI.
"""

@dataclass
class DeletionParams:
    """Parameters for one trusted/unknown run, validated on creation."""
    unknown_root: str
    trusted_root: Optional[str] = None
    recurse_subfolders: bool = True
    include_hidden: bool = False
    include_empty_files: bool = False
    allow_readonly_delete: bool = False
    allow_hidden_delete: bool = False
    simulate_only: bool = False
    algorithm: HashAlgorithmName = field(default=HashAlgorithmName.XXH128)

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.unknown_root or not str(self.unknown_root).strip():
            raise ValueError("Unknown file or folder cannot be empty")
        self.unknown_root = str(self.unknown_root)

        # Blank trusted input means "no pre-existing reference"
        if self.trusted_root is not None:
            self.trusted_root = str(self.trusted_root)
            if not self.trusted_root.strip():
                self.trusted_root = None

        if not isinstance(self.algorithm, HashAlgorithmName):
            self.algorithm = HashAlgorithmName(self.algorithm)
