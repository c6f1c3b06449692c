"""
deldup - deletes files from an "unknown" tree that already exist in a "trusted" tree.

Core features:
- Size index of the trusted tree, checksums computed only when sizes collide
- First-match, scan-order-deterministic duplicate resolution (xxHash128 or MD5)
- Read-only and hidden file protection, per-file confirmation, simulation mode
- Cooperative cancellation from another thread
- CLI interface and an optional Qt worker (install with [gui] extra)
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("deldup")
except Exception:
    import tomllib
    from pathlib import Path as _Path

    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API - only what users should import directly
from deldup.commands import DeletionCommand
from deldup.core import (
    AutoConfirmer, CancellationToken, ConfirmationChannel, ConfirmationRequest,
    Decision, DeletionParams, DeletionStats, GateOutcome, HashAlgorithmName,
)
from deldup.utils.convert_utils import ConvertUtils
from deldup.services.file_service import FileService

__all__ = [
    "DeletionCommand",
    "DeletionParams",
    "DeletionStats",
    "HashAlgorithmName",
    "Decision",
    "GateOutcome",
    "ConfirmationRequest",
    "ConfirmationChannel",
    "CancellationToken",
    "AutoConfirmer",
    "ConvertUtils",
    "FileService",
    "__version__",
]
