"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deleter.py
Implements the two-pass trusted/unknown deletion engine:
    - trusted pass: index every trusted file by size (no matching)
    - unknown pass: match each unknown file against the index, gate duplicates,
      append unique files to the index

Because unique unknown files join the index, a later unknown file identical to an
earlier one is also treated as a duplicate. The first file in scan order is kept.
"""
import time
import logging
from pathlib import Path
from typing import Callable, Optional

from deldup.core.gate import DeletionGateImpl
from deldup.core.hasher import ChecksumComputerImpl, algorithm_for
from deldup.core.index import SizeIndex
from deldup.core.interfaces import Confirmer, ReportSink
from deldup.core.models import DeletionParams, DeletionStats, Entry, GateOutcome
from deldup.core.resolver import MatchResolverImpl
from deldup.core.scanner import TreeScannerImpl

logger = logging.getLogger(__name__)


# =============================
# Main Deleter Class
# =============================
class DuplicateDeleterImpl:
    """
    Runs one trusted/unknown pass with a fresh run context (index, stats, gate).
    Roots must already be canonical and non-overlapping.
    """

    def __init__(
        self,
        params: DeletionParams,
        confirmer: Confirmer,
        report: ReportSink,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None,
        stats: Optional[DeletionStats] = None,
    ):
        self.params = params
        self.report = report
        self.stopped_flag = stopped_flag
        self.stats = stats if stats is not None else DeletionStats()
        self.index = SizeIndex()

        self.scanner = TreeScannerImpl(
            recurse_subfolders=params.recurse_subfolders,
            include_hidden=params.include_hidden,
            include_empty_files=params.include_empty_files,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback,
            report=report,
        )
        self.checksums = ChecksumComputerImpl(
            algorithm=algorithm_for(params.algorithm),
            stats=self.stats,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback,
        )
        self.resolver = MatchResolverImpl(self.index, self.checksums)
        self.gate = DeletionGateImpl(
            params, confirmer, self.stats, report, stopped_flag=stopped_flag
        )

    def run(self, trusted: Optional[Path], unknown: Path) -> DeletionStats:
        """
        Index the trusted tree (if any), then match and gate the unknown tree.
        Args:
            trusted: Canonical trusted root, or None for no pre-existing reference
            unknown: Canonical unknown root
        Returns:
            DeletionStats for this run (cancelled flag set if stopped early)
        """
        start_time = time.time()

        if trusted is not None:
            self.scanner.scan(trusted, self._index_trusted, boundary=unknown, label="trusted")
            logger.debug(f"Indexed {len(self.index)} trusted files")

        if not self._stopped():
            self.scanner.scan(
                unknown, self._match_unknown, boundary=trusted, stats=self.stats, label="unknown"
            )

        self.stats.cancelled = self._stopped()
        self.stats.total_time = time.time() - start_time
        return self.stats

    def _index_trusted(self, path: Path, size: int) -> bool:
        self.index.add(Entry(path=str(path), size=size))
        return True

    def _match_unknown(self, path: Path, size: int) -> bool:
        result = self.resolver.resolve(Entry(path=str(path), size=size))
        if result.cancelled:
            return False
        if not result.is_duplicate:
            return True

        self.report(f"{path} - same as {result.matched.path}")
        if self._stopped():
            return False
        # Counted only once the gate has finished with the file
        if self.gate.decide(result.candidate, result.matched) is GateOutcome.CANCELLED:
            return False
        self.stats.add_duplicate(size)
        return True

    def _stopped(self) -> bool:
        return bool(self.stopped_flag and self.stopped_flag())
