"""
Run orchestrator for trusted/unknown duplicate deletion.
Shared by the console front end and the Qt worker; has no Qt dependencies.
"""
import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

from deldup.core.deleter import DuplicateDeleterImpl
from deldup.core.interfaces import Confirmer, ReportSink
from deldup.core.models import DeletionParams, DeletionStats

logger = logging.getLogger(__name__)

MEMORY_ERROR_MESSAGE = "Not enough memory to complete your request."


class DeletionCommand:
    """
    Orchestrates one deletion run:
    1. Resolve both roots to canonical paths and refuse overlapping trees
    2. Build a fresh run context and execute the trusted/unknown passes
    3. Report a summary, even after cancellation or memory exhaustion

    Usage:
        # For GUI (worker thread, blocking confirmation channel):
        stats = DeletionCommand().execute(
            params,
            confirmer=channel,
            report_line=signals.report.emit,
            stopped_flag=token,
        )

        # For CLI without prompting:
        stats = DeletionCommand().execute(params, confirmer=AutoConfirmer(), report_line=print)
    """

    def __init__(self):
        self.stats: Optional[DeletionStats] = None
        self.trusted: Optional[Path] = None
        self.unknown: Optional[Path] = None

    def execute(
            self,
            params: DeletionParams,
            confirmer: Confirmer,
            report_line: ReportSink,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> DeletionStats:
        """
        Execute a run with given parameters.

        Args:
            params: Validated run parameters
            confirmer: Decision provider asked before each deletion
            report_line: Sink for one line of text per notable event
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            Final statistics. Configuration errors return zero counters without scanning.
        """
        def report(text: str) -> None:
            logger.info(text)
            report_line(text)

        self.stats = DeletionStats()

        try:
            self.trusted, self.unknown = self.resolve_roots(params)
        except ValueError as e:
            logger.error(f"Configuration error: {e}")
            for line in str(e).splitlines():
                report(line)
            return self.stats

        # Every run starts with a fresh "apply to all" answer
        confirmer.apply_to_all = False

        deleter = DuplicateDeleterImpl(
            params,
            confirmer,
            report,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback,
            stats=self.stats,
        )

        try:
            deleter.run(self.trusted, self.unknown)
        except MemoryError:
            logger.exception("Out of memory during deletion run")
            self.stats.cancelled = True
            report(MEMORY_ERROR_MESSAGE)

        if stopped_flag and stopped_flag():
            self.stats.cancelled = True
            report("Cancelled by user.")

        report("")
        for line in self.stats.summary_lines():
            report(line)
        return self.stats

    @staticmethod
    def resolve_roots(params: DeletionParams) -> Tuple[Optional[Path], Path]:
        """
        Canonicalize both roots and check they do not overlap.

        Raises:
            ValueError: If a root does not exist, cannot be resolved, or one root
                        is the same as, or inside, the other
        """
        trusted = None
        if params.trusted_root is not None:
            trusted = DeletionCommand._canonical(params.trusted_root, "Trusted")
        unknown = DeletionCommand._canonical(params.unknown_root, "Unknown")

        if trusted is not None and (
                trusted == unknown or unknown in trusted.parents or trusted in unknown.parents):
            raise ValueError(
                "Trusted and unknown folders can not be the same, or one inside the other.\n"
                f"Trusted file/folder resolves to: {trusted}\n"
                f"Unknown file/folder resolves to: {unknown}"
            )
        return trusted, unknown

    @staticmethod
    def _canonical(raw: str, side: str) -> Path:
        path = Path(raw).expanduser()
        if not (path.is_dir() or path.is_file()):
            raise ValueError(f"{side} file/folder does not exist: {raw}")
        try:
            return path.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise ValueError(f"Can't convert {side.lower()} file/folder to canonical form: {raw}") from e
