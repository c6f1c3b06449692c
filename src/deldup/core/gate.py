"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/gate.py
Deletion policy for confirmed duplicates, applied in fixed precedence:

0. the candidate must still exist (a vanished file is a deletion error)
1. read-only protection   (unless allow_readonly_delete)
2. hidden protection      (unless allow_hidden_delete)
3. confirmation           (sticky while the confirmer's apply_to_all is set)
4. simulation or permanent deletion, with separate error accounting

Refusals and "no" answers are reported but never counted as errors.
"""

import logging
from typing import Callable, Optional

from deldup.core.interfaces import Confirmer, DeletionGate, ReportSink
from deldup.core.models import (
    ConfirmationRequest,
    Decision,
    DeletionParams,
    DeletionStats,
    Entry,
    GateOutcome,
)
from deldup.services.file_service import FileService

logger = logging.getLogger(__name__)


class DeletionGateImpl(DeletionGate):
    """
    Decides, and optionally performs, the deletion of one duplicate file.
    """

    def __init__(
        self,
        params: DeletionParams,
        confirmer: Confirmer,
        stats: DeletionStats,
        report: ReportSink,
        stopped_flag: Optional[Callable[[], bool]] = None,
    ):
        self.params = params
        self.confirmer = confirmer
        self.stats = stats
        self.report = report
        self.stopped_flag = stopped_flag
        self._sticky: Optional[Decision] = None

    def decide(self, candidate: Entry, matched: Entry) -> GateOutcome:
        path = candidate.path
        if not FileService.exists(path):
            self.stats.add_deletion_error()
            logger.warning(f"{path} disappeared before it could be deleted")
            self.report(f"{path} - failed to delete file (file no longer exists)")
            return GateOutcome.FAILED

        is_readonly = FileService.is_readonly(path)
        is_hidden = FileService.is_hidden(path)

        if is_readonly and not self.params.allow_readonly_delete:
            self.report(f"{path} - can't delete read-only files")
            return GateOutcome.REFUSED_READONLY

        if is_hidden and not self.params.allow_hidden_delete:
            self.report(f"{path} - can't delete hidden files")
            return GateOutcome.REFUSED_HIDDEN

        request = ConfirmationRequest(
            candidate_path=path,
            matched_path=matched.path,
            checksum=str(matched.checksum) if matched.checksum else "",
            size=candidate.size,
            modified_time=FileService.modified_time(path),
            is_hidden=is_hidden,
            is_readonly=is_readonly,
        )
        decision = self._ask(request)

        if decision is Decision.CANCELLED or self._stopped():
            logger.debug(f"Deletion of {path} abandoned: run cancelled")
            return GateOutcome.CANCELLED

        if decision is Decision.SKIP:
            self.report(f'{path} - user said "no" to deletion')
            return GateOutcome.DECLINED

        if self.params.simulate_only:
            self.stats.add_deleted(candidate.size)
            self.report(f"{path} - simulated deletion, file kept")
            return GateOutcome.SIMULATED

        try:
            FileService.delete_file(path)
        except OSError as e:
            self.stats.add_deletion_error()
            logger.warning(f"Failed to delete {path}: {e}")
            self.report(f"{path} - failed to delete file ({e.strerror or e})")
            return GateOutcome.FAILED

        self.stats.add_deleted(candidate.size)
        self.report(f"{path} - deleted")
        return GateOutcome.DELETED

    def _ask(self, request: ConfirmationRequest) -> Decision:
        """Asks the confirmer unless a sticky answer applies."""
        if not self.confirmer.apply_to_all:
            self._sticky = None
        elif self._sticky is not None:
            return self._sticky

        decision = self.confirmer.confirm(request)
        if decision is not Decision.CANCELLED and self.confirmer.apply_to_all:
            self._sticky = decision
        return decision

    def _stopped(self) -> bool:
        return bool(self.stopped_flag and self.stopped_flag())
