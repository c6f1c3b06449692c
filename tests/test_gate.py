"""
Unit tests for DeletionGateImpl.
Verifies protection precedence, confirmation stickiness, simulation and
deletion error accounting.
"""
import random
from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import write_file
from deldup.core.gate import DeletionGateImpl
from deldup.core.models import Decision, DeletionParams, DeletionStats, Entry, GateOutcome
from deldup.services.file_service import FileService


class ScriptedConfirmer:
    """Confirmer answering from a list; an answer may also switch apply_to_all on."""

    def __init__(self, *answers, sticky=False):
        self.answers = list(answers)
        self.sticky = sticky
        self.apply_to_all = False
        self.requests = []

    def confirm(self, request):
        self.requests.append(request)
        if self.sticky:
            self.apply_to_all = True
        return self.answers.pop(0)


def attributes(readonly=False, hidden=False):
    """Patches the file attribute queries used by the gate."""
    return (
        patch.object(FileService, "is_readonly", return_value=readonly),
        patch.object(FileService, "is_hidden", return_value=hidden),
    )


@pytest.fixture
def pair(temp_dir):
    candidate = write_file(temp_dir / "unknown" / "copy.jpg", b"x" * 10)
    matched = write_file(temp_dir / "trusted" / "photo.jpg", b"x" * 10)
    return Entry(path=str(candidate), size=10), Entry(path=str(matched), size=10)


def make_gate(confirmer, report, stopped_flag=None, **params):
    stats = DeletionStats()
    gate = DeletionGateImpl(
        DeletionParams(unknown_root="/unknown", **params), confirmer, stats, report, stopped_flag
    )
    return gate, stats


class TestProtections:

    def test_readonly_refused_without_asking(self, pair, report):
        confirmer = ScriptedConfirmer(Decision.DELETE)
        gate, stats = make_gate(confirmer, report)
        readonly, hidden = attributes(readonly=True)

        with readonly, hidden:
            outcome = gate.decide(*pair)

        assert outcome is GateOutcome.REFUSED_READONLY
        assert confirmer.requests == []
        assert report.contains("can't delete read-only files")
        assert stats.deletion_errors == 0
        assert stats.deleted_files == 0

    def test_hidden_refused_without_asking(self, pair, report):
        confirmer = ScriptedConfirmer(Decision.DELETE)
        gate, stats = make_gate(confirmer, report)
        readonly, hidden = attributes(hidden=True)

        with readonly, hidden:
            outcome = gate.decide(*pair)

        assert outcome is GateOutcome.REFUSED_HIDDEN
        assert confirmer.requests == []
        assert report.contains("can't delete hidden files")

    def test_readonly_checked_before_hidden(self, pair, report):
        gate, _ = make_gate(ScriptedConfirmer(Decision.DELETE), report, allow_hidden_delete=False)
        readonly, hidden = attributes(readonly=True, hidden=True)

        with readonly, hidden:
            assert gate.decide(*pair) is GateOutcome.REFUSED_READONLY

    def test_allowed_protections_proceed_to_confirmation(self, pair, report):
        confirmer = ScriptedConfirmer(Decision.SKIP)
        gate, _ = make_gate(confirmer, report, allow_readonly_delete=True, allow_hidden_delete=True)
        readonly, hidden = attributes(readonly=True, hidden=True)

        with readonly, hidden:
            assert gate.decide(*pair) is GateOutcome.DECLINED

        request = confirmer.requests[0]
        assert request.is_readonly and request.is_hidden
        assert request.candidate_path == pair[0].path
        assert request.matched_path == pair[1].path
        assert request.size == 10


class TestDecisions:

    def test_delete_removes_file(self, pair, report):
        gate, stats = make_gate(ScriptedConfirmer(Decision.DELETE), report)

        assert gate.decide(*pair) is GateOutcome.DELETED

        assert not Path(pair[0].path).exists()
        assert stats.deleted_files == 1
        assert stats.deleted_bytes == 10
        assert report.contains("deleted")

    def test_skip_keeps_file(self, pair, report):
        gate, stats = make_gate(ScriptedConfirmer(Decision.SKIP), report)

        assert gate.decide(*pair) is GateOutcome.DECLINED

        assert Path(pair[0].path).exists()
        assert report.contains('user said "no" to deletion')
        assert stats.deleted_files == 0
        assert stats.deletion_errors == 0

    def test_simulation_counts_but_keeps_file(self, pair, report):
        gate, stats = make_gate(ScriptedConfirmer(Decision.DELETE), report, simulate_only=True)

        assert gate.decide(*pair) is GateOutcome.SIMULATED

        assert Path(pair[0].path).exists()
        assert stats.deleted_files == 1
        assert stats.deleted_bytes == 10
        assert report.contains("simulated deletion")

    def test_delete_failure_is_counted_and_reported(self, pair, report):
        gate, stats = make_gate(ScriptedConfirmer(Decision.DELETE), report)

        with patch.object(FileService, "delete_file", side_effect=PermissionError(13, "Permission denied")):
            assert gate.decide(*pair) is GateOutcome.FAILED

        assert stats.deletion_errors == 1
        assert stats.deleted_files == 0
        assert report.contains("failed to delete file (Permission denied)")

    def test_vanished_file_is_a_deletion_error(self, pair, report):
        confirmer = ScriptedConfirmer(Decision.DELETE)
        gate, stats = make_gate(confirmer, report)
        Path(pair[0].path).unlink()

        assert gate.decide(*pair) is GateOutcome.FAILED

        assert confirmer.requests == []
        assert stats.deletion_errors == 1
        assert stats.deleted_files == 0
        assert report.contains("failed to delete file (file no longer exists)")
        assert not report.contains("read-only")

    def test_cancelled_answer_is_silent(self, pair, report):
        gate, stats = make_gate(ScriptedConfirmer(Decision.CANCELLED), report)

        assert gate.decide(*pair) is GateOutcome.CANCELLED

        assert report.lines == []
        assert stats == DeletionStats()

    def test_cancellation_after_confirmation_deletes_nothing(self, pair, report):
        confirmer = ScriptedConfirmer(Decision.DELETE)
        gate, stats = make_gate(confirmer, report, stopped_flag=lambda: bool(confirmer.requests))

        assert gate.decide(*pair) is GateOutcome.CANCELLED

        assert Path(pair[0].path).exists()
        assert stats.deleted_files == 0


class TestStickyAnswers:

    def test_apply_to_all_reuses_answer(self, temp_dir, report):
        confirmer = ScriptedConfirmer(Decision.SKIP, sticky=True)
        gate, _ = make_gate(confirmer, report)
        pairs = [
            (Entry(path=str(write_file(temp_dir / f"u{i}", b"1")), size=1), Entry(path="/t", size=1))
            for i in range(3)
        ]

        outcomes = [gate.decide(*p) for p in pairs]

        assert outcomes == [GateOutcome.DECLINED] * 3
        assert len(confirmer.requests) == 1

    def test_clearing_apply_to_all_forgets_answer(self, temp_dir, report):
        confirmer = ScriptedConfirmer(Decision.SKIP, Decision.SKIP, sticky=True)
        gate, _ = make_gate(confirmer, report)
        first = Entry(path=str(write_file(temp_dir / "u1", b"1")), size=1)
        second = Entry(path=str(write_file(temp_dir / "u2", b"1")), size=1)

        gate.decide(first, Entry(path="/t", size=1))
        confirmer.apply_to_all = False
        gate.decide(second, Entry(path="/t", size=1))

        assert len(confirmer.requests) == 2

    def test_cancelled_answer_is_never_sticky(self, temp_dir, report):
        confirmer = ScriptedConfirmer(Decision.CANCELLED, Decision.SKIP, sticky=True)
        gate, _ = make_gate(confirmer, report)
        first = Entry(path=str(write_file(temp_dir / "u1", b"1")), size=1)
        second = Entry(path=str(write_file(temp_dir / "u2", b"1")), size=1)

        assert gate.decide(first, Entry(path="/t", size=1)) is GateOutcome.CANCELLED
        assert gate.decide(second, Entry(path="/t", size=1)) is GateOutcome.DECLINED
        assert len(confirmer.requests) == 2


class TestProtectionProperty:

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_protected_files_are_never_deleted(self, seed, report):
        """
        For random attribute/permission combinations, a read-only or hidden file is
        deleted only when the matching allow flag is on and the answer is DELETE.
        """
        rng = random.Random(seed)
        for _ in range(100):
            is_readonly, is_hidden = rng.random() < 0.5, rng.random() < 0.5
            allow_ro, allow_hidden = rng.random() < 0.5, rng.random() < 0.5
            answer = rng.choice([Decision.DELETE, Decision.SKIP])

            confirmer = ScriptedConfirmer(answer)
            gate, stats = make_gate(
                confirmer, report,
                allow_readonly_delete=allow_ro, allow_hidden_delete=allow_hidden
            )
            readonly, hidden = attributes(readonly=is_readonly, hidden=is_hidden)
            with readonly, hidden, patch.object(FileService, "delete_file") as delete_file, \
                    patch.object(FileService, "modified_time", return_value=0.0), \
                    patch.object(FileService, "exists", return_value=True):
                outcome = gate.decide(Entry(path="/u/f", size=1), Entry(path="/t/f", size=1))

            protected = (is_readonly and not allow_ro) or (is_hidden and not allow_hidden)
            if protected:
                assert confirmer.requests == []
                assert not delete_file.called
                assert outcome in (GateOutcome.REFUSED_READONLY, GateOutcome.REFUSED_HIDDEN)
            else:
                assert len(confirmer.requests) == 1
                assert delete_file.called == (answer is Decision.DELETE)
            assert stats.deletion_errors == 0
