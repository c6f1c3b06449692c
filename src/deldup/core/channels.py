"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/channels.py
The two cross-thread surfaces between a coordinator (UI or console) and the worker
running a deletion pass:

- CancellationToken: cooperative stop flag, usable directly as `stopped_flag`.
- ConfirmationChannel: blocking request/response for "delete this duplicate?".
  Cancelling the token wakes a waiting worker, which then sees Decision.CANCELLED.
"""

import logging
import threading
from typing import Callable, List, Optional

from deldup.core.models import ConfirmationRequest, Decision

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cancellation flag shared by coordinator and worker."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._listeners: List[Callable[[], None]] = []

    def cancel(self) -> None:
        """Raises the flag and wakes everything waiting on it."""
        self._event.set()
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __call__(self) -> bool:
        return self._event.is_set()

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Registers a callback run once per cancel() call, on the cancelling thread."""
        with self._lock:
            self._listeners.append(listener)


class AutoConfirmer:
    """Answers every confirmation with the same decision (non-interactive runs)."""

    def __init__(self, decision: Decision = Decision.DELETE):
        self.decision = decision
        self.apply_to_all = False

    def confirm(self, request: ConfirmationRequest) -> Decision:
        return self.decision


class ConfirmationChannel:
    """
    Synchronous request/response channel between the worker and a decision provider.

    Worker side:      confirm(request) blocks until a reply or cancellation.
    Coordinator side: wait_for_request() / pending, then reply(decision).
    """

    def __init__(
        self,
        token: Optional[CancellationToken] = None,
        on_request: Optional[Callable[[ConfirmationRequest], None]] = None,
    ):
        self.token = token or CancellationToken()
        self.on_request = on_request
        self._cond = threading.Condition()
        self._pending: Optional[ConfirmationRequest] = None
        self._decision: Optional[Decision] = None
        self._apply_to_all = False
        self.token.add_listener(self._wake)

    @property
    def apply_to_all(self) -> bool:
        with self._cond:
            return self._apply_to_all

    @apply_to_all.setter
    def apply_to_all(self, value: bool) -> None:
        with self._cond:
            self._apply_to_all = bool(value)

    @property
    def pending(self) -> Optional[ConfirmationRequest]:
        """The request currently waiting for an answer, if any."""
        with self._cond:
            return self._pending

    def confirm(self, request: ConfirmationRequest) -> Decision:
        """Posts a request and blocks the calling (worker) thread for the answer."""
        with self._cond:
            if self.token.is_cancelled():
                return Decision.CANCELLED
            self._pending = request
            self._decision = None
            self._cond.notify_all()

        if self.on_request:
            self.on_request(request)

        with self._cond:
            self._cond.wait_for(
                lambda: self._decision is not None or self.token.is_cancelled()
            )
            decision = self._decision
            self._pending = None
            self._decision = None

        if decision is None or self.token.is_cancelled():
            logger.debug(f"Confirmation released by cancellation: {request.candidate_path}")
            return Decision.CANCELLED
        return decision

    def wait_for_request(self, timeout: Optional[float] = None) -> Optional[ConfirmationRequest]:
        """Blocks the coordinator until a request is pending, the token is cancelled, or timeout."""
        with self._cond:
            self._cond.wait_for(
                lambda: self._pending is not None or self.token.is_cancelled(),
                timeout=timeout,
            )
            return self._pending

    def reply(self, decision: Decision, apply_to_all: Optional[bool] = None) -> None:
        """Answers the pending request. Replies with nobody waiting are ignored."""
        with self._cond:
            if apply_to_all is not None:
                self._apply_to_all = bool(apply_to_all)
            if self._pending is None:
                logger.debug("Reply ignored: no confirmation pending")
                return
            self._pending = None
            self._decision = decision
            self._cond.notify_all()

    def _wake(self) -> None:
        with self._cond:
            self._cond.notify_all()
