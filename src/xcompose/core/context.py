"""Cancellation context passed through a single reconcile.

The reconciliation loop that drives composition runs many composites on
worker threads. Each invocation gets a ``ReconcileContext`` that the loop can
cancel (shutdown, superseded event) or bound with a deadline. Core operations
call ``check()`` before blocking I/O so cancellation surfaces as an error
rather than as a result.
"""
from __future__ import annotations

import threading
import time
from typing import Optional

from .exceptions import ComposeCancelledError, DeadlineExceededError


class ReconcileContext:
    """Cancellation token with an optional monotonic deadline.

    Usage:
        ctx = ReconcileContext.background().with_timeout(30)
        ctx.check()  # raises once cancelled or past the deadline
    """

    def __init__(
        self,
        *,
        deadline: Optional[float] = None,
        parent: Optional["ReconcileContext"] = None,
    ) -> None:
        self._event = threading.Event()
        self._parent = parent
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

    @classmethod
    def background(cls) -> "ReconcileContext":
        """Return a context that is never cancelled and has no deadline."""
        return cls()

    def with_timeout(self, seconds: float) -> "ReconcileContext":
        """Derive a child context that expires after ``seconds``.

        Cancelling the parent cancels the child; the child never outlives
        the parent's deadline.
        """
        return ReconcileContext(deadline=time.monotonic() + seconds, parent=self)

    def with_cancel(self) -> "ReconcileContext":
        """Derive a child context that can be cancelled independently."""
        return ReconcileContext(parent=self)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent.cancelled if self._parent is not None else False

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        return self.cancelled or self.expired

    def check(self) -> None:
        """Raise if this context is cancelled or past its deadline."""
        if self.cancelled:
            raise ComposeCancelledError("reconcile context cancelled")
        if self.expired:
            raise DeadlineExceededError("reconcile context deadline exceeded")


def ensure_context(ctx: Optional[ReconcileContext]) -> ReconcileContext:
    """Return ``ctx`` or a background context when the caller passed None."""
    return ctx if ctx is not None else ReconcileContext.background()


__all__ = ["ReconcileContext", "ensure_context"]
