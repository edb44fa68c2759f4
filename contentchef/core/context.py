"""
Call context - caller-driven cancellation and deadlines.

Every API call takes a Context. The client checks it before issuing the
request, passes the remaining time to the transport as its timeout, and
reports the context's error when a transport failure coincides with
cancellation or an expired deadline.
"""

import threading
import time

from contentchef.core.errors import ContextCancelledError, DeadlineExceededError, TransportError


class Context:
    """
    Cancellation/deadline handle for a single call (or a group of calls).

    Example:
        ctx = Context.with_timeout(5)
        channel.content(ctx, ContentOptions(public_id="home"))

    """

    def __init__(self, deadline: float | None = None):
        """
        Args:
            deadline: Absolute time.monotonic() value after which calls fail, or None

        """
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "Context":
        """A context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """A context that expires `seconds` from now."""
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        """Cancel the context. Safe to call from any thread, more than once."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        """Check whether the context is cancelled or past its deadline."""
        return self.cancelled or self.expired

    def remaining(self) -> float | None:
        """Seconds left before the deadline (never negative), or None without a deadline."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def error(self) -> TransportError | None:
        """The error describing why the context is done, or None if it is not."""
        if self.cancelled:
            return ContextCancelledError("context canceled")
        if self.expired:
            return DeadlineExceededError("context deadline exceeded")
        return None
