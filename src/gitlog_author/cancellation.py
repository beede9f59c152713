"""Cooperative cancellation for batch loops and diff streams."""

import threading
from typing import Optional

from .exceptions import OperationCancelled


class CancelToken:
    """Thread-safe cancellation flag shared by one pipeline run.

    Long loops call ``raise_if_cancelled()`` between batches and between
    stream chunks; the CLI cancels the token on Ctrl-C.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason = ""

    def cancel(self, reason: str = "cancelled") -> None:
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled(
                f"Operation cancelled: {self._reason}", details={"reason": self._reason}
            )

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on cancellation."""
        return self._event.wait(timeout)


def check_cancelled(token: Optional[CancelToken]) -> None:
    """Checkpoint helper for code paths where the token is optional."""
    if token is not None:
        token.raise_if_cancelled()
