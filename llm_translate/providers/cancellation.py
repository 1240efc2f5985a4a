"""Cooperative cancellation for in-flight translation requests."""

from .errors import CancelledError


class CancellationToken:
    """Flag set by the caller and polled by adapters at chunk boundaries."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancelledError("Translation cancelled")
