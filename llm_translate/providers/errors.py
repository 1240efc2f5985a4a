"""Error taxonomy for translation requests."""

from typing import Optional


class TranslationError(Exception):
    """Base class for all errors raised by the provider layer."""

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.__class__.__name__


class ConfigurationError(TranslationError):
    """A required credential or endpoint is missing; raised before any I/O."""


class TransportError(TranslationError):
    """Non-2xx response or connection failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(TranslationError):
    """One malformed stream frame. Always recovered inside the decoder."""


class CancelledError(TranslationError):
    """The caller cancelled the request.

    Not a failure and unrelated to ``asyncio.CancelledError``.
    """


class UnsupportedProviderError(TranslationError):
    """Unknown provider identifier passed to the registry."""
