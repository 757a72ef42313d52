"""Exception hierarchy for the loader.

Fatal errors (:class:`ConfigurationError`, :class:`CollectionInitError`,
:class:`EmbedderInitError`) abort the run.  :class:`VectorValidationError`
only ever costs the chunk that produced the bad vector.
"""

from __future__ import annotations


class LoaderError(Exception):
    """Base class for every error raised by the loader."""


class ConfigurationError(LoaderError):
    """Required settings are missing or inconsistent."""


class CollectionInitError(LoaderError):
    """The target collection could not be (re)created."""


class EmbedderInitError(LoaderError):
    """The embedding backend could not be initialised."""


class VectorValidationError(LoaderError):
    """An embedding has the wrong width or contains non-finite values."""

    def __init__(self, message: str, *, expected: int | None = None, actual: int | None = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
