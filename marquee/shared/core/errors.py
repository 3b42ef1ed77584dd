"""Error taxonomy shared by every feature container."""

from __future__ import annotations


class MarqueeError(Exception):
    """Base class for errors raised inside the state layer."""

    def __init__(self, message: str = "", *, entity_id: object | None = None):
        super().__init__(message)
        self.message = message
        self.entity_id = entity_id

    def __str__(self) -> str:
        return self.message or self.__class__.__name__


class FetchError(MarqueeError):
    """A read against the data source failed. Retry by re-dispatching the load intent."""


class ValidationError(MarqueeError):
    """An intent was rejected before it reached the data source."""


class MutationError(MarqueeError):
    """A write against the data source failed; the optimistic snapshot is rolled back."""


class UnexpectedError(MarqueeError):
    """Wraps any exception that escaped a handler."""

    @classmethod
    def wrap(cls, exc: BaseException) -> "UnexpectedError":
        if isinstance(exc, UnexpectedError):
            return exc
        detail = str(exc) or exc.__class__.__name__
        wrapped = cls(f"Unexpected error: {detail}")
        wrapped.__cause__ = exc
        return wrapped


def describe_error(exc: BaseException) -> str:
    """Human readable message for a failure snapshot."""
    if isinstance(exc, MarqueeError):
        return str(exc)
    return str(UnexpectedError.wrap(exc))
