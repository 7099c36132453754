"""Error kinds raised by the curriculum store and tool dispatcher."""

from __future__ import annotations


class CurriculumError(Exception):
    """Base class for curriculum MCP errors.

    ``kind`` is the machine-readable error kind surfaced to MCP clients.
    """

    kind = "InternalError"


class NotFoundError(CurriculumError):
    """Raised when an id does not resolve to a record in the target collection."""

    kind = "NotFound"


class AlreadyExistsError(CurriculumError):
    """Raised when an insert targets an id already present in the collection."""

    kind = "AlreadyExists"


class InvalidRequestError(CurriculumError):
    """Raised for unknown tools and arguments that fail validation."""

    kind = "InvalidRequest"


class StorageError(CurriculumError):
    """Raised when the backing file cannot be read, parsed, or written."""

    kind = "StorageFailure"


def error_kind(exc: BaseException) -> str:
    """Return the error kind for any exception."""
    if isinstance(exc, CurriculumError):
        return exc.kind
    return "InternalError"
