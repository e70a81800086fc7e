"""Error taxonomy for check, in and out invocations.

Every error is local to one invocation. Each class carries the process exit code
the command line entry point uses when the error aborts a verb.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from .types import ReconciliationProgress, Version


class NotionResourceError(RuntimeError):
    """Base class for failures of a resource invocation."""

    exit_code: ClassVar[int] = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.progress: ReconciliationProgress | None = None


class ResolutionError(NotionResourceError):
    """Raised when a database reference cannot be mapped to a collection."""

    exit_code: ClassVar[int] = 3


class AmbiguousReferenceError(ResolutionError):
    """Raised when a name search matches more than one collection."""

    exit_code: ClassVar[int] = 4

    def __init__(self, reference: str, candidates: Sequence[str]) -> None:
        super().__init__(
            f"Ambiguous database name {reference!r}, found {len(candidates)} matches: "
            + ", ".join(candidates)
        )
        self.reference = reference
        self.candidates = tuple(candidates)


class NotFoundError(ResolutionError):
    """Raised when a collection or record does not exist."""

    exit_code: ClassVar[int] = 5


class ConcurrentModificationError(NotionResourceError):
    """Raised when the collection changed between check and retrieval."""

    exit_code: ClassVar[int] = 6

    def __init__(self, *, expected: Version, actual: Version) -> None:
        super().__init__(
            "Database was modified since checking: "
            f"expected {expected.collection_id}@{expected.last_edited_time.isoformat()}, "
            f"found {actual.collection_id}@{actual.last_edited_time.isoformat()}"
        )
        self.expected = expected
        self.actual = actual


class NothingToUpdateError(NotionResourceError):
    """Raised when an out step receives an empty batch."""

    exit_code: ClassVar[int] = 7


class KeyPropertyError(NotionResourceError):
    """Raised when the update key cannot be used for a record."""

    exit_code: ClassVar[int] = 8


class MissingKeyPropertyError(KeyPropertyError):
    def __init__(self, *, property_name: str, index: int, available: Sequence[str]) -> None:
        listing = ", ".join(repr(name) for name in available) or "<none>"
        super().__init__(
            f"Record {index} has no property {property_name!r}; available properties: {listing}"
        )
        self.property_name = property_name
        self.index = index
        self.available = tuple(available)


class UnsupportedKeyPropertyError(KeyPropertyError):
    def __init__(self, *, property_name: str, property_type: str | None) -> None:
        kind = property_type or "unknown"
        super().__init__(
            f"Property {property_name!r} of type {kind} cannot be used as an update key"
        )
        self.property_name = property_name
        self.property_type = property_type


class RemoteCallError(NotionResourceError):
    """Raised when the remote store rejects a call or answers with garbage."""

    exit_code: ClassVar[int] = 9

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ArtifactError(NotionResourceError):
    """Raised when an artifact file cannot be read or written."""

    exit_code: ClassVar[int] = 10

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class PropertyValueError(NotionResourceError):
    """Raised when a plain local value cannot be written to its property."""

    exit_code: ClassVar[int] = 11

    def __init__(self, *, property_name: str, property_type: str | None, value: object) -> None:
        if property_type is None:
            message = f"Property {property_name!r} is not in the database schema"
        else:
            message = (
                f"Property {property_name!r} of type {property_type} needs a typed value, "
                f"got {type(value).__name__}"
            )
        super().__init__(message)
        self.property_name = property_name
        self.property_type = property_type
