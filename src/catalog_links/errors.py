#!filepath: src/catalog_links/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    UNKNOWN = "unknown"
    MAX_DEPTH_EXCEEDED = "max_depth_exceeded"
    LOOKUP_FAILED = "lookup_failed"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True, slots=True)
class CategoryPathErrorDetails:
    kind: ErrorKind
    category_id: Optional[int] = None
    message: str = ""
    extra: Optional[dict[str, Any]] = None

    @property
    def reason(self) -> str:
        return str(self.kind.value)


class CategoryPathError(Exception):
    """Base error for category path resolution."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str = "",
        *,
        category_id: Optional[int] = None,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(str(message or self.kind.value))
        self._details = CategoryPathErrorDetails(
            kind=self.kind,
            category_id=category_id,
            message=str(message or ""),
            extra=extra,
        )

    @property
    def details(self) -> CategoryPathErrorDetails:
        return self._details

    @property
    def category_id(self) -> Optional[int]:
        return self._details.category_id

    @property
    def reason(self) -> str:
        return self._details.reason

    @property
    def retryable(self) -> bool:
        return self.kind == ErrorKind.LOOKUP_FAILED


class MaxDepthExceeded(CategoryPathError):
    """The ancestor walk took more steps than allowed.

    Raised for cyclic or unreasonably deep category trees, which is a data
    integrity problem rather than something to retry.
    """

    kind = ErrorKind.MAX_DEPTH_EXCEEDED

    def __init__(self, category_id: int, max_depth: int) -> None:
        super().__init__(
            f"Reached maximum recursive level {max_depth} for category {category_id}",
            category_id=category_id,
            extra={"max_depth": int(max_depth)},
        )
        self.max_depth = int(max_depth)


class LookupFailed(CategoryPathError):
    """The category lookup collaborator failed, callers may retry."""

    kind = ErrorKind.LOOKUP_FAILED


class InvalidInput(CategoryPathError):
    kind = ErrorKind.INVALID_INPUT


__all__ = [
    "ErrorKind",
    "CategoryPathErrorDetails",
    "CategoryPathError",
    "MaxDepthExceeded",
    "LookupFailed",
    "InvalidInput",
]
