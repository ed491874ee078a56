"""Service results and the error taxonomy shared by every service."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import HTTPException, status

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Broad failure category, used to pick the HTTP status."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    AUTH = "auth"
    STATE = "state"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


KIND_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class ServiceError:
    code: str
    message: str
    kind: ErrorKind
    details: dict[str, Any] | None = None

    @property
    def status_code(self) -> int:
        return KIND_STATUS[self.kind]


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a service operation.

    Exactly one of value/error is meaningful: check ``success`` (or ``error``)
    before reading ``value``.
    """

    value: T | None = None
    error: ServiceError | None = None
    message: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def code(self) -> str | None:
        return self.error.code if self.error else None

    @classmethod
    def ok(cls, value: T | None = None, message: str | None = None) -> "Result[T]":
        return cls(value=value, message=message)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        kind: ErrorKind,
        details: dict[str, Any] | None = None,
    ) -> "Result[T]":
        return cls(error=ServiceError(code, message, kind, details), message=message)


def raise_for_error(result: Result[Any]) -> None:
    """Turn a failed result into the HTTP error the routes respond with."""
    if result.error is None:
        return
    err = result.error
    raise HTTPException(
        status_code=err.status_code,
        detail={"code": err.code, "message": err.message, "details": err.details},
    )


def unwrap(result: Result[T]) -> T:
    """Return the value of a successful result or raise its HTTP error."""
    raise_for_error(result)
    return result.value  # type: ignore[return-value]
