"""
Ledger error taxonomy and operation results.

Validation raises a LedgerError so the surrounding transaction rolls back;
the public operations catch it and hand back an OperationResult, so callers
branch on ``result.error.kind`` instead of catching exceptions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    not_found = "NOT_FOUND"
    bad_request = "BAD_REQUEST"
    not_allocated = "NOT_ALLOCATED"
    allocation_exceeded = "ALLOCATION_EXCEEDED"
    insufficient_balance = "INSUFFICIENT_BALANCE"
    closed_register = "CLOSED_REGISTER"
    conflict = "CONFLICT"


class LedgerError(Exception):
    kind: ErrorKind = ErrorKind.bad_request

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def as_dict(self) -> dict[str, Any]:
        context = {
            key: float(value) if isinstance(value, Decimal) else value
            for key, value in self.context.items()
        }
        return {"kind": self.kind.value, "message": self.message, **context}


class NotFound(LedgerError):
    kind = ErrorKind.not_found


class BadRequest(LedgerError):
    kind = ErrorKind.bad_request


class NotAllocated(LedgerError):
    kind = ErrorKind.not_allocated


class AllocationExceeded(LedgerError):
    kind = ErrorKind.allocation_exceeded


class InsufficientBalance(LedgerError):
    kind = ErrorKind.insufficient_balance


class ClosedRegister(LedgerError):
    kind = ErrorKind.closed_register


class Conflict(LedgerError):
    kind = ErrorKind.conflict


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    value: T | None = None
    error: LedgerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
