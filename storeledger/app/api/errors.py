from __future__ import annotations

from fastapi import HTTPException

from storeledger.services.errors import ErrorKind, LedgerError, OperationResult

STATUS_BY_KIND = {
    ErrorKind.not_found: 404,
    ErrorKind.closed_register: 409,
    ErrorKind.conflict: 409,
}


def to_http_exception(error: LedgerError) -> HTTPException:
    return HTTPException(status_code=STATUS_BY_KIND.get(error.kind, 400), detail=error.as_dict())


def unwrap(result: OperationResult):
    if not result.ok:
        raise to_http_exception(result.error)
    return result.value
