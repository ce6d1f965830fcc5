from __future__ import annotations

from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from storeledger.app.core.logging import get_logger
from storeledger.services.errors import Conflict, LedgerError, OperationResult

logger = get_logger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


def _is_retryable(exc: OperationalError) -> bool:
    return getattr(exc.orig, "sqlstate", None) in RETRYABLE_SQLSTATES


def run_atomic(db: Session, operation: str, work: Callable[[], T]) -> OperationResult[T]:
    """
    Run ``work`` as one transaction: commit on success, rollback otherwise.

    - LedgerError -> rollback, returned as the result error
    - IntegrityError / serialization failure -> rollback, returned as Conflict
    - anything else -> rollback, re-raised
    """
    try:
        value = work()
        db.commit()
    except LedgerError as exc:
        db.rollback()
        logger.info("movement rejected", operation=operation, kind=exc.kind.value, reason=exc.message)
        return OperationResult(error=exc)
    except IntegrityError as exc:
        db.rollback()
        logger.warning("movement conflict", operation=operation, error=str(exc.orig))
        return OperationResult(
            error=Conflict("Concurrent update detected, please retry", operation=operation)
        )
    except OperationalError as exc:
        db.rollback()
        if not _is_retryable(exc):
            raise
        logger.warning("movement conflict", operation=operation, error=str(exc.orig))
        return OperationResult(
            error=Conflict("Concurrent update detected, please retry", operation=operation)
        )
    except Exception:
        db.rollback()
        raise

    logger.info("movement applied", operation=operation)
    return OperationResult(value=value)
