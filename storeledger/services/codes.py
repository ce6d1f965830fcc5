"""
Daily document codes: PREFIX-YYYYMMDD-NNN.

NNN is the count of records of that kind dated on the same day plus one.
The day is the record's own date (entry, register or transfer date), so
backdated records number within their own day. Nothing is
reserved: two concurrent callers can compute the same code, and the unique
``code`` columns reject the second insert at commit (surfaced as a CONFLICT
for the caller to retry).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storeledger.app.db.models.core_types import LedgerKind
from storeledger.app.db.models.models_v1 import InwardRecord, OutwardRegister, TransferRecord


@dataclass(frozen=True)
class InventoryCodes:
    inward_code: str
    outward_code: str
    transfer_code: str


_DATE_COLUMNS = {
    LedgerKind.inward: InwardRecord.entry_date,
    LedgerKind.outward: OutwardRegister.register_date,
    LedgerKind.transfer: TransferRecord.transfer_date,
}


def build_daily_code(kind: LedgerKind, day: date, sequence: int) -> str:
    return f"{kind.value}-{day:%Y%m%d}-{max(1, sequence):03d}"


def count_for_day(db: Session, kind: LedgerKind, day: date) -> int:
    column = _DATE_COLUMNS[kind]
    with db.no_autoflush:
        return int(
            db.execute(select(func.count()).select_from(column.class_).where(column == day)).scalar_one()
        )


def next_code(db: Session, kind: LedgerKind, on: date | None = None) -> str:
    day = on or date.today()
    return build_daily_code(kind, day, count_for_day(db, kind, day) + 1)


def generate_codes(db: Session, on: date | None = None) -> InventoryCodes:
    day = on or date.today()
    return InventoryCodes(
        inward_code=next_code(db, LedgerKind.inward, day),
        outward_code=next_code(db, LedgerKind.outward, day),
        transfer_code=next_code(db, LedgerKind.transfer, day),
    )


def resolve_code(db: Session, requested: str | None, kind: LedgerKind, on: date | None = None) -> str:
    """Requested code if given, else the next code for the record's own day."""
    if requested and requested.strip():
        return requested.strip()
    return next_code(db, kind, on)
