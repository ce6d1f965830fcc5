from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storeledger.app.db.models.models_v1 import (
    InwardRecord,
    InwardLine,
    OutwardRegister,
    OutwardLine,
)


def _as_qty(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def sum_ordered(db: Session, *, project_id: int, material_id: int) -> Decimal:
    """SUM(ordered_qty) of every inward line for (project, material)."""
    with db.no_autoflush:
        total = db.execute(
            select(func.coalesce(func.sum(InwardLine.ordered_qty), 0))
            .join(InwardRecord, InwardRecord.id == InwardLine.record_id)
            .where(InwardRecord.project_id == project_id)
            .where(InwardLine.material_id == material_id)
        ).scalar_one()
    return _as_qty(total)


def sum_received(db: Session, *, project_id: int, material_id: int) -> Decimal:
    """SUM(received_qty) of every inward line for (project, material)."""
    with db.no_autoflush:
        total = db.execute(
            select(func.coalesce(func.sum(InwardLine.received_qty), 0))
            .join(InwardRecord, InwardRecord.id == InwardLine.record_id)
            .where(InwardRecord.project_id == project_id)
            .where(InwardLine.material_id == material_id)
        ).scalar_one()
    return _as_qty(total)


def sum_issued(
    db: Session,
    *,
    project_id: int,
    material_id: int,
    exclude_register_id: int | None = None,
) -> Decimal:
    """
    SUM(issue_qty) over the outward lines of ALL registers of the project.

    ``exclude_register_id`` drops one register's own contribution (edit path).
    """
    stmt = (
        select(func.coalesce(func.sum(OutwardLine.issue_qty), 0))
        .join(OutwardRegister, OutwardRegister.id == OutwardLine.register_id)
        .where(OutwardRegister.project_id == project_id)
        .where(OutwardLine.material_id == material_id)
    )
    if exclude_register_id is not None:
        stmt = stmt.where(OutwardRegister.id != exclude_register_id)

    with db.no_autoflush:
        total = db.execute(stmt).scalar_one()
    return _as_qty(total)


def register_contribution(db: Session, register_id: int) -> dict[int, Decimal]:
    """Per-material issue totals of one register, as persisted."""
    with db.no_autoflush:
        rows = db.execute(
            select(
                OutwardLine.material_id,
                func.coalesce(func.sum(OutwardLine.issue_qty), 0).label("issued_qty"),
            )
            .where(OutwardLine.register_id == register_id)
            .group_by(OutwardLine.material_id)
        ).all()
    return {int(mid): _as_qty(qty) for mid, qty in rows}
