from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storeledger.app.db.models.models_v1 import (
    InwardLine,
    InwardRecord,
    Material,
    OutwardLine,
    OutwardRegister,
)
from storeledger.services.errors import NotFound


@dataclass(frozen=True)
class MaterialMovements:
    inwards: list[InwardRecord]
    outwards: list[OutwardRegister]


def material_movements(db: Session, material_id: int, project_id: int | None = None) -> MaterialMovements:
    """Inward records and outward registers containing ``material_id``, newest first."""
    if not db.get(Material, material_id):
        raise NotFound("Material not found", material_id=material_id)

    inward_stmt = (
        select(InwardRecord)
        .where(InwardRecord.lines.any(InwardLine.material_id == material_id))
        .options(selectinload(InwardRecord.lines))
        .order_by(InwardRecord.entry_date.desc(), InwardRecord.id.desc())
    )
    outward_stmt = (
        select(OutwardRegister)
        .where(OutwardRegister.lines.any(OutwardLine.material_id == material_id))
        .options(selectinload(OutwardRegister.lines))
        .order_by(OutwardRegister.register_date.desc(), OutwardRegister.id.desc())
    )
    if project_id is not None:
        inward_stmt = inward_stmt.where(InwardRecord.project_id == project_id)
        outward_stmt = outward_stmt.where(OutwardRegister.project_id == project_id)

    return MaterialMovements(
        inwards=list(db.execute(inward_stmt).scalars().all()),
        outwards=list(db.execute(outward_stmt).scalars().all()),
    )
