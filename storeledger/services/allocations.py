from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from storeledger.app.db.models.models_v1 import BomLine, Material, OutwardRegister, Project
from storeledger.services.errors import NotAllocated, NotFound


def require_project(db: Session, project_id: int | None) -> Project:
    project = db.get(Project, project_id) if project_id is not None else None
    if not project:
        raise NotFound("Project not found", project_id=project_id)
    return project


def materials_lock_stmt(material_ids: list[int]) -> Select:
    return (
        select(Material)
        .where(Material.id.in_(material_ids))
        .order_by(Material.id.asc())
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def bom_ceiling_stmt(project_id: int, material_id: int) -> Select:
    return (
        select(BomLine)
        .where(BomLine.project_id == project_id)
        .where(BomLine.material_id == material_id)
        .with_for_update()
    )


def register_for_date_lock_stmt(project_id: int, register_date: date) -> Select:
    return (
        select(OutwardRegister)
        .where(OutwardRegister.project_id == project_id)
        .where(OutwardRegister.register_date == register_date)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def register_lock_stmt(register_id: int) -> Select:
    return (
        select(OutwardRegister)
        .where(OutwardRegister.id == register_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def lock_materials(db: Session, material_ids: Iterable[int]) -> dict[int, Material]:
    """
    Lock every material of a call FOR UPDATE, ascending id.

    One fixed lock order for all movement operations, so two calls touching
    the same materials queue up instead of deadlocking.
    """
    ids = sorted({int(mid) for mid in material_ids})
    if not ids:
        return {}

    # earlier legs of the same transaction must reach the DB before reloading
    db.flush()
    rows = db.execute(materials_lock_stmt(ids)).scalars().all()
    materials = {int(m.id): m for m in rows}

    missing = [mid for mid in ids if mid not in materials]
    if missing:
        raise NotFound("Material not found", material_id=missing[0])
    return materials


def require_bom_ceiling(db: Session, project: Project, material: Material) -> Decimal:
    """BOM allocation for (project, material); the row stays locked until commit."""
    line = db.execute(bom_ceiling_stmt(project.id, material.id)).scalar_one_or_none()
    if not line:
        raise NotAllocated(
            f"Material {material.code} is not allocated to project {project.code}",
            material=material.code,
            project=project.code,
        )
    return line.quantity


def lock_register_for_date(db: Session, project_id: int, register_date: date) -> OutwardRegister | None:
    db.flush()
    return db.execute(register_for_date_lock_stmt(project_id, register_date)).scalar_one_or_none()


def lock_register(db: Session, register_id: int) -> OutwardRegister:
    db.flush()
    register = db.execute(register_lock_stmt(register_id)).scalar_one_or_none()
    if not register:
        raise NotFound("Outward register not found", register_id=register_id)
    return register
