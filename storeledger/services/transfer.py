"""
Transfer coordinator.

A transfer is an outward issue at the source project plus a RETURN inward
at the destination, staged in one transaction: if either leg is rejected
nothing from the call persists.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from storeledger.app.core.logging import get_logger
from storeledger.app.db.models.core_types import InwardType, LedgerKind
from storeledger.app.db.models.models_v1 import TransferLine, TransferRecord
from storeledger.app.schemas.movements import (
    InwardCreate,
    InwardLineCreate,
    OutwardCreate,
    OutwardLineCreate,
    TransferCreate,
)
from storeledger.services.allocations import require_project
from storeledger.services.codes import resolve_code
from storeledger.services.errors import BadRequest, OperationResult
from storeledger.services.inward import apply_inward
from storeledger.services.outward import apply_outward
from storeledger.services.unit_of_work import run_atomic
from storeledger.services.validation import has_text

logger = get_logger(__name__)


def register_transfer(db: Session, payload: TransferCreate) -> OperationResult[TransferRecord]:
    return run_atomic(db, "register_transfer", lambda: apply_transfer(db, payload))


def apply_transfer(db: Session, payload: TransferCreate) -> TransferRecord:
    if payload.to_project_id is None:
        raise BadRequest("Destination project is required")
    from_project = require_project(db, payload.from_project_id)
    to_project = require_project(db, payload.to_project_id)

    if not payload.lines:
        raise BadRequest("At least one transfer line is required")

    from_site = payload.from_site.strip() if has_text(payload.from_site) else None
    to_site = payload.to_site.strip() if has_text(payload.to_site) else None

    # must change project or site
    if from_project.id == to_project.id:
        if not from_site or not to_site:
            raise BadRequest(
                "Provide both source and destination sites when transferring within a project",
                project=from_project.code,
            )
        if from_site.lower() == to_site.lower():
            raise BadRequest(
                "Cannot transfer within the same project site",
                project=from_project.code,
                site=from_site,
            )

    lines = [ln for ln in payload.lines if ln.transfer_qty > 0]
    if not lines:
        raise BadRequest("Transfer quantity must be greater than zero")

    transfer_date = date.today()
    record = TransferRecord(
        code=resolve_code(db, payload.code, LedgerKind.transfer, transfer_date),
        from_project_id=from_project.id,
        to_project_id=to_project.id,
        from_site=from_site,
        to_site=to_site,
        remarks=payload.remarks,
        transfer_date=transfer_date,
        lines=[TransferLine(material_id=ln.material_id, transfer_qty=ln.transfer_qty) for ln in lines],
    )

    apply_outward(
        db,
        OutwardCreate(
            project_id=from_project.id,
            issue_to=f"Transfer to {to_project.code}",
            lines=[OutwardLineCreate(material_id=ln.material_id, issue_qty=ln.transfer_qty) for ln in lines],
        ),
    )
    apply_inward(
        db,
        InwardCreate(
            project_id=to_project.id,
            type=InwardType.returned.value,
            remarks=f"Transfer from {from_project.code}",
            supplier_name=from_project.name,
            lines=[
                InwardLineCreate(material_id=ln.material_id, ordered_qty=0, received_qty=ln.transfer_qty)
                for ln in lines
            ],
        ),
    )

    db.add(record)
    db.flush()
    logger.info(
        "transfer staged",
        code=record.code,
        from_project=from_project.code,
        to_project=to_project.code,
        lines=len(lines),
    )
    return record
