"""
Inward journal.

Receipts against a project's BOM. For every (project, material) both
SUM(ordered_qty) and SUM(received_qty) over all inward lines must stay
within the BOM allocation. Records are append-only.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from storeledger.app.core.logging import get_logger
from storeledger.app.db.models.core_types import InwardType, LedgerKind
from storeledger.app.db.models.models_v1 import InwardLine, InwardRecord
from storeledger.app.schemas.movements import InwardCreate
from storeledger.services.allocations import lock_materials, require_bom_ceiling, require_project
from storeledger.services.codes import resolve_code
from storeledger.services.errors import AllocationExceeded, BadRequest, OperationResult
from storeledger.services.inventory import sum_ordered, sum_received
from storeledger.services.material_ledger import apply_inward_delta
from storeledger.services.unit_of_work import run_atomic
from storeledger.services.validation import parse_enum

logger = get_logger(__name__)

ZERO = Decimal("0")


def register_inward(db: Session, payload: InwardCreate) -> OperationResult[InwardRecord]:
    return run_atomic(db, "register_inward", lambda: apply_inward(db, payload))


def apply_inward(db: Session, payload: InwardCreate) -> InwardRecord:
    """Validate and stage one inward record. Never commits."""
    project = require_project(db, payload.project_id)
    if not payload.lines:
        raise BadRequest("At least one inward line is required")

    inward_type = parse_enum(InwardType, payload.type, "type", default=InwardType.supply)

    # sanitize: no negative quantities, drop empty lines
    candidates: list[tuple[int, Decimal, Decimal]] = []
    for ln in payload.lines:
        ordered = max(ZERO, ln.ordered_qty)
        received = max(ZERO, ln.received_qty)
        if ordered <= 0 and received <= 0:
            continue
        candidates.append((ln.material_id, ordered, received))

    if not candidates:
        raise BadRequest("At least one inward line with quantity is required")

    materials = lock_materials(db, [mid for mid, _, _ in candidates])

    entry_date = payload.delivery_date or date.today()
    record = InwardRecord(
        code=resolve_code(db, payload.code, LedgerKind.inward, entry_date),
        project_id=project.id,
        type=inward_type,
        invoice_no=payload.invoice_no,
        invoice_date=payload.invoice_date,
        delivery_date=payload.delivery_date,
        vehicle_no=payload.vehicle_no,
        remarks=payload.remarks,
        supplier_name=payload.supplier_name,
        entry_date=entry_date,
    )

    # same material on several lines of one request is checked cumulatively
    pending_ordered: dict[int, Decimal] = defaultdict(Decimal)
    pending_received: dict[int, Decimal] = defaultdict(Decimal)
    already_ordered: dict[int, Decimal] = {}
    already_received: dict[int, Decimal] = {}

    for material_id, ordered, received in candidates:
        material = materials[int(material_id)]
        allocation = require_bom_ceiling(db, project, material)

        if material.id not in already_ordered:
            already_ordered[material.id] = sum_ordered(db, project_id=project.id, material_id=material.id)
            already_received[material.id] = sum_received(db, project_id=project.id, material_id=material.id)

        next_ordered = already_ordered[material.id] + pending_ordered[material.id] + ordered
        if next_ordered > allocation:
            raise AllocationExceeded(
                f"Ordering {material.code} exceeds the allocated requirement ({allocation}). "
                "Please reduce the ordered quantity or update the project allocation.",
                material=material.code,
                project=project.code,
                allocation=allocation,
                already_ordered=already_ordered[material.id] + pending_ordered[material.id],
                requested=ordered,
            )

        next_received = already_received[material.id] + pending_received[material.id] + received
        if next_received > allocation:
            raise AllocationExceeded(
                f"Receiving {material.code} exceeds the allocated requirement ({allocation}). "
                "Please submit a procurement request.",
                material=material.code,
                project=project.code,
                allocation=allocation,
                already_received=already_received[material.id] + pending_received[material.id],
                requested=received,
            )

        record.lines.append(
            InwardLine(material_id=material.id, ordered_qty=ordered, received_qty=received)
        )
        apply_inward_delta(material, ordered, received)

        pending_ordered[material.id] += ordered
        pending_received[material.id] += received

    db.add(record)
    db.flush()

    logger.info(
        "inward staged",
        code=record.code,
        project=project.code,
        type=inward_type.value,
        lines=len(record.lines),
    )
    return record
