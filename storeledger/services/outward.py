"""
Outward journal.

One register per (project, date) accumulates issue lines while OPEN.
For every (project, material):

    SUM(issue_qty over all registers) <= min(BOM allocation, SUM(received_qty))

and each issue is also capped by the material's global balance.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from storeledger.app.core.logging import get_logger
from storeledger.app.db.models.core_types import LedgerKind, OutwardStatus
from storeledger.app.db.models.models_v1 import OutwardLine, OutwardRegister, Project
from storeledger.app.schemas.movements import OutwardCreate, OutwardUpdate
from storeledger.services.allocations import (
    lock_materials,
    lock_register,
    lock_register_for_date,
    require_bom_ceiling,
    require_project,
)
from storeledger.services.codes import resolve_code
from storeledger.services.errors import (
    AllocationExceeded,
    BadRequest,
    ClosedRegister,
    InsufficientBalance,
    OperationResult,
)
from storeledger.services.inventory import register_contribution, sum_issued, sum_received
from storeledger.services.material_ledger import adjust_utilized, apply_outward_delta
from storeledger.services.unit_of_work import run_atomic
from storeledger.services.validation import has_text, parse_enum

logger = get_logger(__name__)

ZERO = Decimal("0")


def register_outward(db: Session, payload: OutwardCreate) -> OperationResult[OutwardRegister]:
    return run_atomic(db, "register_outward", lambda: apply_outward(db, payload))


def update_outward(
    db: Session, register_id: int, payload: OutwardUpdate
) -> OperationResult[OutwardRegister]:
    return run_atomic(db, "update_outward", lambda: apply_outward_update(db, register_id, payload))


def _apply_status(register: OutwardRegister, status: OutwardStatus | None, close_date: date | None) -> None:
    if status is None:
        return
    register.status = status
    if status == OutwardStatus.closed:
        register.close_date = date.today()
    else:
        register.close_date = close_date


def _open_register(db: Session, project: Project, register_date: date, code: str | None, issue_to: str | None) -> OutwardRegister:
    register = lock_register_for_date(db, project.id, register_date)
    if register is None:
        register = OutwardRegister(
            project_id=project.id,
            register_date=register_date,
            code=resolve_code(db, code, LedgerKind.outward, register_date),
            issue_to=issue_to,
            status=OutwardStatus.open,
            close_date=None,
        )
        db.add(register)
        return register

    if register.status == OutwardStatus.closed:
        raise ClosedRegister(
            "Outward register already closed for this date",
            register=register.code,
            project=project.code,
            date=register_date.isoformat(),
        )
    return register


def apply_outward(db: Session, payload: OutwardCreate) -> OutwardRegister:
    """Accumulate issue lines into the (project, date) register. Never commits."""
    if not payload.lines:
        raise BadRequest("At least one outward line is required")

    project = require_project(db, payload.project_id)
    status = parse_enum(OutwardStatus, payload.status, "status")
    register_date = payload.register_date or date.today()

    register = _open_register(db, project, register_date, payload.code, payload.issue_to)

    candidates = [(ln.material_id, ln.issue_qty) for ln in payload.lines if ln.issue_qty > 0]
    materials = lock_materials(db, [mid for mid, _ in candidates])

    existing = {int(line.material_id): line for line in register.lines}

    pending: dict[int, Decimal] = defaultdict(Decimal)
    received_cache: dict[int, Decimal] = {}
    issued_cache: dict[int, Decimal] = {}

    for material_id, issue_qty in candidates:
        material = materials[int(material_id)]
        mid = int(material.id)

        if mid not in received_cache:
            received_cache[mid] = sum_received(db, project_id=project.id, material_id=mid)
            issued_cache[mid] = sum_issued(db, project_id=project.id, material_id=mid)
        received = received_cache[mid]
        already_issued = issued_cache[mid]

        project_balance = received - already_issued - pending[mid]
        if project_balance <= 0:
            raise InsufficientBalance(
                f"No balance available for material {material.code} in project {project.code}",
                material=material.code,
                project=project.code,
                received=received,
                issued=already_issued + pending[mid],
                available=ZERO,
            )

        # global stock cap
        effective_available = min(project_balance, material.balance_qty)
        if issue_qty > effective_available:
            raise InsufficientBalance(
                f"Cannot issue {issue_qty} {material.unit} of {material.code} for project {project.code}. "
                f"Available quantity for this project is {effective_available}.",
                material=material.code,
                project=project.code,
                requested=issue_qty,
                available=effective_available,
            )

        allocation = require_bom_ceiling(db, project, material)
        if already_issued + pending[mid] + issue_qty > allocation:
            raise AllocationExceeded(
                f"Issuing {material.code} exceeds the allocated requirement ({allocation}). "
                "Please request an increase before issuing more.",
                material=material.code,
                project=project.code,
                allocation=allocation,
                issued=already_issued + pending[mid],
                requested=issue_qty,
            )

        line = existing.get(mid)
        if line is None:
            line = OutwardLine(material_id=mid, issue_qty=ZERO)
            register.lines.append(line)
            existing[mid] = line
        line.issue_qty = (line.issue_qty or ZERO) + issue_qty

        apply_outward_delta(material, issue_qty)
        pending[mid] += issue_qty

    if has_text(payload.issue_to):
        register.issue_to = payload.issue_to
    _apply_status(register, status, payload.close_date)

    db.flush()
    logger.info(
        "outward staged",
        code=register.code,
        project=project.code,
        date=register_date.isoformat(),
        lines=len(candidates),
    )
    return register


def apply_outward_update(db: Session, register_id: int, payload: OutwardUpdate) -> OutwardRegister:
    """
    Replace a register's lines with ``payload.lines``. Never commits.

    Every check runs against the ledger minus this register's own current
    contribution; the material ledger then moves by (requested - current).
    """
    register = lock_register(db, register_id)
    if register.status == OutwardStatus.closed:
        raise ClosedRegister("Closed registers cannot be edited", register=register.code)

    status = parse_enum(OutwardStatus, payload.status, "status")
    project = register.project

    current = register_contribution(db, register.id)
    existing_by_id = {int(line.id): line for line in register.lines}

    request_lines = [ln for ln in payload.lines if ln.issue_qty > 0]
    requested: dict[int, Decimal] = defaultdict(Decimal)
    for ln in request_lines:
        requested[int(ln.material_id)] += ln.issue_qty

    touched = set(current) | set(requested)
    materials = lock_materials(db, touched)

    # dropped materials only release quantity; nothing to check for them
    for mid, total in requested.items():
        material = materials[mid]
        allocation = require_bom_ceiling(db, project, material)

        issued_elsewhere = sum_issued(
            db, project_id=project.id, material_id=mid, exclude_register_id=register.id
        )
        received = sum_received(db, project_id=project.id, material_id=mid)
        next_total = issued_elsewhere + total

        if next_total > received:
            project_balance = max(ZERO, received - issued_elsewhere)
            raise InsufficientBalance(
                f"Cannot set issue quantity for material {material.code} to {total} in project "
                f"{project.code} because project balance is only {project_balance}.",
                material=material.code,
                project=project.code,
                requested=total,
                available=project_balance,
            )

        if next_total > allocation:
            raise AllocationExceeded(
                f"Issuing {material.code} exceeds the allocated requirement ({allocation}). "
                "Please request an increase before issuing more.",
                material=material.code,
                project=project.code,
                allocation=allocation,
                issued=issued_elsewhere,
                requested=total,
            )

    deltas = {mid: requested.get(mid, ZERO) - current.get(mid, ZERO) for mid in touched}
    for mid, delta in deltas.items():
        material = materials[mid]
        if delta > 0 and delta > material.balance_qty:
            raise InsufficientBalance(
                f"Cannot increase issue quantity for {material.code} by {delta} because only "
                f"{material.balance_qty} is available in stock.",
                material=material.code,
                project=project.code,
                requested=delta,
                available=material.balance_qty,
            )

    for mid, delta in deltas.items():
        if delta != 0:
            adjust_utilized(materials[mid], delta)

    next_lines: list[OutwardLine] = []
    by_material: dict[int, OutwardLine] = {}
    for ln in request_lines:
        mid = int(ln.material_id)
        line = by_material.get(mid)
        if line is not None:
            line.issue_qty += ln.issue_qty
            continue

        line = existing_by_id.pop(int(ln.line_id), None) if ln.line_id is not None else None
        if line is None:
            line = OutwardLine(material_id=mid)
        line.material_id = mid
        line.issue_qty = ln.issue_qty

        by_material[mid] = line
        next_lines.append(line)

    register.lines = next_lines

    if has_text(payload.issue_to):
        register.issue_to = payload.issue_to
    _apply_status(register, status, payload.close_date)

    db.flush()
    logger.info(
        "outward replaced",
        code=register.code,
        project=project.code,
        lines=len(next_lines),
    )
    return register
