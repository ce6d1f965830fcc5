from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


# ---------- Inward ----------
class InwardLineCreate(BaseModel):
    material_id: int
    ordered_qty: Decimal = Decimal("0")
    received_qty: Decimal = Decimal("0")


class InwardCreate(BaseModel):
    project_id: int
    code: str | None = None
    type: str | None = None
    invoice_no: str | None = None
    invoice_date: date | None = None
    delivery_date: date | None = None
    vehicle_no: str | None = None
    remarks: str | None = None
    supplier_name: str | None = None
    lines: list[InwardLineCreate] = Field(default_factory=list)


# ---------- Outward ----------
class OutwardLineCreate(BaseModel):
    material_id: int
    issue_qty: Decimal = Decimal("0")


class OutwardCreate(BaseModel):
    project_id: int
    code: str | None = None
    register_date: date | None = None
    issue_to: str | None = None
    status: str | None = None
    close_date: date | None = None
    lines: list[OutwardLineCreate] = Field(default_factory=list)


class OutwardLineUpdate(BaseModel):
    line_id: int | None = None
    material_id: int
    issue_qty: Decimal = Decimal("0")


class OutwardUpdate(BaseModel):
    status: str | None = None
    issue_to: str | None = None
    close_date: date | None = None
    lines: list[OutwardLineUpdate] = Field(default_factory=list)


# ---------- Transfer ----------
class TransferLineCreate(BaseModel):
    material_id: int
    transfer_qty: Decimal = Decimal("0")


class TransferCreate(BaseModel):
    from_project_id: int
    to_project_id: int | None = None
    code: str | None = None
    from_site: str | None = None
    to_site: str | None = None
    remarks: str | None = None
    lines: list[TransferLineCreate] = Field(default_factory=list)
