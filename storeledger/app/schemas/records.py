from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict

from storeledger.app.db.models.core_types import InwardType, OutwardStatus


class InventoryCodesRead(BaseModel):
    inward_code: str
    outward_code: str
    transfer_code: str

    model_config = ConfigDict(from_attributes=True)


class InwardLineRead(BaseModel):
    id: int
    material_id: int
    ordered_qty: float
    received_qty: float

    model_config = ConfigDict(from_attributes=True)


class InwardRecordRead(BaseModel):
    id: int
    code: str
    project_id: int
    type: InwardType
    supplier_name: str | None = None
    invoice_no: str | None = None
    entry_date: date
    lines: list[InwardLineRead]

    model_config = ConfigDict(from_attributes=True)


class OutwardLineRead(BaseModel):
    id: int
    material_id: int
    issue_qty: float

    model_config = ConfigDict(from_attributes=True)


class OutwardRegisterRead(BaseModel):
    id: int
    code: str
    project_id: int
    register_date: date
    issue_to: str | None = None
    status: OutwardStatus
    close_date: date | None = None
    lines: list[OutwardLineRead]

    model_config = ConfigDict(from_attributes=True)


class TransferLineRead(BaseModel):
    id: int
    material_id: int
    transfer_qty: float

    model_config = ConfigDict(from_attributes=True)


class TransferRecordRead(BaseModel):
    id: int
    code: str
    from_project_id: int
    to_project_id: int
    from_site: str | None = None
    to_site: str | None = None
    remarks: str | None = None
    transfer_date: date
    lines: list[TransferLineRead]

    model_config = ConfigDict(from_attributes=True)


class MaterialMovementsRead(BaseModel):
    inwards: list[InwardRecordRead]
    outwards: list[OutwardRegisterRead]

    model_config = ConfigDict(from_attributes=True)
