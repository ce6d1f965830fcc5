from __future__ import annotations

from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import (
    String,
    Integer,
    BigInteger,
    DateTime,
    Date,
    ForeignKey,
    Numeric,
    Text,
    Enum,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storeledger.app.db.base import Base
from storeledger.app.db.models.core_types import InwardType, OutwardStatus

# SQLite only autoincrements INTEGER PRIMARY KEY
BigIntPK = BigInteger().with_variant(Integer, "sqlite")
Qty = Numeric(14, 3)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# ---------- MASTER DATA ----------
class Project(Base):
    __tablename__ = "projects"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Material(Base):
    __tablename__ = "materials"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(32), default="unit", nullable=False)
    category: Mapped[str | None] = mapped_column(String(128))

    # Global across all projects
    ordered_qty: Mapped[Decimal] = mapped_column(Qty, default=Decimal("0"), nullable=False)
    received_qty: Mapped[Decimal] = mapped_column(Qty, default=Decimal("0"), nullable=False)
    utilized_qty: Mapped[Decimal] = mapped_column(Qty, default=Decimal("0"), nullable=False)
    balance_qty: Mapped[Decimal] = mapped_column(Qty, default=Decimal("0"), nullable=False)

    __table_args__ = (
        CheckConstraint("ordered_qty >= 0", name="ck_material_ordered_nonneg"),
        CheckConstraint("received_qty >= 0", name="ck_material_received_nonneg"),
        CheckConstraint("utilized_qty >= 0", name="ck_material_utilized_nonneg"),
        CheckConstraint("balance_qty >= 0", name="ck_material_balance_nonneg"),
    )

    def sync_balance(self) -> None:
        balance = (self.received_qty or Decimal("0")) - (self.utilized_qty or Decimal("0"))
        self.balance_qty = balance if balance > 0 else Decimal("0")


class BomLine(Base):
    __tablename__ = "bom_lines"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    material_id: Mapped[int] = mapped_column(ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Qty, nullable=False)

    project: Mapped[Project] = relationship()
    material: Mapped[Material] = relationship()

    __table_args__ = (
        UniqueConstraint("project_id", "material_id", name="uq_bom_project_material"),
        CheckConstraint("quantity >= 0", name="ck_bom_quantity_nonneg"),
    )


# ---------- INWARD ----------
class InwardRecord(Base):
    __tablename__ = "inward_records"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False)
    type: Mapped[InwardType] = mapped_column(
        Enum(InwardType, name="inward_type", values_callable=_enum_values),
        default=InwardType.supply,
        nullable=False,
    )

    invoice_no: Mapped[str | None] = mapped_column(String(128))
    invoice_date: Mapped[date | None] = mapped_column(Date)
    delivery_date: Mapped[date | None] = mapped_column(Date)
    vehicle_no: Mapped[str | None] = mapped_column(String(64))
    supplier_name: Mapped[str | None] = mapped_column(String(255))
    remarks: Mapped[str | None] = mapped_column(Text)

    entry_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    project: Mapped[Project] = relationship()
    lines: Mapped[list["InwardLine"]] = relationship(back_populates="record", cascade="all, delete-orphan")


class InwardLine(Base):
    __tablename__ = "inward_lines"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    record_id: Mapped[int] = mapped_column(ForeignKey("inward_records.id", ondelete="CASCADE"), nullable=False)
    material_id: Mapped[int] = mapped_column(ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False)
    ordered_qty: Mapped[Decimal] = mapped_column(Qty, default=Decimal("0"), nullable=False)
    received_qty: Mapped[Decimal] = mapped_column(Qty, default=Decimal("0"), nullable=False)

    record: Mapped[InwardRecord] = relationship(back_populates="lines")
    material: Mapped[Material] = relationship()

    __table_args__ = (
        CheckConstraint("ordered_qty >= 0", name="ck_inward_line_ordered_nonneg"),
        CheckConstraint("received_qty >= 0", name="ck_inward_line_received_nonneg"),
        Index("ix_inward_lines_material_record", "material_id", "record_id"),
    )


# ---------- OUTWARD ----------
class OutwardRegister(Base):
    __tablename__ = "outward_registers"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False)
    register_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    issue_to: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[OutwardStatus] = mapped_column(
        Enum(OutwardStatus, name="outward_status", values_callable=_enum_values),
        default=OutwardStatus.open,
        nullable=False,
    )
    close_date: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    project: Mapped[Project] = relationship()
    lines: Mapped[list["OutwardLine"]] = relationship(
        back_populates="register",
        cascade="all, delete-orphan",
        order_by="OutwardLine.id",
    )

    __table_args__ = (UniqueConstraint("project_id", "register_date", name="uq_outward_project_date"),)


class OutwardLine(Base):
    __tablename__ = "outward_lines"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    register_id: Mapped[int] = mapped_column(ForeignKey("outward_registers.id", ondelete="CASCADE"), nullable=False)
    material_id: Mapped[int] = mapped_column(ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False)
    issue_qty: Mapped[Decimal] = mapped_column(Qty, default=Decimal("0"), nullable=False)

    register: Mapped[OutwardRegister] = relationship(back_populates="lines")
    material: Mapped[Material] = relationship()

    __table_args__ = (
        CheckConstraint("issue_qty >= 0", name="ck_outward_line_issue_nonneg"),
        Index("ix_outward_lines_material_register", "material_id", "register_id"),
    )


# ---------- TRANSFER ----------
class TransferRecord(Base):
    __tablename__ = "transfer_records"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    from_project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False)
    to_project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False)
    from_site: Mapped[str | None] = mapped_column(String(128))
    to_site: Mapped[str | None] = mapped_column(String(128))
    remarks: Mapped[str | None] = mapped_column(Text)
    transfer_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    from_project: Mapped[Project] = relationship(foreign_keys=[from_project_id])
    to_project: Mapped[Project] = relationship(foreign_keys=[to_project_id])
    lines: Mapped[list["TransferLine"]] = relationship(back_populates="record", cascade="all, delete-orphan")


class TransferLine(Base):
    __tablename__ = "transfer_lines"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    record_id: Mapped[int] = mapped_column(ForeignKey("transfer_records.id", ondelete="CASCADE"), nullable=False)
    material_id: Mapped[int] = mapped_column(ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False)
    transfer_qty: Mapped[Decimal] = mapped_column(Qty, nullable=False)

    record: Mapped[TransferRecord] = relationship(back_populates="lines")
    material: Mapped[Material] = relationship()

    __table_args__ = (CheckConstraint("transfer_qty > 0", name="ck_transfer_line_qty_pos"),)
