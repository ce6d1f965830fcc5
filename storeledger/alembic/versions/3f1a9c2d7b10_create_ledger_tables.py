"""create ledger tables

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

QTY = sa.Numeric(14, 3)

inward_type = sa.Enum("SUPPLY", "RETURN", name="inward_type")
outward_status = sa.Enum("OPEN", "CLOSED", name="outward_status")


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
    )

    op.create_table(
        "materials",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False, server_default="unit"),
        sa.Column("category", sa.String(128)),
        sa.Column("ordered_qty", QTY, nullable=False, server_default="0"),
        sa.Column("received_qty", QTY, nullable=False, server_default="0"),
        sa.Column("utilized_qty", QTY, nullable=False, server_default="0"),
        sa.Column("balance_qty", QTY, nullable=False, server_default="0"),
        sa.CheckConstraint("ordered_qty >= 0", name="ck_material_ordered_nonneg"),
        sa.CheckConstraint("received_qty >= 0", name="ck_material_received_nonneg"),
        sa.CheckConstraint("utilized_qty >= 0", name="ck_material_utilized_nonneg"),
        sa.CheckConstraint("balance_qty >= 0", name="ck_material_balance_nonneg"),
    )

    op.create_table(
        "bom_lines",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_id", sa.BigInteger(), sa.ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("quantity", QTY, nullable=False),
        sa.UniqueConstraint("project_id", "material_id", name="uq_bom_project_material"),
        sa.CheckConstraint("quantity >= 0", name="ck_bom_quantity_nonneg"),
    )

    op.create_table(
        "inward_records",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("type", inward_type, nullable=False),
        sa.Column("invoice_no", sa.String(128)),
        sa.Column("invoice_date", sa.Date()),
        sa.Column("delivery_date", sa.Date()),
        sa.Column("vehicle_no", sa.String(64)),
        sa.Column("supplier_name", sa.String(255)),
        sa.Column("remarks", sa.Text()),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_inward_records_entry_date", "inward_records", ["entry_date"])

    op.create_table(
        "inward_lines",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("record_id", sa.BigInteger(), sa.ForeignKey("inward_records.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_id", sa.BigInteger(), sa.ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("ordered_qty", QTY, nullable=False, server_default="0"),
        sa.Column("received_qty", QTY, nullable=False, server_default="0"),
        sa.CheckConstraint("ordered_qty >= 0", name="ck_inward_line_ordered_nonneg"),
        sa.CheckConstraint("received_qty >= 0", name="ck_inward_line_received_nonneg"),
    )
    op.create_index("ix_inward_lines_material_record", "inward_lines", ["material_id", "record_id"])

    op.create_table(
        "outward_registers",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("register_date", sa.Date(), nullable=False),
        sa.Column("issue_to", sa.String(255)),
        sa.Column("status", outward_status, nullable=False),
        sa.Column("close_date", sa.Date()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("project_id", "register_date", name="uq_outward_project_date"),
    )
    op.create_index("ix_outward_registers_register_date", "outward_registers", ["register_date"])

    op.create_table(
        "outward_lines",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("register_id", sa.BigInteger(), sa.ForeignKey("outward_registers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_id", sa.BigInteger(), sa.ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("issue_qty", QTY, nullable=False, server_default="0"),
        sa.CheckConstraint("issue_qty >= 0", name="ck_outward_line_issue_nonneg"),
    )
    op.create_index("ix_outward_lines_material_register", "outward_lines", ["material_id", "register_id"])

    op.create_table(
        "transfer_records",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("from_project_id", sa.BigInteger(), sa.ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("to_project_id", sa.BigInteger(), sa.ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("from_site", sa.String(128)),
        sa.Column("to_site", sa.String(128)),
        sa.Column("remarks", sa.Text()),
        sa.Column("transfer_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_transfer_records_transfer_date", "transfer_records", ["transfer_date"])

    op.create_table(
        "transfer_lines",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("record_id", sa.BigInteger(), sa.ForeignKey("transfer_records.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_id", sa.BigInteger(), sa.ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("transfer_qty", QTY, nullable=False),
        sa.CheckConstraint("transfer_qty > 0", name="ck_transfer_line_qty_pos"),
    )


def downgrade() -> None:
    op.drop_table("transfer_lines")
    op.drop_index("ix_transfer_records_transfer_date", table_name="transfer_records")
    op.drop_table("transfer_records")
    op.drop_index("ix_outward_lines_material_register", table_name="outward_lines")
    op.drop_table("outward_lines")
    op.drop_index("ix_outward_registers_register_date", table_name="outward_registers")
    op.drop_table("outward_registers")
    op.drop_index("ix_inward_lines_material_record", table_name="inward_lines")
    op.drop_table("inward_lines")
    op.drop_index("ix_inward_records_entry_date", table_name="inward_records")
    op.drop_table("inward_records")
    op.drop_table("bom_lines")
    op.drop_table("materials")
    op.drop_table("projects")

    outward_status.drop(op.get_bind(), checkfirst=True)
    inward_type.drop(op.get_bind(), checkfirst=True)
