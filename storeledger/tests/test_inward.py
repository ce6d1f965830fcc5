from datetime import date
from decimal import Decimal

from sqlalchemy import func, select

from storeledger.app.db.models.core_types import InwardType
from storeledger.app.db.models.models_v1 import InwardLine, InwardRecord, Material
from storeledger.app.schemas.movements import InwardCreate, InwardLineCreate
from storeledger.services.errors import ErrorKind
from storeledger.services.inventory import sum_ordered, sum_received
from storeledger.services.inward import register_inward


def _inward(project, *lines, **meta):
    return InwardCreate(
        project_id=project.id,
        lines=[
            InwardLineCreate(material_id=m.id, ordered_qty=Decimal(str(o)), received_qty=Decimal(str(r)))
            for m, o, r in lines
        ],
        **meta,
    )


def _record_count(db_session) -> int:
    return db_session.execute(select(func.count()).select_from(InwardRecord)).scalar_one()


def test_receipt_updates_material_aggregates(db_session, project, material, allocate):
    allocate(project, material, 100)

    result = register_inward(db_session, _inward(project, (material, 80, 60)))

    assert result.ok
    record = result.value
    assert record.type == InwardType.supply
    assert record.entry_date == date.today()
    assert record.code == f"INW-{date.today():%Y%m%d}-001"

    m = db_session.get(Material, material.id)
    assert m.ordered_qty == Decimal("80")
    assert m.received_qty == Decimal("60")
    assert m.balance_qty == Decimal("60")


def test_entry_date_follows_delivery_date_and_code_is_kept(db_session, project, material, allocate):
    allocate(project, material, 100)

    result = register_inward(
        db_session,
        _inward(
            project,
            (material, 0, 10),
            code="  GRN-7781 ",
            delivery_date=date(2026, 3, 2),
            invoice_no="INV-1",
            supplier_name="Acme Steel",
        ),
    )

    assert result.ok
    assert result.value.code == "GRN-7781"
    assert result.value.entry_date == date(2026, 3, 2)
    assert result.value.supplier_name == "Acme Steel"


def test_material_without_allocation_is_rejected(db_session, project, material):
    result = register_inward(db_session, _inward(project, (material, 0, 5)))

    assert not result.ok
    assert result.error.kind == ErrorKind.not_allocated
    assert result.error.context["material"] == "MAT-M"
    assert _record_count(db_session) == 0


def test_received_over_allocation_is_rejected(db_session, project, material, allocate, receive):
    allocate(project, material, 100)
    receive(project, material, 60)

    result = register_inward(db_session, _inward(project, (material, 0, 41)))

    assert result.error.kind == ErrorKind.allocation_exceeded
    assert result.error.context["allocation"] == Decimal("100")
    assert db_session.get(Material, material.id).received_qty == Decimal("60")


def test_ordered_over_allocation_is_rejected(db_session, project, material, allocate):
    allocate(project, material, 50)

    result = register_inward(db_session, _inward(project, (material, 51, 0)))

    assert result.error.kind == ErrorKind.allocation_exceeded
    assert "Ordering MAT-M" in result.error.message


def test_same_material_lines_are_checked_cumulatively(db_session, project, material, allocate):
    allocate(project, material, 100)

    result = register_inward(db_session, _inward(project, (material, 0, 60), (material, 0, 50)))

    assert result.error.kind == ErrorKind.allocation_exceeded
    assert _record_count(db_session) == 0


def test_batch_is_all_or_nothing(db_session, project, make_material, allocate):
    ok_material = make_material("MAT-OK")
    bad_material = make_material("MAT-BAD")
    allocate(project, ok_material, 100)
    allocate(project, bad_material, 10)

    result = register_inward(
        db_session,
        _inward(project, (ok_material, 0, 40), (bad_material, 0, 11)),
    )

    assert result.error.kind == ErrorKind.allocation_exceeded
    assert _record_count(db_session) == 0
    assert db_session.execute(select(func.count()).select_from(InwardLine)).scalar_one() == 0
    assert db_session.get(Material, ok_material.id).received_qty == Decimal("0")
    assert sum_received(db_session, project_id=project.id, material_id=ok_material.id) == 0


def test_negative_quantities_are_clamped_and_empty_lines_skipped(db_session, project, make_material, allocate):
    steel = make_material("MAT-STEEL")
    cable = make_material("MAT-CABLE")
    allocate(project, steel, 100)

    result = register_inward(
        db_session,
        _inward(project, (steel, -5, 12), (cable, 0, 0)),
    )

    assert result.ok
    assert len(result.value.lines) == 1
    assert sum_ordered(db_session, project_id=project.id, material_id=steel.id) == 0
    assert sum_received(db_session, project_id=project.id, material_id=steel.id) == Decimal("12")


def test_request_without_quantities_is_bad_request(db_session, project, material, allocate):
    allocate(project, material, 100)

    empty = register_inward(db_session, InwardCreate(project_id=project.id, lines=[]))
    zeros = register_inward(db_session, _inward(project, (material, 0, 0)))

    assert empty.error.kind == ErrorKind.bad_request
    assert zeros.error.kind == ErrorKind.bad_request


def test_unknown_project_material_and_type(db_session, project, material, allocate):
    allocate(project, material, 100)

    no_project = register_inward(
        db_session,
        InwardCreate(project_id=9999, lines=[InwardLineCreate(material_id=material.id, received_qty=1)]),
    )
    no_material = register_inward(
        db_session,
        InwardCreate(project_id=project.id, lines=[InwardLineCreate(material_id=9999, received_qty=1)]),
    )
    bad_type = register_inward(db_session, _inward(project, (material, 0, 1), type="GIFT"))
    no_project_no_lines = register_inward(db_session, InwardCreate(project_id=9999, lines=[]))

    assert no_project.error.kind == ErrorKind.not_found
    assert no_material.error.kind == ErrorKind.not_found
    assert bad_type.error.kind == ErrorKind.bad_request
    assert no_project_no_lines.error.kind == ErrorKind.not_found


def test_return_type_is_accepted(db_session, project, material, allocate):
    allocate(project, material, 100)

    result = register_inward(db_session, _inward(project, (material, 0, 3), type="return"))

    assert result.ok
    assert result.value.type == InwardType.returned
