from datetime import date, timedelta

from storeledger.app.db.models.core_types import LedgerKind
from storeledger.app.schemas.movements import InwardCreate, InwardLineCreate, OutwardCreate, OutwardLineCreate
from storeledger.services.codes import build_daily_code, generate_codes, resolve_code
from storeledger.services.inward import register_inward
from storeledger.services.outward import register_outward


def test_code_format():
    assert build_daily_code(LedgerKind.inward, date(2026, 10, 19), 7) == "INW-20261019-007"
    assert build_daily_code(LedgerKind.transfer, date(2026, 1, 2), 1234) == "TRF-20260102-1234"
    assert build_daily_code(LedgerKind.outward, date(2026, 1, 2), 0) == "OUT-20260102-001"


def test_preview_counts_todays_records_without_reserving(db_session, project, material, allocate, receive):
    today = date.today()
    stamp = f"{today:%Y%m%d}"

    first = generate_codes(db_session)
    assert first.inward_code == f"INW-{stamp}-001"
    assert first.outward_code == f"OUT-{stamp}-001"
    assert first.transfer_code == f"TRF-{stamp}-001"
    assert generate_codes(db_session) == first

    allocate(project, material, 100)
    receive(project, material, 10)
    receive(project, material, 10)
    register_outward(
        db_session,
        OutwardCreate(project_id=project.id, lines=[OutwardLineCreate(material_id=material.id, issue_qty=1)]),
    )

    after = generate_codes(db_session)
    assert after.inward_code == f"INW-{stamp}-003"
    assert after.outward_code == f"OUT-{stamp}-002"
    assert after.transfer_code == f"TRF-{stamp}-001"


def test_other_days_do_not_count(db_session, project, material, allocate):
    allocate(project, material, 100)
    register_outward(
        db_session,
        OutwardCreate(project_id=project.id, register_date=date(2020, 1, 1), lines=[OutwardLineCreate(material_id=material.id, issue_qty=0)]),
    )

    assert generate_codes(db_session, on=date(2020, 1, 1)).outward_code == "OUT-20200101-002"
    assert generate_codes(db_session, on=date(2020, 1, 2)).outward_code == "OUT-20200102-001"


def test_resolve_code_keeps_requested_code(db_session):
    assert resolve_code(db_session, "  MANUAL-9 ", LedgerKind.inward) == "MANUAL-9"
    assert resolve_code(db_session, "   ", LedgerKind.inward).startswith("INW-")


def test_backdated_inward_does_not_take_todays_code(db_session, project, material, allocate):
    allocate(project, material, 100)
    yesterday = date.today() - timedelta(days=1)

    backdated = register_inward(
        db_session,
        InwardCreate(
            project_id=project.id,
            delivery_date=yesterday,
            lines=[InwardLineCreate(material_id=material.id, received_qty=1)],
        ),
    )
    first_today = register_inward(
        db_session,
        InwardCreate(project_id=project.id, lines=[InwardLineCreate(material_id=material.id, received_qty=1)]),
    )
    second_today = register_inward(
        db_session,
        InwardCreate(project_id=project.id, lines=[InwardLineCreate(material_id=material.id, received_qty=1)]),
    )

    assert backdated.ok and first_today.ok and second_today.ok
    assert backdated.value.code == f"INW-{yesterday:%Y%m%d}-001"
    assert first_today.value.code == f"INW-{date.today():%Y%m%d}-001"
    assert second_today.value.code == f"INW-{date.today():%Y%m%d}-002"


def test_backdated_register_does_not_take_todays_code(db_session, project, material, allocate, receive):
    allocate(project, material, 100)
    receive(project, material, 10)
    day = date(2026, 1, 1)

    backdated = register_outward(
        db_session,
        OutwardCreate(project_id=project.id, register_date=day, lines=[OutwardLineCreate(material_id=material.id, issue_qty=1)]),
    )
    today = register_outward(
        db_session,
        OutwardCreate(project_id=project.id, lines=[OutwardLineCreate(material_id=material.id, issue_qty=1)]),
    )

    assert backdated.ok and today.ok
    assert backdated.value.code == "OUT-20260101-001"
    assert today.value.code == f"OUT-{date.today():%Y%m%d}-001"


def test_resolve_code_uses_the_given_day(db_session):
    assert resolve_code(db_session, None, LedgerKind.transfer, date(2025, 12, 31)) == "TRF-20251231-001"
