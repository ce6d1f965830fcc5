from decimal import Decimal

import pytest

from storeledger.app.db.models.models_v1 import Material
from storeledger.services.material_ledger import adjust_utilized, apply_inward_delta, apply_outward_delta


def _material(received="0", utilized="0") -> Material:
    return Material(
        code="MAT-X",
        name="X",
        unit="nos",
        ordered_qty=Decimal("0"),
        received_qty=Decimal(received),
        utilized_qty=Decimal(utilized),
        balance_qty=Decimal("0"),
    )


def test_inward_then_outward_keeps_balance_in_sync():
    m = _material()

    apply_inward_delta(m, Decimal("80"), Decimal("60"))
    apply_outward_delta(m, Decimal("40"))

    assert (m.ordered_qty, m.received_qty, m.utilized_qty, m.balance_qty) == (
        Decimal("80"),
        Decimal("60"),
        Decimal("40"),
        Decimal("20"),
    )


def test_balance_is_clamped_at_zero():
    m = _material(received="10", utilized="0")

    apply_outward_delta(m, Decimal("15"))

    assert m.utilized_qty == Decimal("15")
    assert m.balance_qty == 0


def test_adjust_utilized_never_goes_negative():
    m = _material(received="10", utilized="4")

    adjust_utilized(m, Decimal("-9"))

    assert m.utilized_qty == 0
    assert m.balance_qty == Decimal("10")


def test_negative_deltas_are_caller_bugs():
    m = _material()

    with pytest.raises(ValueError):
        apply_inward_delta(m, Decimal("-1"), Decimal("0"))
    with pytest.raises(ValueError):
        apply_outward_delta(m, Decimal("-1"))
