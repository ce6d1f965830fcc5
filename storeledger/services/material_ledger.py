"""
Material ledger.

Global per-material aggregates (ordered / received / utilized / balance).
Callers must hold the material row lock (see allocations.lock_materials)
and stay inside the transaction of the line that causes the change.
"""

from __future__ import annotations

from decimal import Decimal

from storeledger.app.db.models.models_v1 import Material

ZERO = Decimal("0")


def _current(value: Decimal | None) -> Decimal:
    return value if value is not None else ZERO


def apply_inward_delta(material: Material, ordered: Decimal, received: Decimal) -> None:
    if ordered < 0 or received < 0:
        raise ValueError("inward deltas must be non-negative")

    if ordered > 0:
        material.ordered_qty = _current(material.ordered_qty) + ordered
    if received > 0:
        material.received_qty = _current(material.received_qty) + received
    material.sync_balance()


def apply_outward_delta(material: Material, issued: Decimal) -> None:
    if issued < 0:
        raise ValueError("outward delta must be non-negative")

    material.utilized_qty = _current(material.utilized_qty) + issued
    material.sync_balance()


def adjust_utilized(material: Material, delta: Decimal) -> None:
    """Edit path: ``delta`` may be negative, utilized never drops below zero."""
    utilized = _current(material.utilized_qty) + delta
    material.utilized_qty = utilized if utilized > 0 else ZERO
    material.sync_balance()
