from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storeledger.app.api.deps import get_db
from storeledger.app.api.errors import to_http_exception
from storeledger.app.schemas.records import MaterialMovementsRead
from storeledger.services.errors import LedgerError
from storeledger.services.history import material_movements

router = APIRouter(prefix="/materials")


@router.get("/{material_id}/movements", response_model=MaterialMovementsRead)
def get_material_movements(
    material_id: int,
    project_id: int | None = None,
    db: Session = Depends(get_db),
):
    try:
        movements = material_movements(db, material_id, project_id=project_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return MaterialMovementsRead.model_validate(movements)
