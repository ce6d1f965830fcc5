from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storeledger.app.api.deps import get_db
from storeledger.app.api.errors import to_http_exception, unwrap
from storeledger.app.db.models.models_v1 import OutwardRegister
from storeledger.app.schemas.movements import OutwardCreate, OutwardUpdate
from storeledger.app.schemas.records import OutwardRegisterRead
from storeledger.services.errors import NotFound
from storeledger.services.outward import register_outward, update_outward

router = APIRouter(prefix="/outwards")


@router.post("", response_model=OutwardRegisterRead)
def create_outward(payload: OutwardCreate, db: Session = Depends(get_db)):
    """Creates the (project, date) register or accumulates into the open one."""
    return unwrap(register_outward(db, payload))


@router.get("/{register_id}", response_model=OutwardRegisterRead)
def get_outward(register_id: int, db: Session = Depends(get_db)):
    register = db.get(OutwardRegister, register_id)
    if not register:
        raise to_http_exception(NotFound("Outward register not found", register_id=register_id))
    return register


@router.put("/{register_id}", response_model=OutwardRegisterRead)
def replace_outward(register_id: int, payload: OutwardUpdate, db: Session = Depends(get_db)):
    return unwrap(update_outward(db, register_id, payload))
