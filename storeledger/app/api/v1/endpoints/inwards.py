from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storeledger.app.api.deps import get_db
from storeledger.app.api.errors import unwrap
from storeledger.app.schemas.movements import InwardCreate
from storeledger.app.schemas.records import InwardRecordRead
from storeledger.services.inward import register_inward

router = APIRouter(prefix="/inwards")


@router.post("", status_code=201, response_model=InwardRecordRead)
def create_inward(payload: InwardCreate, db: Session = Depends(get_db)):
    return unwrap(register_inward(db, payload))
