from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storeledger.app.api.deps import get_db
from storeledger.app.api.errors import unwrap
from storeledger.app.schemas.movements import TransferCreate
from storeledger.app.schemas.records import TransferRecordRead
from storeledger.services.transfer import register_transfer

router = APIRouter(prefix="/transfers")


@router.post("", status_code=201, response_model=TransferRecordRead)
def create_transfer(payload: TransferCreate, db: Session = Depends(get_db)):
    return unwrap(register_transfer(db, payload))
