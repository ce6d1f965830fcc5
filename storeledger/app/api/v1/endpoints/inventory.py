from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storeledger.app.api.deps import get_db
from storeledger.app.schemas.records import InventoryCodesRead
from storeledger.services.codes import generate_codes

router = APIRouter(prefix="/inventory")


@router.get("/codes", response_model=InventoryCodesRead)
def next_codes(db: Session = Depends(get_db)):
    """Preview of the next daily codes (nothing is reserved)."""
    return generate_codes(db)
