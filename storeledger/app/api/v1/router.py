from fastapi import APIRouter

from storeledger.app.api.v1.endpoints.inventory import router as inventory_router
from storeledger.app.api.v1.endpoints.inwards import router as inwards_router
from storeledger.app.api.v1.endpoints.outwards import router as outwards_router
from storeledger.app.api.v1.endpoints.transfers import router as transfers_router
from storeledger.app.api.v1.endpoints.materials import router as materials_router

router = APIRouter()
router.include_router(inventory_router, tags=["inventory"])
router.include_router(inwards_router, tags=["inwards"])
router.include_router(outwards_router, tags=["outwards"])
router.include_router(transfers_router, tags=["transfers"])
router.include_router(materials_router, tags=["materials"])
