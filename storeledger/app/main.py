from fastapi import FastAPI

from storeledger.app.api.v1.router import router as v1_router
from storeledger.app.core.logging import configure_logging

configure_logging()

app = FastAPI(title="Store Ledger", version="0.1.0")
app.include_router(v1_router, prefix="/v1")
