from fastapi import FastAPI

from tricol.app.api.v1.router import router as v1_router
from tricol.app.core.errors import register_exception_handlers
from tricol.app.core.logging import configure_logging

configure_logging()

app = FastAPI(title="TRICOL Inventory", version="0.1.0")
register_exception_handlers(app)
app.include_router(v1_router, prefix="/v1")
