# main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from partflow.core.config import APP_ENV, CORS_ORIGINS, ENABLE_SCHEDULER, IS_PRODUCTION
from partflow.core.db import engine, init_models
from partflow.core.error_handlers import (
    app_exception_handler,
    database_error_handler,
    http_exception_handler,
    integrity_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from partflow.core.exceptions import AppException
from partflow.core.logging import setup_logging
from partflow.core.scheduler import scheduler
from partflow.middleware.request_logging import request_logging_middleware
from partflow.routers import (
    category_router,
    export_router,
    import_router,
    inventory_router,
    location_router,
    part_router,
)

APP_NAME = "PartFlow Inventory API"
APP_VERSION = "1.0.0"

# ------------------------------------------------------------------------------
# LOGGING
# ------------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# LIFESPAN
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application", extra={"environment": APP_ENV})

    if not IS_PRODUCTION:
        await init_models()
        logger.info("Database tables ensured (%s)", APP_ENV)
    else:
        logger.info("Production mode: init_models() skipped")

    if ENABLE_SCHEDULER:
        scheduler.start()
        logger.info("Scheduler started")
    else:
        logger.info("Scheduler disabled")

    yield

    logger.info("Shutting down application")
    if scheduler.running:
        scheduler.shutdown()
    await engine.dispose()


# ------------------------------------------------------------------------------
# APP INIT
# ------------------------------------------------------------------------------
app = FastAPI(
    title=APP_NAME,
    description="Small-parts inventory backend: parts, stock ledger, categories and boxes",
    version=APP_VERSION,
    docs_url="/docs" if not IS_PRODUCTION else None,
    redoc_url=None,
    lifespan=lifespan,
)

# ------------------------------------------------------------------------------
# EXCEPTION HANDLERS
# ------------------------------------------------------------------------------
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# ------------------------------------------------------------------------------
# MIDDLEWARE
# ------------------------------------------------------------------------------
app.middleware("http")(request_logging_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS or (["*"] if not IS_PRODUCTION else []),
    allow_credentials=bool(CORS_ORIGINS),
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------------------
# HEALTH CHECK
# ------------------------------------------------------------------------------
@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


# ------------------------------------------------------------------------------
# ROUTERS
# ------------------------------------------------------------------------------
app.include_router(part_router)
app.include_router(inventory_router)
app.include_router(category_router)
app.include_router(location_router)
app.include_router(export_router)
app.include_router(import_router)
