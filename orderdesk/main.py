# orderdesk/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import FastAPI, Request

from orderdesk.core.config import get_settings
from orderdesk.core.errors import PipelineError
from orderdesk.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from orderdesk.models import user as _user_models  # noqa: F401
from orderdesk.models import order as _order_models  # noqa: F401
from orderdesk.models import quote as _quote_models  # noqa: F401
from orderdesk.models import message as _message_models  # noqa: F401
from orderdesk.models import rate_limit as _rate_limit_models  # noqa: F401


# Routers
from orderdesk.routers.orders import router as orders_router
from orderdesk.routers.files import router as files_router
from orderdesk.routers.admin import router as admin_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("Startup: connecting to the order database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Order Desk",
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error envelope: {"success": false, "error": "..."} ---


async def pipeline_error_handler(request: Request, exc: PipelineError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body"},
    )


app.add_exception_handler(PipelineError, pipeline_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)


# Versioned API prefix, e.g. /api/v1
app.include_router(orders_router, prefix=settings.API_V1_STR)
app.include_router(files_router, prefix=settings.API_V1_STR)
app.include_router(admin_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "orderdesk"}
