# marketplace/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from marketplace.core.config import get_settings
from marketplace.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from marketplace.models import product as _product_models  # noqa: F401
from marketplace.models import seller as _seller_models  # noqa: F401
from marketplace.models import review as _review_models  # noqa: F401
from marketplace.models import order as _order_models  # noqa: F401
from marketplace.models import cart as _cart_models  # noqa: F401

# Routers
from marketplace.routers.reviews import router as reviews_router
from marketplace.routers.orders import router as orders_router
from marketplace.routers.cart import router as cart_router

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
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified (checkout mode: %s).", settings.CHECKOUT_MODE)
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
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


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    """
    Any store failure that escapes a service is fatal for the request.
    No retry; the client gets an opaque 500.
    """
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(reviews_router, prefix=settings.API_PREFIX)
app.include_router(orders_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "marketplace-api"}
