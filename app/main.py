# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from app.core.config import get_settings
from app.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from app.models import user as _user_models  # noqa: F401
from app.models import catalog as _catalog_models  # noqa: F401
from app.models import product as _product_models  # noqa: F401
from app.models import order as _order_models  # noqa: F401

# Routers
from app.routers.users import router as users_router
from app.routers.catalog import categories_router, brands_router
from app.routers.products import router as products_router
from app.routers.orders import router as orders_router
from app.routers.admin import router as admin_router

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
        logger.info("Startup: DB connection OK, tables verified.")
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

# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(categories_router, prefix=settings.API_V1_STR)
app.include_router(brands_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)
app.include_router(admin_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "glow-beauty-backend"}
