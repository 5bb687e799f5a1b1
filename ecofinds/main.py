# ecofinds/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from ecofinds.core.config import get_settings
from ecofinds.core.errors import register_exception_handlers
from ecofinds.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from ecofinds.models import user as _user_models  # noqa: F401
from ecofinds.models import product as _product_models  # noqa: F401
from ecofinds.models import interaction as _interaction_models  # noqa: F401
from ecofinds.models import purchase as _purchase_models  # noqa: F401


# Routers
from ecofinds.routers.auth import router as auth_router
from ecofinds.routers.users import router as users_router
from ecofinds.routers.products import router as products_router
from ecofinds.routers.product_lists import router as product_lists_router
from ecofinds.routers.cart import router as cart_router
from ecofinds.routers.user_products import router as user_products_router
from ecofinds.routers.purchases import router as purchases_router
from ecofinds.routers.upload import router as upload_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("🔄 Startup: Connecting to database...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# All resources live under one prefix, e.g. /api/products
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(product_lists_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(user_products_router, prefix=settings.API_PREFIX)
app.include_router(purchases_router, prefix=settings.API_PREFIX)
app.include_router(upload_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "ecofinds-backend"}
