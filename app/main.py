from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
import logging

import uvicorn
from sqlalchemy import text

from app.config import get_settings
from app.database import engine, Base, StorageError
from app.api import products, storefront, health
from app.services.image_store import get_image_store
from app.services.product_service import ImageRequiredError

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    A database that cannot be reached is logged, not fatal: the catalog
    endpoints then answer with a storage error.
    """
    # Startup
    logger.info("Starting up application...")

    if engine is None:
        logger.error("Database not connected; catalog endpoints will report errors.")
    else:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
            logger.info("Successfully connected to the database")
        except Exception as e:
            logger.error(f"Database connection failed! Reason: {e}")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title="Wesley Stores",
    description="""
    Product listings for a small storefront.

    - **Catalog**: list, create (multipart with image) and delete products
    - **Images**: uploads are stored on disk and served under `/uploads`
    - **Storefront**: server-rendered product grid and admin list
    """,
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"{exc.message}: {exc.details}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message, "details": exc.details}
    )


@app.exception_handler(ImageRequiredError)
async def image_required_handler(request: Request, exc: ImageRequiredError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc)}
    )


# Include API routers
app.include_router(health.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(storefront.router, prefix="/api")

# Image store and static assets
image_store = get_image_store()
image_store.ensure_directory()
app.mount("/uploads", StaticFiles(directory=str(image_store.directory)), name="uploads")
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Every other GET serves the application shell
app.add_api_route(
    "/{full_path:path}",
    storefront.shell,
    methods=["GET"],
    include_in_schema=False
)


def run():
    """Start the server on all interfaces."""
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
