# filmsync/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filmsync.core.catalog_client import get_catalog_client
from filmsync.core.config import get_settings
from filmsync.core.errors import CatalogError, StoreError
from filmsync.core.identity import get_identity_provider
from filmsync.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from filmsync.models import document as _document_models  # noqa: F401

# Routers
from filmsync.routers.auth import router as auth_router
from filmsync.routers.movies import router as movies_router
from filmsync.routers.movie_details import router as movie_details_router
from filmsync.routers.users import router as users_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify document store connectivity and create the table.

    Shutdown:
      - Close the HTTP clients of the catalog and identity provider.
    """
    logger.info("Startup: connecting to document store...")
    try:
        create_db_and_tables()
        logger.info("Startup: document store OK, table verified.")
    except Exception as e:
        logger.error(f"Startup: document store connection FAILED: {e}")
        raise
    yield
    for factory in (get_catalog_client, get_identity_provider):
        if factory.cache_info().currsize:
            factory().close()
            factory.cache_clear()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- Error mapping ---


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Document store unavailable"},
    )


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    logger.error(f"Catalog failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Upstream catalog unavailable"},
    )


# --- CORS configuration ---
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(movies_router, prefix=settings.API_PREFIX)
app.include_router(movie_details_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "filmsync-backend"}
