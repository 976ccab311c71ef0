from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import APIRouter, FastAPI
from catalog.core.config import settings
from catalog.core.middleware_correlation import CorrelationIdMiddleware
from catalog.core.logging import setup_logging
from catalog.core.errors import register_exception_handlers
from catalog.db.session import init_db

# Routers
from catalog.api.routes.authors import router as authors_router


setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    init_db()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Library Catalog - authors and the books that reference them.",
    version="1.0.0",
    lifespan=lifespan,
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "message": "Welcome to the Library Catalog",
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "endpoints": {
            "authors": f"{settings.CATALOG_PREFIX}/authors",
            "create_author": f"{settings.CATALOG_PREFIX}/author/create",
        },
    }

register_exception_handlers(app)

# Mount routers
catalog_router = APIRouter(prefix=settings.CATALOG_PREFIX)
catalog_router.include_router(authors_router)
app.include_router(catalog_router)
