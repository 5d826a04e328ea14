# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .catalog import catalog_router
from .catalog.errors import CatalogError
from .catalog.upstream_service import create_client
from .config import get_settings


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    if not settings.upstreams_configured:
        logger.warning(
            "AUTHORS_SERVICE_URL or BOOKS_SERVICE_URL is not set; /catalog will fail"
        )
    async with create_client(settings.upstream_timeout_seconds) as client:
        app.state.http_client = client
        logger.info("Catalog Service listening on port %s", settings.port)
        yield


app = FastAPI(
    title="Catalog Service",
    description=(
        "Microservice qui agrège les auteurs et les livres de deux services "
        "en amont et renvoie un catalogue consolidé."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    return PlainTextResponse(exc.message, status_code=exc.http_status)


# 🔹 Route de base pour tester rapidement
@app.get("/", response_class=PlainTextResponse)
def health_check():
    return "Catalog Service is up and running!"


app.include_router(catalog_router)
