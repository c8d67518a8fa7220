"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.config import get_settings
from app.db.session import SessionLocal
from app.routers import admin, favorites, reports, reviews, stores, submissions
from app.routers.errors import handle_database_unavailable
from app.services.stores import get_directory_overview

logger = logging.getLogger(__name__)


def _warm_backend_state() -> None:
    """Prime DB connection and the landing-page query at process start."""

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
            get_directory_overview(db)
    except Exception:
        logger.exception("Backend warm-up failed; continuing without startup pre-warm.")


@asynccontextmanager
async def lifespan(_: FastAPI):
    _warm_backend_state()
    yield


settings = get_settings()
app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(OperationalError, handle_database_unavailable)

app.include_router(stores.router, tags=["stores"])
app.include_router(reviews.router, tags=["reviews"])
app.include_router(favorites.router, tags=["favorites"])
app.include_router(reports.router, tags=["reports"])
app.include_router(submissions.router, tags=["submissions"])
app.include_router(admin.router, tags=["admin"])


@app.get("/health")
def health() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}
