"""FastAPI application entry point with lifespan, logging, and middleware."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.models import HealthResponse
from app.routers import movies
from app.services.database import DatabaseService
from app.services.movie_service import MovieService

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = DatabaseService(settings.db_path)
    if settings.init_schema:
        db.init_schema()
    service = MovieService(db)

    movies.init_router(service)

    app.state.db = db
    app.state.movie_service = service

    logger.info("Application started: db=%s", settings.db_path)
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Movie Catalog",
    description=(
        "Read and update a movie catalog of genres, actors and directors. "
        "Every endpoint answers with a {data, error, success} envelope."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s → %d  (%.0f ms)",
        request.method, request.url.path, response.status_code, elapsed,
    )
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal error occurred. Please try again."},
    )


@app.get("/health", response_model=HealthResponse, tags=["system"])
def health():
    """Check database connectivity."""
    db: DatabaseService = app.state.db

    db_ok = db.health_check()
    return HealthResponse(status="healthy" if db_ok else "degraded", database=db_ok)


app.include_router(movies.router)
