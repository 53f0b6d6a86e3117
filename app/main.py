"""FastAPI application routes, middleware, and metrics."""

import time
import uuid
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from app.gazetteer.repository import GAZETTEER_PATH, CityRepository, GazetteerLoadError
from app.health.health_check import is_gazetteer_available, is_redis_available
from app.logging_config import logger
from app.models.health import Dependencies, HealthResponse
from app.models.suggestion import CityQuery, Suggestions
from app.suggestion_service.suggestions import get_suggestions
from structlog.contextvars import bind_contextvars, clear_contextvars


@lru_cache
def get_city_repository() -> CityRepository:
    """Load the gazetteer once and share it between requests."""
    return CityRepository.from_tsv(GAZETTEER_PATH)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the gazetteer before serving so a bad data file stops startup."""
    get_city_repository()
    yield


app = FastAPI(lifespan=lifespan)

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "path", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request duration in seconds", ["path"]
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    """Log request details, attach a request ID, and record metrics.

    Args:
        request: Incoming HTTP request.
        call_next: FastAPI handler for the next middleware/app.

    Returns:
        The response produced by the downstream handler.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_contextvars(request_id=request_id)
    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response
    finally:
        duration_s = time.perf_counter() - start
        duration_ms = round(duration_s * 1000, 2)
        status_code = getattr(response, "status_code", 500)
        logger.info(
            "HTTP_REQUEST",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
        REQUEST_COUNT.labels(
            method=request.method, path=request.url.path, status_code=status_code
        ).inc()
        REQUEST_LATENCY.labels(path=request.url.path).observe(duration_s)
        clear_contextvars()


@app.exception_handler(GazetteerLoadError)
async def gazetteer_load_error_handler(request: Request, exc: GazetteerLoadError):
    """Convert gazetteer load failures into 503 responses.

    Args:
        request: Incoming HTTP request.
        exc: Raised load error.

    Returns:
        A JSON response with the error detail.
    """
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/")
async def root():
    """Return a basic liveness response."""
    return {"message": "City suggestions"}


@app.get("/suggestions", response_model=Suggestions)
def suggestions(
    q: str = "",
    latitude: str = "",
    longitude: str = "",
    repository: CityRepository = Depends(get_city_repository),
) -> Suggestions:
    """Rank gazetteer cities matching a partial name.

    Args:
        q: Partial city name, matched case-insensitively.
        latitude: Optional latitude hint in decimal degrees.
        longitude: Optional longitude hint in decimal degrees.
        repository: Loaded city records.

    Returns:
        A Suggestions model, best match first.
    """
    query = CityQuery(name=q, latitude=latitude, longitude=longitude)
    return get_suggestions(query, repository)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report API health and dependency availability.

    Returns:
        A HealthResponse containing dependency status.
    """
    return HealthResponse(
        status="ok",
        dependencies=Dependencies(
            gazetteer=is_gazetteer_available(get_city_repository),
            redis=is_redis_available(),
        ),
    )


@app.get("/metrics")
async def metrics():
    """Expose Prometheus metrics for scraping."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
