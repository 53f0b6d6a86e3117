"""Health checks for the gazetteer and Redis."""

from app.gazetteer.repository import GazetteerLoadError
from app.logging_config import logger
from app.models.health import ServiceStatus
from app.redis_cache.cache import redis_client


def is_redis_available() -> ServiceStatus:
    """Check Redis connectivity.

    Returns:
        ServiceStatus.available when Redis responds, else not_available.
    """
    try:
        redis_client.ping()
        logger.info("REDIS CONNECTED")
        return ServiceStatus.available
    except Exception as e:
        logger.error("REDIS UNAVAILABLE", error=str(e))
        return ServiceStatus.not_available


def is_gazetteer_available(load_repository) -> ServiceStatus:
    """Check that the city repository is loaded and not empty.

    Args:
        load_repository: Callable returning the city repository.

    Returns:
        ServiceStatus.available when records are loaded, else not_available.
    """
    try:
        repository = load_repository()
    except GazetteerLoadError:
        return ServiceStatus.not_available
    return ServiceStatus.available if len(repository) else ServiceStatus.not_available
