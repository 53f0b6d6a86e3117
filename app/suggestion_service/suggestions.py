"""Suggestion lookup with result caching."""

from app.gazetteer.repository import CityRepository
from app.logging_config import logger
from app.models.suggestion import CityQuery, Suggestions
from app.redis_cache.cache import suggestion_cache


def get_suggestions(query: CityQuery, repository: CityRepository) -> Suggestions:
    """Return ranked suggestions from cache or the city repository.

    Args:
        query: Raw query with name and optional coordinate hints.
        repository: Loaded city records.

    Returns:
        A Suggestions model, best match first.
    """
    if not query.name:
        return Suggestions(suggestions=[])

    cache = suggestion_cache()
    if suggestions := cache.get_suggestions(query, repository.fingerprint):
        logger.info("CACHED_SUGGESTIONS_HIT", query=query.name)
        return suggestions

    logger.info("CACHE_SUGGESTIONS_MISS", query=query.name)
    suggestions = Suggestions(suggestions=repository.find_ranked_suggestions(query))
    logger.info(
        "SUGGESTIONS_RANKED", query=query.name, matches=len(suggestions.suggestions)
    )
    cache.save_suggestions(query, repository.fingerprint, suggestions)
    return suggestions
