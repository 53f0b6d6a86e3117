"""Redis cache helpers for ranked suggestion lists."""

import hashlib
import json
import os
from functools import partial

from redis import Redis
from redis.exceptions import RedisError

from app.logging_config import logger
from app.models.suggestion import CityQuery, Suggestions

redis_client = Redis(
    host=os.getenv("REDIS_HOST", "redis"),
    port=int(os.getenv("REDIS_PORT", "6379")),
    db=int(os.getenv("REDIS_DB", "0")),
    decode_responses=True,
)
SUGGESTIONS_TTL_S = int(os.getenv("SUGGESTIONS_TTL", "0"))


def suggestions_key(query: CityQuery, fingerprint: str) -> str:
    """Build the Redis key for a query against one gazetteer snapshot.

    The name is lower-cased; the coordinate hints are kept verbatim. The parts
    are JSON encoded and hashed so distinct queries never share a key.

    Args:
        query: Raw suggestion query.
        fingerprint: Fingerprint of the gazetteer the suggestions came from.

    Returns:
        The cache key.
    """
    encoded = json.dumps(
        [query.name.lower(), query.latitude, query.longitude], ensure_ascii=False
    )
    digest = hashlib.sha256(encoded.encode("utf-8")).hexdigest()
    return f"suggestions:{fingerprint}:{digest}"


class SuggestionCache:
    """Cache wrapper for storing and retrieving ranked suggestions."""

    def __init__(self, client):
        self.redis_client: Redis = client

    def save_suggestions(
        self, query: CityQuery, fingerprint: str, suggestions: Suggestions
    ):
        """Save a ranked suggestion list to Redis.

        Args:
            query: Query the suggestions were computed for.
            fingerprint: Fingerprint of the gazetteer that was ranked.
            suggestions: Suggestions model to serialize.
        """
        try:
            ttl = SUGGESTIONS_TTL_S if SUGGESTIONS_TTL_S > 0 else None
            self.redis_client.set(
                suggestions_key(query, fingerprint), suggestions.model_dump_json(), ex=ttl
            )
        except RedisError as exc:
            logger.error(
                "REDIS_SAVE_SUGGESTIONS_FAILED", query=query.name, error=str(exc)
            )

    def get_suggestions(self, query: CityQuery, fingerprint: str):
        """Get a ranked suggestion list from Redis.

        Args:
            query: Query to look up.
            fingerprint: Fingerprint of the gazetteer currently loaded.

        Returns:
            Suggestions model if present, otherwise None.
        """
        try:
            suggestions = self.redis_client.get(suggestions_key(query, fingerprint))
        except RedisError as exc:
            logger.error(
                "REDIS_GET_SUGGESTIONS_FAILED", query=query.name, error=str(exc)
            )
            return None
        return Suggestions(**json.loads(suggestions)) if suggestions else None


suggestion_cache = partial(SuggestionCache, client=redis_client)
