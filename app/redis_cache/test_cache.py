import pytest
import fakeredis
from redis.exceptions import ConnectionError as RedisConnectionError

from app.models.suggestion import CityQuery, Suggestion, Suggestions
from app.redis_cache.cache import SuggestionCache, suggestions_key

FINGERPRINT = "0123456789abcdef"


@pytest.fixture
def fake_redis():
    client = fakeredis.FakeRedis(decode_responses=True)
    client.flushall()
    return client


class BrokenRedis:
    def get(self, key):
        raise RedisConnectionError("connection refused")

    def set(self, key, value, ex=None):
        raise RedisConnectionError("connection refused")


def paris_suggestions():
    return Suggestions(
        suggestions=[
            Suggestion(name="Paris, A8, FR", latitude=48.8566, longitude=2.3522, score=1.0)
        ]
    )


def test_suggestions_key_is_scoped_by_fingerprint():
    key = suggestions_key(CityQuery(name="Paris"), FINGERPRINT)
    assert key.startswith(f"suggestions:{FINGERPRINT}:")
    assert key != suggestions_key(CityQuery(name="Paris"), "fedcba9876543210")


def test_queries_differing_in_case_share_a_key():
    assert suggestions_key(CityQuery(name="PARIS"), FINGERPRINT) == suggestions_key(
        CityQuery(name="paris"), FINGERPRINT
    )


@pytest.mark.parametrize(
    "first, second",
    [
        (CityQuery(name="saint paul"), CityQuery(name="saint_paul")),
        (CityQuery(name="x:1"), CityQuery(name="x", latitude="1:")),
        (CityQuery(name="x", latitude="1"), CityQuery(name="x", longitude="1")),
        (CityQuery(name="paris "), CityQuery(name="paris")),
    ],
)
def test_distinct_queries_never_share_a_key(first, second):
    assert suggestions_key(first, FINGERPRINT) != suggestions_key(second, FINGERPRINT)


def test_save_suggestions_to_cache(fake_redis):
    cache = SuggestionCache(fake_redis)
    query = CityQuery(name="Paris")
    cache.save_suggestions(query, FINGERPRINT, paris_suggestions())
    assert cache.get_suggestions(query, FINGERPRINT) == paris_suggestions()


def test_get_suggestions_cache_miss_returns_none(fake_redis):
    cache = SuggestionCache(fake_redis)
    assert cache.get_suggestions(CityQuery(name="Unknown City"), FINGERPRINT) is None


def test_location_is_part_of_the_key(fake_redis):
    cache = SuggestionCache(fake_redis)
    cache.save_suggestions(
        CityQuery(name="paris", latitude="48"), FINGERPRINT, paris_suggestions()
    )
    assert cache.get_suggestions(CityQuery(name="paris", latitude="33"), FINGERPRINT) is None


def test_other_gazetteer_does_not_see_cached_suggestions(fake_redis):
    cache = SuggestionCache(fake_redis)
    cache.save_suggestions(CityQuery(name="paris"), FINGERPRINT, paris_suggestions())
    assert cache.get_suggestions(CityQuery(name="paris"), "fedcba9876543210") is None


def test_redis_errors_are_treated_as_miss():
    cache = SuggestionCache(BrokenRedis())
    cache.save_suggestions(CityQuery(name="paris"), FINGERPRINT, paris_suggestions())
    assert cache.get_suggestions(CityQuery(name="paris"), FINGERPRINT) is None
