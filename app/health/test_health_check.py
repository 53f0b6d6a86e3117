import fakeredis
from redis.exceptions import ConnectionError as RedisConnectionError

from app.gazetteer.repository import CityRepository, GazetteerLoadError
from app.health.health_check import is_gazetteer_available, is_redis_available
from app.models.city import CityRecord
from app.models.health import ServiceStatus


class UnreachableRedis:
    def ping(self):
        raise RedisConnectionError("connection refused")


def test_redis_available(monkeypatch):
    monkeypatch.setattr(
        "app.health.health_check.redis_client", fakeredis.FakeRedis()
    )
    assert is_redis_available() == ServiceStatus.available


def test_redis_not_available(monkeypatch):
    monkeypatch.setattr("app.health.health_check.redis_client", UnreachableRedis())
    assert is_redis_available() == ServiceStatus.not_available


def test_gazetteer_available():
    status = is_gazetteer_available(lambda: CityRepository([CityRecord(name="Paris")]))
    assert status == ServiceStatus.available


def test_gazetteer_empty_is_not_available():
    assert is_gazetteer_available(lambda: CityRepository([])) == ServiceStatus.not_available


def test_gazetteer_load_failure_is_not_available():
    def broken():
        raise GazetteerLoadError("Could not load gazetteer: missing.tsv")

    assert is_gazetteer_available(broken) == ServiceStatus.not_available
