import time

import fakeredis
import pytest
import redis

from scheduler.cache import client as cache_client
from scheduler.errors import CacheUnavailable

from .conftest import SlowRedis


def test_connect_builds_client_with_timeouts():
    previous = cache_client.install(None)
    try:
        built = cache_client.connect("redis://localhost:6399/3", timeout=0.25)
        assert cache_client.get_client() is built
        kwargs = built.connection_pool.connection_kwargs
        assert kwargs["socket_timeout"] == 0.25
        assert kwargs["socket_connect_timeout"] == 0.25
        assert kwargs["db"] == 3
    finally:
        cache_client.install(previous)


def test_get_client_without_connect():
    previous = cache_client.install(None)
    try:
        with pytest.raises(CacheUnavailable):
            cache_client.get_client()
    finally:
        cache_client.install(previous)


def test_health_check(redis_client, broken_redis):
    assert cache_client.health_check(redis_client) is True
    assert cache_client.health_check(broken_redis) is False


def test_non_critical_swallows_cache_errors(broken_redis):
    with cache_client.non_critical("test_write"):
        broken_redis.set("k", "v")


def test_non_critical_keeps_other_errors():
    with pytest.raises(KeyError):
        with cache_client.non_critical("test_write"):
            raise KeyError("boom")


def test_fail_soft_default_factory():
    calls = []

    @cache_client.fail_soft(list)
    def read():
        calls.append(1)
        raise redis.ConnectionError("down")

    first, second = read(), read()
    assert first == [] and second == []
    assert first is not second


def test_deadline_client_passes_calls_through(redis_client):
    client = cache_client.DeadlineClient(redis_client, time.monotonic() + 5)
    with client.pipeline(transaction=True) as pipe:
        pipe.rpush("k", "a", "b")
        pipe.expire("k", 60)
        pipe.execute()

    assert client.lrange("k", 0, -1) == ["a", "b"]
    assert client.lpop("k") == "a"


def test_deadline_client_refuses_calls_after_the_deadline(redis_client):
    client = cache_client.DeadlineClient(redis_client, time.monotonic() - 1)
    with pytest.raises(CacheUnavailable):
        client.llen("k")
    with pytest.raises(CacheUnavailable):
        with client.pipeline() as pipe:
            pipe.llen("k")
            pipe.execute()


def test_deadline_client_abandons_a_slow_call():
    slow = SlowRedis(server=fakeredis.FakeServer(), decode_responses=True)
    client = cache_client.DeadlineClient(slow, time.monotonic() + 0.1)

    started = time.monotonic()
    with pytest.raises(CacheUnavailable):
        client.llen("k")
    assert time.monotonic() - started < slow.delay
