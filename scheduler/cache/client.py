"""Process-wide Redis client and the failure conventions around it.

The client is built once by :func:`connect` when the app starts and handed to
the cache components through their constructors. Cache failures never
propagate: reads use :func:`fail_soft`, writes whose loss is tolerable run
inside :func:`non_critical`.
"""
import functools
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from contextlib import contextmanager

import redis
import structlog
from django.conf import settings

from ..config import srs_setting
from ..errors import CacheUnavailable

logger = structlog.get_logger()

_client = None

# runs cache round trips that must finish before a caller-side deadline
_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="cache-op")


def connect(url=None, timeout=None):
    global _client
    url = url or settings.REDIS_URL
    timeout = srs_setting("CACHE_TIMEOUT_SECONDS") if timeout is None else timeout
    _client = redis.Redis.from_url(
        url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        decode_responses=True,
    )
    logger.info("cache_client_created", timeout_seconds=timeout)
    return _client


def install(client):
    """Replace the process-wide client; returns the previous one."""
    global _client
    previous, _client = _client, client
    return previous


def get_client():
    if _client is None:
        raise CacheUnavailable("cache client not connected")
    return _client


def health_check(client=None) -> bool:
    try:
        (client or get_client()).ping()
    except (redis.RedisError, CacheUnavailable) as e:
        logger.warning("cache_health_check_failed", error=str(e))
        return False
    logger.info("cache_health_check_ok")
    return True


def fail_soft(default):
    """Turn a cache error in the wrapped method into ``default``.

    ``default`` may be a factory (e.g. ``list``) for mutable results.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except redis.RedisError as e:
                logger.warning("cache_op_failed", op=fn.__qualname__, error=str(e))
                return default() if callable(default) else default

        return wrapper

    return decorator


@contextmanager
def non_critical(action, **context):
    """Run a cache side effect whose failure is logged and otherwise ignored."""
    try:
        yield
    except (redis.RedisError, CacheUnavailable) as e:
        logger.warning("non_critical_cache_write_failed", action=action, error=str(e), **context)


class DeadlineClient:
    """Proxy that runs every cache round trip against one shared deadline.

    A call is refused once the deadline has passed, and a call still running
    when it passes is abandoned: its result, whenever it arrives, is
    discarded. Both cases raise :class:`CacheUnavailable`.
    """

    def __init__(self, client, deadline):
        self._client = client
        self.deadline = deadline

    def run(self, fn, *args, **kwargs):
        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise CacheUnavailable("cache path ran past its deadline")
        future = _executor.submit(fn, *args, **kwargs)
        try:
            return future.result(timeout=remaining)
        except FutureTimeout:
            raise CacheUnavailable("cache operation ran past the deadline") from None

    def pipeline(self, *args, **kwargs):
        return DeadlinePipeline(self._client.pipeline(*args, **kwargs), self)

    def __getattr__(self, name):
        attr = getattr(self._client, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args, **kwargs):
            return self.run(attr, *args, **kwargs)

        return call


class DeadlinePipeline:
    """Pipeline whose ``execute`` is bounded by the owning client's deadline.

    Queuing commands is local; only ``execute`` talks to the server. Once
    submitted, ``execute`` resets the pipeline itself, so leaving the block
    must not touch a connection an abandoned worker may still hold.
    """

    def __init__(self, pipe, owner):
        self._pipe = pipe
        self._owner = owner
        self._submitted = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        if not self._submitted:
            self._pipe.reset()

    def execute(self, *args, **kwargs):
        self._submitted = True
        return self._owner.run(self._pipe.execute, *args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._pipe, name)
