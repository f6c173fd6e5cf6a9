"""Shared key/value store for staff sessions and the staff/reservation snapshots.

Redis when ``REDIS_URL`` answers, otherwise a process-local dictionary. Keys are
``<namespace>:<identifier>`` so a whole snapshot family can be dropped at once
after a mutation.
"""

import logging
import pickle
import threading
import time
from functools import wraps
from typing import Any, Callable, Optional, Protocol

from redis import Redis
from redis.exceptions import RedisError

from .config import get_settings

logger = logging.getLogger(__name__)


def namespaced_key(namespace: str, identifier: str) -> str:
    return f"{namespace}:{identifier}"


class CacheBackend(Protocol):
    name: str

    def get(self, key: str) -> Any | None:
        ...

    def set(self, key: str, value: Any, ttl: int) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def clear_namespace(self, namespace: str) -> None:
        ...

    def ping(self) -> bool:
        ...


class RedisCacheBackend:
    name = "Redis"

    def __init__(self, client: Redis):
        self.client = client

    def get(self, key: str) -> Any | None:
        return self.client.get(key)

    def set(self, key: str, value: Any, ttl: int) -> None:
        self.client.setex(key, ttl, value)

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def clear_namespace(self, namespace: str) -> None:
        keys = list(self.client.scan_iter(match=namespaced_key(namespace, "*")))
        if keys:
            self.client.delete(*keys)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except RedisError as exc:
            logger.warning("Redis ping failed: %s", exc)
            return False


class InMemoryCacheBackend:
    """Dictionary store with per-key expiry, measured on ``clock``."""

    name = "In-memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._values: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            item = self._values.get(key)
            if item is None:
                return None
            value, deadline = item
            if deadline <= self._clock():
                del self._values[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: int) -> None:
        with self._lock:
            self._values[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def clear_namespace(self, namespace: str) -> None:
        prefix = namespaced_key(namespace, "")
        with self._lock:
            for key in [key for key in self._values if key.startswith(prefix)]:
                del self._values[key]

    def ping(self) -> bool:
        return True


class CacheManager:
    def __init__(self) -> None:
        self.backend: CacheBackend | None = None

    def init_backend(self) -> CacheBackend:
        if self.backend is None:
            self.backend = self._connect(get_settings().REDIS_URL)
        return self.backend

    @staticmethod
    def _connect(redis_url: Optional[str]) -> CacheBackend:
        if redis_url:
            try:
                client = Redis.from_url(redis_url)
                client.ping()
            except (RedisError, OSError) as exc:
                logger.warning("Redis unavailable (%s), sessions and snapshots stay in process memory", exc)
            else:
                logger.info("Cache backend: Redis")
                return RedisCacheBackend(client)
        logger.info("Cache backend: in-memory")
        return InMemoryCacheBackend()

    def use(self, backend: CacheBackend) -> None:
        self.backend = backend

    def reset(self) -> None:
        self.backend = None

    def get_backend(self) -> CacheBackend:
        return self.init_backend()

    def invalidate_namespace(self, namespace: str) -> None:
        self.get_backend().clear_namespace(namespace)


cache_manager = CacheManager()


def cache(ttl: int, namespace: str, key_builder: Callable[..., str]):
    """Memoize a snapshot loader under ``namespace`` until invalidated or ``ttl`` runs out.

    Values are pickled so the same loader works against Redis and memory.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            key = namespaced_key(namespace, key_builder(*args, **kwargs))
            backend = cache_manager.get_backend()
            stored = backend.get(key)
            if stored is not None:
                return pickle.loads(stored)
            value = func(*args, **kwargs)
            backend.set(key, pickle.dumps(value), ttl)
            return value

        return wrapper

    return decorator


def invalidate_cache(namespace: str) -> None:
    cache_manager.invalidate_namespace(namespace)
