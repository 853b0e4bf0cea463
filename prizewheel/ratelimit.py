from __future__ import annotations

import functools
import logging
import time
import uuid

import redis
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.http import JsonResponse

logger = logging.getLogger(__name__)

DEFAULT_RATE_KEY_PREFIX = "prizewheel:rate:"
RATE_LIMIT_MESSAGE = "Trop de tentatives, réessaie dans un instant."


def _redis_client() -> redis.Redis:
    redis_url = getattr(settings, "REDIS_URL", None)
    if not redis_url:
        raise ImproperlyConfigured("REDIS_URL is not configured in settings.")
    timeout = getattr(settings, "PRIZEWHEEL_REDIS_TIMEOUT", 0.5)
    return redis.Redis.from_url(
        redis_url,
        decode_responses=True,
        socket_connect_timeout=timeout,
        socket_timeout=timeout,
    )


def hit(client: redis.Redis, scope: str, limit: int, window: int) -> bool:
    """Count one request in a rolling window shared by every caller; False once over `limit`."""

    prefix = getattr(settings, "PRIZEWHEEL_RATE_KEY_PREFIX", DEFAULT_RATE_KEY_PREFIX)
    key = f"{prefix}{scope}"
    now = time.time()
    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window)
    pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
    pipe.zcard(key)
    pipe.expire(key, window)
    _, _, count, _ = pipe.execute()
    return count <= limit


def rate_limited(scope: str):
    """Reject requests past PRIZEWHEEL_RATE_LIMIT per PRIZEWHEEL_RATE_WINDOW seconds with 429."""

    def decorator(func):
        @functools.wraps(func)
        def _wrapped(request, *args, **kwargs):
            limit = getattr(settings, "PRIZEWHEEL_RATE_LIMIT", 20)
            window = getattr(settings, "PRIZEWHEEL_RATE_WINDOW", 60)
            try:
                allowed = hit(_redis_client(), scope, limit, window)
            except (redis.RedisError, ImproperlyConfigured) as exc:
                logger.warning("Rate limiter unavailable, letting request through: %s", exc)
                allowed = True
            if not allowed:
                return JsonResponse(
                    {"ok": False, "message": RATE_LIMIT_MESSAGE},
                    status=429,
                    json_dumps_params={"ensure_ascii": False},
                )
            return func(request, *args, **kwargs)

        return _wrapped

    return decorator
