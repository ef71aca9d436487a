# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from threading import Lock

from flask import Request, current_app, jsonify, request

from sessiongate.shared.logging import logger

RATE_LIMITER_EXTENSION = "sessiongate.rate_limiter"


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._lock = Lock()
        self._buckets: dict[str, Bucket] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = Bucket(deque(maxlen=self._limit))
            # Drop old
            while bucket.timestamps and (now - bucket.timestamps[0]) >= self._window:
                bucket.timestamps.popleft()
            if len(bucket.timestamps) >= self._limit:
                return False
            bucket.timestamps.append(now)
            return True

    def _sweep(self, now: float) -> None:
        # At most once per window, forget keys with no request inside it.
        if now - self._last_sweep < self._window:
            return
        self._last_sweep = now
        idle = [
            key
            for key, bucket in self._buckets.items()
            if not bucket.timestamps or (now - bucket.timestamps[-1]) >= self._window
        ]
        for key in idle:
            del self._buckets[key]


def _client_key(req: Request) -> str:
    return req.remote_addr or "unknown"


def configure_rate_limiting(app, limiter: InMemoryRateLimiter | None) -> None:
    """Attach ``limiter`` to the app; ``None`` leaves decorated views unthrottled."""
    app.extensions[RATE_LIMITER_EXTENSION] = limiter


def rate_limit(f: Callable):
    @wraps(f)
    def wrapper(*args, **kwargs):
        limiter: InMemoryRateLimiter | None = current_app.extensions.get(RATE_LIMITER_EXTENSION)
        if limiter is not None:
            key = f"{request.path}:{_client_key(request)}"
            if not limiter.allow(key):
                logger.warning(f"rate_limit: rejected {key}")
                return jsonify({"error": "rate_limited"}), 429
        return f(*args, **kwargs)

    return wrapper


__all__ = ["InMemoryRateLimiter", "configure_rate_limiting", "rate_limit"]
