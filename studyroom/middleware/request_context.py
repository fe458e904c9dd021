"""Request context middleware: request id, timing, access log and rate limiting.

All four concerns run in one ``dispatch`` pass. The limiter itself is the
pure function ``check_rate_limit`` so it can be tested without a server.
"""

import logging
import threading
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.config import settings
from ..core.logging_config import owner_id_var, request_id_var
from ..core.token_factory import decode_token
from ..exceptions import ErrorCode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Token bucket
# ---------------------------------------------------------------------------

# {client_key: (available_tokens, last_refill_timestamp)}
_rate_buckets: dict[str, tuple[float, float]] = {}
_rate_lock = threading.Lock()

_rate_call_count = 0
_EVICT_EVERY = 100       # sweep every N calls
_EVICT_AGE = 120.0       # seconds a full bucket may sit idle


def check_rate_limit(
    bucket: dict[str, tuple[float, float]],
    key: str,
    max_per_minute: int,
    now: Optional[float] = None,
) -> tuple[bool, float]:
    """Take one token for *key* from *bucket*.

    Args:
        bucket: Per-key state, modified in place.
        key: Client identifier (owner id or IP address).
        max_per_minute: Sustained rate and burst size. ``<= 0`` disables limiting.
        now: Monotonic timestamp, injectable for tests.

    Returns:
        ``(allowed, retry_after)`` where *retry_after* is the seconds until a
        token is available (0.0 when allowed).
    """
    global _rate_call_count

    if max_per_minute <= 0:
        return True, 0.0

    if now is None:
        now = time.monotonic()

    _rate_call_count += 1
    if _rate_call_count % _EVICT_EVERY == 0:
        cutoff = now - _EVICT_AGE
        for stale_key in [k for k, (_, ts) in bucket.items() if ts < cutoff]:
            del bucket[stale_key]

    refill_per_second = max_per_minute / 60.0
    tokens, last_refill = bucket.get(key, (float(max_per_minute), now))
    tokens = min(float(max_per_minute), tokens + (now - last_refill) * refill_per_second)

    if tokens >= 1.0:
        bucket[key] = (tokens - 1.0, now)
        return True, 0.0

    bucket[key] = (tokens, now)
    return False, (1.0 - tokens) / refill_per_second


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

# Probes and API docs are never throttled.
_EXEMPT_PATHS = frozenset({"/", "/health", "/docs", "/redoc", "/openapi.json"})


def _client_key(request: Request) -> str:
    """Rate-limit per owner when a valid bearer token is present, else per IP."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        payload = decode_token(
            auth_header[7:].strip(), settings.jwt_secret_key, settings.jwt_algorithm
        )
        if payload is not None:
            return f"owner:{payload.sub}"

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    if request.client:
        return f"ip:{request.client.host}"
    return "ip:unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, throttle it, time it and log it."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        request_id_var.set(rid)
        owner_id_var.set("")

        if request.url.path not in _EXEMPT_PATHS:
            key = _client_key(request)
            if key.startswith("owner:"):
                owner_id_var.set(key[len("owner:"):])
            with _rate_lock:
                allowed, retry_after = check_rate_limit(
                    _rate_buckets, key, settings.rate_limit_per_minute
                )
            if not allowed:
                logger.warning(
                    "Rate limit exceeded",
                    extra={"client": key, "path": request.url.path, "retry_after": round(retry_after, 1)},
                )
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": ErrorCode.RATE_LIMITED.value,
                        "message": "Too many requests",
                        "details": {"retry_after": round(retry_after, 1)},
                    },
                    headers={
                        "Retry-After": str(int(retry_after) + 1),
                        "X-Request-ID": rid,
                    },
                )

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        response.headers["X-Request-ID"] = rid
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        logger.info(
            "%s %s %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
