"""
Per-client rate limits for login attempts and image uploads (slowapi).

Requests are keyed by the socket peer address only. Behind a reverse proxy,
run uvicorn with --proxy-headers and --forwarded-allow-ips=<proxy ip> so the
proxy's X-Forwarded-For is applied to request.client before it reaches here;
a client-supplied header is never trusted directly.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from showroom.config import settings

# Counters are per process; RATE_LIMIT_ENABLED=false switches every limit off
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)

RATE_LIMITS = {
    "login": "5/minute",
    "upload": "20/hour",
}
