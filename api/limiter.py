"""
api/limiter.py -- The process-wide slowapi Limiter and the limits it enforces.

create_app() mounts this instance as middleware; routes apply per-endpoint
limits with @limiter.limit(). Every route must share this one instance so
requests count against the same in-memory store.

Limits are keyed on the client IP. Behind a reverse proxy that rewrites the
peer address, run uvicorn with --proxy-headers so the real client is counted.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# POST /api/v1/login -- brute-force mitigation
LOGIN_LIMIT = "10/minute"

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")
