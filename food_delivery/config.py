"""Runtime configuration defaults for the remote API and logging."""

from __future__ import annotations

import os

_API_BASE_ENV = "FOOD_DELIVERY_API_BASE"
_HTTP_TIMEOUT_ENV = "FOOD_DELIVERY_HTTP_TIMEOUT"
_DEBUG_LOG_ENV = "FOOD_DELIVERY_DEBUG_LOG"
_DEBUG_ENV = "FOOD_DELIVERY_DEBUG"


def _timeout_from_env() -> float | None:
    raw = os.environ.get(_HTTP_TIMEOUT_ENV, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


API_BASE = os.environ.get(_API_BASE_ENV, "").strip() or "http://localhost:8080/api"

# None disables httpx's default timeout; a hung request leaves the view on its last snapshot.
HTTP_TIMEOUT_SECONDS = _timeout_from_env()

DEBUG_LOG_PATH = os.environ.get(_DEBUG_LOG_ENV, "").strip() or "/tmp/food-delivery-debug.log"
DEBUG = os.environ.get(_DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}
