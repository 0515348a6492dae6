# boneplus/utils.py
import functools
import json
import logging
import random
import time

from django.http import JsonResponse

logger = logging.getLogger(__name__)


def read_json(request) -> dict:
    """
    Parse the request body as a JSON object.
    Raises ValueError for malformed JSON or a non-object payload.
    """
    try:
        data = json.loads((request.body or b"{}").decode("utf-8") or "{}")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Invalid JSON") from exc
    if not isinstance(data, dict):
        raise ValueError("Invalid JSON")
    return data


def json_error(message: str, status: int = 400, **extra) -> JsonResponse:
    return JsonResponse({"error": message, **extra}, status=status)


def short_id(value) -> str:
    """Trim opaque client identifiers before they reach the logs."""
    value = str(value or "")
    return f"{value[:8]}..." if len(value) > 8 else value


def retry(exceptions, attempts: int = 3, delay: float = 0.3, factor: float = 1.5, max_delay: float = 10.0):
    """
    Retry the wrapped call on `exceptions` with exponential backoff plus jitter.
    The last failure is re-raised once `attempts` calls have failed.

    `attempts` and `delay` may be callables so settings are read per call.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            tries = attempts() if callable(attempts) else attempts
            base = delay() if callable(delay) else delay
            tries = max(1, int(tries))
            for attempt in range(1, tries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    if attempt >= tries:
                        raise
                    backoff = min(base * factor ** (attempt - 1) + random.uniform(0, base), max_delay)
                    logger.warning(
                        "%s failed (attempt %d/%d): %s; retrying in %.2fs",
                        func.__name__, attempt, tries, exc, backoff,
                    )
                    time.sleep(backoff)
        return wrapper
    return decorator
