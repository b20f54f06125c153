"""Retry helper with exponential backoff and optional retryable-code filtering.

The wrapped operation either returns a result or raises ``TTSError``. Any
other exception is a fault and propagates immediately without retrying.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping, TypeVar, Union

from multitts.errors import ErrorCode, TTSError
from multitts.events.telemetry import Telemetry
from multitts.tts.types import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Union[Awaitable[T], T]]


async def with_retry(
    operation: Operation,
    policy: RetryPolicy | None = None,
    *,
    telemetry: Telemetry | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> T:
    """Run *operation*, retrying failures according to *policy*.

    The operation is invoked at most ``policy.max_attempts + 1`` times. On
    give-up the operation's own last ``TTSError`` is raised unchanged.

    Raises:
        TTSError: The last error from the operation, or ``invalid_return``
            if the operation returned None.
    """
    policy = policy or RetryPolicy()
    metadata = dict(metadata or {})
    attempt = 1

    while True:
        try:
            result = operation()
            if inspect.isawaitable(result):
                result = await result
        except TTSError as error:
            if attempt > policy.max_attempts or not is_retryable(error, policy):
                raise

            delay = delay_ms(error, policy, attempt)
            if telemetry is not None:
                telemetry.retry_attempt(
                    attempt,
                    delay=delay,
                    max_attempts=policy.max_attempts,
                    error=safe_error(error),
                    **metadata,
                )
            else:
                logger.info("Retrying after attempt %d in %d ms: %s", attempt, delay, error)

            await asyncio.sleep(delay / 1000)
            attempt += 1
            continue

        if result is None:
            raise TTSError(
                ErrorCode.INVALID_RETURN,
                "retry operation returned None",
                provider=metadata.get("provider"),
            )
        return result


def is_retryable(error: Any, policy: RetryPolicy) -> bool:
    """Return True if *error* should be retried under *policy*.

    An empty ``retryable_errors`` set retries everything. Otherwise only
    errors carrying a code in the set are retried.
    """
    if not policy.retryable_errors:
        return True
    code = _error_code(error)
    return code is not None and code in policy.retryable_errors


def delay_ms(error: Any, policy: RetryPolicy, attempt: int) -> int:
    """Milliseconds to wait after the failed *attempt* (1-based).

    A ``Retry-After`` header on the error wins over the exponential formula;
    both are capped at ``policy.max_delay``.
    """
    from_header = retry_after_ms(error)
    if from_header is not None:
        return min(from_header, policy.max_delay)

    exponential = round(
        policy.initial_delay * policy.backoff_factor ** max(attempt - 1, 0)
    )
    return min(exponential, policy.max_delay)


def retry_after_ms(error: Any) -> int | None:
    """Return the error's ``Retry-After`` value in milliseconds, if parseable."""
    headers = getattr(error, "headers", None)
    if headers is None and isinstance(error, Mapping):
        headers = error.get("headers")
    if headers is None:
        return None

    for key, value in _header_items(headers):
        if isinstance(key, str) and key.lower() == "retry-after" and isinstance(value, str):
            value = value.strip()
            if value.isascii() and value.isdigit():
                return int(value) * 1000
            return None
    return None


def safe_error(error: Any) -> Any:
    """Return a log-safe snapshot of *error* for telemetry."""
    if isinstance(error, str):
        return error
    if isinstance(error, TTSError):
        return {"code": error.code.value, "message": error.message, "status": error.status}
    if isinstance(error, Mapping):
        return {key: error[key] for key in ("code", "message", "status") if key in error}
    return repr(error)


def _error_code(error: Any) -> str | None:
    code = getattr(error, "code", None)
    if code is None and isinstance(error, Mapping):
        code = error.get("code")
    if isinstance(code, ErrorCode):
        return code.value
    if isinstance(code, str):
        return code
    return None


def _header_items(headers: Any) -> Iterable[tuple[Any, Any]]:
    if hasattr(headers, "multi_items"):
        return headers.multi_items()
    if isinstance(headers, Mapping):
        return headers.items()
    if isinstance(headers, (list, tuple)):
        return [item for item in headers if isinstance(item, tuple) and len(item) == 2]
    return []
