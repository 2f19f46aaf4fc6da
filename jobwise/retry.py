"""Retry decorator for idempotent store reads."""
from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Tuple, Type

from jobwise.errors import UpstreamFailure

logger = logging.getLogger(__name__)


def retry(
    *,
    max_attempts: int = 2,
    base_delay: float = 0.05,
    retryable: Tuple[Type[BaseException], ...] = (UpstreamFailure,),
) -> Callable:
    """Re-run the wrapped call when it raises one of ``retryable``."""

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(1, max_attempts + 1):
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt == max_attempts:
                        logger.error(
                            "%s failed after %d attempts: %s",
                            fn.__qualname__,
                            max_attempts,
                            exc,
                        )
                        raise
                    logger.warning(
                        "%s attempt %d/%d failed (%s), retrying",
                        fn.__qualname__,
                        attempt,
                        max_attempts,
                        exc,
                    )
                    time.sleep(base_delay * attempt)

        return wrapper

    return decorator
