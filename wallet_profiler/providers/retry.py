"""Retry loop for transient upstream failures (429, 5xx, transport errors)."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from .base import ProviderError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def backoff_delay(attempt: int, max_delay: float) -> float:
    """Exponential delay in seconds: 1, 2, 4, ... capped at ``max_delay``."""
    return min(float(2 ** attempt), max_delay)


async def send_with_retries(
    send: Callable[[], Awaitable[httpx.Response]],
    *,
    provider: str,
    max_retries: int,
    max_delay: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """Call ``send`` until it returns a non-retryable response.

    Raises ProviderError when retries are exhausted or the response is an
    HTTP error that retrying will not fix.
    """
    for attempt in range(max_retries + 1):
        try:
            response = await send()
        except httpx.TransportError as exc:
            if attempt < max_retries:
                delay = backoff_delay(attempt, max_delay)
                logger.warning(
                    "%s transport error, retrying in %.1fs: %s", provider, delay, exc
                )
                await sleep(delay)
                continue
            raise ProviderError(f"{provider} request failed: {exc}") from exc

        if response.status_code in RETRYABLE_STATUS and attempt < max_retries:
            delay = backoff_delay(attempt, max_delay)
            logger.warning(
                "%s returned %s, retrying in %.1fs", provider, response.status_code, delay
            )
            await sleep(delay)
            continue

        if response.is_error:
            raise ProviderError(
                f"{provider} API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response

    raise ProviderError(f"{provider} request failed")
