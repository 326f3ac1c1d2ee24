"""
Loaders — Ready-made implementations of the loader contract.

A loader is any coroutine function locale -> dictionary. The runtime never
validates what a loader returns; the data source is trusted.

- http_loader: fetch a JSON dictionary per locale over HTTP (httpx)
- mapping_loader: serve dictionaries from an in-memory mapping

Retries (http_loader):
- Only transport errors (connect, read, timeout) are retried.
- HTTP status errors are raised immediately.
- Structured logging on each retry with attempt number and wait time.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger()

__all__ = ["http_loader", "mapping_loader"]

# Transient errors that justify retries
_RETRYABLE_ERRORS = (httpx.TransportError,)


def http_loader(
    resolve_url: Callable[[Any], str],
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = 10.0,
    retries: int = 0,
    headers: Mapping[str, str] | None = None,
) -> Callable[[Any], Awaitable[Any]]:
    """Build a loader that GETs `resolve_url(locale)` and parses the JSON body.

    Args:
        resolve_url: Maps a locale to the URL of its dictionary,
            e.g. lambda l: f"https://cdn.example.com/i18n/{l}.json".
        client: Shared AsyncClient. If None, a short-lived client is
            created per load with `timeout` and `headers`.
        timeout: Per-request timeout in seconds (own client only).
        retries: Extra attempts on transport errors (0 = single attempt).
        headers: Extra request headers (own client only).

    Returns:
        Coroutine function locale -> decoded JSON body.
    """
    log = logger.bind(component="http_loader")
    max_attempts = retries + 1  # 1 original attempt + N retries

    def _on_retry_sleep(retry_state: RetryCallState) -> None:
        next_wait = retry_state.next_action.sleep if retry_state.next_action else 0
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        log.warning(
            "http_loader.retry",
            attempt=retry_state.attempt_number,
            wait_seconds=round(next_wait, 1),
            error=str(exc) if exc else None,
            error_type=type(exc).__name__ if exc else None,
        )

    async def _fetch(http: httpx.AsyncClient, url: str) -> Any:
        response = await http.get(url)
        response.raise_for_status()
        return response.json()

    async def load(locale: Any) -> Any:
        url = resolve_url(locale)
        log.debug("http_loader.fetch", locale=locale, url=url)
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(_RETRYABLE_ERRORS),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
            before_sleep=_on_retry_sleep,
            reraise=True,
        ):
            with attempt:
                if client is not None:
                    return await _fetch(client, url)
                async with httpx.AsyncClient(
                    timeout=timeout,
                    headers=dict(headers or {}),
                    follow_redirects=True,
                ) as http:
                    return await _fetch(http, url)

    return load


def mapping_loader(dictionaries: Mapping[Any, Any]) -> Callable[[Any], Awaitable[Any]]:
    """Build a loader over an in-memory mapping locale -> dictionary.

    Raises KeyError (from the returned loader) for an unknown locale.
    """

    async def load(locale: Any) -> Any:
        return dictionaries[locale]

    return load
