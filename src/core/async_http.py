"""Async HTTP utilities using httpx, sharing the retry policy of ``http_client``."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, Optional

import httpx

from config import settings
from .http_client import HttpError, backoff_delay, default_headers, retry_after_seconds, should_retry

_log = logging.getLogger(__name__)


async def fetch(
    url: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    retries: int | None = None,
    initial_backoff: float | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> str:
    retries = retries if retries is not None else settings.MAX_RETRIES
    initial_backoff = initial_backoff if initial_backoff is not None else settings.INITIAL_BACKOFF
    close_client = False
    if client is None:
        client = httpx.AsyncClient(
            headers=default_headers(), timeout=settings.DEFAULT_TIMEOUT, follow_redirects=True
        )
        close_client = True
    try:
        attempt = 0
        while True:
            try:
                resp = await client.get(url)
            except httpx.TransportError as e:
                if attempt >= retries:
                    raise HttpError(f"Failed after {retries} retries: {e}") from e
                delay = backoff_delay(attempt, None, initial_backoff)
            else:
                if not should_retry(resp):
                    if resp.is_error:
                        raise HttpError(f"HTTP error {resp.status_code} for {url}")
                    return resp.text
                if attempt >= retries:
                    raise HttpError(f"Max retries reached for {url} (status {resp.status_code})")
                delay = backoff_delay(attempt, retry_after_seconds(resp), initial_backoff)
            _log.warning("Retrying %s in %.1fs (attempt %d/%d)", url, delay, attempt + 1, retries)
            await sleep(delay)
            attempt += 1
    finally:
        if close_client:
            await client.aclose()


async def fetch_many(
    urls: Dict[str, str],
    *,
    client: Optional[httpx.AsyncClient] = None,
    **kwargs,
) -> Dict[str, str | Exception]:
    """Fetch several URLs concurrently; each key maps to its body or its failure.

    One failing URL never cancels the others.
    """
    close_client = False
    if client is None:
        client = httpx.AsyncClient(
            headers=default_headers(), timeout=settings.DEFAULT_TIMEOUT, follow_redirects=True
        )
        close_client = True
    try:
        keys: Iterable[str] = list(urls)
        results = await asyncio.gather(
            *(fetch(urls[k], client=client, **kwargs) for k in keys), return_exceptions=True
        )
        return dict(zip(keys, results))
    finally:
        if close_client:
            await client.aclose()
