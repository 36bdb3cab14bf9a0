"""HTTP client utilities with bounded retry and backoff (httpx).

Rate limiting (429) and 5xx responses that carry ``Retry-After`` are retried
after ``max(initial_backoff * 2**attempt, retry_after)`` seconds; transport
errors are retried on the same schedule. After ``retries`` retries the fetch
fails permanently with ``HttpError``.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Mapping, Optional

import httpx

from config import settings

_log = logging.getLogger(__name__)


class HttpError(RuntimeError):
    pass


def default_headers() -> dict[str, str]:
    return {"User-Agent": settings.DEFAULT_USER_AGENT, "Accept-Encoding": "gzip"}


def retry_after_seconds(response: httpx.Response) -> Optional[float]:
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return None


def should_retry(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code >= 500 and retry_after_seconds(response) is not None


def backoff_delay(attempt: int, retry_after: Optional[float], initial_backoff: float) -> float:
    delay = initial_backoff * (2**attempt)
    if retry_after is not None:
        delay = max(delay, retry_after)
    return delay


def fetch(
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    client: Optional[httpx.Client] = None,
    retries: int | None = None,
    initial_backoff: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> httpx.Response:
    retries = retries if retries is not None else settings.MAX_RETRIES
    initial_backoff = initial_backoff if initial_backoff is not None else settings.INITIAL_BACKOFF
    close_client = False
    if client is None:
        client = httpx.Client(headers=default_headers(), timeout=settings.DEFAULT_TIMEOUT, follow_redirects=True)
        close_client = True
    try:
        attempt = 0
        while True:
            try:
                response = client.get(url, params=params)
            except httpx.TransportError as e:
                if attempt >= retries:
                    raise HttpError(f"Failed to fetch {url} after {retries} retries: {e}") from e
                delay = backoff_delay(attempt, None, initial_backoff)
                _log.warning("Request to %s failed (%s). Retry %d/%d in %.1fs", url, e, attempt + 1, retries, delay)
            else:
                if not should_retry(response):
                    if response.is_error:
                        raise HttpError(f"HTTP error {response.status_code} for {url}")
                    return response
                if attempt >= retries:
                    raise HttpError(f"Max retries reached for {url} (status {response.status_code})")
                delay = backoff_delay(attempt, retry_after_seconds(response), initial_backoff)
                _log.warning("Rate limited by %s. Retrying after %.1fs", url, delay)
            sleep(delay)
            attempt += 1
    finally:
        if close_client:
            client.close()


def fetch_text(url: str, **kwargs: Any) -> str:
    return fetch(url, **kwargs).text


def fetch_json(url: str, **kwargs: Any) -> Any:
    text = fetch_text(url, **kwargs)
    try:
        return json.loads(text)
    except ValueError as e:
        raise HttpError(f"Response from {url} is not JSON: {e}") from e
