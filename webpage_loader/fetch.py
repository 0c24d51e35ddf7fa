"""HTTP fetching with retry and exponential backoff."""

from __future__ import annotations

import hashlib
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import Settings, get_settings
from .models import FetchedPage, LoaderOptions

logger = logging.getLogger(__name__)

RETRY_STATUS = frozenset({408, 429, 500, 502, 503, 504})
ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _normalize_headers(headers: httpx.Headers) -> Dict[str, str]:
    return {k.lower(): v for k, v in headers.items()}


def _raise_for_retryable_status(resp: httpx.Response) -> None:
    if resp.status_code in RETRY_STATUS:
        raise httpx.HTTPStatusError(
            f"Retryable HTTP {resp.status_code} for {resp.request.url}",
            request=resp.request,
            response=resp,
        )


def validate_url(url: str) -> str:
    """Check that ``url`` is an absolute http(s) URL with a host.

    Raises:
        ValueError: If the URL cannot be parsed or is not http(s).
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ValueError(f"Invalid URL: {url!r}") from exc
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"URL must use http or https, got {url!r}")
    if not parsed.host:
        raise ValueError(f"URL has no host: {url!r}")
    return url


def _client(
    settings: Settings,
    options: LoaderOptions,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    headers = {
        "user-agent": settings.user_agent,
        "accept": ACCEPT_HTML,
        "accept-language": settings.accept_language,
    }
    headers.update({k.lower(): v for k, v in options.headers.items()})
    return httpx.Client(
        timeout=options.timeout or settings.timeout_total,
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _retry_decorator(settings: Settings, max_attempts: int):
    return retry(
        retry=retry_if_exception_type((httpx.TransportError, httpx.HTTPStatusError)),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=settings.backoff_multiplier,
            min=settings.backoff_min,
            max=settings.backoff_max,
        ),
        reraise=True,
    )


def _decode_body(resp: httpx.Response, encoding: Optional[str]) -> str:
    if encoding:
        return resp.content.decode(encoding, errors="replace")
    return resp.text


def fetch_page(
    url: str,
    *,
    settings: Optional[Settings] = None,
    options: Optional[LoaderOptions] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> FetchedPage:
    """Fetch a URL with retry on transient failures.

    Args:
        url: The http(s) URL to fetch.
        settings: Loader settings. Uses defaults from the environment if not provided.
        options: Per-call overrides (timeout, attempts, encoding, headers).
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.

    Returns:
        FetchedPage with the decoded body and fetch metadata.

    Raises:
        ValueError: If ``url`` is not a valid http(s) URL.
        httpx.HTTPStatusError: On a non-success status, after retries for
            retryable ones.
        httpx.TransportError: When the host is unreachable or the request
            times out on every attempt.
    """
    s = settings or get_settings()
    opts = options or LoaderOptions()
    validate_url(url)

    if s.min_delay_seconds > 0:
        time.sleep(s.min_delay_seconds)

    max_attempts = opts.max_attempts or s.max_attempts
    logger.info("Fetching: %s (max_attempts=%d)", url, max_attempts)

    @_retry_decorator(s, max_attempts)
    def _do_request() -> httpx.Response:
        with _client(s, opts, transport) as client:
            resp = client.get(url)
            _raise_for_retryable_status(resp)
            return resp

    fetched_at = _utc_now()
    resp = _do_request()

    if resp.status_code >= 400:
        logger.error("HTTP %d for %s", resp.status_code, url)
        raise httpx.HTTPStatusError(
            f"HTTP {resp.status_code} for {url}",
            request=resp.request,
            response=resp,
        )

    body = resp.content
    content_hash = _sha256_bytes(body)
    logger.info("Fetched OK: %s (%d bytes, hash=%s)", url, len(body), content_hash[:12])

    return FetchedPage(
        source_url=url,
        final_url=str(resp.url),
        fetched_at=fetched_at,
        status=resp.status_code,
        headers=_normalize_headers(resp.headers),
        content_hash=content_hash,
        text=_decode_body(resp, opts.encoding),
    )
