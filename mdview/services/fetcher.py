import asyncio
import logging
from typing import Mapping, NamedTuple, Optional

import httpx

from mdview.exceptions import OriginHttpError, OriginUnreachable
from mdview.services.path_filter import normalize_path

logger = logging.getLogger(__name__)

TIMEOUT = 10  # seconds, per attempt
HTML_ACCEPT = "text/html"

# Never forwarded: Accept is overridden, the others describe the inbound request
_DROPPED_HEADERS = {"accept", "host", "content-length"}


class FetchResult(NamedTuple):
    html: str
    headers: httpx.Headers
    origin: str
    status_code: int


def _strip_origin(origin: str) -> str:
    return origin[:-1] if origin.endswith("/") else origin


def resolve_fallback_origin(primary_origin: str, alternate_host: Optional[str]) -> Optional[str]:
    """Return the fallback origin derived from a platform-provided host, if usable.

    The alternate host only applies when the primary origin is an http(s)
    URL; a bare hostname gets ``https://``. Returns None when nothing is
    configured or the result is the primary origin itself.
    """
    if not alternate_host or not alternate_host.strip():
        return None
    if not primary_origin.startswith("http"):
        return None
    host = alternate_host.strip()
    fallback = _strip_origin(host if host.startswith("http") else f"https://{host}")
    if fallback == _strip_origin(primary_origin):
        return None
    return fallback


def build_request_headers(headers: Optional[Mapping[str, str]]) -> httpx.Headers:
    """Copy caller headers, replacing any Accept header with an HTML one."""
    request_headers = httpx.Headers()
    for key, value in (headers or {}).items():
        if key.lower() in _DROPPED_HEADERS:
            continue
        request_headers[key] = value
    request_headers["Accept"] = HTML_ACCEPT
    return request_headers


async def _fetch_once(
    client: httpx.AsyncClient, url: str, headers: httpx.Headers, timeout: float
) -> httpx.Response:
    logger.info("Fetching origin HTML", extra={"url": url})
    # httpx timeouts are per phase; the attempt as a whole gets the same bound
    try:
        return await asyncio.wait_for(client.get(url, headers=headers), timeout)
    except asyncio.TimeoutError:
        raise httpx.ReadTimeout(f"Request to {url} exceeded {timeout}s") from None


async def fetch_html(
    path: str,
    primary_origin: str,
    fallback_origin: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FetchResult:
    """Fetch the rendered HTML for *path*, trying *fallback_origin* if the primary fails.

    A transport error (including a timeout) or a non-2xx status counts as a
    failure. The fallback is only tried when it differs from the primary.

    Raises:
        OriginHttpError: every attempt returned an error status; carries the
            last status seen.
        OriginUnreachable: no attempt produced a response; carries the last
            transport error.
    """
    path = normalize_path(path)
    primary = _strip_origin(primary_origin)
    origins = [primary]
    if fallback_origin and _strip_origin(fallback_origin) != primary:
        origins.append(_strip_origin(fallback_origin))

    request_headers = build_request_headers(headers)
    last_error: Optional[httpx.RequestError] = None
    last_status: Optional[int] = None
    last_url = None

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport) as client:
        for origin in origins:
            last_url = f"{origin}{path}"
            try:
                response = await _fetch_once(client, last_url, request_headers, timeout)
            except httpx.RequestError as exc:
                logger.warning("Origin request failed for %s: %r", last_url, exc)
                last_error = exc
                continue

            if response.is_success:
                return FetchResult(
                    html=response.text,
                    headers=response.headers,
                    origin=origin,
                    status_code=response.status_code,
                )

            logger.warning("Origin returned HTTP %d for %s", response.status_code, last_url)
            last_status = response.status_code

    if last_status is not None:
        raise OriginHttpError(last_status, last_url)
    raise OriginUnreachable(last_error, last_url)
