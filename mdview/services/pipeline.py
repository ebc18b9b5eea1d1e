"""Entry point tying path filtering, caching, fetching and rendering together."""

import logging
from typing import Mapping, Optional

import httpx

from mdview.exceptions import PathExcluded
from mdview.models.config import MarkdownConfig
from mdview.services.assembler import byte_size, render_markdown
from mdview.services.cache import MarkdownCache
from mdview.services.fetcher import TIMEOUT, fetch_html
from mdview.services.path_filter import is_excluded, normalize_path

logger = logging.getLogger(__name__)


async def get_markdown_for_path(
    path: str,
    config: MarkdownConfig,
    cache: Optional[MarkdownCache] = None,
    base_url: Optional[str] = None,
    fallback_origin: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
    build_id: Optional[str] = None,
    timeout: float = TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Return the Markdown view of the page at *path*.

    Served from *cache* when a valid entry exists; otherwise the HTML is
    fetched from *base_url* (or ``config.base_url``), rendered, and stored.

    Raises:
        PathExcluded: *path* is filtered out by the include/exclude globs.
        OriginHttpError, OriginUnreachable: the HTML could not be fetched.
        ValueError: no origin was given.
    """
    path = normalize_path(path)
    if is_excluded(path, config):
        raise PathExcluded(path)

    use_cache = cache is not None and config.cache_enabled
    if use_cache:
        cached = cache.get(path, build_id)
        if cached is not None:
            logger.info("Cache hit", extra={"path": path})
            return cached

    origin = base_url or config.base_url
    if not origin:
        raise ValueError("An origin base URL is required to fetch page HTML.")

    result = await fetch_html(
        path,
        origin,
        fallback_origin=fallback_origin,
        headers=headers,
        timeout=timeout,
        transport=transport,
    )
    markdown = render_markdown(result.html, config, html_size=byte_size(result.html))

    if use_cache:
        cache.put(path, markdown, result.headers, build_id)
    logger.info("Rendered markdown", extra={"path": path, "origin": result.origin})
    return markdown
