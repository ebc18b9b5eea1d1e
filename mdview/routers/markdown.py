import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Header, HTTPException, Query, Request
from fastapi.responses import Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from mdview.config import get_settings
from mdview.exceptions import OriginHttpError, OriginUnreachable, PathExcluded
from mdview.services.fetcher import resolve_fallback_origin
from mdview.services.pipeline import get_markdown_for_path

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Markdown"])

MARKDOWN_MEDIA_TYPE = "text/markdown; charset=utf-8"

# Inbound headers passed on to the origin (session / deployment protection)
FORWARDED_HEADERS = ("cookie", "authorization")


@router.get(
    "/markdown",
    summary="Markdown view of a site page",
    description=(
        "Fetches the rendered HTML of `path` from the configured origin and "
        "returns it as Markdown with YAML frontmatter.\n\n"
        "The path is read from the `x-mdview-path` header first, then from "
        "the `path` query parameter."
    ),
    response_class=Response,
)
@limiter.limit(lambda: get_settings().rate_limit)
async def markdown_for_path(
    request: Request,
    path: Optional[str] = Query(default=None, description="Page path, e.g. /blog/hello."),
    x_mdview_path: Optional[str] = Header(default=None),
) -> Response:
    page_path = x_mdview_path or path
    if not page_path:
        raise HTTPException(status_code=400, detail="A page path is required.")

    settings = request.app.state.settings
    config = request.app.state.config
    base_url = config.base_url or settings.base_url
    forward = {
        name: request.headers[name] for name in FORWARDED_HEADERS if name in request.headers
    }
    logger.info("Markdown request received", extra={"path": page_path})

    try:
        markdown = await get_markdown_for_path(
            page_path,
            config,
            cache=request.app.state.cache,
            base_url=base_url,
            fallback_origin=resolve_fallback_origin(base_url, settings.alternate_host),
            headers=forward,
            build_id=settings.build_id,
            timeout=settings.fetch_timeout,
        )
    except PathExcluded as exc:
        logger.info("Path excluded from markdown: %s", exc.path)
        raise HTTPException(status_code=404, detail=exc.message)
    except OriginHttpError as exc:
        logger.error("Origin error for %s: %s", page_path, exc)
        raise HTTPException(status_code=502, detail=f"Origin returned HTTP {exc.status_code}.")
    except OriginUnreachable as exc:
        logger.error("Origin unreachable for %s: %s", page_path, exc)
        if isinstance(exc.error, httpx.TimeoutException):
            raise HTTPException(status_code=504, detail="The origin timed out.")
        raise HTTPException(status_code=502, detail=exc.message)

    return Response(content=markdown, media_type=MARKDOWN_MEDIA_TYPE)
