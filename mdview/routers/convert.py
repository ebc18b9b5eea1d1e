import logging

from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from mdview.models.convert_request import ConvertRequest, ConvertResponse
from mdview.services.assembler import render_markdown

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Convert"])


@router.post(
    "/convert",
    response_model=ConvertResponse,
    summary="Convert an HTML document to Markdown",
    description=(
        "Runs the same cleaning, metadata extraction and conversion as "
        "`GET /markdown` on HTML supplied in the request body. Nothing is "
        "fetched or cached."
    ),
)
@limiter.limit("30/minute")
async def convert(request: Request, body: ConvertRequest) -> ConvertResponse:
    overrides = {
        "include_frontmatter": body.include_frontmatter,
        "debug_enabled": body.debug,
    }
    if body.clean_selectors is not None:
        overrides["clean_selectors"] = tuple(body.clean_selectors)
    config = request.app.state.config.model_copy(update=overrides)
    logger.info("Convert request received", extra={"html_size": len(body.html)})
    return ConvertResponse(markdown=render_markdown(body.html, config))
