"""Assembles frontmatter, converted body and structured data into the final document."""

import math
from typing import List, Optional

from mdview.models.config import DEFAULT_CONFIG, MarkdownConfig
from mdview.services.converter import apply_transformers, convert_html
from mdview.services.frontmatter import make_frontmatter
from mdview.services.metadata import extract_metadata
from mdview.services.sanitizer import clean

STRUCTURED_DATA_HEADING = "## Structured Data (JSON-LD)"


def byte_size(text: str) -> int:
    return len(text.encode("utf-8"))


def size_report(html_bytes: int, markdown: str) -> str:
    """Return the HTML comment describing how much smaller *markdown* is than the source."""
    markdown_bytes = byte_size(markdown)
    reduction = (
        math.floor((html_bytes - markdown_bytes) / html_bytes * 100 + 0.5) if html_bytes > 0 else 0
    )
    return (
        f"<!-- mdview: html_size={html_bytes} bytes, "
        f"markdown_size={markdown_bytes} bytes, reduction={reduction}% -->"
    )


def _structured_data_section(blocks: List[str]) -> str:
    parts = [STRUCTURED_DATA_HEADING]
    parts.extend(f"```json\n{block}\n```" for block in blocks)
    return "\n\n".join(parts)


def render_markdown(
    html: str,
    config: MarkdownConfig = DEFAULT_CONFIG,
    html_size: Optional[int] = None,
) -> str:
    """Convert a full rendered HTML page to a Markdown document.

    Metadata and JSON-LD are read from the original *html*; the body is
    converted after the configured clean selectors have been removed and
    then passed through ``config.transformers`` in order.

    Args:
        html: The page as served by the origin.
        config: Conversion settings.
        html_size: Byte size reported in debug mode; defaults to the UTF-8
            size of *html*.
    """
    metadata, structured_data = extract_metadata(html)

    body = convert_html(clean(html, config.clean_selectors))
    body = apply_transformers(body, config.transformers)

    sections: List[str] = []
    if config.include_frontmatter and metadata.has_content():
        sections.append(make_frontmatter(metadata))
    if body.strip():
        sections.append(body.strip())
    if structured_data:
        sections.append(_structured_data_section(structured_data))
    result = "\n\n".join(sections)

    if config.debug_enabled:
        html_bytes = html_size if html_size is not None else byte_size(html)
        result = f"{size_report(html_bytes, result)}\n\n{result}"

    return result.strip()
