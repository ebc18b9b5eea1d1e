from typing import Iterable

from bs4 import BeautifulSoup, Tag
from markdownify import MarkdownConverter

from mdview.models.config import Transformer
from mdview.services.cleaner import tidy_markdown
from mdview.services.sanitizer import ALWAYS_REMOVED_TAGS

_LANGUAGE_PREFIXES = ("language-", "lang-")


def _code_language(el: Tag) -> str:
    """Return the fence language declared via a ``language-*`` class on <pre> or its <code>."""
    candidates = [el]
    code = el.find("code")
    if isinstance(code, Tag):
        candidates.append(code)
    for node in candidates:
        for cls in node.get("class") or []:
            for prefix in _LANGUAGE_PREFIXES:
                if cls.startswith(prefix) and len(cls) > len(prefix):
                    return cls[len(prefix):]
    return ""


def _make_converter() -> MarkdownConverter:
    return MarkdownConverter(
        heading_style="ATX",
        bullets="-",
        newline_style="backslash",
        code_language_callback=_code_language,
    )


def convert_html(html: str) -> str:
    """Convert an (already cleaned) HTML document to Markdown.

    Scripts, styles and noscript blocks are always dropped here, whatever the
    configured clean selectors were. Only the <body> is converted.
    """
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(list(ALWAYS_REMOVED_TAGS)):
        if not tag.decomposed:
            tag.decompose()
    root = soup.body or soup
    return tidy_markdown(_make_converter().convert_soup(root))


def apply_transformers(markdown: str, transformers: Iterable[Transformer]) -> str:
    for transform in transformers:
        markdown = transform(markdown)
    return markdown
