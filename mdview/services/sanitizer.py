import logging
from typing import Iterable

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

logger = logging.getLogger(__name__)

# Tags dropped before conversion no matter which selectors are configured
ALWAYS_REMOVED_TAGS = ("script", "style", "noscript")


def remove_selectors(soup: BeautifulSoup, selectors: Iterable[str]) -> BeautifulSoup:
    """Decompose every element matching each selector in *selectors*, in place.

    A selector that soupsieve cannot parse or does not support is skipped on
    its own; the remaining selectors are still applied.
    """
    for selector in selectors:
        try:
            matches = soup.select(selector)
        except (SelectorSyntaxError, NotImplementedError, ValueError) as exc:
            logger.debug("Skipping invalid clean selector %r: %s", selector, exc)
            continue
        for tag in matches:
            # nested matches are already gone with their ancestor
            if not tag.decomposed:
                tag.decompose()
    return soup


def clean(html: str, selectors: Iterable[str]) -> str:
    """Remove every subtree matched by *selectors* from *html* and return the cleaned document."""
    soup = BeautifulSoup(html, "lxml")
    remove_selectors(soup, selectors)
    return str(soup)
