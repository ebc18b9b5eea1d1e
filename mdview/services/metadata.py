"""Single-pass extraction of <head> metadata and JSON-LD blocks."""

import json
import logging
from typing import Dict, List, Tuple

from bs4 import BeautifulSoup, Tag

from mdview.models.metadata import ExtractedMetadata

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
JSON_LD_TYPE = "application/ld+json"

_TWITTER_FIELDS = {"card", "title", "description", "image", "creator", "site"}
_OG_FIELDS = {"title", "description", "type", "url", "image", "site_name", "locale"}
_ARTICLE_FIELDS = {"author", "published_time", "modified_time", "section"}

# Every element type the extractor cares about; collected in one traversal
_INTERESTING_TAGS = ["html", "title", "link", "meta", "script"]


def _apply_name_meta(fields: Dict, name: str, content: str) -> None:
    name = name.lower()
    if name == "description":
        fields["description"] = content
    elif name == "keywords":
        fields["keywords"] = [k.strip() for k in content.split(",") if k.strip()]
    elif name == "author":
        fields["author"] = content
    elif name == "robots":
        robots = content.lower()
        fields["robots_index"] = "noindex" not in robots
        fields["robots_follow"] = "nofollow" not in robots
    elif name.startswith("twitter:"):
        field = name[len("twitter:"):]
        if field in _TWITTER_FIELDS:
            fields[f"twitter_{field}"] = content


def _apply_property_meta(fields: Dict, prop: str, content: str) -> None:
    if prop.startswith("og:"):
        field = prop[len("og:"):]
        if field in _OG_FIELDS:
            fields[f"og_{field}"] = content
    elif prop.startswith("article:"):
        field = prop[len("article:"):]
        if field == "tag":
            fields.setdefault("article_tag", []).append(content)
        elif field in _ARTICLE_FIELDS:
            fields[f"article_{field}"] = content


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _parse_json_ld(text: str) -> str | None:
    """Return *text* re-serialised with 2-space indentation, or None if it is not JSON."""
    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        logger.debug("Skipping malformed JSON-LD block: %s", exc)
        return None
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def extract_metadata(html: str) -> Tuple[ExtractedMetadata, List[str]]:
    """Extract page metadata and JSON-LD structured data from *html*.

    Runs on the original document (before any cleaning) so that <head>
    content is always available.

    Returns:
        (metadata, structured_data) where *structured_data* holds one
        pretty-printed JSON document per valid ``application/ld+json`` script.
    """
    soup = BeautifulSoup(html, "lxml")
    fields: Dict = {}
    structured_data: List[str] = []
    language = None
    seen_title = False

    for tag in soup.find_all(_INTERESTING_TAGS):
        if not isinstance(tag, Tag):
            continue

        if tag.name == "html":
            if language is None and tag.get("lang"):
                language = str(tag["lang"])

        elif tag.name == "title":
            if not seen_title:
                seen_title = True
                title = tag.get_text().strip()
                if title:
                    fields["title"] = title

        elif tag.name == "link":
            rel = [str(r).lower() for r in tag.get("rel") or []]
            if "canonical" in rel and "canonical" not in fields and tag.get("href"):
                fields["canonical"] = str(tag["href"])

        elif tag.name == "meta":
            content = tag.get("content")
            if not content:
                continue
            content = str(content)
            name = tag.get("name")
            prop = tag.get("property")
            if name:
                _apply_name_meta(fields, str(name), content)
            if prop:
                _apply_property_meta(fields, str(prop), content)

        elif tag.name == "script":
            if str(tag.get("type", "")).strip().lower() != JSON_LD_TYPE:
                continue
            text = tag.get_text().strip()
            if not text:
                continue
            pretty = _parse_json_ld(text)
            if pretty is not None:
                structured_data.append(pretty)

    fields["language"] = language or DEFAULT_LANGUAGE
    return ExtractedMetadata(**fields), structured_data
