from typing import List, Optional

from pydantic import BaseModel


class ExtractedMetadata(BaseModel):
    """Page metadata read from <head>. Field order is the frontmatter order."""

    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[List[str]] = None
    author: Optional[str] = None
    canonical: Optional[str] = None
    language: Optional[str] = None

    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_type: Optional[str] = None
    og_url: Optional[str] = None
    og_image: Optional[str] = None
    og_site_name: Optional[str] = None
    og_locale: Optional[str] = None

    article_author: Optional[str] = None
    article_published_time: Optional[str] = None
    article_modified_time: Optional[str] = None
    article_section: Optional[str] = None
    article_tag: Optional[List[str]] = None

    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    twitter_creator: Optional[str] = None
    twitter_site: Optional[str] = None

    robots_index: Optional[bool] = None
    robots_follow: Optional[bool] = None

    def has_content(self) -> bool:
        """Return True when at least one field carries a non-empty value."""
        return any(value not in (None, "") for value in self.model_dump().values())
