from typing import Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

Transformer = Callable[[str], str]

DEFAULT_INCLUDE = ("/**",)
DEFAULT_EXCLUDE = ("/api/**", "/_next/**", "/__markdown/**")
DEFAULT_CLEAN_SELECTORS = (
    "nav",
    "footer",
    ".no-markdown",
    "[data-no-markdown]",
    "script",
    "style",
)


class MarkdownConfig(BaseModel):
    """Fully populated configuration used inside the pipeline."""

    model_config = ConfigDict(frozen=True)

    include: Tuple[str, ...] = DEFAULT_INCLUDE
    exclude: Tuple[str, ...] = DEFAULT_EXCLUDE
    clean_selectors: Tuple[str, ...] = DEFAULT_CLEAN_SELECTORS
    cache_enabled: bool = True
    transformers: Tuple[Transformer, ...] = ()
    include_frontmatter: bool = True
    debug_enabled: bool = False
    base_url: Optional[str] = None


class MarkdownConfigInput(BaseModel):
    """User-supplied configuration; every field may be left out."""

    model_config = ConfigDict(extra="forbid")

    include: Optional[Tuple[str, ...]] = None
    exclude: Optional[Tuple[str, ...]] = None
    clean_selectors: Optional[Tuple[str, ...]] = None
    cache_enabled: Optional[bool] = None
    transformers: Optional[Tuple[Transformer, ...]] = None
    include_frontmatter: Optional[bool] = None
    debug_enabled: Optional[bool] = None
    base_url: Optional[str] = None


DEFAULT_CONFIG = MarkdownConfig()


def merge_config(user: MarkdownConfigInput, base: MarkdownConfig = DEFAULT_CONFIG) -> MarkdownConfig:
    """Overlay the fields *user* actually set onto *base*."""
    supplied = {key: value for key, value in user.model_dump().items() if value is not None}
    return base.model_copy(update=supplied)
