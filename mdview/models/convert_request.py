from typing import List, Optional

from pydantic import BaseModel, Field


class ConvertRequest(BaseModel):
    html: str = Field(min_length=1, description="Full rendered HTML document.")
    include_frontmatter: bool = True
    debug: bool = False
    clean_selectors: Optional[List[str]] = Field(
        default=None,
        description="CSS selectors removed before conversion. Defaults to the configured set.",
        examples=[["nav", "footer", ".no-markdown"]],
    )


class ConvertResponse(BaseModel):
    markdown: str
