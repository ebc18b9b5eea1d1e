from typing import Optional

from pydantic import BaseModel, ConfigDict


class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    markdown: str
    expires_at: Optional[float] = None  # epoch milliseconds
    build_id: Optional[str] = None

    def is_valid(self, build_id: Optional[str], now_ms: float) -> bool:
        """An entry is reusable only for the build that wrote it and before it expires."""
        if self.build_id is not None and self.build_id != build_id:
            return False
        if self.expires_at is not None and now_ms > self.expires_at:
            return False
        return True
