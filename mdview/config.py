"""Runtime settings and config-file loading."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from mdview.models.config import DEFAULT_CONFIG, MarkdownConfig, MarkdownConfigInput, merge_config

logger = logging.getLogger(__name__)

CONFIG_NAMES = ("mdview.config.yaml", "mdview.config.yml", "mdview.config.json")


class Settings(BaseSettings):
    """Process environment consumed by the service."""

    model_config = SettingsConfigDict(env_prefix="MDVIEW_")

    base_url: str = "http://localhost:3000"
    build_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("BUILD_ID", "MDVIEW_BUILD_ID"))
    alternate_host: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("VERCEL_URL", "MDVIEW_ALTERNATE_HOST")
    )
    config_dir: Path = Path(".")
    fetch_timeout: float = 10.0
    rate_limit: str = "60/minute"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_config(project_root: Path | str = ".") -> MarkdownConfig:
    """Return the first valid config file in *project_root* merged over the defaults."""
    root = Path(project_root)
    for name in CONFIG_NAMES:
        path = root / name
        if not path.exists():
            continue
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("top-level value must be a mapping")
            user = MarkdownConfigInput(**data)
        except (OSError, yaml.YAMLError, ValueError, ValidationError) as exc:
            logger.warning("Ignoring config file %s: %s", path, exc)
            continue
        logger.info("Loaded config from %s", path)
        return merge_config(user)
    return DEFAULT_CONFIG
