# === FILE: lesson_scout/config.py ===
"""
Loading and validation of the LessonScout configuration.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    ValidationError,
    field_validator,
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/95.0.4638.69 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "he-IL,he;q=0.9,en-US;q=0.8,en;q=0.7"


class SiteSelectors(BaseModel):
    """CSS selectors of the crawled site. Defaults follow the live markup."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    last_page: str = "a.facetwp-page.last"
    listing_grid: str = ".jet-listing-grid__items[data-nav]"
    listing_item: str = "div[data-post-id]"
    listing_anchor: str = "a[href]"
    item_ready: str = ".jet-listing-grid__items[data-nav]"
    media_anchor: str = 'a[href$="mp3"]'
    title: str = "h1.elementor-heading-title.elementor-size-default"
    keyword_tags: str = 'a[href*="shiurim-tags"]'
    series_tags: str = 'a[href*="shiurim-series"]'
    publish_date: str = "span.elementor-icon-list-text.elementor-post-info__item"
    canonical_link: str = 'link[rel=canonical][href*="meirtv"]'


class TelegramConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    token: SecretStr
    chat_id: str = Field(..., min_length=1)
    api_base: HttpUrl = Field("https://api.telegram.org", validate_default=True, description="Bot API root.")
    timeout: float = Field(10.0, gt=0)

    @field_validator("chat_id", mode="before")
    def _chat_id_to_str(cls, v: Any) -> Any:
        # numeric ids are common in YAML
        return str(v) if isinstance(v, int) else v


class ScraperConfig(BaseModel):
    """Configuration of one crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    rabbi_url: HttpUrl = Field(..., alias="rabbiUrl", description="Listing root URL of the crawl subject.")
    retries: int = Field(3, ge=1, description="Attempts per fetched URL.")
    subject_key: str = Field("rabbi_fireman", min_length=1, description="Snapshot subject key.")
    headless: bool = Field(True, description="Run Chromium without a window.")
    navigation_timeout: float = Field(30.0, gt=0, description="page.goto timeout (seconds).")
    selector_timeout: float = Field(10.0, gt=0, description="wait_for_selector timeout (seconds).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1)
    accept_language: str = Field(DEFAULT_ACCEPT_LANGUAGE, min_length=1)
    storage_dir: Path = Field(Path("snapshots"), description="Root directory of stored snapshots.")
    publish_date_fallback: Literal["none", "now"] = Field(
        "none", description="What to store when the publish date cannot be parsed."
    )
    selectors: SiteSelectors = Field(default_factory=SiteSelectors)
    telegram: Optional[TelegramConfig] = None

    @field_validator("subject_key")
    def _subject_key_is_path_safe(cls, v: str) -> str:
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("subject_key must not contain path separators")
        return v

    @property
    def root_url(self) -> str:
        return str(self.rabbi_url)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScraperConfig:
    """
    Read YAML or JSON and return a validated ScraperConfig.
    Raises FileNotFoundError when the file is missing.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ScraperConfig(**data)


__all__ = [
    "ScraperConfig",
    "SiteSelectors",
    "TelegramConfig",
    "ValidationError",
    "load_config",
]
