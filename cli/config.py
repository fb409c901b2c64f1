"""Configuration loader for the iamx CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.catalog.source import DEFAULT_CACHE_PATH, DEFAULT_CATALOG_URL, DEFAULT_USER_AGENT

DEFAULTS = {
    "catalog_source": DEFAULT_CATALOG_URL,
    "cache_path": str(DEFAULT_CACHE_PATH),
    "use_cache": True,
    "request_timeout": 30.0,
    "user_agent": DEFAULT_USER_AGENT,
    "default_format": "text",
    "strict": False,
}


@dataclass(slots=True)
class Settings:
    catalog_source: str = DEFAULTS["catalog_source"]
    cache_path: str = DEFAULTS["cache_path"]
    use_cache: bool = DEFAULTS["use_cache"]
    request_timeout: float = DEFAULTS["request_timeout"]
    user_agent: str = DEFAULTS["user_agent"]
    default_format: str = DEFAULTS["default_format"]
    strict: bool = DEFAULTS["strict"]

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Settings":
        return cls(
            catalog_source=str(data.get("catalog_source", DEFAULTS["catalog_source"])),
            cache_path=str(data.get("cache_path", DEFAULTS["cache_path"])),
            use_cache=bool(data.get("use_cache", DEFAULTS["use_cache"])),
            request_timeout=float(data.get("request_timeout", DEFAULTS["request_timeout"])),
            user_agent=str(data.get("user_agent", DEFAULTS["user_agent"])),
            default_format=data.get("default_format", DEFAULTS["default_format"]),
            strict=bool(data.get("strict", DEFAULTS["strict"])),
        )

    def merge_cli(
        self,
        format_override: str | None = None,
        catalog_source: str | None = None,
        use_cache: bool | None = None,
        strict: bool | None = None,
    ) -> "Settings":
        return Settings(
            catalog_source=catalog_source or self.catalog_source,
            cache_path=self.cache_path,
            use_cache=self.use_cache if use_cache is None else use_cache,
            request_timeout=self.request_timeout,
            user_agent=self.user_agent,
            default_format=format_override or self.default_format,
            strict=self.strict if strict is None else strict,
        )


def load_settings(path: Path) -> Settings:
    if not path.exists():
        return Settings()

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError("Configuration file must be a mapping of keys to values.")

    return Settings.from_mapping(data)


__all__ = ["Settings", "load_settings"]
