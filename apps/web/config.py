"""Configuration helpers for the console web app."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from services.ledger import DEFAULT_LOW_STOCK

DEFAULT_CONFIG_PATH = Path(__file__).with_name("config.yaml")


@dataclass
class PaginationConfig:
    """List paging settings shared by every screen."""

    page_size: int = 10
    max_page_size: int = 100

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, object]]) -> "PaginationConfig":
        if not data:
            return cls()
        page_size = _positive_int(data.get("page_size"), cls.page_size)
        max_page_size = max(page_size, _positive_int(data.get("max_page_size"), cls.max_page_size))
        return cls(page_size=page_size, max_page_size=max_page_size)


@dataclass
class ConsoleConfig:
    """Top-level configuration for the console web app."""

    log_level: str = "INFO"
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    low_stock: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_LOW_STOCK))
    api_key: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "ConsoleConfig":
        log_level_value = data.get("log_level", cls.log_level)
        log_level = str(log_level_value).strip() or cls.log_level
        pagination = PaginationConfig.from_mapping(_get_mapping(data, "pagination"))
        low_stock = dict(DEFAULT_LOW_STOCK)
        for domain, raw in _get_mapping(data, "low_stock").items():
            if domain in low_stock:
                low_stock[domain] = _positive_int(raw, low_stock[domain])
        raw_key = data.get("api_key")
        api_key = str(raw_key).strip() if raw_key not in (None, "") else None
        return cls(log_level=log_level.upper(), pagination=pagination, low_stock=low_stock, api_key=api_key)


def load_config(path: Path | None = None) -> ConsoleConfig:
    """Load console configuration from YAML, then apply environment overrides."""

    config_path = path or Path(os.getenv("CARESTORE_CONFIG_PATH") or DEFAULT_CONFIG_PATH)
    if config_path.exists():
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, Mapping):
            raise ValueError("Console configuration must be a mapping")
        config = ConsoleConfig.from_mapping(data)
    else:
        config = ConsoleConfig()
    env_key = os.getenv("CARESTORE_API_KEY")
    if env_key:
        config.api_key = env_key
    env_level = os.getenv("CARESTORE_LOG_LEVEL")
    if env_level:
        config.log_level = env_level.strip().upper()
    return config


def _get_mapping(data: Mapping[str, object], key: str) -> Dict[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def _positive_int(raw: object, default: int) -> int:
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


__all__ = ["ConsoleConfig", "DEFAULT_CONFIG_PATH", "PaginationConfig", "load_config"]
