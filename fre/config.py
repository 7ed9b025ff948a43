"""Config loading from ~/.fre/config.json with env var overrides."""

from __future__ import annotations

import json
from pathlib import Path
from typing import ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fre.models import SortMethod
from fre.store import DEFAULT_HALF_LIFE, DEFAULT_REBASE_HALF_LIVES

CONFIG_DIR = Path.home() / ".fre"
CONFIG_PATH = CONFIG_DIR / "config.json"


class FreConfig(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="FRE_",
        extra="ignore",
    )
    store_dir: str = Field(default_factory=lambda: str(CONFIG_DIR))
    store_name: str = "fre.json"
    # Only seeds a brand-new store; an existing store keeps its own.
    half_life: float = Field(default=DEFAULT_HALF_LIFE, gt=0)
    rebase_half_lives: float = Field(default=DEFAULT_REBASE_HALF_LIVES, gt=0)
    sort_method: SortMethod = SortMethod.FRECENT
    stat_digits: int | None = Field(default=None, ge=0)


def loadConfig() -> FreConfig:
    """Load config from ~/.fre/config.json with env var overrides."""
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        if not isinstance(raw, dict):
            raise ValueError(f"{CONFIG_PATH} must hold a JSON object")
        return FreConfig(**raw)
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    config = FreConfig()
    CONFIG_PATH.write_text(config.model_dump_json(indent=2))
    return config


def storePath(
    config: FreConfig, store: Path | None = None, store_name: str | None = None
) -> Path:
    """Explicit ``store`` wins; otherwise ``store_name`` (or the default) in store_dir."""
    if store is not None:
        return store
    return Path(config.store_dir).expanduser() / (store_name or config.store_name)
