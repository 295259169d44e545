"""Configuration loading helpers for the SKU scraper."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import ScraperConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "config.yaml"
HOME_ENV_VAR = "SKU_SCRAPER_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from the project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV_VAR)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def config_path(self) -> Path:
        for extension in CONFIG_EXTENSIONS:
            candidate = self.data_dir / f"config{extension}"
            if candidate.exists():
                return candidate
        return self.data_dir / CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: ScraperConfig | None = None

    def load(self) -> ScraperConfig:
        if self._cache is not None:
            return self._cache
        path = self.locator.config_path()
        if path.exists():
            config = ScraperConfig.model_validate(_read_file(path))
        else:
            config = ScraperConfig()
            self.save(config)
        self._cache = config
        return config

    def save(self, config: ScraperConfig) -> Path:
        path = self.locator.config_path()
        _write_file(path, config.model_dump(mode="json"))
        self._cache = config
        return path

    def reload(self) -> ScraperConfig:
        self._cache = None
        return self.load()

    def filters_path(self, override: Path | None = None) -> Path:
        config = self.load()
        if override is not None:
            return _resolve_override(override)
        return config.resolved_filters_path(self.locator.project_root)

    def record_path(self, override: Path | None = None) -> Path:
        config = self.load()
        if override is not None:
            return _resolve_override(override)
        return config.resolved_record_path(self.locator.project_root)


def _resolve_override(path: Path) -> Path:
    return path.expanduser().resolve()


__all__ = ["CONFIG_EXTENSIONS", "ConfigLocator", "ConfigRepository", "HOME_ENV_VAR"]
