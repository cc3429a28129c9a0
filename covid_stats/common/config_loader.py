"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from covid_stats.common.constants import GRANULARITIES
from covid_stats.common.errors import ConfigError
from covid_stats.common.fs import read_yaml
from covid_stats.common.schema import validate_aggregate_config

CONFIG_FILENAME = "aggregate.yml"


@dataclass(frozen=True)
class AggregateConfig:
    raw: dict

    @property
    def daily_reports_dir(self) -> Path:
        return Path(self.raw["input"]["daily_reports_dir"])

    @property
    def filename_glob(self) -> str:
        return self.raw["input"]["filename_glob"]

    @property
    def api_dir(self) -> Path:
        return Path(self.raw["output"]["api_dir"])

    @property
    def normalized_country_names(self) -> dict[str, str]:
        return dict(self.raw["countries"]["normalized_names"])

    @property
    def field_aliases(self) -> dict[str, list[str]]:
        return {name: list(aliases) for name, aliases in self.raw["fields"].items()}

    @property
    def fetch(self) -> dict:
        return self.raw.get("fetch") or {"enabled": False}

    def plural_name(self, granularity: str) -> str:
        return self.raw["granularities"][granularity]["plural_name"]

    def plural_names(self) -> dict[str, str]:
        return {granularity: self.plural_name(granularity) for granularity in GRANULARITIES}


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if not isinstance(base, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must contain a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> AggregateConfig:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    return AggregateConfig(raw=validate_aggregate_config(cfg, allow_unknown=allow_unknown))
