from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from street_collection_cal.config.schema import TownConfig, validate_config


@dataclass(frozen=True)
class TownFiles:
    """A validated town config plus the street table it points at."""

    config: TownConfig
    town_dir: Path
    street_schedule_path: Path


def _read_town_yaml(path: Path) -> TownConfig:
    if not path.is_file():
        raise FileNotFoundError(f"Town config not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Town config must be a mapping: {path}")
    return validate_config(data)


def resolve_config_path(town_id: str | None = None, config_path: str | None = None) -> Path:
    """``TOWN_CONFIG_PATH`` wins; otherwise ``towns/<TOWN_ID>/town.yaml`` under the cwd."""
    if config_path:
        return Path(config_path).expanduser().resolve()
    if town_id:
        return (Path.cwd() / "towns" / town_id / "town.yaml").resolve()
    raise ValueError("Either TOWN_ID or TOWN_CONFIG_PATH must be provided")


def street_schedule_path(config: TownConfig, town_dir: Path) -> Path:
    override = os.getenv("STREET_SCHEDULE_PATH")
    if override:
        return Path(override).expanduser().resolve()
    return (town_dir / config.street_schedule_csv).resolve()


def load_town(config_path: Path) -> TownFiles:
    config_path = config_path.expanduser().resolve()
    config = _read_town_yaml(config_path)
    town_dir = config_path.parent
    csv_path = street_schedule_path(config, town_dir)
    if not csv_path.is_file():
        raise FileNotFoundError(f"Street schedule missing for {config.town_id}: {csv_path}")
    return TownFiles(config=config, town_dir=town_dir, street_schedule_path=csv_path)


def load_town_from_env() -> TownFiles:
    path = resolve_config_path(
        town_id=os.getenv("TOWN_ID"), config_path=os.getenv("TOWN_CONFIG_PATH")
    )
    return load_town(path)
