from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_GLOBAL_CSV = PACKAGE_ROOT / "registry" / "data" / "global_500.csv"
DEFAULT_DOMESTIC_CSV = PACKAGE_ROOT / "registry" / "data" / "domestic_500.csv"
DEFAULT_ALIAS_TABLE = PACKAGE_ROOT / "resolver" / "aliases.json"


@dataclass(frozen=True)
class StoreConfig:
    data_root: Path


def get_store_config() -> StoreConfig:
    root = os.getenv("DATA_ROOT", "./data_store")
    return StoreConfig(data_root=Path(root).resolve())


@dataclass(frozen=True)
class RegistryConfig:
    global_path: Path
    domestic_path: Path


def get_registry_config() -> RegistryConfig:
    return RegistryConfig(
        global_path=Path(os.getenv("GLOBAL_REGISTRY_CSV") or DEFAULT_GLOBAL_CSV),
        domestic_path=Path(os.getenv("DOMESTIC_REGISTRY_CSV") or DEFAULT_DOMESTIC_CSV),
    )


@dataclass(frozen=True)
class AliasConfig:
    path: Path


def get_alias_config() -> AliasConfig:
    return AliasConfig(path=Path(os.getenv("ALIAS_TABLE_PATH") or DEFAULT_ALIAS_TABLE))


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"


def get_log_config() -> LogConfig:
    return LogConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
