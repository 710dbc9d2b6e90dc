"""
config.py – JSON configuration for building tabulated atmospheres.

Example
-------
    {
      "table": {
        "files": {"0": "density.dat", "1": "pressure.dat", "2": "temperature.dat"},
        "dependent_variables": ["density", "pressure", "temperature"],
        "independent_variables": ["longitude", "latitude", "altitude"],
        "comment": "#"
      },
      "constants": {"gas_constant": 287.0, "specific_heat_ratio": 1.4},
      "logging": {"level": "INFO", "file": null}
    }

Relative table paths are resolved against the config file's directory.
Without a ``files`` entry the bundled USSA1976 table is used.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from tabatmo.atmosphere import GAMMA_AIR, R_AIR, TabulatedAtmosphere
from tabatmo.table_loader import DEFAULT_COMMENT
from tabatmo.tables import ussa1976_table_path


@dataclass(slots=True)
class TableConfig:
    files: dict[int, str] = field(default_factory=dict)
    dependent_variables: list[str] | None = None
    independent_variables: list[str] | None = None
    comment: str = DEFAULT_COMMENT

    def __post_init__(self):
        try:
            self.files = {int(k): str(v) for k, v in self.files.items()}
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Table file keys must be integers: {exc}") from exc

    def resolved_files(self) -> dict[int, Path]:
        if not self.files:
            return {0: ussa1976_table_path()}
        return {k: Path(v).expanduser() for k, v in self.files.items()}


@dataclass(slots=True)
class ConstantsConfig:
    gas_constant: float = R_AIR
    specific_heat_ratio: float = GAMMA_AIR


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    file: str | None = None


@dataclass(slots=True)
class AtmosphereConfig:
    table: TableConfig = field(default_factory=TableConfig)
    constants: ConstantsConfig = field(default_factory=ConstantsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AtmosphereConfig":
        try:
            return cls(
                table=TableConfig(**data.get("table", {})),
                constants=ConstantsConfig(**data.get("constants", {})),
                logging=LoggingConfig(**data.get("logging", {})),
            )
        except TypeError as exc:
            # unknown keys or a section that is not an object
            raise ValueError(f"Invalid config: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: str | Path | None) -> AtmosphereConfig:
    if path is None:
        return AtmosphereConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() != ".json":
        raise ValueError("Only JSON config files are supported")

    with config_path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")

    cfg = AtmosphereConfig.from_dict(raw)
    base = config_path.parent
    cfg.table.files = {
        k: str(v if Path(v).expanduser().is_absolute() else base / v)
        for k, v in cfg.table.files.items()
    }
    return cfg


def build_atmosphere(config: AtmosphereConfig) -> TabulatedAtmosphere:
    """Build the model described by a configuration."""
    return TabulatedAtmosphere.from_files(
        config.table.resolved_files(),
        dependent_variables=config.table.dependent_variables,
        independent_variables=config.table.independent_variables,
        comment=config.table.comment,
        gas_constant=config.constants.gas_constant,
        specific_heat_ratio=config.constants.specific_heat_ratio,
    )
