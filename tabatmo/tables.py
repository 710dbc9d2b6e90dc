"""
tables.py – Reference tables shipped with the package.

USSA1976Until86kmPer100mUntil1000km.dat
    US Standard Atmosphere 1976, geometric altitude [m] vs density
    [kg/m³], pressure [Pa] and temperature [K].  100 m spacing from sea
    level to 86 km, published reference points from 90 km to 1000 km.
"""

from __future__ import annotations
from pathlib import Path

from tabatmo.atmosphere import TabulatedAtmosphere
from tabatmo.errors import SourceUnavailableError

DATA_DIR = Path(__file__).with_name("data")

USSA1976_TABLE = "USSA1976Until86kmPer100mUntil1000km.dat"


def table_path(name: str) -> Path:
    """Path of a bundled table.  Raises SourceUnavailableError if missing."""
    path = DATA_DIR / name
    if not path.is_file():
        available = sorted(p.name for p in DATA_DIR.glob("*.dat"))
        raise SourceUnavailableError(
            str(path), f"no bundled table '{name}'.  Available: {available}"
        )
    return path


def ussa1976_table_path() -> Path:
    return table_path(USSA1976_TABLE)


def ussa1976_atmosphere(**kwargs) -> TabulatedAtmosphere:
    """1-D (altitude) model over the bundled USSA1976 table."""
    return TabulatedAtmosphere.from_files({0: ussa1976_table_path()}, **kwargs)
