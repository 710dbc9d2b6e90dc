"""
export.py – CSV export for sampled atmosphere profiles.
"""

from __future__ import annotations
import numpy as np
from pathlib import Path


def export_profile_csv(profile: dict, path: str | Path,
                       n_points: int | None = None) -> Path:
    """
    Write a profile (as returned by ``sample_profile``) to CSV.

    Parameters
    ----------
    profile  : dict of equal-length arrays; 'altitude' is written first
    path     : output file path
    n_points : if given, subsample to this many equally-spaced rows

    Returns
    -------
    Resolved Path of the written file.
    """
    path = Path(path).expanduser().resolve()

    columns = ['altitude'] + [k for k in profile if k != 'altitude']
    data = [np.asarray(profile[k], dtype=float) for k in columns]
    n_rows = len(data[0])
    if any(len(col) != n_rows for col in data):
        raise ValueError("All profile columns must have the same length")

    idx = np.arange(n_rows)
    if n_points is not None and n_points < n_rows:
        idx = np.linspace(0, n_rows - 1, n_points).astype(int)

    with open(path, "w") as f:
        f.write(",".join(columns) + "\n")
        for i in idx:
            f.write(",".join(f"{col[i]:.8e}" for col in data) + "\n")

    return path
