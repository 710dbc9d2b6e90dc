"""
profiles.py – Atmosphere profiles along an altitude sweep.

Samples a tabulated atmosphere at a list of altitudes (longitude, latitude
and time held fixed) and returns plain arrays, ready for export or
plotting.
"""

from __future__ import annotations
from typing import Sequence

import numpy as np

from tabatmo.atmosphere import TabulatedAtmosphere
from tabatmo.variables import DependentVariable


def altitude_grid(h_min: float = 0.0, h_max: float = 100_000.0,
                  n_points: int = 201) -> np.ndarray:
    """Evenly spaced altitudes [m]."""
    if n_points < 2:
        raise ValueError("n_points must be >= 2")
    if h_max <= h_min:
        raise ValueError("h_max must be greater than h_min")
    return np.linspace(h_min, h_max, n_points)


def sample_profile(
    atmosphere: TabulatedAtmosphere,
    altitudes: np.ndarray | Sequence[float],
    variables: Sequence | None = None,
    longitude: float = 0.0,
    latitude: float = 0.0,
    time: float = 0.0,
    speed_of_sound: bool = False,
) -> dict[str, np.ndarray]:
    """
    Evaluate an atmosphere along an altitude sweep.

    Parameters
    ----------
    atmosphere     : model to sample
    altitudes      : altitudes [m]
    variables      : dependent variables to sample (default: all tabulated)
    longitude, latitude, time : fixed coordinates for the sweep
    speed_of_sound : also add a 'speed_of_sound' column

    Returns
    -------
    dict with arrays:
        'altitude'          : altitudes [m]
        '<variable name>'   : one array per sampled variable
        'speed_of_sound'    : only if requested [m/s]
    """
    h = np.asarray(altitudes, dtype=float).reshape(-1)
    if variables is None:
        variables = atmosphere.dependent_variables
    variables = [DependentVariable.parse(v) for v in variables]

    out = {'altitude': h}
    for variable in variables:
        col = np.zeros(h.size)
        for i, alt in enumerate(h):
            col[i] = atmosphere.get(variable, alt, longitude, latitude, time)
        out[variable.value] = col

    if speed_of_sound:
        a = np.zeros(h.size)
        for i, alt in enumerate(h):
            a[i] = atmosphere.get_speed_of_sound(alt, longitude, latitude, time)
        out['speed_of_sound'] = a
    return out
