"""
interpolation.py – N-dimensional multilinear interpolation on a flat grid.

For a D-axis grid (1 ≤ D ≤ 4) the value at a point is

    Σ_corners  v(corner) · Π_k  w_k(corner)

over the 2^D corners of the bracketing hyper-cube, with the per-axis high
weight  w = (x − x_lo) / (x_hi − x_lo)  and the low weight  1 − w.
D = 1, 2, 3 reduce to linear, bilinear and trilinear interpolation.
"""

from __future__ import annotations
from itertools import product
from typing import Sequence

import numpy as np

from tabatmo.grid import Axis


def interpolate(
    axes: Sequence[Axis],
    axis_strides: Sequence[int],
    values: np.ndarray,
    point: Sequence[float],
) -> float:
    """
    Multilinear interpolation of one flat value grid.

    Parameters
    ----------
    axes         : grid axes, in storage order
    axis_strides : row-major strides matching ``axes``
    values       : flat value grid
    point        : one coordinate per axis

    Returns
    -------
    Interpolated value (float).  Coordinates outside an axis are clamped
    to its edge.
    """
    n_dim = len(axes)
    if len(point) != n_dim:
        raise ValueError(f"Expected {n_dim} coordinate(s), got {len(point)}")

    base = 0
    weights = []
    for axis, stride, x in zip(axes, axis_strides, point):
        i, w_hi = axis.bracket(x)
        base += i * stride
        weights.append((1.0 - w_hi, w_hi))

    total = 0.0
    for corner in product((0, 1), repeat=n_dim):
        w = 1.0
        offset = base
        for k, side in enumerate(corner):
            w *= weights[k][side]
            offset += side * axis_strides[k]
        # zero-weight corners are skipped so grid points come back bit-exact
        if w != 0.0:
            total += w * float(values[offset])
    return total
