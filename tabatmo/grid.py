"""
grid.py – Grid axes, bracket search and value-grid assembly.

Value grids are stored flat in row-major order: the first configured axis
varies slowest and the last axis fastest, so

    flat = Σ i_k · stride_k,   stride_last = 1,   stride_k = stride_{k+1} · n_{k+1}

Table rows may arrive in any order; each row is scattered to its grid
position and every grid point must appear exactly once.
"""

from __future__ import annotations
import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from tabatmo.errors import InconsistentGridError, MalformedRowError
from tabatmo.variables import IndependentVariable


def read_only_view(arr) -> np.ndarray:
    """Private float copy of ``arr``, handed out only as a read-only view."""
    owner = np.array(arr, dtype=float, copy=True)
    owner.flags.writeable = False
    # a view of a read-only base cannot have its writeable flag turned back on
    return owner.view()


@dataclass(frozen=True, eq=False)
class Axis:
    """Strictly increasing breakpoints of one independent variable."""
    variable: IndependentVariable
    breakpoints: np.ndarray

    _points: tuple = field(init=False, repr=False)

    def __post_init__(self):
        bp = read_only_view(np.asarray(self.breakpoints, dtype=float).reshape(-1))
        if bp.size < 2:
            raise InconsistentGridError(
                f"Axis '{self.variable.value}' needs at least 2 breakpoints, "
                f"got {bp.size}"
            )
        if not np.all(np.isfinite(bp)):
            raise InconsistentGridError(
                f"Axis '{self.variable.value}' has non-finite breakpoints"
            )
        if np.any(np.diff(bp) <= 0.0):
            raise InconsistentGridError(
                f"Axis '{self.variable.value}' breakpoints must be strictly increasing"
            )
        object.__setattr__(self, "breakpoints", bp)
        object.__setattr__(self, "_points", tuple(float(x) for x in bp))

    def __len__(self) -> int:
        return len(self._points)

    @property
    def lower(self) -> float:
        return self._points[0]

    @property
    def upper(self) -> float:
        return self._points[-1]

    def bracket(self, value: float) -> tuple[int, float]:
        """
        Locate the cell holding ``value``.

        Values outside [lower, upper] are clamped to the edge breakpoint.

        Returns
        -------
        (i, w) with breakpoints[i] ≤ value ≤ breakpoints[i+1] and
        w = (value - breakpoints[i]) / (breakpoints[i+1] - breakpoints[i]),
        the weight of the high side.  Exact breakpoint hits give w = 0.0 or
        1.0 exactly.
        """
        pts = self._points
        last = len(pts) - 2
        v = float(value)
        if v <= pts[0]:
            return 0, 0.0
        if v >= pts[-1]:
            return last, 1.0

        i = min(bisect_right(pts, v) - 1, last)
        low = pts[i]
        width = pts[i + 1] - low
        if width == 0.0:
            return i, 1.0
        return i, (v - low) / width

    def __repr__(self) -> str:
        return (f"Axis({self.variable.value}, n={len(self)}, "
                f"range=[{self.lower:g}, {self.upper:g}])")


def strides(axes: Sequence[Axis]) -> tuple[int, ...]:
    """Row-major strides of a grid spanned by ``axes``."""
    out = [1] * len(axes)
    for k in range(len(axes) - 2, -1, -1):
        out[k] = out[k + 1] * len(axes[k + 1])
    return tuple(out)


def build_grid(
    rows: np.ndarray,
    axis_variables: Sequence[IndependentVariable],
    source: str = "<table>",
) -> tuple[tuple[Axis, ...], list[np.ndarray]]:
    """
    Split a parsed table into grid axes and flat value grids.

    Parameters
    ----------
    rows           : (n_rows, n_fields) array from the table loader
    axis_variables : independent variables held by the leading columns
    source         : table name for error messages

    Returns
    -------
    (axes, value_grids) – one read-only flat array per value column
    """
    rows = np.asarray(rows, dtype=float)
    n_axes = len(axis_variables)
    if rows.ndim != 2 or rows.shape[1] <= n_axes:
        n_fields = rows.shape[1] if rows.ndim == 2 else 0
        raise MalformedRowError(
            source, 0,
            f"{n_fields} field(s) per row leaves no value columns after "
            f"{n_axes} coordinate column(s)",
        )

    coords = rows[:, :n_axes]
    data = rows[:, n_axes:]
    if not np.all(np.isfinite(coords)):
        raise InconsistentGridError(f"{source}: non-finite grid coordinates")

    axes = []
    indices = []
    for k, variable in enumerate(axis_variables):
        breakpoints, inverse = np.unique(coords[:, k], return_inverse=True)
        if breakpoints.size < 2:
            raise InconsistentGridError(
                f"{source}: axis '{variable.value}' has a single breakpoint "
                f"({breakpoints[0]:g}); at least 2 are required"
            )
        axes.append(Axis(variable, breakpoints))
        indices.append(inverse.reshape(-1))

    shape = tuple(len(a) for a in axes)
    n_points = math.prod(shape)
    if rows.shape[0] != n_points:
        raise InconsistentGridError(
            f"{source}: {rows.shape[0]} rows do not form the complete "
            f"{' x '.join(map(str, shape))} grid ({n_points} points)"
        )

    flat = np.ravel_multi_index(tuple(indices), shape)
    counts = np.bincount(flat, minlength=n_points)
    if np.any(counts != 1):
        dup = int(np.argmax(counts > 1))
        point = np.unravel_index(dup, shape)
        coords_txt = ", ".join(
            f"{a.variable.value}={a.breakpoints[i]:g}" for a, i in zip(axes, point)
        )
        raise InconsistentGridError(f"{source}: duplicated grid point ({coords_txt})")

    grids = []
    for col in range(data.shape[1]):
        grid = np.empty(n_points, dtype=float)
        grid[flat] = data[:, col]
        grids.append(read_only_view(grid))

    return tuple(axes), grids


def check_same_grid(reference: Sequence[Axis], axes: Sequence[Axis],
                    source: str = "<table>") -> None:
    """Raise InconsistentGridError unless ``axes`` reproduce ``reference``."""
    for ref, ax in zip(reference, axes):
        if ref.variable is not ax.variable or not np.array_equal(
                ref.breakpoints, ax.breakpoints):
            raise InconsistentGridError(
                f"{source}: '{ax.variable.value}' coordinates do not match the "
                f"first table's grid ({ax!r} vs {ref!r})"
            )
