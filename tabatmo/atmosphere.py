"""
atmosphere.py – Tabulated atmosphere model.

Density, pressure, temperature (and any other tabulated quantity) as a
function of up to four independent variables – altitude, longitude,
latitude, time – interpolated multilinearly from tables of reference data.

Construction goes through ``TabulatedAtmosphereBuilder`` (or the
``TabulatedAtmosphere.from_files`` shortcut).  The resulting model is
read-only: every query is a pure function of the stored grid and the query
point, so one model can be shared between threads.

Example
-------
    atm = TabulatedAtmosphere.from_files({0: "USSA1976.dat"})
    atm.get_density(10.05e3)                 # reduced form
    atm.get_density(10.05e3, 0.0, 0.0, 0.0)  # full form, identical result
"""

from __future__ import annotations
import logging
import math
from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from tabatmo.errors import TabulatedAtmosphereError, UnsupportedVariableError
from tabatmo.grid import Axis, build_grid, check_same_grid, read_only_view, strides
from tabatmo.interpolation import interpolate
from tabatmo.table_loader import DEFAULT_COMMENT, buffer_source, load_sources
from tabatmo.variables import (
    DependentVariable,
    IndependentVariable,
    VariableRegistry,
    canonical_point,
    variable_names,
)

logger = logging.getLogger(__name__)

# Used for the speed of sound when the tables do not provide them.
R_AIR = 287.0               # J/(kg·K)
GAMMA_AIR = 1.4


class TabulatedAtmosphere:
    """
    Read-only atmosphere backed by tabulated data.

    Every getter takes ``(altitude, longitude=0.0, latitude=0.0, time=0.0)``.
    Arguments for variables that are not grid axes of this model are
    ignored, so the reduced call ``get_density(h)`` and the full call
    ``get_density(h, 0.0, 0.0, 0.0)`` are the same computation.
    """

    __slots__ = ("_registry", "_axes", "_strides", "_values",
                 "_gas_constant", "_specific_heat_ratio")

    def __init__(
        self,
        registry: VariableRegistry,
        axes: Sequence[Axis],
        values: Mapping[DependentVariable, np.ndarray],
        gas_constant: float = R_AIR,
        specific_heat_ratio: float = GAMMA_AIR,
    ):
        axes = tuple(axes)
        if tuple(a.variable for a in axes) != registry.independent_variables:
            raise ValueError("Axes do not match the registry's independent variables")
        if set(values) != set(registry.dependent_variables):
            raise ValueError("Value grids do not match the registry's dependent variables")

        n_points = math.prod(len(a) for a in axes)
        frozen = {}
        for variable in registry.dependent_variables:
            grid = read_only_view(np.asarray(values[variable], dtype=float).reshape(-1))
            if grid.size != n_points:
                raise ValueError(
                    f"'{variable.value}' grid has {grid.size} values, "
                    f"expected {n_points}"
                )
            frozen[variable] = grid

        object.__setattr__(self, "_registry", registry)
        object.__setattr__(self, "_axes", axes)
        object.__setattr__(self, "_strides", strides(axes))
        object.__setattr__(self, "_values", MappingProxyType(frozen))
        object.__setattr__(self, "_gas_constant", float(gas_constant))
        object.__setattr__(self, "_specific_heat_ratio", float(specific_heat_ratio))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ── Construction shortcut ─────────────────────────────────────────

    @classmethod
    def from_files(
        cls,
        files: Mapping[int, object],
        dependent_variables: Sequence | None = None,
        independent_variables: Sequence | None = None,
        **kwargs,
    ) -> "TabulatedAtmosphere":
        """
        Build a model from ``index → table source``.

        Parameters
        ----------
        files                 : table files (or line iterables) by index
        dependent_variables   : quantity held by each value column, in
                                order; default (density, pressure, temperature)
        independent_variables : grid axes in column order; default (altitude,)
        kwargs                : comment, gas_constant, specific_heat_ratio
        """
        builder = TabulatedAtmosphereBuilder().with_sources(files)
        if dependent_variables is not None:
            builder.with_dependent_variables(dependent_variables)
        if independent_variables is not None:
            builder.with_independent_variables(independent_variables)
        if "comment" in kwargs:
            builder.with_comment_marker(kwargs.pop("comment"))
        if "gas_constant" in kwargs:
            builder.with_gas_constant(kwargs.pop("gas_constant"))
        if "specific_heat_ratio" in kwargs:
            builder.with_specific_heat_ratio(kwargs.pop("specific_heat_ratio"))
        if kwargs:
            raise TypeError(f"Unexpected keyword arguments: {sorted(kwargs)}")
        return builder.build()

    # ── Introspection ─────────────────────────────────────────────────

    @property
    def independent_variables(self) -> tuple[IndependentVariable, ...]:
        return self._registry.independent_variables

    @property
    def dependent_variables(self) -> tuple[DependentVariable, ...]:
        return self._registry.dependent_variables

    @property
    def axes(self) -> tuple[Axis, ...]:
        return self._axes

    @property
    def values(self) -> Mapping[DependentVariable, np.ndarray]:
        """Flat read-only value grids (row-major, first axis slowest)."""
        return self._values

    @property
    def ranges(self) -> dict[IndependentVariable, tuple[float, float]]:
        return {a.variable: (a.lower, a.upper) for a in self._axes}

    @property
    def gas_constant(self) -> float:
        return self._gas_constant

    @property
    def specific_heat_ratio(self) -> float:
        return self._specific_heat_ratio

    def has(self, variable) -> bool:
        try:
            self._registry.slot(variable)
        except UnsupportedVariableError:
            return False
        return True

    def __repr__(self) -> str:
        axes = ", ".join(repr(a) for a in self._axes)
        return (f"TabulatedAtmosphere(axes=[{axes}], "
                f"variables={variable_names(self.dependent_variables)})")

    # ── Queries ───────────────────────────────────────────────────────

    def get(self, variable, altitude: float, longitude: float = 0.0,
            latitude: float = 0.0, time: float = 0.0) -> float:
        """Interpolated value of ``variable`` at the given point."""
        slot = self._registry.slot(variable)
        grid = self._values[self._registry.dependent_variables[slot]]
        point = [0.0] * self._registry.dimensions
        for axis_variable, x in canonical_point(altitude, longitude, latitude, time).items():
            k = self._registry.axis_index(axis_variable)
            if k is not None:
                point[k] = x
        return interpolate(self._axes, self._strides, grid, point)

    def get_density(self, altitude: float, longitude: float = 0.0,
                    latitude: float = 0.0, time: float = 0.0) -> float:
        """Density [kg/m³]."""
        return self.get(DependentVariable.DENSITY, altitude, longitude, latitude, time)

    def get_pressure(self, altitude: float, longitude: float = 0.0,
                     latitude: float = 0.0, time: float = 0.0) -> float:
        """Pressure [Pa]."""
        return self.get(DependentVariable.PRESSURE, altitude, longitude, latitude, time)

    def get_temperature(self, altitude: float, longitude: float = 0.0,
                        latitude: float = 0.0, time: float = 0.0) -> float:
        """Temperature [K]."""
        return self.get(DependentVariable.TEMPERATURE, altitude, longitude, latitude, time)

    def get_gas_constant(self, altitude: float, longitude: float = 0.0,
                         latitude: float = 0.0, time: float = 0.0) -> float:
        """Specific gas constant [J/(kg·K)]; must be tabulated."""
        return self.get(DependentVariable.GAS_CONSTANT, altitude, longitude, latitude, time)

    def get_specific_heat_ratio(self, altitude: float, longitude: float = 0.0,
                                latitude: float = 0.0, time: float = 0.0) -> float:
        """Ratio of specific heats [-]; must be tabulated."""
        return self.get(DependentVariable.SPECIFIC_HEAT_RATIO,
                        altitude, longitude, latitude, time)

    def get_molar_mass(self, altitude: float, longitude: float = 0.0,
                       latitude: float = 0.0, time: float = 0.0) -> float:
        """Molar mass [kg/mol]; must be tabulated."""
        return self.get(DependentVariable.MOLAR_MASS, altitude, longitude, latitude, time)

    def get_speed_of_sound(self, altitude: float, longitude: float = 0.0,
                           latitude: float = 0.0, time: float = 0.0) -> float:
        """
        Speed of sound  a = √(γ · R · T)  [m/s].

        γ and R come from the tables when tabulated, otherwise from the
        model's constants.  Temperature must be tabulated.
        """
        T = self.get_temperature(altitude, longitude, latitude, time)
        if self.has(DependentVariable.GAS_CONSTANT):
            R = self.get_gas_constant(altitude, longitude, latitude, time)
        else:
            R = self._gas_constant
        if self.has(DependentVariable.SPECIFIC_HEAT_RATIO):
            gamma = self.get_specific_heat_ratio(altitude, longitude, latitude, time)
        else:
            gamma = self._specific_heat_ratio
        return math.sqrt(gamma * R * T)


class TabulatedAtmosphereBuilder:
    """
    Collects table sources and variable choices, then builds a
    ``TabulatedAtmosphere``.

    Every ``with_*`` / ``add_source`` call returns the builder.  ``build``
    may be called repeatedly; each call re-reads file sources (line iterables
    are buffered by ``add_source``) and returns an independent model.
    """

    def __init__(self):
        self._sources: dict[int, object] = {}
        self._dependent = None
        self._independent = None
        self._comment = DEFAULT_COMMENT
        self._gas_constant = R_AIR
        self._specific_heat_ratio = GAMMA_AIR

    def add_source(self, index: int, source) -> "TabulatedAtmosphereBuilder":
        """Register a table path or line iterable; iterables are read now."""
        self._sources[index] = buffer_source(source)
        return self

    def with_sources(self, sources: Mapping[int, object]) -> "TabulatedAtmosphereBuilder":
        for index, source in sources.items():
            self.add_source(index, source)
        return self

    def with_dependent_variables(self, variables) -> "TabulatedAtmosphereBuilder":
        self._dependent = variables
        return self

    def with_independent_variables(self, variables) -> "TabulatedAtmosphereBuilder":
        self._independent = variables
        return self

    def with_comment_marker(self, comment: str) -> "TabulatedAtmosphereBuilder":
        self._comment = comment
        return self

    def with_gas_constant(self, value: float) -> "TabulatedAtmosphereBuilder":
        self._gas_constant = value
        return self

    def with_specific_heat_ratio(self, value: float) -> "TabulatedAtmosphereBuilder":
        self._specific_heat_ratio = value
        return self

    def build(self) -> TabulatedAtmosphere:
        try:
            return self._build()
        except TabulatedAtmosphereError as exc:
            logger.debug("Tabulated atmosphere build failed: %s", exc)
            raise

    def _build(self) -> TabulatedAtmosphere:
        registry = VariableRegistry(self._dependent, self._independent)
        tables = load_sources(self._sources, comment=self._comment)

        axes = None
        columns = []
        for name, rows in tables:
            file_axes, grids = build_grid(rows, registry.independent_variables, name)
            if axes is None:
                axes = file_axes
            else:
                check_same_grid(axes, file_axes, name)
            columns.append(grids)

        binding = registry.bind_columns([len(c) for c in columns])
        values = {var: columns[f][c] for var, (f, c) in binding.items()}

        model = TabulatedAtmosphere(
            registry, axes, values,
            gas_constant=self._gas_constant,
            specific_heat_ratio=self._specific_heat_ratio,
        )
        logger.info(
            "Built %d-D tabulated atmosphere from %d table(s): axes %s, variables %s",
            registry.dimensions, len(tables),
            variable_names(registry.independent_variables),
            variable_names(registry.dependent_variables),
        )
        return model
