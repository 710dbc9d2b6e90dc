"""
variables.py – Independent / dependent variable kinds and the registry that
binds them to table axes and value columns.

The registry is built once from the caller's ordered lists.  Every lookup
goes through the declared order, so ``(pressure, density, temperature)``
binds column 0 to pressure and density queries read column 1.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from tabatmo.errors import UnsupportedVariableError, VariableBindingError


class _ParsableEnum(Enum):

    @classmethod
    def parse(cls, value):
        """Accept an enum member or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_").replace(" ", "_")
            for member in cls:
                if member.value == key:
                    return member
        raise VariableBindingError(
            f"Unknown {cls.__name__} '{value}'.  "
            f"Available: {[m.value for m in cls]}"
        )


class IndependentVariable(_ParsableEnum):
    """Grid axes, listed in the canonical query order."""
    ALTITUDE = "altitude"
    LONGITUDE = "longitude"
    LATITUDE = "latitude"
    TIME = "time"


class DependentVariable(_ParsableEnum):
    """Tabulated physical quantities."""
    DENSITY = "density"                          # kg/m³
    PRESSURE = "pressure"                        # Pa
    TEMPERATURE = "temperature"                  # K
    GAS_CONSTANT = "gas_constant"                # J/(kg·K)
    SPECIFIC_HEAT_RATIO = "specific_heat_ratio"  # –
    MOLAR_MASS = "molar_mass"                    # kg/mol


# Column order assumed when the caller does not declare one.
DEFAULT_DEPENDENT_VARIABLES: tuple[DependentVariable, ...] = (
    DependentVariable.DENSITY,
    DependentVariable.PRESSURE,
    DependentVariable.TEMPERATURE,
)

DEFAULT_INDEPENDENT_VARIABLES: tuple[IndependentVariable, ...] = (
    IndependentVariable.ALTITUDE,
)

MAX_DIMENSIONS = 4


def _normalise(values, enum_cls, default, label: str) -> tuple:
    if values is None:
        return tuple(default)
    if isinstance(values, (str, Enum)):
        values = [values]
    parsed = tuple(enum_cls.parse(v) for v in values)
    if not parsed:
        raise VariableBindingError(f"At least one {label} variable is required")
    if len(set(parsed)) != len(parsed):
        raise VariableBindingError(
            f"Duplicate {label} variables: {[v.value for v in parsed]}"
        )
    return parsed


@dataclass(frozen=True)
class VariableRegistry:
    """
    Ordered binding of variable kinds to slots.

    Parameters
    ----------
    dependent_variables   : quantities held by the value columns, in column
                            order (file 0's columns first).  Defaults to
                            (density, pressure, temperature).
    independent_variables : axes in table column order.  Defaults to
                            (altitude,).
    """
    dependent_variables: tuple[DependentVariable, ...] | None = None
    independent_variables: tuple[IndependentVariable, ...] | None = None

    _slots: dict = field(init=False, repr=False, compare=False)
    _axes: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        dependent = _normalise(self.dependent_variables, DependentVariable,
                               DEFAULT_DEPENDENT_VARIABLES, "dependent")
        independent = _normalise(self.independent_variables, IndependentVariable,
                                 DEFAULT_INDEPENDENT_VARIABLES, "independent")
        if len(independent) > MAX_DIMENSIONS:
            raise VariableBindingError(
                f"At most {MAX_DIMENSIONS} independent variables are supported, "
                f"got {len(independent)}"
            )

        object.__setattr__(self, "dependent_variables", dependent)
        object.__setattr__(self, "independent_variables", independent)
        object.__setattr__(self, "_slots", {v: i for i, v in enumerate(dependent)})
        object.__setattr__(self, "_axes", {v: i for i, v in enumerate(independent)})

    @property
    def dimensions(self) -> int:
        return len(self.independent_variables)

    def slot(self, variable) -> int:
        """Declared position of a dependent variable."""
        try:
            key = DependentVariable.parse(variable)
        except VariableBindingError:
            raise UnsupportedVariableError(variable, self.dependent_variables) from None
        try:
            return self._slots[key]
        except KeyError:
            raise UnsupportedVariableError(key, self.dependent_variables) from None

    def axis_index(self, variable) -> int | None:
        """Axis position of an independent variable, or None if unbound."""
        return self._axes.get(IndependentVariable.parse(variable))

    def bind_columns(
        self, column_counts: Sequence[int],
    ) -> dict[DependentVariable, tuple[int, int]]:
        """
        Assign the declared dependent variables to (file, column) pairs.

        Parameters
        ----------
        column_counts : number of value columns in each file, in file order

        Returns
        -------
        dict  DependentVariable → (file position, value-column position)
        """
        total = sum(column_counts)
        if total != len(self.dependent_variables):
            raise VariableBindingError(
                f"Tables provide {total} value column(s) but "
                f"{len(self.dependent_variables)} dependent variable(s) were "
                f"declared: {[v.value for v in self.dependent_variables]}"
            )

        binding = {}
        variables = iter(self.dependent_variables)
        for file_pos, count in enumerate(column_counts):
            for col in range(count):
                binding[next(variables)] = (file_pos, col)
        return binding


def canonical_point(altitude: float, longitude: float, latitude: float,
                    time: float) -> dict[IndependentVariable, float]:
    """Map the four canonical query arguments to their variable kinds."""
    return {
        IndependentVariable.ALTITUDE: altitude,
        IndependentVariable.LONGITUDE: longitude,
        IndependentVariable.LATITUDE: latitude,
        IndependentVariable.TIME: time,
    }


def variable_names(variables: Iterable[Enum]) -> list[str]:
    return [v.value for v in variables]
