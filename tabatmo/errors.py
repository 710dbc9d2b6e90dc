"""
errors.py – Exception hierarchy for tabulated-atmosphere construction and
queries.

Construction errors (source, row, grid, binding) abort the build and no
model is returned.  ``UnsupportedVariableError`` is the only query-time
error; it leaves the model untouched.
"""

from __future__ import annotations


class TabulatedAtmosphereError(Exception):
    """Base class for every error raised by tabatmo."""


class SourceUnavailableError(TabulatedAtmosphereError, OSError):
    """A declared table source cannot be opened or read."""

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        msg = f"Table source '{source}' is unavailable"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class MalformedRowError(TabulatedAtmosphereError, ValueError):
    """A data line has a non-numeric token or the wrong number of fields."""

    def __init__(self, source: str, line_number: int, reason: str):
        self.source = source
        self.line_number = line_number
        super().__init__(f"{source}, line {line_number}: {reason}")


class InconsistentGridError(TabulatedAtmosphereError, ValueError):
    """Table coordinates do not form (or do not share) a complete grid."""


class VariableBindingError(TabulatedAtmosphereError, ValueError):
    """The declared variable lists cannot be bound to the table columns."""


class UnsupportedVariableError(TabulatedAtmosphereError, KeyError):
    """A query asked for a dependent variable the model does not tabulate."""

    def __init__(self, variable, available=()):
        self.variable = variable
        self.available = tuple(available)
        names = [getattr(v, 'value', str(v)) for v in self.available]
        super().__init__(
            f"Unsupported variable '{getattr(variable, 'value', variable)}'.  "
            f"Available: {names}"
        )

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return self.args[0]
