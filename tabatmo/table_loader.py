"""
table_loader.py – Whitespace-delimited numeric table ingestion.

Turns line-oriented text into a 2-D float array.  Comment and blank lines
are skipped; every data row must have the same number of numeric fields.
Nothing here knows what a column means – binding columns to variables is
the registry's job.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, Mapping

import numpy as np

from tabatmo.errors import (
    MalformedRowError,
    SourceUnavailableError,
    VariableBindingError,
)

logger = logging.getLogger(__name__)

DEFAULT_COMMENT = "#"


def parse_table(lines: Iterable[str], source: str = "<table>",
                comment: str = DEFAULT_COMMENT) -> np.ndarray:
    """
    Parse numeric rows from an iterable of text lines.

    Parameters
    ----------
    lines   : any iterable of str (open file, list, io.StringIO …)
    source  : name used in error messages
    comment : marker that starts a comment line

    Returns
    -------
    float64 array of shape (n_rows, n_fields)
    """
    rows: list[list[float]] = []
    n_fields = None

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or (comment and line.startswith(comment)):
            continue

        tokens = line.split()
        try:
            row = [float(tok) for tok in tokens]
        except ValueError as exc:
            raise MalformedRowError(source, line_number,
                                    f"non-numeric field ({exc})") from exc

        if n_fields is None:
            n_fields = len(row)
        elif len(row) != n_fields:
            raise MalformedRowError(
                source, line_number,
                f"expected {n_fields} fields, found {len(row)}",
            )
        rows.append(row)

    if not rows:
        raise MalformedRowError(source, 0, "no data rows")

    logger.debug("Parsed %d rows x %d fields from %s", len(rows), n_fields, source)
    return np.array(rows, dtype=float)


def read_table(path: str | os.PathLike, comment: str = DEFAULT_COMMENT) -> np.ndarray:
    """Read and parse a table file.  I/O failures become SourceUnavailableError."""
    path = Path(path).expanduser()
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_table(f, source=str(path), comment=comment)
    except OSError as exc:
        raise SourceUnavailableError(str(path), exc.strerror or str(exc)) from exc


def _source_name(source) -> str:
    return str(getattr(source, "name", f"<{type(source).__name__}>"))


class BufferedLines:
    """In-memory copy of a line iterable; can be iterated any number of times."""

    __slots__ = ("name", "lines")

    def __init__(self, name: str, lines: Iterable[str]):
        self.name = name
        self.lines = tuple(lines)

    def __iter__(self):
        return iter(self.lines)


def buffer_source(source):
    """
    Make a table source re-readable.

    Paths are returned unchanged (they are re-opened on every load); a line
    iterable such as an open file or ``io.StringIO`` is consumed once into
    a ``BufferedLines`` that keeps its name.  Anything else is returned as
    is and rejected by ``load_source``.
    """
    if isinstance(source, (str, os.PathLike, BufferedLines)):
        return source
    if not hasattr(source, "__iter__"):
        return source
    return BufferedLines(_source_name(source), source)


def load_source(source, comment: str = DEFAULT_COMMENT) -> tuple[str, np.ndarray]:
    """
    Load one table source.

    A ``str`` or path-like is read from disk; anything else is treated as an
    iterable of lines (its ``name`` attribute, if any, labels errors).
    """
    if isinstance(source, (str, os.PathLike)):
        return str(source), read_table(source, comment=comment)

    name = _source_name(source)
    if not hasattr(source, "__iter__"):
        raise SourceUnavailableError(name, "source is not a path or line iterable")
    return name, parse_table(source, source=name, comment=comment)


def load_sources(sources: Mapping[int, object],
                 comment: str = DEFAULT_COMMENT) -> list[tuple[str, np.ndarray]]:
    """
    Load every source of an ``index → source`` mapping, ordered by index.

    Returns
    -------
    list of (source name, rows) in index order
    """
    if not sources:
        raise VariableBindingError("At least one table source is required")

    for key in sources:
        if isinstance(key, bool) or not isinstance(key, (int, np.integer)):
            raise VariableBindingError(
                f"Table source keys must be integers, got {key!r}"
            )

    return [load_source(sources[key], comment=comment) for key in sorted(sources)]
