# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from ._errors import InvalidSliceFormat, TooManySlices

# Both the 2-part ("1:5") and the 3-part ("1:5:2") form. Every integer is optional.
_AXIS_SPEC = re.compile(r"\s*(-?\d+)?\s*:\s*(-?\d+)?\s*(?::\s*(-?\d+)?\s*)?")
_CLAUSE_SEP = re.compile(r"\s*,\s*")


@dataclass(frozen=True)
class AxisRange:
    """Iteration plan over a single axis.

    Positions start at ``start`` and advance by ``step``. Iteration stops before
    ``stop`` if ``has_stop`` is set, otherwise at the length of the axis at the
    time the plan is applied.
    """

    start: int = 0
    stop: int = 0
    step: int = 1
    has_stop: bool = False

    @classmethod
    def full(cls) -> AxisRange:
        """Plan selecting every element of an axis (i.e. ``":"``)."""
        return cls()

    def resolve_stop(self, length: int) -> int:
        return self.stop if self.has_stop else length

    def indices(self, length: int) -> Iterator[int]:
        """Raw positions visited on an axis of ``length`` elements.

        Positions are *not* bounds checked; negative positions are resolved by
        the caller the same way a negative index is.
        """
        return iter(range(self.start, self.resolve_stop(length), self.step))

    def __str__(self) -> str:
        stop = str(self.stop) if self.has_stop else ""
        return f"{self.start}:{stop}:{self.step}"


def parse_range(text: str) -> AxisRange:
    """Parse a single slice clause such as ``"1:5:2"``, ``"2:"`` or ``":3"``.

    Raises
    ------
    InvalidSliceFormat
        If ``text`` is not of the form ``[int]:[int]`` or ``[int]:[int]:[int]``,
        or if the step is not positive.
    """
    if not isinstance(text, str):
        raise TypeError(f"slice clause must be of type 'str', found `{type(text)}`")
    match = _AXIS_SPEC.fullmatch(text)
    if match is None:
        raise InvalidSliceFormat(f"invalid slice format: `{text}`")

    start, stop, step = match.groups()
    out = AxisRange(
        start=0 if start is None else int(start),
        stop=0 if stop is None else int(stop),
        step=1 if step is None else int(step),
        has_stop=stop is not None,
    )
    if out.step < 1:
        raise InvalidSliceFormat(
            f"slice step must be a positive integer; found `{out.step}` in `{text}`"
        )
    return out


def parse_slices(text: str, ndim: int) -> tuple[AxisRange, ...]:
    """Split a comma separated slice string into one ``AxisRange`` per clause.

    Raises
    ------
    TooManySlices
        If there are more clauses than ``ndim``.
    InvalidSliceFormat
        If any clause is malformed.
    """
    if not isinstance(text, str):
        raise TypeError(f"slice must be of type 'str', found `{type(text)}`")
    clauses = _CLAUSE_SEP.split(text)
    if len(clauses) > ndim:
        raise TooManySlices(
            f"too many slices for array: array is {ndim}-dimensional, "
            f"but {len(clauses)} were given"
        )
    return tuple(parse_range(clause) for clause in clauses)


__all__ = [
    "AxisRange",
    "parse_range",
    "parse_slices",
]
