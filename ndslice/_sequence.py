# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

import numpy as np

from ._config import get_indent
from ._errors import IndexOutOfRange


def resolve_index(idx: int, length: int) -> int:
    """Resolve a possibly negative ``idx`` against an axis of ``length``.

    Raises
    ------
    IndexOutOfRange
        If ``idx`` is outside of ``[0, length)`` after wrapping negative values.
    """
    if isinstance(idx, bool | np.bool_):
        raise TypeError("boolean values are not valid indices")
    try:
        idx = operator.index(idx)
    except TypeError:
        raise TypeError(f"indices must be integers; found `{type(idx)}`") from None

    if idx < 0:
        idx += length
    if idx < 0 or idx >= length:
        raise IndexOutOfRange(
            f"index {idx} is out of range for axis with length {length}"
        )
    return idx


def row_major_strides(shape: tuple[int, ...]) -> tuple[int, ...]:
    """Number of flat elements spanned by one step along each axis."""
    strides = []
    acc = 1
    for length in reversed(shape):
        strides.append(acc)
        acc *= length
    return tuple(reversed(strides))


class IndexableSequence(ABC):
    """Ordered sequence with negative-index resolution and text rendering.

    Subclasses provide the length and the element lookup for an already resolved
    position. Rendering of an element that is itself an ``IndexableSequence`` is
    delegated to that element, one level deeper.
    """

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def _item(self, idx: int, /) -> Any:
        """Element at the resolved, in-bounds position ``idx``."""
        ...

    def is_empty(self) -> bool:
        return len(self) == 0

    def __iter__(self) -> Iterator[Any]:
        return (self._item(i) for i in range(len(self)))

    def __contains__(self, value: Any) -> bool:
        return any(el == value for el in self)

    def render(self, depth: int = 0) -> str:
        """Render as a single line if the elements are scalars, otherwise as a
        block with one nested element per line."""
        if self.is_empty():
            return "[ ]"

        items = list(self)
        if not isinstance(items[0], IndexableSequence):
            return "[ " + ", ".join(str(el) for el in items) + " ]"

        indent = " " * (get_indent() * depth)
        inner = indent + " " * get_indent()
        lines = ",\n".join(inner + el.render(depth + 1) for el in items)
        return f"[\n{lines}\n{indent}]"

    def __str__(self) -> str:
        return self.render()
