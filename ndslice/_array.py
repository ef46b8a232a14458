# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import math
import operator
from collections.abc import Iterable, Sequence
from functools import lru_cache
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np
from typing_extensions import Self

from ._dtypes import is_text, to_buffer, to_python, zero
from ._range import AxisRange, parse_slices
from ._sequence import IndexableSequence, resolve_index, row_major_strides

if TYPE_CHECKING:
    from .types import IndexKey, NestedSequence, StrictShape


class Array(IndexableSequence):
    """Rectangular n-dimensional array of a single element type.

    The data is held in a flat buffer in row-major order together with the
    per-axis lengths. The element type and the number of dimensions are fixed
    per class; use ``ndslice.Ndarray[dtype, ndim]`` to obtain a concrete class.

    An array can be created from

    - extents and a fill value: ``Ndarray[int, 2](2, 3, fill=7)``
    - a nested literal: ``Ndarray[int, 2]([[1, 2, 3], [4, 5, 6]])``
    - an array of lower dimension, which becomes the sole element along the
      new leading axes: ``Ndarray[int, 3](Ndarray[int, 1]([1, 2]))``
    """

    dtype: ClassVar[np.dtype]
    ndim: ClassVar[int]

    _shape: StrictShape
    _data: np.ndarray
    # Array whose buffer is shared by this one, if any.
    _base: Array | None

    def __init__(self, *args: Any, fill: Any = None) -> None:
        # to_buffer -> _construct -> __init__ -> caller
        self._construct(args, fill, stacklevel=4)

    def _construct(self, args: tuple[Any, ...], fill: Any, stacklevel: int) -> None:
        cls = type(self)
        if getattr(cls, "ndim", None) is None:
            raise TypeError(
                "'Array' cannot be instantiated directly. Use 'ndslice.Ndarray[dtype, ndim]' or 'ndslice.asarray' instead"
            )

        if len(args) == 1 and is_nested(args[0]):
            if fill is not None:
                raise TypeError("'fill' cannot be combined with a nested literal")
            (value,) = args
            if isinstance(value, Array) and value.ndim < cls.ndim:
                shape = (1,) * (cls.ndim - value.ndim) + value.shape
                data = to_buffer(value._data, cls.dtype, stacklevel=stacklevel)
            else:
                shape, values = flatten_literal(value, cls.ndim)
                data = to_buffer(values, cls.dtype, stacklevel=stacklevel)
        else:
            shape = _extents(args, cls.ndim)
            cell = to_buffer(
                [zero(cls.dtype) if fill is None else fill],
                cls.dtype,
                stacklevel=stacklevel,
            )
            data = np.repeat(cell, math.prod(shape))

        self._shape = shape
        self._data = data
        self._base = None

    @classmethod
    def _from_buffer(
        cls, shape: StrictShape, data: np.ndarray, base: Array | None = None
    ) -> Self:
        inst = cls.__new__(cls)
        inst._shape = shape
        inst._data = data
        inst._base = base
        return inst

    @property
    def shape(self) -> StrictShape:
        return self._shape

    @property
    def size(self) -> int:
        return math.prod(self._shape)

    def __len__(self) -> int:
        return self._shape[0]

    def _item(self, idx: int, /) -> Any:
        return self._view(idx * row_major_strides(self._shape)[0], 1)

    def _view(self, offset: int, consumed: int) -> Any:
        """Element or live sub-array starting at the flat ``offset`` after
        ``consumed`` axes have been indexed."""
        if consumed == self.ndim:
            return to_python(self._data[offset])
        shape = self._shape[consumed:]
        block = self._data[offset : offset + math.prod(shape)]
        return array_type(self.dtype, len(shape))._from_buffer(shape, block, self)

    def _offset(self, indices: tuple[int, ...]) -> int:
        if not indices:
            raise TypeError("at least one index is required")
        if len(indices) > self.ndim:
            raise TypeError(
                f"too many indices for array: array is {self.ndim}-dimensional, "
                f"but {len(indices)} were indexed"
            )
        strides = row_major_strides(self._shape)
        return sum(
            resolve_index(idx, length) * stride
            for idx, length, stride in zip(indices, self._shape, strides)
        )

    def at(self, *indices: int) -> Any:
        """Return the element (all axes indexed) or a live sub-array of reduced
        dimension (fewer indices than axes).

        Negative indices count from the end of their axis.

        Raises
        ------
        IndexOutOfRange
            If an index is outside of its axis after resolving negative values.
        TypeError
            If no or more than ``ndim`` indices are given.
        """
        return self._view(self._offset(indices), len(indices))

    def set(self, indices: int | tuple[int, ...], value: Any) -> None:
        """Write ``value`` at ``indices``.

        If fewer indices than axes are given, ``value`` must be an array or a
        nested literal of exactly the shape of the addressed block.
        """
        # to_buffer -> _set -> set -> caller
        self._set(indices, value, stacklevel=4)

    def _set(
        self, indices: int | tuple[int, ...], value: Any, stacklevel: int
    ) -> None:
        indices_ = indices if isinstance(indices, tuple) else (indices,)
        offset = self._offset(indices_)
        shape = self._shape[len(indices_) :]

        if not shape:
            if is_nested(value):
                raise ValueError("cannot assign a sequence to a single element")
            cell = to_buffer([value], self.dtype, stacklevel=stacklevel)
            self._data[offset] = cell[0]
            return

        value_shape, values = flatten_literal(value, len(shape))
        if value_shape != shape:
            raise ValueError(
                f"cannot assign value of shape {value_shape} to block of shape {shape}"
            )
        self._data[offset : offset + math.prod(shape)] = to_buffer(
            values, self.dtype, stacklevel=stacklevel
        )

    def slice(self, text: str) -> Self:
        """Return a new array holding copies of the elements selected by ``text``.

        ``text`` holds one ``start:stop:step`` clause per leading axis, separated
        by commas (e.g. ``"1:, ::2"``). Axes without a clause are taken whole.
        The result has the same number of dimensions as ``self``.

        Raises
        ------
        InvalidSliceFormat
            If a clause is malformed.
        TooManySlices
            If there are more clauses than axes.
        IndexOutOfRange
            If a visited position is outside of its axis.
        """
        ranges = parse_slices(text, self.ndim)
        ranges += (AxisRange.full(),) * (self.ndim - len(ranges))

        # Once an axis selection is empty its inner axes are never visited and
        # hence cannot be out of range.
        selections: list[list[int]] = []
        strict = True
        for r, length in zip(ranges, self._shape):
            selection = _select(r, length) if strict else _select_lenient(r, length)
            strict = strict and bool(selection)
            selections.append(selection)

        shape = tuple(len(el) for el in selections)
        grid = self._data.reshape(self._shape)[np.ix_(*selections)]
        return type(self)._from_buffer(shape, grid.reshape(-1).copy())

    def __getitem__(self, key: IndexKey, /) -> Any:
        if isinstance(key, str):
            return self.slice(key)
        if isinstance(key, tuple):
            return self.at(*key)
        if isinstance(key, int | np.integer):
            return self.at(key)
        raise IndexError(f"unexpected key type: `{type(key)}`")

    def __setitem__(self, key: int | tuple[int, ...], value: Any, /) -> None:
        if not isinstance(key, int | np.integer | tuple):
            raise IndexError(f"unexpected key type: `{type(key)}`")
        # to_buffer -> _set -> __setitem__ -> caller
        self._set(key, value, stacklevel=4)

    def append(self, value: Any) -> None:
        """Append an element (1D) or a sub-array (nD) along the first axis."""
        # to_buffer -> _extend -> append -> caller
        self._extend([value], stacklevel=4)

    def extend(self, values: Iterable[Any]) -> None:
        """Append every item of ``values`` along the first axis.

        Either all items are appended or, if one of them does not fit, none.
        """
        self._extend(values, stacklevel=4)

    def _extend(self, values: Iterable[Any], stacklevel: int) -> None:
        self._check_resizable()
        inner = self._shape[1:]
        buffers = []
        n = 0
        for value in values:
            if self.ndim == 1:
                if is_nested(value):
                    raise ValueError("cannot append a sequence to a 1-dimensional array")
                buffers.append(to_buffer([value], self.dtype, stacklevel=stacklevel))
            else:
                value_shape, flat = flatten_literal(value, self.ndim - 1)
                if len(self) == 0 and n == 0:
                    inner = value_shape
                elif value_shape != inner:
                    raise ValueError(
                        f"cannot append value of shape {value_shape} to array of shape {self._shape}"
                    )
                buffers.append(to_buffer(flat, self.dtype, stacklevel=stacklevel))
            n += 1

        self._data = np.concatenate([self._data, *buffers])
        self._shape = (len(self) + n, *inner)

    def clear(self) -> None:
        """Remove all items along the first axis."""
        self._check_resizable()
        self._data = self._data[:0].copy()
        self._shape = (0, *self._shape[1:])

    def _check_resizable(self) -> None:
        if self._base is not None:
            raise ValueError("cannot resize an array that shares its data with another array")

    def copy(self) -> Self:
        return type(self)._from_buffer(self._shape, self._data.copy())

    def __copy__(self) -> Self:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self.copy()

    def tolist(self) -> NestedSequence:
        return self._data.reshape(self._shape).tolist()

    def unwrap_numpy(self) -> np.ndarray:
        """Return a copy of the data as a NumPy array of shape ``self.shape``.

        Text is returned with NumPy's unicode data type.
        """
        out = self._data.reshape(self._shape).copy()
        if is_text(self.dtype):
            return out.astype(str)
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return (
            self.ndim == other.ndim
            and self._shape == other._shape
            and self.dtype.kind == other.dtype.kind
            and bool(np.array_equal(self._data, other._data))
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"array({self.tolist()}, shape={self._shape}, dtype={dtype_name(self.dtype)})"


def dtype_name(dtype: np.dtype) -> str:
    return "str" if is_text(dtype) else str(dtype)


@lru_cache(maxsize=None, typed=True)
def array_type(dtype: np.dtype, ndim: int) -> type[Array]:
    """Concrete ``Array`` class for the given element type and dimension count."""
    if isinstance(ndim, bool) or not isinstance(ndim, int) or ndim < 1:
        raise ValueError(f"number of dimensions must be a positive integer; found `{ndim}`")
    name = f"Array[{dtype_name(dtype)}, {ndim}]"
    return type(
        name,
        (Array,),
        {"dtype": dtype, "ndim": ndim, "__module__": Array.__module__},
    )


def flatten_literal(obj: Any, ndim: int) -> tuple[StrictShape, list[Any]]:
    """Shape and row-major values of the ``ndim`` times nested literal ``obj``.

    ``obj`` may contain ``Array`` and ``numpy.ndarray`` objects at any level.

    Raises
    ------
    ValueError
        If the nesting depth is not ``ndim`` or sibling lengths disagree.
    """
    if isinstance(obj, Array):
        if obj.ndim != ndim:
            raise ValueError(
                f"expected a {ndim}-dimensional value; found a {obj.ndim}-dimensional array"
            )
        return obj.shape, obj._data.tolist()
    if isinstance(obj, np.ndarray):
        obj = obj.tolist()

    if ndim == 0:
        if is_nested(obj):
            raise ValueError("literal is nested deeper than the number of dimensions")
        return (), [obj]
    if not is_nested(obj):
        raise ValueError(
            f"literal is not nested deep enough; expected {ndim} more level(s)"
        )

    shapes = []
    values: list[Any] = []
    for el in obj:
        el_shape, el_values = flatten_literal(el, ndim - 1)
        shapes.append(el_shape)
        values.extend(el_values)

    if any(el != shapes[0] for el in shapes):
        raise ValueError(f"jagged literal: sub-arrays have differing shapes {shapes}")
    inner = shapes[0] if shapes else (0,) * (ndim - 1)
    return (len(shapes), *inner), values


def is_nested(obj: Any) -> bool:
    if isinstance(obj, str | bytes):
        return False
    return isinstance(obj, Sequence | np.ndarray | Array)


def _extents(args: Sequence[Any], ndim: int) -> StrictShape:
    if len(args) > ndim:
        raise TypeError(
            f"expected at most {ndim} extents for a {ndim}-dimensional array; found {len(args)}"
        )
    shape = []
    for n in args:
        if isinstance(n, bool):
            raise TypeError("extents must be integers; found `bool`")
        n = operator.index(n)
        if n < 0:
            raise ValueError(f"extents must be non-negative; found `{n}`")
        shape.append(n)
    return (*shape, *(0,) * (ndim - len(shape)))


def _select(r: AxisRange, length: int) -> list[int]:
    return [resolve_index(i, length) for i in r.indices(length)]


def _select_lenient(r: AxisRange, length: int) -> list[int]:
    """Like ``_select`` but positions outside of the axis are dropped."""
    start = r.start
    if start < -length:
        start += -((start + length) // r.step) * r.step
    stop = min(r.resolve_stop(length), length)
    return [i + length if i < 0 else i for i in range(start, stop, r.step)]
