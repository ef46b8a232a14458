# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from ._array import Array, array_type, flatten_literal, is_nested
from ._dtypes import as_dtype, infer_dtype

if TYPE_CHECKING:
    from .types import DTypeLike, StrictShape


def ndarray_type(dtype: DTypeLike, ndim: int) -> type[Array]:
    """Return the array class holding elements of ``dtype`` along ``ndim`` axes.

    Parameters
    ----------
    dtype
        A Python type (``int``, ``float``, ``bool``, ``complex``, ``str``), a
        NumPy scalar type or a ``numpy.dtype``.
    ndim
        Number of dimensions; must be at least 1.
    """
    return array_type(as_dtype(dtype), ndim)


@dataclass(frozen=True)
class DimSelector:
    """Result of ``Ndarray[dtype]``; ``.dim(n)`` picks the number of dimensions."""

    dtype: np.dtype

    def dim(self, ndim: int) -> type[Array]:
        return array_type(self.dtype, ndim)


class Ndarray:
    """Selects the array class for an element type and a number of dimensions.

    ``Ndarray[int, 2]`` and ``Ndarray[int].dim(2)`` name the same class. The
    facade itself holds no state and cannot be instantiated.
    """

    def __init__(self, *args, **kwargs) -> None:
        raise TypeError(
            "'Ndarray' cannot be instantiated directly. Use 'Ndarray[dtype, ndim](...)' instead"
        )

    def __class_getitem__(cls, key: Any) -> Any:
        if not isinstance(key, tuple):
            return DimSelector(as_dtype(key))
        if len(key) != 2:
            raise TypeError(
                f"expected 'Ndarray[dtype, ndim]'; found {len(key)} parameters"
            )
        dtype, ndim = key
        return ndarray_type(dtype, ndim)


def asarray(obj: Any, dtype: DTypeLike | None = None) -> Array:
    """Create an array from a nested literal, a NumPy array or another array.

    The number of dimensions is the nesting depth of ``obj``. If ``dtype`` is
    not given it is inferred the way NumPy infers it, with text kept as ``str``.
    The result never shares data with ``obj``.
    """
    if isinstance(obj, Array):
        dtype_ = obj.dtype if dtype is None else as_dtype(dtype)
        return _instantiate(array_type(dtype_, obj.ndim), (obj,))

    ndim = _nesting_depth(obj)
    if ndim == 0:
        raise ValueError("arrays must have at least one dimension")
    if dtype is None and isinstance(obj, np.ndarray):
        dtype_ = as_dtype(obj.dtype)
    elif dtype is None:
        _, values = flatten_literal(obj, ndim)
        dtype_ = infer_dtype(values)
    else:
        dtype_ = as_dtype(dtype)
    return _instantiate(array_type(dtype_, ndim), (obj,))


def full(shape: int | StrictShape, fill: Any, dtype: DTypeLike | None = None) -> Array:
    """Array of ``shape`` with every element set to ``fill``."""
    shape_ = (shape,) if isinstance(shape, int) else tuple(shape)
    dtype_ = infer_dtype([fill]) if dtype is None else as_dtype(dtype)
    return _instantiate(array_type(dtype_, len(shape_)), shape_, fill)


def zeros(shape: int | StrictShape, dtype: DTypeLike = float) -> Array:
    """Array of ``shape`` filled with the zero value of ``dtype``."""
    shape_ = (shape,) if isinstance(shape, int) else tuple(shape)
    return _instantiate(array_type(as_dtype(dtype), len(shape_)), shape_)


def _instantiate(cls: type[Array], args: tuple[Any, ...], fill: Any = None) -> Array:
    inst = cls.__new__(cls)
    # to_buffer -> _construct -> _instantiate -> public function -> caller
    inst._construct(args, fill, stacklevel=5)
    return inst


def _nesting_depth(obj: Any) -> int:
    depth = 0
    while is_nested(obj) and not isinstance(obj, np.ndarray | Array):
        depth += 1
        if len(obj) == 0:
            return depth
        obj = obj[0]
    if isinstance(obj, np.ndarray | Array):
        return depth + obj.ndim
    return depth
