# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from warnings import warn

import numpy as np

# Text is stored in object arrays so that assignments are never truncated to a
# fixed width (NumPy picks `<U1` for `["a", "b"]`).
TEXT = np.dtype(object)

_NUMERIC_KINDS = ("b", "i", "u", "f", "c")


def as_dtype(obj: Any) -> np.dtype:
    """Normalize a Python type, NumPy scalar type or ``numpy.dtype`` to the dtype
    used for the flat storage of an array."""
    if isinstance(obj, np.dtype):
        np_dtype = obj
    elif obj is str:
        return TEXT
    else:
        try:
            np_dtype = np.dtype(obj)
        except TypeError:
            raise TypeError(f"unsupported element type `{obj}`") from None
        # Arbitrary Python types map onto the object data type
        if np_dtype.kind == "O":
            raise TypeError(f"unsupported element type `{obj}`")

    if np_dtype == TEXT or np_dtype.kind in ("U", "T"):
        return TEXT
    if np_dtype.kind in _NUMERIC_KINDS:
        return np_dtype
    raise TypeError(
        f"element type must be boolean, numeric or text; found `{np_dtype}`"
    )


def is_text(dtype: np.dtype) -> bool:
    return dtype == TEXT


def zero(dtype: np.dtype) -> Any:
    """Value-initialized element of ``dtype``."""
    if is_text(dtype):
        return ""
    return np.zeros((), dtype=dtype).item()


def infer_dtype(values: Sequence[Any]) -> np.dtype:
    """Element type NumPy would pick for the flat sequence ``values``."""
    if len(values) == 0:
        return np.dtype(np.float64)
    if all(isinstance(el, str) for el in values):
        return TEXT
    return as_dtype(np.asarray(values).dtype)


def to_buffer(
    values: Sequence[Any], dtype: np.dtype, *, stacklevel: int = 2
) -> np.ndarray:
    """Cast the flat sequence ``values`` into a fresh 1D buffer of ``dtype``.

    Casts that are not ``same_kind`` (e.g. float into int) emit a
    ``RuntimeWarning`` and are carried out nonetheless. ``stacklevel`` is passed
    on to ``warnings.warn``.
    """
    if is_text(dtype):
        for el in values:
            if not isinstance(el, str):
                raise TypeError(
                    f"text arrays only hold 'str' elements; found `{type(el)}`"
                )
        out = np.empty(len(values), dtype=TEXT)
        out[:] = list(values)
        return out

    if len(values) == 0:
        return np.empty(0, dtype=dtype)

    src = np.asarray(values)
    if src.dtype.kind not in _NUMERIC_KINDS:
        raise TypeError(f"cannot store elements of type `{src.dtype}` as `{dtype}`")
    if not np.can_cast(src.dtype, dtype, casting="same_kind"):
        warn(
            f"unsafe cast from `{src.dtype}` to `{dtype}` may lose information",
            RuntimeWarning,
            stacklevel=stacklevel,
        )
    return src.astype(dtype).reshape(-1)


def to_python(value: Any) -> Any:
    """Unwrap NumPy scalars into the corresponding Python scalar."""
    if isinstance(value, np.generic):
        return value.item()
    return value


__all__ = [
    "TEXT",
    "as_dtype",
    "infer_dtype",
    "is_text",
    "to_buffer",
    "to_python",
    "zero",
]
