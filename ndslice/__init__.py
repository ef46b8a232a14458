# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

import importlib.metadata
import warnings

from ._array import Array
from ._config import render_options, set_render_options
from ._errors import IndexOutOfRange, InvalidSliceFormat, TooManySlices
from ._facade import DimSelector, Ndarray, asarray, full, ndarray_type, zeros
from ._range import AxisRange, parse_range, parse_slices

try:
    __version__ = importlib.metadata.version(__name__)
except Exception as e:
    warnings.warn(f"Could not determine version of {__name__}\n{e!s}", stacklevel=2)
    __version__ = "unknown"

__all__ = [
    "Array",
    "AxisRange",
    "DimSelector",
    "IndexOutOfRange",
    "InvalidSliceFormat",
    "Ndarray",
    "TooManySlices",
    "asarray",
    "full",
    "ndarray_type",
    "parse_range",
    "parse_slices",
    "render_options",
    "set_render_options",
    "zeros",
]
