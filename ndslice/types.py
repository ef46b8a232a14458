# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

from collections.abc import Sequence
from typing import TypeAlias, Union

import numpy as np

StrictShape = tuple[int, ...]

IndexKey: TypeAlias = Union[int, tuple[int, ...], str]

DTypeLike: TypeAlias = Union[type, np.dtype, str]

PyScalar = bool | int | float | complex | str
NestedSequence = Sequence["PyScalar | NestedSequence"]


__all__ = [
    "StrictShape",
    "IndexKey",
    "DTypeLike",
    "PyScalar",
    "NestedSequence",
]
