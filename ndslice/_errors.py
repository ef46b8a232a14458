# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause


class InvalidSliceFormat(ValueError):
    """Raised if a slice clause does not match ``[int]:[int][:[int]]``."""


class TooManySlices(IndexError):
    """Raised if a slice string has more clauses than the array has axes."""


class IndexOutOfRange(IndexError):
    """Raised if an index falls outside ``[0, length)`` after wraparound."""


__all__ = [
    "InvalidSliceFormat",
    "TooManySlices",
    "IndexOutOfRange",
]
