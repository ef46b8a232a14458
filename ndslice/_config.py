# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

from collections.abc import Iterator
from contextlib import contextmanager

_INDENT = 2


def get_indent() -> int:
    """Number of spaces used per nesting level when rendering arrays."""
    return _INDENT


def set_render_options(*, indent: int) -> None:
    """Set the number of spaces used per nesting level when rendering arrays."""
    global _INDENT

    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
        raise ValueError(f"'indent' must be a non-negative integer; found `{indent}`")
    _INDENT = indent


@contextmanager
def render_options(*, indent: int) -> Iterator[None]:
    """Temporarily change the rendering options.

    The previous options are restored even if an exception is raised.
    """
    old_indent = get_indent()
    set_render_options(indent=indent)
    try:
        yield
    finally:
        set_render_options(indent=old_indent)
