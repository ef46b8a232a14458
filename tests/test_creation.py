# Copyright (c) QuantCo 2023-2025
# SPDX-License-Identifier: BSD-3-Clause

import copy

import numpy as np
import pytest

import ndslice as nds
from ndslice import Array, Ndarray


def test_facade_spellings_agree():
    assert Ndarray[int, 2] is Ndarray[int].dim(2)
    assert Ndarray[int, 2] is nds.ndarray_type(np.int64, 2)
    assert Ndarray[int, 2] is not Ndarray[int, 3]
    assert issubclass(Ndarray[float, 1], Array)
    assert Ndarray[float, 1].ndim == 1
    assert Ndarray[float, 1].dtype == np.float64


@pytest.mark.parametrize(
    "dtype, expected",
    [
        (int, np.dtype(np.int64)),
        (float, np.dtype(np.float64)),
        (bool, np.dtype(np.bool_)),
        (complex, np.dtype(np.complex128)),
        (np.int8, np.dtype(np.int8)),
        (np.dtype("float32"), np.dtype(np.float32)),
        (str, np.dtype(object)),
        (np.str_, np.dtype(object)),
    ],
)
def test_facade_dtypes(dtype, expected):
    assert Ndarray[dtype, 1].dtype == expected


@pytest.mark.parametrize("ndim", [0, -1, 1.5, True])
def test_facade_invalid_ndim(ndim):
    with pytest.raises(ValueError):
        Ndarray[int, ndim]


def test_facade_invalid_dtype():
    with pytest.raises(TypeError):
        Ndarray[dict, 1]
    with pytest.raises(TypeError):
        Ndarray[np.datetime64, 1]


def test_facade_wrong_parameter_count():
    with pytest.raises(TypeError):
        Ndarray[int, 2, 3]


def test_cannot_instantiate_directly():
    with pytest.raises(TypeError):
        Array([1, 2])
    with pytest.raises(TypeError):
        Ndarray([1, 2])


def test_size_and_fill():
    arr = Ndarray[int, 3](2, 3, 4, fill=7)
    assert arr.shape == (2, 3, 4)
    assert arr.size == 24
    np.testing.assert_array_equal(arr.unwrap_numpy(), np.full((2, 3, 4), 7))


@pytest.mark.parametrize(
    "dtype, expected",
    [(int, 0), (float, 0.0), (bool, False), (complex, 0j), (str, "")],
)
def test_default_fill(dtype, expected):
    arr = Ndarray[dtype, 2](2, 2)
    assert arr.at(1, 1) == expected
    assert type(arr.at(1, 1)) is type(expected)


def test_missing_extents_are_empty():
    arr = Ndarray[int, 3](2)
    assert arr.shape == (2, 0, 0)
    assert Ndarray[int, 2]().shape == (0, 0)


def test_invalid_extents():
    with pytest.raises(TypeError):
        Ndarray[int, 2](1, 2, 3)
    with pytest.raises(ValueError):
        Ndarray[int, 2](-1, 2)
    with pytest.raises(TypeError):
        Ndarray[int, 1](True)


def test_nested_literal():
    arr = Ndarray[int, 2]([[1, 2, 3], [4, 5, 6]])
    assert arr.shape == (2, 3)
    assert arr.tolist() == [[1, 2, 3], [4, 5, 6]]


def test_nested_literal_of_arrays():
    row = Ndarray[int, 1]([1, 2])
    arr = Ndarray[int, 2]([row, (3, 4), np.array([5, 6])])
    assert arr.tolist() == [[1, 2], [3, 4], [5, 6]]

    row.set(0, 100)
    assert arr.at(0, 0) == 1


def test_text_literal():
    arr = Ndarray[str, 2]([["a", "bc"], ["def", ""]])
    assert arr.at(1, 0) == "def"
    arr.set((1, 1), "a much longer string")
    assert arr.at(1, 1) == "a much longer string"


def test_text_rejects_non_text():
    with pytest.raises(TypeError):
        Ndarray[str, 1](["a", 1])
    with pytest.raises(TypeError):
        Ndarray[int, 1](["a", "b"])


@pytest.mark.parametrize(
    "literal",
    [
        [[1, 2, 3], [4, 5]],
        [[1], []],
        [[[1, 2], [3, 4]], [[1, 2], [3]]],
    ],
)
def test_jagged_literal_raises(literal):
    ndim = 3 if isinstance(literal[0][0], list) else 2
    with pytest.raises(ValueError, match="jagged"):
        Ndarray[int, ndim](literal)


@pytest.mark.parametrize(
    "literal, ndim",
    [
        ([1, 2, 3], 2),
        ([[1, 2], [3, 4]], 1),
        ([[1, 2], 3], 2),
    ],
)
def test_literal_depth_mismatch_raises(literal, ndim):
    with pytest.raises(ValueError):
        Ndarray[int, ndim](literal)


def test_empty_literal():
    arr = Ndarray[int, 2]([])
    assert arr.shape == (0, 0)
    assert arr.is_empty()


def test_fill_with_literal_raises():
    with pytest.raises(TypeError):
        Ndarray[int, 1]([1, 2], fill=3)


def test_widening_copy():
    lower = Ndarray[int, 1]([1, 2, 3])
    arr = Ndarray[int, 3](lower)
    assert arr.shape == (1, 1, 3)
    assert arr.tolist() == [[[1, 2, 3]]]

    arr.set((0, 0, 0), 42)
    assert lower.at(0) == 1


def test_same_dimension_copy():
    src = Ndarray[int, 2]([[1, 2], [3, 4]])
    dst = Ndarray[float, 2](src)
    assert dst.dtype == np.float64
    assert dst.tolist() == [[1.0, 2.0], [3.0, 4.0]]


def test_narrowing_copy_raises():
    src = Ndarray[int, 2]([[1, 2], [3, 4]])
    with pytest.raises(ValueError):
        Ndarray[int, 1](src)


def test_unsafe_cast_warns():
    with pytest.warns(RuntimeWarning, match="unsafe cast"):
        arr = Ndarray[int, 1]([1.5, 2.5])
    assert arr.tolist() == [1, 2]

    with pytest.warns(RuntimeWarning):
        Ndarray[int, 2](2, 2, fill=0.5)


def test_copies_are_independent():
    src = Ndarray[int, 2]([[1, 2], [3, 4]])
    for dst in [src.copy(), copy.copy(src), copy.deepcopy(src)]:
        assert dst == src
        dst.set((0, 0), 9)
        assert src.at(0, 0) == 1


@pytest.mark.parametrize(
    "obj, dtype, ndim",
    [
        ([1, 2, 3], np.int64, 1),
        ([[1.0, 2.0]], np.float64, 2),
        ([[True], [False]], np.bool_, 2),
        ([["a", "b"]], object, 2),
        (np.zeros((2, 3, 4), np.int32), np.int32, 3),
        ([], np.float64, 1),
    ],
)
def test_asarray(obj, dtype, ndim):
    arr = nds.asarray(obj)
    assert arr.dtype == dtype
    assert arr.ndim == ndim
    np.testing.assert_array_equal(arr.unwrap_numpy(), np.asarray(obj))


def test_asarray_with_dtype():
    arr = nds.asarray([[1, 2]], dtype=float)
    assert arr.dtype == np.float64
    assert isinstance(arr, Ndarray[float, 2])


def test_asarray_of_array_copies():
    src = Ndarray[int, 2]([[1, 2]])
    dst = nds.asarray(src)
    assert dst == src
    dst.set((0, 0), 5)
    assert src.at(0, 0) == 1


def test_asarray_scalar_raises():
    with pytest.raises(ValueError):
        nds.asarray(5)


def test_full_and_zeros():
    arr = nds.full((2, 3), 1.5)
    assert arr.dtype == np.float64
    np.testing.assert_array_equal(arr.unwrap_numpy(), np.full((2, 3), 1.5))

    arr = nds.full(3, "x")
    assert arr.tolist() == ["x", "x", "x"]

    arr = nds.zeros((2, 2), dtype=int)
    np.testing.assert_array_equal(arr.unwrap_numpy(), np.zeros((2, 2), np.int64))


@pytest.mark.parametrize(
    "obj, expected",
    [
        (range(3), [0, 1, 2]),
        ([range(2), range(2, 4)], [[0, 1], [2, 3]]),
        ((np.array([1, 2]), np.array([3, 4])), [[1, 2], [3, 4]]),
    ],
)
def test_asarray_any_sequence(obj, expected):
    arr = nds.asarray(obj)
    assert arr.ndim == np.asarray(expected).ndim
    assert arr.tolist() == expected


@pytest.mark.parametrize(
    "create",
    [
        lambda: Ndarray[int, 1]([1.5]),
        lambda: Ndarray[int, 2](1, 1, fill=0.5),
        lambda: Ndarray[int, 2](Ndarray[float, 1]([0.5])),
        lambda: nds.asarray([1.5], dtype=int),
        lambda: nds.asarray(Ndarray[float, 1]([0.5]), dtype=int),
        lambda: nds.full((2,), 0.5, dtype=int),
    ],
)
def test_unsafe_cast_warning_points_to_caller(create):
    with pytest.warns(RuntimeWarning) as record:
        create()
    assert record[0].filename == __file__
