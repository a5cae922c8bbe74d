import math

import pytest

from causaltree.model import LEFT, RIGHT
from causaltree.surrogate import choose_surrogate

X = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
Y = [LEFT, LEFT, LEFT, RIGHT, RIGHT, RIGHT]
W = [1.0] * 6
ORDER = list(range(6))


def test_perfect_continuous_surrogate():
    res = choose_surrogate(0, 6, Y, X, ORDER, 0, 3.0, 3.0, W, 1)
    assert res.agreement == 1.0
    assert res.adj == 1.0
    assert res.split == 3.5
    assert res.csplit == (LEFT,)


def test_reversed_continuous_surrogate():
    y = [RIGHT, RIGHT, RIGHT, LEFT, LEFT, LEFT]
    res = choose_surrogate(0, 6, y, X, ORDER, 0, 3.0, 3.0, W, 1)
    assert res.csplit == (RIGHT,)
    assert res.agreement == 1.0
    assert res.split == 3.5


def test_missing_x_is_ignored():
    x = X + [math.nan]
    y = Y + [LEFT]
    w = W + [1.0]
    order = [-7] + ORDER
    with_missing = choose_surrogate(0, 7, y, x, order, 0, 3.0, 3.0, w, 1)
    without = choose_surrogate(0, 6, Y, X, ORDER, 0, 3.0, 3.0, W, 1)
    assert with_missing == without


def test_total_table_denominator_lowers_agreement():
    own = choose_surrogate(0, 6, Y, X, ORDER, 0, 4.0, 4.0, W, 1)
    total = choose_surrogate(0, 6, Y, X, ORDER, 0, 4.0, 4.0, W, 0)
    assert total.agreement < own.agreement
    assert total.agreement == pytest.approx(6 / 8)


def test_too_few_observations_gives_no_surrogate():
    y = [LEFT, RIGHT, RIGHT]
    res = choose_surrogate(0, 3, y, [1.0, 2.0, 3.0], [0, 1, 2], 0, 1.0, 2.0, [1.0] * 3, 1)
    assert res.agreement == 0.0
    assert res.adj == 0.0


def test_noisy_categorical_surrogate():
    x = [1, 1, 1, 2, 2, 2]
    y = [LEFT, LEFT, RIGHT, RIGHT, RIGHT, LEFT]
    res = choose_surrogate(0, 6, y, x, ORDER, 2, 3.0, 3.0, W, 1)
    assert res.csplit == (LEFT, RIGHT)
    assert res.agreement == pytest.approx(4 / 6)
    assert 0.0 < res.adj < res.agreement


def test_categorical_empty_level_has_no_direction():
    x = [1, 1, 1, 3, 3, 3]
    y = [LEFT, LEFT, RIGHT, RIGHT, RIGHT, LEFT]
    res = choose_surrogate(0, 6, y, x, ORDER, 3, 3.0, 3.0, W, 1)
    assert res.csplit[1] == 0
    assert res.csplit[0] == LEFT and res.csplit[2] == RIGHT


def test_categorical_perfect_split_counts_as_failure():
    x = [1, 1, 2, 2]
    y = [LEFT, LEFT, RIGHT, RIGHT]
    res = choose_surrogate(0, 4, y, x, [0, 1, 2, 3], 2, 2.0, 2.0, [1.0] * 4, 1)
    assert res.agreement == 0.0
    assert res.adj == 0.0