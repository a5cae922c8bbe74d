import math

import pytest

from causaltree.estimate import TreeFrame, estimate_tree

NAN = math.nan


def stump(counts=(4, 2, 2), nsurrogate=1):
    # Split 1: variable 1, values below 3 go left.
    # Split 2: surrogate on variable 2, values below 0.5 go right.
    return TreeFrame(
        nnum=[1, 2, 3],
        count=list(counts),
        primary=[1, 0, 0],
        ncompete=[0, 0, 0],
        nsurrogate=[nsurrogate, 0, 0],
        split_var=[1, 2],
        split_ncat=[-1, 1],
        split_value=[3.0, 0.5],
    )


XDATA = [[1.0, 5.0, NAN, NAN, NAN], [0.0, 0.0, 0.2, 0.9, NAN]]


def test_primary_split_places_observations():
    where = estimate_tree(stump(), XDATA, None, 0)
    assert where[:2] == [2, 3]


def test_missing_without_surrogates_stays_at_root():
    where = estimate_tree(stump(), XDATA, None, 0)
    assert where[2:] == [1, 1, 1]


def test_surrogates_place_missing_primary():
    where = estimate_tree(stump(), XDATA, None, 1)
    assert where == [2, 3, 3, 2, 1]


def test_majority_rule_follows_larger_son():
    where = estimate_tree(stump(counts=(4, 3, 1)), XDATA, None, 2)
    assert where[4] == 2
    where = estimate_tree(stump(counts=(4, 1, 3)), XDATA, None, 2)
    assert where[4] == 3


def test_majority_rule_tie_stays_home():
    where = estimate_tree(stump(counts=(4, 2, 2)), XDATA, None, 2)
    assert where[4] == 1


def test_explicit_missing_flags_override_values():
    xmiss = [[1, 0, 1, 1, 1], [0, 0, 0, 0, 1]]
    where = estimate_tree(stump(), XDATA, xmiss, 1)
    assert where[0] == 3


def test_categorical_split():
    frame = TreeFrame(
        nnum=[1, 2, 3],
        count=[3, 2, 1],
        primary=[1, 0, 0],
        ncompete=[0, 0, 0],
        nsurrogate=[0, 0, 0],
        split_var=[1],
        split_ncat=[3],
        split_value=[1.0],
        csplit=[[-1, 1, 0]],
    )
    where = estimate_tree(frame, [[1.0, 2.0, 3.0]], None, 0)
    assert where == [2, 3, 1]


def test_deeper_tree_reaches_grandsons():
    frame = TreeFrame(
        nnum=[1, 2, 3, 4, 5],
        count=[4, 3, 1, 2, 1],
        primary=[1, 2, 0, 0, 0],
        ncompete=[0, 0, 0, 0, 0],
        nsurrogate=[0, 0, 0, 0, 0],
        split_var=[1, 1],
        split_ncat=[-1, -1],
        split_value=[10.0, 5.0],
    )
    where = estimate_tree(frame, [[1.0, 7.0, 12.0]], None, 0)
    assert where == [4, 5, 3]


def test_unknown_node_raises():
    frame = TreeFrame(
        nnum=[1, 2],
        count=[2, 1],
        primary=[1, 0],
        ncompete=[0, 0],
        nsurrogate=[0, 0],
        split_var=[1],
        split_ncat=[-1],
        split_value=[3.0],
    )
    with pytest.raises(ValueError):
        estimate_tree(frame, [[5.0]], None, 0)


def test_mismatched_tables_raise():
    with pytest.raises(ValueError):
        TreeFrame(nnum=[1, 2], count=[1], primary=[0, 0], ncompete=[0, 0], nsurrogate=[0, 0])