import math

import pytest

from causaltree.model import LEFT, RIGHT, Node, Split, TreeData
from causaltree.navigation import branch, node_split

NAN = math.nan


def make_data(usesurrogate=2):
    data = TreeData(
        xdata=[[1, 6, 3, NAN, 8, NAN], [1, 2, 1, 2, 1, NAN]],
        ydata=[[0.0]] * 6,
        wt=[1.0] * 6,
        treatment=[0, 1, 0, 1, 0, 1],
        numcat=[0, 2],
        usesurrogate=usesurrogate,
    )
    data.compute_sorts()
    return data


def make_tree():
    root = Node(id=1)
    left = Node(id=2, parent=root)
    right = Node(id=3, parent=root)
    root.leftson = left
    root.rightson = right
    root.primary = [Split(var_num=0, spoint=5.0, csplit=[LEFT])]
    root.surrogate = [Split(var_num=1, csplit=[LEFT, RIGHT])]
    root.lastsurrogate = RIGHT
    return root


def test_branch_by_primary_split():
    tree = make_tree()
    data = make_data()
    assert branch(tree, 0, data) is tree.leftson
    assert branch(tree, 1, data) is tree.rightson


def test_branch_reversed_direction():
    tree = make_tree()
    tree.primary[0].csplit = [RIGHT]
    data = make_data()
    assert branch(tree, 0, data) is tree.rightson
    assert branch(tree, 4, data) is tree.leftson


def test_branch_leaf_returns_none():
    tree = make_tree()
    assert branch(tree.leftson, 0, make_data()) is None


def test_branch_uses_surrogate_when_primary_missing():
    tree = make_tree()
    assert branch(tree, 3, make_data(usesurrogate=1)) is tree.rightson


def test_branch_without_surrogates_stops_on_missing():
    tree = make_tree()
    assert branch(tree, 3, make_data(usesurrogate=0)) is None


def test_branch_negative_code_is_decoded():
    tree = make_tree()
    data = make_data(usesurrogate=1)
    assert branch(tree, -4, data) is branch(tree, 3, data)


def test_branch_all_missing_uses_default_only_at_level_two():
    tree = make_tree()
    assert branch(tree, 5, make_data(usesurrogate=1)) is None
    assert branch(tree, 5, make_data(usesurrogate=2)) is tree.rightson
    tree.lastsurrogate = LEFT
    assert branch(tree, 5, make_data(usesurrogate=2)) is tree.leftson


def test_branch_categorical_zero_direction_falls_through():
    tree = make_tree()
    tree.primary = [Split(var_num=1, csplit=[0, LEFT])]
    tree.surrogate = []
    assert branch(tree, 0, make_data(usesurrogate=0)) is None
    assert branch(tree, 1, make_data(usesurrogate=0)) is tree.leftson


def decode(code):
    return -(1 + code) if code < 0 else code


def test_node_split_counts_and_which():
    tree = make_tree()
    data = make_data(usesurrogate=2)
    nleft, nright = node_split(tree, 1, 0, 6, data)
    assert (nleft, nright) == (2, 4)
    assert data.which == [2, 3, 2, 3, 3, 3]
    assert tree.surrogate[0].count == 1


def test_node_split_reorders_sorts():
    tree = make_tree()
    data = make_data(usesurrogate=2)
    before = [list(row) for row in data.sorts]
    nleft, _ = node_split(tree, 1, 0, 6, data)
    assert data.sorts[0] == [0, 2, -4, -6, 1, 4]
    for old, new in zip(before, data.sorts):
        assert sorted(old) == sorted(new)
        sons = [data.which[decode(c)] for c in new]
        assert sons == sorted(sons)
        left_old = [c for c in old if data.which[decode(c)] == 2]
        assert new[:nleft] == left_old


def test_node_split_without_default_leaves_obs_home():
    tree = make_tree()
    data = make_data(usesurrogate=1)
    nleft, nright = node_split(tree, 1, 0, 6, data)
    assert (nleft, nright) == (2, 3)
    assert data.which[5] == 1
    for row in data.sorts:
        assert decode(row[-1]) == 5


def test_node_split_needs_primary():
    data = make_data()
    with pytest.raises(ValueError):
        node_split(Node(id=1), 1, 0, 6, data)