"""Moving observations from a node to its children."""

from __future__ import annotations

import math
from typing import Optional

from .model import LEFT, RIGHT, Node, Split, TreeData


def _decode(code: int) -> int:
    """Observation number of a code that is negative for a missing value."""
    return -(1 + code) if code < 0 else code


def _son(node: Node, direction: int) -> Optional[Node]:
    return node.leftson if direction == LEFT else node.rightson


def _route(split: Split, obs: int, data: TreeData) -> Optional[int]:
    """Direction ``split`` sends ``obs``, or None if it cannot decide."""
    value = data.xdata[split.var_num][obs]
    if not math.isfinite(value):
        return None
    if data.numcat[split.var_num] == 0:
        return split.csplit[0] if value < split.spoint else -split.csplit[0]
    direction = split.csplit[int(value) - 1]
    return direction if direction else None


def branch(tree: Node, obs: int, data: TreeData) -> Optional[Node]:
    """Walk observation ``obs`` one split further down from ``tree``.

    Returns the child it goes to, or None when ``tree`` is a leaf or the
    observation cannot be placed under the surrogate settings of ``data``.
    A negative ``obs`` is the code of an observation whose value is missing.
    """
    if tree.leftson is None:
        return None
    if not tree.primary:
        raise ValueError("an interior node needs a primary split")
    index = _decode(obs)

    direction = _route(tree.primary[0], index, data)
    if direction is not None:
        return _son(tree, direction)
    if data.usesurrogate == 0:
        return None

    for split in tree.surrogate:
        direction = _route(split, index, data)
        if direction is not None:
            return _son(tree, direction)

    if data.usesurrogate < 2:
        return None
    return _son(tree, tree.lastsurrogate)


def node_split(
    me: Node, nodenum: int, n1: int, n2: int, data: TreeData
) -> tuple[int, int]:
    """Send the observations at positions ``n1``..``n2`` of a node to its sons.

    Updates ``data.which`` with the son numbers ``2 * nodenum`` and
    ``2 * nodenum + 1`` and reorders that stretch of every row of
    ``data.sorts`` as: sent left, sent right, stayed home, keeping the order
    within the first two groups. Surrogates that place an observation have
    their ``count`` raised. Returns the numbers sent left and right.
    """
    if not me.primary:
        raise ValueError("the node has no primary split")
    which = data.which
    sorts = data.sorts
    xdata = data.xdata
    leftson = 2 * nodenum
    rightson = leftson + 1

    primary = me.primary[0]
    pvar = primary.var_num
    someleft = nleft = nright = 0

    for code in sorts[pvar][n1:n2]:
        if code < 0:
            someleft += 1
            continue
        value = xdata[pvar][code]
        if data.numcat[pvar] > 0:
            direction = primary.csplit[int(value) - 1]
            if direction == LEFT:
                which[code] = leftson
                nleft += 1
            elif direction == RIGHT:
                which[code] = rightson
                nright += 1
        else:
            direction = primary.csplit[0] if value < primary.spoint else -primary.csplit[0]
            if direction == LEFT:
                which[code] = leftson
                nleft += 1
            else:
                which[code] = rightson
                nright += 1

    if someleft > 0 and data.usesurrogate > 0:
        for code in sorts[pvar][n1:n2]:
            if code >= 0:
                continue
            obs = -(code + 1)
            for split in me.surrogate:
                value = xdata[split.var_num][obs]
                if not math.isfinite(value):
                    continue
                if data.numcat[split.var_num] > 0:
                    direction = split.csplit[int(value) - 1]
                    if not direction:
                        continue
                else:
                    direction = split.csplit[0] if value < split.spoint else -split.csplit[0]
                split.count += 1
                if direction == LEFT:
                    which[obs] = leftson
                    nleft += 1
                else:
                    which[obs] = rightson
                    nright += 1
                someleft -= 1
                break

    if someleft > 0 and data.usesurrogate == 2 and me.lastsurrogate:
        if me.lastsurrogate < 0:
            target = leftson
            nleft += someleft
        else:
            target = rightson
            nright += someleft
        for code in sorts[pvar][n1:n2]:
            if code < 0:
                obs = -(code + 1)
                if which[obs] == nodenum:
                    which[obs] = target

    for row in sorts:
        went_left: list[int] = []
        went_right: list[int] = []
        stayed: list[int] = []
        for code in row[n1:n2]:
            son = which[_decode(code)]
            if son == leftson:
                went_left.append(code)
            elif son == rightson:
                went_right.append(code)
            else:
                stayed.append(code)
        row[n1:n2] = went_left + went_right + stayed

    return nleft, nright