"""Honest re-estimation of a plain regression tree on a fresh sample."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .estimate import TreeFrame, _descend, _locate, _missing_flags


@dataclass(frozen=True)
class RpartHonestEstimate:
    """Per-node results of running a new sample down a tree.

    ``where`` gives each observation's final node number; the other lists
    follow the node order of the frame: observations passing through, their
    total weight, the deviance and the weighted mean response.
    """

    where: list[int]
    count: list[int]
    wt: list[float]
    dev: list[float]
    yval: list[float]


def honest_estimate_rpart_tree(
    frame: TreeFrame,
    xdata: Sequence[Sequence[float]],
    xmiss: Optional[Sequence[Sequence[int]]],
    usesur: int,
    wt: Sequence[float],
    y: Sequence[float],
) -> RpartHonestEstimate:
    """Re-estimate the node means and deviances of ``frame`` from new data.

    Every node an observation passes through accumulates it. When surrogates
    fail and ``usesur`` is 2, the son that has received more of the new
    observations so far is followed. A node that received no weight takes
    its parent's mean, for its deviance too.
    """
    if xmiss is None:
        xmiss = _missing_flags(xdata)
    n = len(xdata[0]) if xdata else 0
    if len(wt) != n or len(y) != n:
        raise ValueError("wt and y must have one value per observation")

    nnode = len(frame.nnum)
    count = [0] * nnode
    wsum = [0.0] * nnode
    ysum = [0.0] * nnode
    ysqr = [0.0] * nnode
    where: list[int] = []

    for obs in range(n):
        w = float(wt[obs])
        yi = float(y[obs])
        node = 1
        while True:
            pos = _locate(frame, node)
            count[pos] += 1
            wsum[pos] += w
            ysum[pos] += w * yi
            ysqr[pos] += w * yi * yi
            son = _descend(frame, pos, node, obs, xdata, xmiss, usesur, count)
            if son is None:
                break
            node = son
        where.append(node)

    invert = {number: pos for pos, number in enumerate(frame.nnum)}
    yval = [0.0] * nnode
    dev = [0.0] * nnode
    for number in sorted(invert):
        pos = invert[number]
        if wsum[pos] != 0:
            mean = ysum[pos] / wsum[pos]
            yval[pos] = mean
            dev[pos] = ysqr[pos] - wsum[pos] * mean * mean
        else:
            parent = invert.get(number // 2)
            if parent is None:
                raise ValueError(f"node {number} has no weight and no parent to inherit from")
            yval[pos] = yval[parent]
            dev[pos] = yval[parent]

    return RpartHonestEstimate(where=where, count=count, wt=wsum, dev=dev, yval=yval)