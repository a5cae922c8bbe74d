"""Honest re-estimation of a causal tree's treatment effects on a fresh sample."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .estimate import TreeFrame, _descend, _locate, _missing_flags


@dataclass(frozen=True)
class HonestEstimate:
    """Per-node results of running a new sample down a causal tree.

    ``where`` gives each observation's final node number; the other lists
    follow the node order of the frame: observations passing through, their
    total weight, the deviance and the treatment effect.
    """

    where: list[int]
    count: list[int]
    wt: list[float]
    dev: list[float]
    yval: list[float]


def honest_estimate_causal_tree(
    frame: TreeFrame,
    xdata: Sequence[Sequence[float]],
    xmiss: Optional[Sequence[Sequence[int]]],
    usesur: int,
    wt: Sequence[float],
    treatment: Sequence[float],
    y: Sequence[float],
) -> HonestEstimate:
    """Re-estimate the treatment effects and deviances of ``frame`` from new data.

    Every node an observation passes through accumulates it. When surrogates
    fail and ``usesur`` is 2, the son that has received more of the new
    observations so far is followed. A node lacking treated or control
    weight takes its parent's effect, for its deviance too.
    """
    if xmiss is None:
        xmiss = _missing_flags(xdata)
    n = len(xdata[0]) if xdata else 0
    if len(wt) != n or len(treatment) != n or len(y) != n:
        raise ValueError("wt, treatment and y must have one value per observation")

    nnode = len(frame.nnum)
    count = [0] * nnode
    wsum = [0.0] * nnode
    trs = [0.0] * nnode
    cons = [0.0] * nnode
    trsums = [0.0] * nnode
    consums = [0.0] * nnode
    trsqr = [0.0] * nnode
    consqr = [0.0] * nnode
    where: list[int] = []

    for obs in range(n):
        w = float(wt[obs])
        t = float(treatment[obs])
        yi = float(y[obs])
        node = 1
        while True:
            pos = _locate(frame, node)
            count[pos] += 1
            wsum[pos] += w
            trs[pos] += w * t
            cons[pos] += w * (1 - t)
            trsums[pos] += w * t * yi
            consums[pos] += w * (1 - t) * yi
            trsqr[pos] += w * t * yi * yi
            consqr[pos] += w * (1 - t) * yi * yi
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
        if trs[pos] != 0 and cons[pos] != 0:
            tr_mean = trsums[pos] / trs[pos]
            con_mean = consums[pos] / cons[pos]
            yval[pos] = tr_mean - con_mean
            dev[pos] = (
                trsqr[pos] - trs[pos] * tr_mean * tr_mean
                + consqr[pos] - cons[pos] * con_mean * con_mean
            )
        else:
            parent = invert.get(number // 2)
            if parent is None:
                raise ValueError(
                    f"node {number} lacks treated or control weight and has no parent"
                )
            yval[pos] = yval[parent]
            dev[pos] = yval[parent]

    return HonestEstimate(where=where, count=count, wt=wsum, dev=dev, yval=yval)