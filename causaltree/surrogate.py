"""Finding the surrogate split that best copies a primary split."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .model import LEFT, RIGHT


@dataclass(frozen=True)
class SurrogateResult:
    """Best surrogate for one variable.

    ``agreement`` is the share of weight sent the same way as the primary
    split, ``adj`` the part of the possible gain over the majority rule that
    was realised. Both are 0 when no usable split was found.
    """

    agreement: float
    adj: float
    split: float
    csplit: tuple[int, ...]


def _ratio(num: float, den: float) -> float:
    if den:
        return num / den
    if num == 0 or math.isnan(num):
        return math.nan
    return math.copysign(math.inf, num)


def _continuous(n1, n2, y, x, order, wt):
    ll = rl = 0
    llwt = rlwt = 0.0
    lastx = 0.0
    for j in reversed(order[n1:n2]):
        if j < 0:
            continue
        lastx = x[j]
        if y[j] == LEFT:
            if wt[j] > 0:
                ll += 1
            llwt += wt[j]
        elif y[j] == RIGHT:
            if wt[j] > 0:
                rl += 1
            rlwt += wt[j]

    agree = llwt if llwt > rlwt else rlwt
    majority = agree
    total_wt = llwt + rlwt

    lr = rr = 0
    lrwt = rrwt = 0.0
    direction = LEFT
    split = lastx
    success = False
    for j in order[n1:n2]:
        if ll + rl < 2:
            break
        if j < 0:
            continue
        if lr + rr >= 2 and x[j] != lastx:
            if llwt + rrwt > agree:
                success = True
                agree = llwt + rrwt
                direction = RIGHT
                split = (x[j] + lastx) / 2
            elif lrwt + rlwt > agree:
                success = True
                agree = lrwt + rlwt
                direction = LEFT
                split = (x[j] + lastx) / 2
        if y[j] == LEFT:
            if wt[j] > 0:
                ll -= 1
                lr += 1
            llwt -= wt[j]
            lrwt += wt[j]
        elif y[j] == RIGHT:
            if wt[j] > 0:
                rl -= 1
                rr += 1
            rlwt -= wt[j]
            rrwt += wt[j]
        lastx = x[j]
    return success, agree, majority, total_wt, split, (direction,)


def _categorical(n1, n2, y, x, order, ncat, wt):
    left = [0] * ncat
    right = [0] * ncat
    lwt = [0.0] * ncat
    rwt = [0.0] * ncat
    for j in order[n1:n2]:
        if j < 0:
            continue
        k = int(x[j]) - 1
        if y[j] == LEFT:
            if wt[j] > 0:
                left[k] += 1
            lwt[k] += wt[j]
        elif y[j] == RIGHT:
            if wt[j] > 0:
                right[k] += 1
            rwt[k] += wt[j]

    llwt = sum(lwt)
    rrwt = sum(rwt)
    if llwt > rrwt:
        defdir, majority = LEFT, llwt
    else:
        defdir, majority = RIGHT, rrwt
    total_wt = llwt + rrwt

    agree = 0.0
    lcount = rcount = 0
    csplit = []
    for nl, nr, wl, wr in zip(left, right, lwt, rwt):
        if nl == 0 and nr == 0:
            csplit.append(0)
        elif wl < wr or (wl == wr and defdir == RIGHT):
            agree += wr
            csplit.append(RIGHT)
            lcount += nl
            rcount += nr
        else:
            agree += wl
            csplit.append(LEFT)
            lcount += nr
            rcount += nl
    success = lcount > 1 and rcount > 1
    return success, agree, majority, total_wt, 0.0, tuple(csplit)


def choose_surrogate(
    n1: int,
    n2: int,
    y: Sequence[int],
    x: Sequence[float],
    order: Sequence[int],
    ncat: int,
    tleft: float,
    tright: float,
    wt: Sequence[float],
    sur_agree: int,
) -> SurrogateResult:
    """Best split of one variable for predicting the primary split ``y``.

    ``y`` and ``x`` are indexed by observation; ``y`` holds LEFT, RIGHT or 0
    for missing. ``order[n1:n2]`` lists the node's observations, negative for
    a missing ``x``. ``tleft`` and ``tright`` are the weights the primary
    split sends each way; they are the denominator when ``sur_agree`` is 0,
    otherwise only observations with ``x`` present count.
    """
    if ncat == 0:
        outcome = _continuous(n1, n2, y, x, order, wt)
    else:
        outcome = _categorical(n1, n2, y, x, order, ncat, wt)
    success, agree, majority, total_wt, split, csplit = outcome

    if not success:
        return SurrogateResult(0.0, 0.0, split, csplit)

    if sur_agree == 0:
        total_wt = tleft + tright
        majority = tleft if tleft > tright else tright

    agreement = _ratio(agree, total_wt)
    majority = _ratio(majority, total_wt)
    adj = _ratio(agreement - majority, 1.0 - majority)
    return SurrogateResult(agreement, adj, split, csplit)