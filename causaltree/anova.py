"""Splitting on the squared treatment effect, with no variance terms."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

from .model import LEFT, RIGHT, NodeEstimate, SplitChoice


def _div(num: float, den: float) -> float:
    """Floating-point division giving inf or nan instead of raising."""
    if den:
        return num / den
    if num == 0 or math.isnan(num):
        return math.nan
    return math.copysign(math.inf, num) * math.copysign(1.0, den)


@dataclass
class _Sums:
    """Weighted sums over a group of observations."""

    n: int = 0
    wt: float = 0.0
    tr: float = 0.0
    ysum: float = 0.0
    trsum: float = 0.0
    sqr: float = 0.0
    trsqr: float = 0.0

    @classmethod
    def of(cls, y: float, wt: float, treatment: float) -> _Sums:
        return cls(
            n=1,
            wt=wt,
            tr=wt * treatment,
            ysum=y * wt,
            trsum=y * wt * treatment,
            sqr=y * y * wt,
            trsqr=y * y * wt * treatment,
        )

    def __iadd__(self, other: _Sums) -> _Sums:
        self.n += other.n
        self.wt += other.wt
        self.tr += other.tr
        self.ysum += other.ysum
        self.trsum += other.trsum
        self.sqr += other.sqr
        self.trsqr += other.trsqr
        return self

    def __isub__(self, other: _Sums) -> _Sums:
        self.n -= other.n
        self.wt -= other.wt
        self.tr -= other.tr
        self.ysum -= other.ysum
        self.trsum -= other.trsum
        self.sqr -= other.sqr
        self.trsqr -= other.trsqr
        return self

    @property
    def effect(self) -> float:
        """Treated mean minus control mean."""
        return _div(self.trsum, self.tr) - _div(self.ysum - self.trsum, self.wt - self.tr)

    def big_enough(self, minsize: int) -> bool:
        """Whether both the treated and the control weight reach ``minsize``."""
        return int(self.tr) >= minsize and int(self.wt) - int(self.tr) >= minsize


Score = Callable[[_Sums], "tuple[float, float]"]


def _observations(
    y: Sequence[float],
    wt: Sequence[float],
    treatment: Sequence[float],
    x: Optional[Sequence[float]] = None,
) -> list[_Sums]:
    n = len(y)
    if len(wt) != n or len(treatment) != n or (x is not None and len(x) != n):
        raise ValueError("y, x, wt and treatment must have the same length")
    return [_Sums.of(float(yi), float(w), float(t)) for yi, w, t in zip(y, wt, treatment)]


def _continuous(
    x: Sequence[float],
    obs: list[_Sums],
    total: _Sums,
    node_effect: float,
    edge: int,
    minsize: int,
    score: Score,
) -> SplitChoice:
    n = len(obs)
    left = _Sums()
    right = replace(total)
    best = 0.0
    where: Optional[int] = None
    direction = LEFT
    steps = min(n, n - edge) if n > edge else 0
    for i in range(steps):
        left += obs[i]
        right -= obs[i]
        if i + 1 >= n or x[i + 1] == x[i] or left.n < edge:
            continue
        if not (left.big_enough(minsize) and right.big_enough(minsize)):
            continue
        left_temp, left_effect = score(left)
        right_temp, right_effect = score(right)
        gain = left_effect + right_effect - node_effect
        if gain > best:
            best = gain
            where = i
            direction = LEFT if left_temp < right_temp else RIGHT
    if where is None or not best > 0:
        return SplitChoice(improve=best)
    return SplitChoice(
        improve=best, split=(x[where] + x[where + 1]) / 2, csplit=(direction,)
    )


def _categorical(
    x: Sequence[float],
    nclass: int,
    obs: list[_Sums],
    total: _Sums,
    node_effect: float,
    edge: int,
    minsize: int,
    score: Score,
) -> SplitChoice:
    classes = [_Sums() for _ in range(nclass)]
    for value, o in zip(x, obs):
        level = int(value)
        if not 1 <= level <= nclass:
            raise ValueError(f"category {value} is outside 1..{nclass}")
        classes[level - 1] += o

    tsplit = [RIGHT if c.n else 0 for c in classes]
    left = _Sums()
    right = replace(total)
    best = 0.0
    csplit: Optional[tuple[int, ...]] = None
    # Every class is ranked by the same effect, so classes move in index order.
    for j in (k for k, c in enumerate(classes) if c.n):
        tsplit[j] = LEFT
        left += classes[j]
        right -= classes[j]
        if left.n < edge or right.n < edge:
            continue
        if not (left.big_enough(minsize) and right.big_enough(minsize)):
            continue
        left_temp, left_effect = score(left)
        right_temp, right_effect = score(right)
        gain = left_effect + right_effect - node_effect
        if gain > best:
            best = gain
            sign = -1 if left_temp > right_temp else 1
            csplit = tuple(sign * t for t in tsplit)
    if csplit is None:
        return SplitChoice(improve=best)
    return SplitChoice(improve=best, csplit=csplit)


def _search_split(
    y: Sequence[float],
    x: Sequence[float],
    nclass: int,
    edge: int,
    wt: Sequence[float],
    treatment: Sequence[float],
    minsize: int,
    score: Score,
) -> SplitChoice:
    """Best split of ``x`` under the gain measured by ``score``."""
    obs = _observations(y, wt, treatment, x)
    total = _Sums()
    for o in obs:
        total += o
    node_effect = score(total)[1]
    if nclass == 0:
        return _continuous(x, obs, total, node_effect, edge, minsize, score)
    return _categorical(x, nclass, obs, total, node_effect, edge, minsize, score)


def _anova_score(side: _Sums) -> tuple[float, float]:
    temp = side.effect
    return temp, temp * temp * side.wt


def anova_eval(
    y: Sequence[float],
    wt: Sequence[float],
    treatment: Sequence[float],
    max_y: float,
) -> NodeEstimate:
    """Treatment effect and risk of a node holding these observations."""
    _observations(y, wt, treatment)
    temp0 = temp1 = twt = ttreat = 0.0
    for yi, w, t in zip(y, wt, treatment):
        temp1 += yi * w * t
        temp0 += yi * w * (1 - t)
        twt += w
        ttreat += w * t
    tr_mean = _div(temp1, ttreat)
    con_mean = _div(temp0, twt - ttreat)
    effect = tr_mean - con_mean
    risk = 4 * twt * max_y * max_y - twt * effect * effect
    return NodeEstimate(value=effect, con_mean=con_mean, tr_mean=tr_mean, risk=risk)


def anova_split(
    y: Sequence[float],
    x: Sequence[float],
    nclass: int,
    edge: int,
    wt: Sequence[float],
    treatment: Sequence[float],
    minsize: int,
) -> SplitChoice:
    """Split of ``x`` that most raises the weighted squared effect.

    For a continuous variable (``nclass`` 0) the observations must be in
    increasing order of ``x``; categorical levels are coded 1..``nclass``.
    Each side needs ``edge`` observations and ``minsize`` weight of treated
    and of control units.
    """
    return _search_split(y, x, nclass, edge, wt, treatment, minsize, _anova_score)


def anova_pred(y: float, wt: float, treatment: float, yhat: float, p: float) -> float:
    """Weighted squared error of ``yhat`` against the transformed outcome."""
    temp = _div(y, p) if treatment == 1 else -_div(y, 1 - p)
    temp -= yhat
    return temp * temp * wt