"""Tree structures and the shared data of a fitting run."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .sorting import sort_carrying

LEFT = -1
RIGHT = 1
MISSING = 0


@dataclass
class Split:
    """A primary or surrogate split of a node.

    ``csplit[0]`` holds the direction of values below ``spoint`` for a
    continuous variable; for a categorical one ``csplit`` holds LEFT, RIGHT
    or 0 for each level.
    """

    improve: float = 0.0
    adj: float = 0.0
    spoint: float = 0.0
    var_num: int = 0
    count: int = 0
    csplit: list[int] = field(default_factory=lambda: [0])


@dataclass(eq=False)
class Node:
    """A node of the tree."""

    id: int = 0
    risk: float = 0.0
    complexity: float = 0.0
    sum_wt: float = 0.0
    sum_tr: float = 0.0
    primary: list[Split] = field(default_factory=list)
    surrogate: list[Split] = field(default_factory=list)
    leftson: Optional[Node] = None
    rightson: Optional[Node] = None
    parent: Optional[Node] = field(default=None, repr=False)
    num_obs: int = 0
    lastsurrogate: int = 0
    response_est: float = 0.0
    treat_mean: float = 0.0
    control_mean: float = 0.0
    xtreat_mean: float = 0.0
    xcontrol_mean: float = 0.0

    @property
    def is_leaf(self) -> bool:
        return self.leftson is None

    def fix_cp(self, parent_cp: float) -> None:
        """Lower every complexity in this subtree to at most its parent's."""
        stack: list[tuple[Node, float]] = [(self, parent_cp)]
        while stack:
            node, limit = stack.pop()
            if node.complexity > limit:
                node.complexity = limit
            if node.leftson is not None:
                stack.append((node.leftson, node.complexity))
                if node.rightson is not None:
                    stack.append((node.rightson, node.complexity))


@dataclass(frozen=True)
class SplitChoice:
    """What a splitting function found for one variable."""

    improve: float
    split: float = 0.0
    csplit: tuple[int, ...] = (0,)


@dataclass(frozen=True)
class NodeEstimate:
    """What an evaluation function reports for a node."""

    value: float
    con_mean: float
    tr_mean: float
    risk: float


def insert_split(
    splits: list[Split], improve: float, max_splits: int
) -> Optional[Split]:
    """Insert a new split into ``splits``, kept in decreasing improvement.

    At most ``max_splits`` splits are kept. Returns the new split for the
    caller to fill in, or None if it is not good enough to be kept.
    """
    new = Split(improve=improve)
    if not splits:
        splits.append(new)
        return new
    if max_splits < 2:
        if improve <= splits[0].improve:
            return None
        splits[:] = [new]
        return new
    pos = next(
        (i for i, s in enumerate(splits) if improve > s.improve), len(splits)
    )
    if len(splits) >= max_splits:
        if pos == len(splits):
            return None
        splits.pop()
    splits.insert(pos, new)
    return new


@dataclass
class TreeData:
    """The data and settings shared by all routines of one fitting run.

    ``xdata`` holds one column per predictor, ``ydata`` one row of responses
    per observation. Missing predictor values are non-finite numbers.
    """

    xdata: list[list[float]]
    ydata: list[list[float]]
    wt: list[float]
    treatment: list[float]
    numcat: list[int] = field(default_factory=list)
    vcost: list[float] = field(default_factory=list)
    usesurrogate: int = 2
    sur_agree: int = 0
    min_node: int = 1
    maxpri: int = 1
    propensity: float = 0.5
    num_honest: int = 0
    complexity: float = 0.0
    alpha: float = 0.0
    iscale: float = 0.0
    sorts: list[list[int]] = field(default_factory=list)
    which: list[int] = field(default_factory=list)
    max_y: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.xdata = [[float(v) for v in col] for col in self.xdata]
        self.ydata = [[float(v) for v in row] for row in self.ydata]
        self.wt = [float(v) for v in self.wt]
        self.treatment = [float(v) for v in self.treatment]
        n = len(self.wt)
        if len(self.treatment) != n or len(self.ydata) != n:
            raise ValueError("wt, treatment and ydata must have the same length")
        if any(len(col) != n for col in self.xdata):
            raise ValueError("every predictor column must have one value per observation")
        if not self.numcat:
            self.numcat = [0] * self.nvar
        if len(self.numcat) != self.nvar:
            raise ValueError("numcat must have one entry per predictor")
        if not self.vcost:
            self.vcost = [1.0] * self.nvar
        if len(self.vcost) != self.nvar:
            raise ValueError("vcost must have one entry per predictor")
        if not self.which:
            self.which = [1] * n
        self.max_y = max((abs(v) for row in self.ydata for v in row), default=0.0)

    @property
    def n(self) -> int:
        return len(self.wt)

    @property
    def nvar(self) -> int:
        return len(self.xdata)

    @property
    def response(self) -> list[float]:
        """The first response column."""
        return [row[0] for row in self.ydata]

    def compute_sorts(self) -> int:
        """Build the per-variable observation orderings.

        Continuous variables are ordered by value; missing values are coded
        as ``-(k + 1)`` and sorted as if their value were 0. Categorical
        variables keep the observation order. Returns the largest number of
        categories of any variable.
        """
        maxcat = 0
        self.sorts = []
        for column, ncat in zip(self.xdata, self.numcat):
            order = [k if math.isfinite(v) else -(k + 1) for k, v in enumerate(column)]
            if ncat == 0:
                keys = [v if math.isfinite(v) else 0.0 for v in column]
                _, order = sort_carrying(keys, order)
            elif ncat > maxcat:
                maxcat = ncat
            self.sorts.append(order)
        return maxcat