"""Placing observations in the nodes of a tree stored in matrix form."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence


@dataclass
class TreeFrame:
    """A fitted tree as flat per-node and per-split tables.

    Per node: ``nnum`` its number (root 1, sons 2k and 2k+1), ``count`` the
    observations it held, ``primary`` the 1-based row of its primary split
    (0 for a leaf), ``ncompete`` its competitor splits and ``nsurrogate`` its
    surrogate splits, which follow the primary and the competitors.
    Per split: ``split_var`` the 1-based variable, ``split_ncat`` the number
    of levels if 2 or more, otherwise the direction of values below the cut,
    ``split_value`` the cut or the 1-based row of ``csplit``. Each ``csplit``
    row gives the direction of every level.
    """

    nnum: list[int]
    count: list[int]
    primary: list[int]
    ncompete: list[int]
    nsurrogate: list[int]
    split_var: list[int] = field(default_factory=list)
    split_ncat: list[int] = field(default_factory=list)
    split_value: list[float] = field(default_factory=list)
    csplit: list[list[int]] = field(default_factory=list)
    _positions: dict[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        nnode = len(self.nnum)
        if not all(
            len(col) == nnode
            for col in (self.count, self.primary, self.ncompete, self.nsurrogate)
        ):
            raise ValueError("every node table must have one entry per node")
        nsplit = len(self.split_var)
        if len(self.split_ncat) != nsplit or len(self.split_value) != nsplit:
            raise ValueError("every split table must have one entry per split")
        self._positions = {}
        for pos, number in enumerate(self.nnum):
            self._positions.setdefault(number, pos)


def _locate(frame: TreeFrame, node: int) -> int:
    try:
        return frame._positions[node]
    except KeyError:
        raise ValueError(f"node {node} is not in the tree") from None


def _direction(
    frame: TreeFrame,
    nspl: int,
    obs: int,
    xdata: Sequence[Sequence[float]],
    xmiss: Sequence[Sequence[int]],
) -> int:
    var = frame.split_var[nspl] - 1
    if xmiss[var][obs] != 0:
        return 0
    value = xdata[var][obs]
    ncat = int(frame.split_ncat[nspl])
    point = frame.split_value[nspl]
    if ncat >= 2:
        return frame.csplit[int(point) - 1][int(value) - 1]
    return ncat if value < point else -ncat


def _son(node: int, direction: int) -> int:
    return 2 * node if direction == -1 else 2 * node + 1


def _descend(
    frame: TreeFrame,
    pos: int,
    node: int,
    obs: int,
    xdata: Sequence[Sequence[float]],
    xmiss: Sequence[Sequence[int]],
    usesur: int,
    counts: Sequence[int],
) -> Optional[int]:
    """Number of the son ``obs`` moves to from ``node``, or None to stop."""
    nspl = frame.primary[pos] - 1
    if nspl < 0:
        return None
    direction = _direction(frame, nspl, obs, xdata, xmiss)
    if direction:
        return _son(node, direction)
    if usesur > 0:
        first = frame.ncompete[pos] + frame.primary[pos]
        for j in range(frame.nsurrogate[pos]):
            direction = _direction(frame, first + j, obs, xdata, xmiss)
            if direction:
                return _son(node, direction)
    if usesur > 1:
        lcount = counts[_locate(frame, 2 * node)]
        rcount = counts[_locate(frame, 2 * node + 1)]
        if lcount != rcount:
            return 2 * node if lcount > rcount else 2 * node + 1
    return None


def _missing_flags(xdata: Sequence[Sequence[float]]) -> list[list[int]]:
    return [[0 if math.isfinite(v) else 1 for v in column] for column in xdata]


def estimate_tree(
    frame: TreeFrame,
    xdata: Sequence[Sequence[float]],
    xmiss: Optional[Sequence[Sequence[int]]],
    usesur: int,
) -> list[int]:
    """Node number at which each observation of ``xdata`` comes to rest.

    ``xdata`` holds one column per variable; ``xmiss`` flags missing values
    with a non-zero entry and is worked out from non-finite values when None.
    ``usesur`` is 0 to stop at a missing value, 1 to try surrogates, 2 to
    also follow the larger son when they fail.
    """
    if xmiss is None:
        xmiss = _missing_flags(xdata)
    n = len(xdata[0]) if xdata else 0
    where = []
    for obs in range(n):
        node = 1
        while True:
            pos = _locate(frame, node)
            son = _descend(frame, pos, node, obs, xdata, xmiss, usesur, frame.count)
            if son is None:
                break
            node = son
        where.append(node)
    return where