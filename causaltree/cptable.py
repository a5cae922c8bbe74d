"""The table of complexity parameters of a fitted tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .model import Node


@dataclass
class CpEntry:
    """One row of the complexity table."""

    cp: float
    risk: float = 0.0
    xrisk: float = 0.0
    xstd: float = 0.0
    nsplit: int = 0


class CpTable:
    """Unique complexity parameters, largest first."""

    def __init__(self, cp: float, risk: float) -> None:
        self.entries: list[CpEntry] = [CpEntry(cp=cp, risk=risk)]

    def __iter__(self) -> Iterator[CpEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> CpEntry:
        return self.entries[index]

    @property
    def head(self) -> CpEntry:
        return self.entries[0]

    @property
    def tail(self) -> CpEntry:
        return self.entries[-1]

    def insert(self, cp: float) -> Optional[CpEntry]:
        """Add ``cp`` in order; return the new entry, or None on an exact tie."""
        pos = len(self.entries)
        for i, entry in enumerate(self.entries):
            if cp == entry.cp:
                return None
            if cp > entry.cp:
                pos = i
                break
        new = CpEntry(cp=cp)
        self.entries.insert(pos, new)
        return new


def make_cp_list(me: Node, parent: float, table: CpTable, alpha: float) -> None:
    """Add the unique complexities of the subtree at ``me`` to ``table``.

    Each node's complexity is first lowered to at most its parent's; no
    value below ``alpha`` enters the table.
    """
    if me.complexity > parent:
        me.complexity = parent
    me_cp = me.complexity
    if me_cp < alpha:
        me_cp = alpha
    if me.leftson is not None:
        make_cp_list(me.leftson, me_cp, table, alpha)
        make_cp_list(me.rightson, me_cp, table, alpha)
    if me_cp < parent:
        table.insert(me_cp)


def make_cp_table(me: Node, parent: float, table: CpTable, nsplit: int) -> int:
    """Fill in risk and split counts of ``table`` from the subtree at ``me``.

    Returns the index of the first entry at which the parent collapses.
    """
    if me.leftson is not None:
        make_cp_table(me.leftson, me.complexity, table, 0)
        index = make_cp_table(me.rightson, me.complexity, table, nsplit + 1)
    else:
        index = len(table) - 1
    while index >= 0 and table[index].cp < parent:
        entry = table[index]
        entry.risk += me.risk
        entry.nsplit += nsplit
        index -= 1
    return index