"""Orders in which categories move from the right group to the left."""

from __future__ import annotations

from typing import Iterator, Sequence


def ordered_moves(counts: Sequence[int], values: Sequence[float]) -> list[int]:
    """Categories to move left one at a time, for an orderable variable.

    Empty categories are left out; the others come in increasing order of
    ``values``, ties keeping their original order.
    """
    if len(counts) != len(values):
        raise ValueError("counts and values must have the same length")
    ranked: list[tuple[float, int]] = []
    for index, (count, value) in enumerate(zip(counts, values)):
        if not count:
            continue
        pos = len(ranked)
        while pos > 0 and ranked[pos - 1][0] > value:
            pos -= 1
        ranked.insert(pos, (value, index))
    return [index for _, index in ranked]


def gray_moves(counts: Sequence[int]) -> Iterator[int]:
    """Yield the category that changes group at each step of a Gray code.

    Everyone starts in the right group; each step moves one non-empty
    category. The last category never moves, so every subset is visited
    once up to swapping left and right.
    """
    state = [1 if count else 0 for count in counts]
    while True:
        for i, mark in enumerate(state[:-1]):
            if mark == 1:
                state[i] = 2
                yield i
                break
            if mark == 2:
                state[i] = 1
        else:
            return