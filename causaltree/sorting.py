"""Sorting a vector of keys while carrying a companion vector along."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def sort_carrying(
    values: Sequence[float], carry: Sequence[T]
) -> tuple[list[float], list[T]]:
    """Sort ``values`` ascending and permute ``carry`` the same way.

    Returns the sorted values and the carried items as two new lists.
    """
    values = list(values)
    carry = list(carry)
    if len(values) != len(carry):
        raise ValueError(
            f"values and carry differ in length: {len(values)} != {len(carry)}"
        )
    order = sorted(range(len(values)), key=values.__getitem__)
    return [values[i] for i in order], [carry[i] for i in order]