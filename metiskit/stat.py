"""Balance statistics of a computed partitioning."""

from __future__ import annotations

from typing import List, Optional, Sequence


def _part_totals(nparts: int, where: Sequence[int], weights: Sequence[int]) -> List[int]:
    totals = [0] * nparts
    for part, weight in zip(where, weights):
        if not 0 <= part < nparts:
            raise ValueError(f"partition number {part} is out of range")
        totals[part] += weight
    return totals


def _balance(nparts: int, totals: Sequence[int]) -> float:
    total = sum(totals)
    if total == 0:
        raise ValueError("the total weight is zero")
    return nparts * max(totals) / total


def compute_partition_balance(
    nparts: int,
    where: Sequence[int],
    vwgt: Optional[Sequence[int]],
    ncon: int,
) -> List[float]:
    """Load imbalance of each constraint: ``nparts * max / total``.

    Without vertex weights every vertex counts one and a single value is
    returned.
    """
    nvtxs = len(where)
    if vwgt is None:
        return [_balance(nparts, _part_totals(nparts, where, [1] * nvtxs))]
    if len(vwgt) < nvtxs * ncon:
        raise ValueError("not enough vertex weights for the constraints")
    return [
        _balance(nparts, _part_totals(nparts, where, vwgt[con::ncon][:nvtxs]))
        for con in range(ncon)
    ]


def compute_element_balance(nparts: int, where: Sequence[int]) -> float:
    """Load imbalance of an element partitioning, counting each element once."""
    return _balance(nparts, _part_totals(nparts, where, [1] * len(where)))