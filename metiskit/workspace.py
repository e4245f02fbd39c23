"""Workspace sizing and the growable neighbour pool used in k-way refinement."""

from __future__ import annotations

import enum
from dataclasses import dataclass

IDX_BYTES = 4
REAL_BYTES = 4


class OpType(enum.IntEnum):
    """Top-level operation being performed."""

    PMETIS = 0
    KMETIS = 1
    OMETIS = 2


def compute_core_size(optype: int, nvtxs: int, nparts: int, ncon: int) -> int:
    """Number of bytes reserved for the scratch core of an operation."""
    vertex_arrays = 3 if optype == OpType.PMETIS else 4
    return (
        vertex_arrays * (nvtxs + 1) * IDX_BYTES
        + 5 * (nparts + 1) * ncon * IDX_BYTES
        + 5 * (nparts + 1) * ncon * REAL_BYTES
    )


@dataclass
class NeighborPool:
    """Hands out consecutive slices of a pool that grows on demand."""

    nparts: int
    size_max: int
    size: int = 0
    cpos: int = 0
    reallocs: int = 0

    def reset(self) -> None:
        self.cpos = 0

    def get_next(self, nnbrs: int) -> int:
        """Reserve room for ``nnbrs`` neighbours and return the start offset."""
        nnbrs = min(self.nparts, nnbrs)
        self.cpos += nnbrs
        if self.cpos > self.size:
            self.size += max(10 * nnbrs, self.size // 2)
            self.size = min(self.size, self.size_max)
            self.reallocs += 1
        return self.cpos - nnbrs