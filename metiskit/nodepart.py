"""Graphs carrying a vertex separator and the bookkeeping around it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

SEPARATOR = 2


@dataclass
class NodeGraph:
    """A graph split into two sides (0 and 1) and a separator (2).

    ``pwgts`` holds the weight of each of the three parts, ``bndind`` lists the
    separator vertices with ``bndptr`` giving each one's position there (or
    -1), and ``edegrees[v]`` holds the weight that separator vertex ``v`` sees
    on either side.
    """

    xadj: List[int]
    adjncy: List[int]
    vwgt: Optional[List[int]] = None
    where: Optional[List[int]] = None
    cmap: Optional[List[int]] = None
    coarser: Optional["NodeGraph"] = field(default=None, repr=False)
    finer: Optional["NodeGraph"] = field(default=None, repr=False)
    pwgts: List[int] = field(default_factory=lambda: [0, 0, 0])
    bndind: List[int] = field(default_factory=list)
    bndptr: List[int] = field(default_factory=list)
    edegrees: List[List[int]] = field(default_factory=list)
    mincut: int = 0

    def __post_init__(self) -> None:
        if not self.xadj:
            raise ValueError("xadj must hold at least one entry")
        if self.vwgt is None:
            self.vwgt = [1] * self.nvtxs
        elif len(self.vwgt) != self.nvtxs:
            raise ValueError("vwgt must have one weight per vertex")

    @property
    def nvtxs(self) -> int:
        return len(self.xadj) - 1

    @property
    def nbnd(self) -> int:
        """Number of separator vertices."""
        return len(self.bndind)

    @property
    def tvwgt(self) -> int:
        """Total vertex weight."""
        return sum(self.vwgt)


def compute_2way_node_partition_params(graph: NodeGraph) -> None:
    """Recompute part weights, the separator list and separator degrees."""
    n = graph.nvtxs
    where = graph.where
    if where is None or len(where) != n:
        raise ValueError("the graph has no assignment for every vertex")

    vwgt = graph.vwgt
    pwgts = [0, 0, 0]
    bndind: List[int] = []
    bndptr = [-1] * n
    edegrees = [[0, 0] for _ in range(n)]

    for i, me in enumerate(where):
        if me not in (0, 1, SEPARATOR):
            raise ValueError(f"vertex {i} has invalid side {me}")
        pwgts[me] += vwgt[i]
        if me == SEPARATOR:
            bndptr[i] = len(bndind)
            bndind.append(i)
            degrees = edegrees[i]
            for j in range(graph.xadj[i], graph.xadj[i + 1]):
                nbr = graph.adjncy[j]
                other = where[nbr]
                if other != SEPARATOR:
                    degrees[other] += vwgt[nbr]

    graph.pwgts = pwgts
    graph.bndind = bndind
    graph.bndptr = bndptr
    graph.edegrees = edegrees
    graph.mincut = pwgts[SEPARATOR]


def project_2way_node_partition(graph: NodeGraph) -> None:
    """Carry the separator of ``graph.coarser`` down to ``graph``."""
    cgraph = graph.coarser
    if cgraph is None or graph.cmap is None:
        raise ValueError("the graph has no coarser graph to project from")
    cwhere = cgraph.where
    if cwhere is None:
        raise ValueError("the coarser graph has no partition")
    if len(graph.cmap) != graph.nvtxs:
        raise ValueError("cmap must have one entry per vertex")

    where = [cwhere[c] for c in graph.cmap]
    for i, side in enumerate(where):
        if side not in (0, 1, SEPARATOR):
            raise ValueError(f"vertex {i} projects to invalid side {side}")

    graph.where = where
    graph.coarser = None
    compute_2way_node_partition_params(graph)