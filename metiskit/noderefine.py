"""FM-style refinement and balancing of vertex separators."""

from __future__ import annotations

import contextlib
import logging
import random
from dataclasses import dataclass, field
from typing import ContextManager, Dict, List, Optional, Tuple

from metiskit.nodepart import (
    SEPARATOR,
    NodeGraph,
    compute_2way_node_partition_params,
    project_2way_node_partition,
)
from metiskit.params import RType, i2r_ubfactor
from metiskit.timing import Timers
from metiskit.util import init_random

log = logging.getLogger(__name__)

DBG_TIME = 2
DBG_REFINE = 8
DBG_MOVEINFO = 32

DEFAULT_UFACTOR = 200


@dataclass
class RefineControl:
    """Settings and state shared by the separator refinement routines."""

    ubfactor: float = field(default_factory=lambda: i2r_ubfactor(DEFAULT_UFACTOR))
    niter: int = 10
    rtype: RType = RType.SEP1SIDED
    compress: bool = False
    dbglvl: int = 0
    seed: int = -1
    timers: Timers = field(default_factory=Timers)
    rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.rng = init_random(self.seed)


class _MaxQueue:
    """Addressable binary max-heap of vertices keyed by gain."""

    def __init__(self) -> None:
        self._heap: List[Tuple[int, int]] = []
        self._loc: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def reset(self) -> None:
        self._heap.clear()
        self._loc.clear()

    def _place(self, i: int, key: int, node: int) -> None:
        self._heap[i] = (key, node)
        self._loc[node] = i

    def _sift_up(self, i: int, key: int, node: int) -> None:
        heap = self._heap
        while i > 0:
            j = (i - 1) >> 1
            if key > heap[j][0]:
                self._place(i, *heap[j])
                i = j
            else:
                break
        self._place(i, key, node)

    def _sift_down(self, i: int, key: int, node: int) -> None:
        heap = self._heap
        n = len(heap)
        while (j := 2 * i + 1) < n:
            if heap[j][0] > key:
                if j + 1 < n and heap[j + 1][0] > heap[j][0]:
                    j += 1
            elif j + 1 < n and heap[j + 1][0] > key:
                j += 1
            else:
                break
            self._place(i, *heap[j])
            i = j
        self._place(i, key, node)

    def insert(self, node: int, key: int) -> None:
        if node in self._loc:
            raise ValueError(f"vertex {node} is already queued")
        self._heap.append((key, node))
        self._sift_up(len(self._heap) - 1, key, node)

    def delete(self, node: int) -> None:
        i = self._loc.pop(node)
        last_key, last_node = self._heap.pop()
        if last_node != node:
            if last_key > self._heap[i][0]:
                self._sift_up(i, last_key, last_node)
            else:
                self._sift_down(i, last_key, last_node)

    def update(self, node: int, key: int) -> None:
        i = self._loc.get(node)
        if i is None:
            return
        if key > self._heap[i][0]:
            self._sift_up(i, key, node)
        else:
            self._sift_down(i, key, node)

    def top(self) -> Optional[int]:
        return self._heap[0][1] if self._heap else None

    def pop(self) -> Optional[int]:
        if not self._heap:
            return None
        vtx = self._heap[0][1]
        del self._loc[vtx]
        last_key, last_node = self._heap.pop()
        if self._heap:
            self._sift_down(0, last_key, last_node)
        return vtx


def _bnd_insert(graph: NodeGraph, v: int) -> None:
    graph.bndptr[v] = len(graph.bndind)
    graph.bndind.append(v)


def _bnd_delete(graph: NodeGraph, v: int) -> None:
    pos = graph.bndptr[v]
    last = graph.bndind.pop()
    if last != v:
        graph.bndind[pos] = last
        graph.bndptr[last] = pos
    graph.bndptr[v] = -1


def _random_boundary(ctrl: RefineControl, graph: NodeGraph) -> List[int]:
    order = list(graph.bndind)
    ctrl.rng.shuffle(order)
    return order


def _phase(ctrl: RefineControl, name: str) -> ContextManager:
    if ctrl.dbglvl & DBG_TIME:
        return getattr(ctrl.timers, name)
    return contextlib.nullcontext()


def _neighbors(graph: NodeGraph, v: int) -> List[int]:
    return graph.adjncy[graph.xadj[v] : graph.xadj[v + 1]]


def _rollback(
    graph: NodeGraph, swaps: List[int], pulled_log: List[List[int]], mincutorder: int
) -> None:
    """Undo every move made after position ``mincutorder``."""
    where, pwgts, vwgt, edeg = graph.where, graph.pwgts, graph.vwgt, graph.edegrees
    for idx in range(len(swaps) - 1, mincutorder, -1):
        higain = swaps[idx]
        to = where[higain]
        other = 1 - to
        pwgts[SEPARATOR] += vwgt[higain]
        pwgts[to] -= vwgt[higain]
        where[higain] = SEPARATOR
        _bnd_insert(graph, higain)

        degrees = [0, 0]
        for k in _neighbors(graph, higain):
            if where[k] == SEPARATOR:
                edeg[k][to] -= vwgt[higain]
            else:
                degrees[where[k]] += vwgt[k]
        edeg[higain] = degrees

        for k in pulled_log[idx]:
            where[k] = other
            pwgts[other] += vwgt[k]
            pwgts[SEPARATOR] -= vwgt[k]
            _bnd_delete(graph, k)
            for kk in _neighbors(graph, k):
                if where[kk] == SEPARATOR:
                    edeg[kk][other] += vwgt[k]


def fm_2way_node_refine_2sided(ctrl: RefineControl, graph: NodeGraph, niter: int) -> None:
    """Refine the separator, moving vertices towards either side."""
    nvtxs = graph.nvtxs
    vwgt, where, pwgts, edeg = graph.vwgt, graph.where, graph.pwgts, graph.edegrees
    queues = (_MaxQueue(), _MaxQueue())

    badmaxpwgt = int(0.5 * ctrl.ubfactor * sum(pwgts))
    if ctrl.dbglvl & DBG_REFINE:
        log.debug(
            "Partitions-N2: [%6d %6d] Nv-Nb[%6d %6d]. ISep: %6d",
            pwgts[0], pwgts[1], nvtxs, graph.nbnd, graph.mincut,
        )

    for pass_ in range(niter):
        moved = [-1] * nvtxs
        queues[0].reset()
        queues[1].reset()

        mincutorder = -1
        initcut = mincut = graph.mincut
        nbnd = graph.nbnd

        for i in _random_boundary(ctrl, graph):
            queues[0].insert(i, vwgt[i] - edeg[i][1])
            queues[1].insert(i, vwgt[i] - edeg[i][0])

        limit = min(5 * nbnd, 400) if ctrl.compress else min(2 * nbnd, 300)

        swaps: List[int] = []
        pulled_log: List[List[int]] = []
        nmind = 0
        mindiff = abs(pwgts[0] - pwgts[1])
        to = 0 if pwgts[0] < pwgts[1] else 1

        while len(swaps) < nvtxs:
            nswaps = len(swaps)
            u0, u1 = queues[0].top(), queues[1].top()
            if u0 is not None and u1 is not None:
                g0 = vwgt[u0] - edeg[u0][1]
                g1 = vwgt[u1] - edeg[u1][0]
                to = 0 if g0 > g1 else (1 if g0 < g1 else pass_ % 2)
                u = u0 if to == 0 else u1
                if pwgts[to] + vwgt[u] > badmaxpwgt:
                    to = 1 - to
            elif u0 is None and u1 is None:
                break
            elif u0 is not None and pwgts[0] + vwgt[u0] <= badmaxpwgt:
                to = 0
            elif u1 is not None and pwgts[1] + vwgt[u1] <= badmaxpwgt:
                to = 1
            else:
                break

            other = 1 - to
            higain = queues[to].pop()
            if moved[higain] == -1:
                queues[other].delete(higain)

            if nmind + graph.xadj[higain + 1] - graph.xadj[higain] >= 2 * nvtxs - 1:
                break

            gain = vwgt[higain] - edeg[higain][other]
            pwgts[SEPARATOR] -= gain

            newdiff = abs(pwgts[to] + vwgt[higain] - (pwgts[other] - edeg[higain][other]))
            if pwgts[SEPARATOR] < mincut or (
                pwgts[SEPARATOR] == mincut and newdiff < mindiff
            ):
                mincut = pwgts[SEPARATOR]
                mincutorder = nswaps
                mindiff = newdiff
            elif nswaps - mincutorder > 2 * limit or (
                nswaps - mincutorder > limit and pwgts[SEPARATOR] > 1.10 * mincut
            ):
                pwgts[SEPARATOR] += gain
                break

            _bnd_delete(graph, higain)
            pwgts[to] += vwgt[higain]
            where[higain] = to
            moved[higain] = nswaps
            swaps.append(higain)

            pulled: List[int] = []
            for k in _neighbors(graph, higain):
                if where[k] == SEPARATOR:
                    oldgain = vwgt[k] - edeg[k][to]
                    edeg[k][to] += vwgt[higain]
                    if moved[k] == -1 or moved[k] == -(2 + other):
                        queues[other].update(k, oldgain - vwgt[higain])
                elif where[k] == other:
                    _bnd_insert(graph, k)
                    pulled.append(k)
                    nmind += 1
                    where[k] = SEPARATOR
                    pwgts[other] -= vwgt[k]

                    degrees = [0, 0]
                    edeg[k] = degrees
                    for kk in _neighbors(graph, k):
                        if where[kk] != SEPARATOR:
                            degrees[where[kk]] += vwgt[kk]
                        else:
                            oldgain = vwgt[kk] - edeg[kk][other]
                            edeg[kk][other] -= vwgt[k]
                            if moved[kk] == -1 or moved[kk] == -(2 + to):
                                queues[to].update(kk, oldgain + vwgt[k])

                    if moved[k] == -1:
                        queues[to].insert(k, vwgt[k] - degrees[other])
                        moved[k] = -(2 + to)
            pulled_log.append(pulled)

            if ctrl.dbglvl & DBG_MOVEINFO:
                log.debug(
                    "Moved %6d to %3d [%5d %5d %5d]",
                    higain, to, pwgts[0], pwgts[1], pwgts[2],
                )

        _rollback(graph, swaps, pulled_log, mincutorder)

        if ctrl.dbglvl & DBG_REFINE:
            log.debug(
                "\tMinimum sep: %6d at %5d, PWGTS: [%6d %6d], NBND: %6d",
                mincut, mincutorder, pwgts[0], pwgts[1], graph.nbnd,
            )

        graph.mincut = mincut
        if mincutorder == -1 or mincut >= initcut:
            break


def fm_2way_node_refine_1sided(ctrl: RefineControl, graph: NodeGraph, niter: int) -> None:
    """Refine the separator in passes that each move vertices to one side only."""
    nvtxs = graph.nvtxs
    vwgt, where, pwgts, edeg = graph.vwgt, graph.where, graph.pwgts, graph.edegrees
    queue = _MaxQueue()

    badmaxpwgt = int(0.5 * ctrl.ubfactor * sum(pwgts))
    if ctrl.dbglvl & DBG_REFINE:
        log.debug(
            "Partitions-N1: [%6d %6d] Nv-Nb[%6d %6d]. ISep: %6d",
            pwgts[0], pwgts[1], nvtxs, graph.nbnd, graph.mincut,
        )

    to = 1 if pwgts[0] < pwgts[1] else 0
    for pass_ in range(2 * niter):
        other = to
        to = 1 - to

        queue.reset()
        mincutorder = -1
        initcut = mincut = graph.mincut
        nbnd = graph.nbnd

        for i in _random_boundary(ctrl, graph):
            queue.insert(i, vwgt[i] - edeg[i][other])

        limit = min(5 * nbnd, 500) if ctrl.compress else min(3 * nbnd, 300)

        swaps: List[int] = []
        pulled_log: List[List[int]] = []
        nmind = 0
        mindiff = abs(pwgts[0] - pwgts[1])

        with _phase(ctrl, "aux3"):
            while len(swaps) < nvtxs:
                nswaps = len(swaps)
                higain = queue.pop()
                if higain is None:
                    break
                if nmind + graph.xadj[higain + 1] - graph.xadj[higain] >= 2 * nvtxs - 1:
                    break
                if pwgts[to] + vwgt[higain] > badmaxpwgt:
                    break

                gain = vwgt[higain] - edeg[higain][other]
                pwgts[SEPARATOR] -= gain

                newdiff = abs(
                    pwgts[to] + vwgt[higain] - (pwgts[other] - edeg[higain][other])
                )
                if pwgts[SEPARATOR] < mincut or (
                    pwgts[SEPARATOR] == mincut and newdiff < mindiff
                ):
                    mincut = pwgts[SEPARATOR]
                    mincutorder = nswaps
                    mindiff = newdiff
                elif nswaps - mincutorder > 3 * limit or (
                    nswaps - mincutorder > limit and pwgts[SEPARATOR] > 1.10 * mincut
                ):
                    pwgts[SEPARATOR] += gain
                    break

                _bnd_delete(graph, higain)
                pwgts[to] += vwgt[higain]
                where[higain] = to
                swaps.append(higain)

                pulled: List[int] = []
                for k in _neighbors(graph, higain):
                    if where[k] == SEPARATOR:
                        edeg[k][to] += vwgt[higain]
                    elif where[k] == other:
                        _bnd_insert(graph, k)
                        pulled.append(k)
                        nmind += 1
                        where[k] = SEPARATOR
                        pwgts[other] -= vwgt[k]

                        degrees = [0, 0]
                        edeg[k] = degrees
                        for kk in _neighbors(graph, k):
                            if where[kk] != SEPARATOR:
                                degrees[where[kk]] += vwgt[kk]
                            else:
                                edeg[kk][other] -= vwgt[k]
                                queue.update(kk, vwgt[kk] - edeg[kk][other])

                        queue.insert(k, vwgt[k] - degrees[other])
                pulled_log.append(pulled)

                if ctrl.dbglvl & DBG_MOVEINFO:
                    log.debug(
                        "Moved %6d to %3d, Gain: %5d [%5d %5d %5d]",
                        higain, to, gain, pwgts[0], pwgts[1], pwgts[2],
                    )

        with _phase(ctrl, "aux2"):
            _rollback(graph, swaps, pulled_log, mincutorder)

        if ctrl.dbglvl & DBG_REFINE:
            log.debug(
                "\tMinimum sep: %6d at %5d, PWGTS: [%6d %6d], NBND: %6d",
                mincut, mincutorder, pwgts[0], pwgts[1], graph.nbnd,
            )

        graph.mincut = mincut
        if pass_ % 2 == 1 and (mincutorder == -1 or mincut >= initcut):
            break


def fm_2way_node_balance(ctrl: RefineControl, graph: NodeGraph) -> None:
    """Move separator vertices towards the lighter side until it is balanced."""
    nvtxs = graph.nvtxs
    vwgt, where, pwgts, edeg = graph.vwgt, graph.where, graph.pwgts, graph.edegrees

    mult = 0.5 * ctrl.ubfactor
    badmaxpwgt = int(mult * (pwgts[0] + pwgts[1]))
    if max(pwgts[0], pwgts[1]) < badmaxpwgt:
        return
    if abs(pwgts[0] - pwgts[1]) < 3 * graph.tvwgt // nvtxs:
        return

    to = 0 if pwgts[0] < pwgts[1] else 1
    other = 1 - to

    queue = _MaxQueue()
    moved = [False] * nvtxs

    if ctrl.dbglvl & DBG_REFINE:
        log.debug(
            "Partitions: [%6d %6d] Nv-Nb[%6d %6d]. ISep: %6d [B]",
            pwgts[0], pwgts[1], nvtxs, graph.nbnd, graph.mincut,
        )

    for i in _random_boundary(ctrl, graph):
        queue.insert(i, vwgt[i] - edeg[i][other])

    nswaps = 0
    while nswaps < nvtxs:
        higain = queue.pop()
        if higain is None:
            break
        nswaps += 1
        moved[higain] = True

        gain = vwgt[higain] - edeg[higain][other]
        badmaxpwgt = int(mult * (pwgts[0] + pwgts[1]))

        if pwgts[to] > pwgts[other]:
            break
        if gain < 0 and pwgts[other] < badmaxpwgt:
            break
        if pwgts[to] + vwgt[higain] > badmaxpwgt:
            continue

        pwgts[SEPARATOR] -= gain
        _bnd_delete(graph, higain)
        pwgts[to] += vwgt[higain]
        where[higain] = to

        if ctrl.dbglvl & DBG_MOVEINFO:
            log.debug(
                "Moved %6d to %3d, Gain: %3d, [%5d %5d %5d]",
                higain, to, gain, pwgts[0], pwgts[1], pwgts[2],
            )

        for k in _neighbors(graph, higain):
            if where[k] == SEPARATOR:
                edeg[k][to] += vwgt[higain]
            elif where[k] == other:
                _bnd_insert(graph, k)
                where[k] = SEPARATOR
                pwgts[other] -= vwgt[k]

                degrees = [0, 0]
                edeg[k] = degrees
                for kk in _neighbors(graph, k):
                    if where[kk] != SEPARATOR:
                        degrees[where[kk]] += vwgt[kk]
                    else:
                        oldgain = vwgt[kk] - edeg[kk][other]
                        edeg[kk][other] -= vwgt[k]
                        if not moved[kk]:
                            queue.update(kk, oldgain + vwgt[k])

                queue.insert(k, vwgt[k] - degrees[other])

    if ctrl.dbglvl & DBG_REFINE:
        log.debug(
            "\tBalanced sep: %6d at %4d, PWGTS: [%6d %6d], NBND: %6d",
            pwgts[2], nswaps, pwgts[0], pwgts[1], graph.nbnd,
        )

    graph.mincut = pwgts[SEPARATOR]


def refine_2way_node(ctrl: RefineControl, orggraph: NodeGraph, graph: NodeGraph) -> None:
    """Project the separator of ``graph`` level by level down to ``orggraph``.

    At every finer level the separator is balanced and then refined with the
    scheme chosen by ``ctrl.rtype``.
    """
    with _phase(ctrl, "uncoarsen"):
        if graph is orggraph:
            compute_2way_node_partition_params(graph)
            return
        while graph is not orggraph:
            finer = graph.finer
            if finer is None:
                raise ValueError("the original graph is not below the given graph")
            graph = finer

            with _phase(ctrl, "project"):
                project_2way_node_partition(graph)

            with _phase(ctrl, "ref"):
                fm_2way_node_balance(ctrl, graph)
                if ctrl.rtype == RType.SEP2SIDED:
                    fm_2way_node_refine_2sided(ctrl, graph, ctrl.niter)
                elif ctrl.rtype == RType.SEP1SIDED:
                    fm_2way_node_refine_1sided(ctrl, graph, ctrl.niter)
                else:
                    raise ValueError(f"Unknown rtype of {int(ctrl.rtype)}")