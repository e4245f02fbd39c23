import pytest

from metiskit.nodepart import NodeGraph, compute_2way_node_partition_params
from metiskit.noderefine import (
    RefineControl,
    fm_2way_node_balance,
    fm_2way_node_refine_1sided,
    fm_2way_node_refine_2sided,
    refine_2way_node,
)
from metiskit.params import RType


def _build(n, edges, where, vwgt=None):
    adj = [[] for _ in range(n)]
    for u, v in edges:
        adj[u].append(v)
        adj[v].append(u)
    xadj = [0]
    adjncy = []
    for nbrs in adj:
        adjncy.extend(sorted(nbrs))
        xadj.append(len(adjncy))
    return NodeGraph(xadj=xadj, adjncy=adjncy, vwgt=vwgt, where=list(where))


def _path(n, where, vwgt=None):
    return _build(n, [(i, i + 1) for i in range(n - 1)], where, vwgt)


def _grid(rows, cols, where):
    edges = []
    for r in range(rows):
        for c in range(cols):
            v = r * cols + c
            if c + 1 < cols:
                edges.append((v, v + 1))
            if r + 1 < rows:
                edges.append((v, v + cols))
    return _build(rows * cols, edges, where)


def _two_column_separator_grid():
    # columns: 0 -> side 0, 1 and 2 -> separator, 3 -> side 1
    sides = [0, 2, 2, 1]
    where = [sides[v % 4] for v in range(16)]
    graph = _grid(4, 4, where)
    compute_2way_node_partition_params(graph)
    return graph


def _assert_consistent(graph):
    fresh = NodeGraph(
        xadj=graph.xadj, adjncy=graph.adjncy, vwgt=list(graph.vwgt), where=list(graph.where)
    )
    compute_2way_node_partition_params(fresh)
    assert graph.pwgts == fresh.pwgts
    assert sorted(graph.bndind) == sorted(fresh.bndind)
    assert graph.mincut == fresh.mincut == graph.pwgts[2]
    for pos, v in enumerate(graph.bndind):
        assert graph.bndptr[v] == pos
        assert graph.edegrees[v] == fresh.edegrees[v]
    assert sum(1 for p in graph.bndptr if p != -1) == graph.nbnd


def _assert_separates(graph):
    for v in range(graph.nvtxs):
        for j in range(graph.xadj[v], graph.xadj[v + 1]):
            u = graph.adjncy[j]
            assert {graph.where[v], graph.where[u]} != {0, 1}


def test_default_control_uses_ordering_imbalance():
    ctrl = RefineControl()
    assert ctrl.ubfactor == pytest.approx(1.2)
    assert ctrl.rtype == RType.SEP1SIDED
    assert ctrl.niter == 10


@pytest.mark.parametrize("refine", [fm_2way_node_refine_1sided, fm_2way_node_refine_2sided])
@pytest.mark.parametrize("seed", [-1, 1, 7, 42])
def test_refine_shrinks_thick_separator(refine, seed):
    graph = _two_column_separator_grid()
    before = graph.mincut
    refine(RefineControl(seed=seed), graph, 10)
    assert graph.mincut < before
    _assert_consistent(graph)
    _assert_separates(graph)


@pytest.mark.parametrize("refine", [fm_2way_node_refine_1sided, fm_2way_node_refine_2sided])
@pytest.mark.parametrize("seed", [3, 11])
def test_refine_never_worsens_path_separator(refine, seed):
    graph = _path(9, [0, 0, 0, 2, 1, 1, 1, 1, 1])
    compute_2way_node_partition_params(graph)
    before = graph.mincut
    refine(RefineControl(seed=seed), graph, 5)
    assert graph.mincut <= before
    _assert_consistent(graph)
    _assert_separates(graph)


def test_refine_is_deterministic_for_a_seed():
    first = _two_column_separator_grid()
    second = _two_column_separator_grid()
    fm_2way_node_refine_2sided(RefineControl(seed=5), first, 10)
    fm_2way_node_refine_2sided(RefineControl(seed=5), second, 10)
    assert first.where == second.where
    assert first.pwgts == second.pwgts


def test_zero_iterations_leave_graph_unchanged():
    graph = _two_column_separator_grid()
    where = list(graph.where)
    pwgts = list(graph.pwgts)
    fm_2way_node_refine_2sided(RefineControl(), graph, 0)
    assert graph.where == where
    assert graph.pwgts == pwgts


def test_balance_moves_weight_to_lighter_side():
    graph = _path(7, [0, 0, 0, 0, 0, 2, 1])
    compute_2way_node_partition_params(graph)
    before = abs(graph.pwgts[0] - graph.pwgts[1])
    fm_2way_node_balance(RefineControl(seed=2), graph)
    assert abs(graph.pwgts[0] - graph.pwgts[1]) < before
    assert sum(graph.pwgts) == 7
    _assert_consistent(graph)
    _assert_separates(graph)


def test_balance_leaves_balanced_graph_alone():
    graph = _path(7, [0, 0, 0, 2, 1, 1, 1])
    compute_2way_node_partition_params(graph)
    where = list(graph.where)
    fm_2way_node_balance(RefineControl(), graph)
    assert graph.where == where


def _hierarchy():
    fine = _path(6, [0] * 6)
    fine.where = None
    fine.cmap = [0, 0, 1, 1, 2, 2]
    coarse = _path(3, [0, 2, 1], vwgt=[2, 2, 2])
    coarse.finer = fine
    fine.coarser = coarse
    return fine, coarse


@pytest.mark.parametrize("rtype", [RType.SEP1SIDED, RType.SEP2SIDED])
def test_refine_2way_node_projects_to_finest(rtype):
    fine, coarse = _hierarchy()
    refine_2way_node(RefineControl(rtype=rtype, seed=1), fine, coarse)
    assert fine.coarser is None
    assert len(fine.where) == 6
    assert fine.mincut <= 2
    _assert_consistent(fine)
    _assert_separates(fine)


def test_refine_2way_node_on_original_computes_params():
    graph = _path(5, [0, 0, 2, 1, 1])
    refine_2way_node(RefineControl(), graph, graph)
    assert graph.bndind == [2]
    assert graph.edegrees[2] == [1, 1]
    _assert_consistent(graph)


def test_refine_2way_node_rejects_unknown_rtype():
    fine, coarse = _hierarchy()
    with pytest.raises(ValueError):
        refine_2way_node(RefineControl(rtype=RType.FM), fine, coarse)


def test_timers_collect_when_time_debugging():
    fine, coarse = _hierarchy()
    ctrl = RefineControl(dbglvl=2)
    refine_2way_node(ctrl, fine, coarse)
    assert ctrl.timers.uncoarsen.seconds >= 0.0
    assert not ctrl.timers.uncoarsen.running
    _assert_consistent(fine)