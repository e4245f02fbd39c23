import pytest

from metiskit.io import Graph
from metiskit.smbfactor import (
    SubscriptOverflow,
    SymbolicFactor,
    compute_fill_in,
    smbfct,
)


def _graph(n, edges):
    nbrs = [[] for _ in range(n)]
    for a, b in edges:
        nbrs[a].append(b)
        nbrs[b].append(a)
    xadj = [0]
    adjncy = []
    for lst in nbrs:
        adjncy.extend(sorted(lst))
        xadj.append(len(adjncy))
    return Graph(xadj=xadj, adjncy=adjncy)


def _identity(n):
    return list(range(n))


def test_path_identity_structure():
    g = _graph(3, [(0, 1), (1, 2)])
    factor = smbfct(g.xadj, g.adjncy, _identity(3), _identity(3))
    assert isinstance(factor, SymbolicFactor)
    assert factor.nzsub == [1, 2]
    assert factor.maxlnz == 2
    assert factor.xlnz[0] == 0


def test_tree_leaves_first_has_no_fill():
    edges = [(0, 1), (0, 2), (0, 3), (0, 4)]
    g = _graph(5, edges)
    perm = [1, 2, 3, 4, 0]
    iperm = [0] * 5
    for k, v in enumerate(perm):
        iperm[v] = k
    nnz, _ = compute_fill_in(g, perm, iperm)
    assert nnz == len(edges)


def test_star_center_first_fills_completely():
    n = 5
    g = _graph(n, [(0, i) for i in range(1, n)])
    nnz, opc = compute_fill_in(g, _identity(n), _identity(n))
    assert nnz == n * (n - 1) // 2
    assert opc > 0


def test_complete_graph_any_ordering():
    n = 4
    edges = [(a, b) for a in range(n) for b in range(a + 1, n)]
    g = _graph(n, edges)
    perm = [2, 0, 3, 1]
    iperm = [0] * n
    for k, v in enumerate(perm):
        iperm[v] = k
    nnz, _ = compute_fill_in(g, perm, iperm)
    assert nnz == len(edges)


def test_fill_at_least_edges_and_column_counts_consistent():
    edges = [(i, (i + 1) % 6) for i in range(6)]
    g = _graph(6, edges)
    factor = smbfct(g.xadj, g.adjncy, _identity(6), _identity(6))
    assert factor.maxlnz >= len(edges)
    assert sum(factor.column_counts) == factor.xlnz[-1]
    assert all(0 <= r < 6 for r in factor.nzsub)


def test_graph_left_unchanged():
    g = _graph(4, [(0, 1), (1, 2), (2, 3), (3, 0)])
    before = (list(g.xadj), list(g.adjncy))
    compute_fill_in(g, _identity(4), _identity(4))
    assert (g.xadj, g.adjncy) == before


def test_overflow_raised():
    n = 5
    g = _graph(n, [(0, i) for i in range(1, n)])
    with pytest.raises(SubscriptOverflow):
        smbfct(g.xadj, g.adjncy, _identity(n), _identity(n), 2)


def test_invalid_permutation_rejected():
    g = _graph(3, [(0, 1), (1, 2)])
    with pytest.raises(ValueError):
        compute_fill_in(g, [0, 0, 1], [0, 1, 2])


def test_inverse_mismatch_rejected():
    g = _graph(3, [(0, 1), (1, 2)])
    with pytest.raises(ValueError):
        smbfct(g.xadj, g.adjncy, [1, 2, 0], [0, 1, 2])