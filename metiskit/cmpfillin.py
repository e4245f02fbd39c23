"""Command that reports the fill-in of a graph under a given ordering."""

from __future__ import annotations

import sys
from typing import List, Optional, Sequence

from metiskit.io import read_graph, read_po_vector
from metiskit.smbfactor import SubscriptOverflow, compute_fill_in

_RULE = "*" * 70


def _invert(iperm: Sequence[int]) -> List[int]:
    n = len(iperm)
    perm = [-1] * n
    for i, p in enumerate(iperm):
        if not 0 <= p < n or perm[p] != -1:
            raise ValueError("the ordering file does not hold a permutation")
        perm[p] = i
    return perm


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Read a graph and an inverse permutation and print the fill-in."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print("Usage: cmpfillin <GraphFile> <PermFile>")
        return 0
    graph_file, perm_file = args

    try:
        graph = read_graph(graph_file)
        if graph.nvtxs <= 0:
            print("Empty graph. Nothing to do.")
            return 0
        if graph.ncon != 1:
            print("Ordering can only be applied to graphs with one constraint.")
            return 0

        iperm = read_po_vector(perm_file, graph.nvtxs)
        perm = _invert(iperm)

        print(_RULE)
        print(" Fill-in computation")
        print("Graph Information ---------------------------------------------------")
        print(
            f"  Name: {graph_file}, #Vertices: {graph.nvtxs}, "
            f"#Edges: {graph.nedges // 2}\n"
        )
        print("Fillin... -----------------------------------------------------------")

        maxlnz, opc = compute_fill_in(graph, perm, iperm)
    except (OSError, ValueError, SubscriptOverflow) as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"  Nonzeros: {float(maxlnz):6.3e} \tOperation Count: {float(opc):6.3e}")
    print(_RULE)
    return 0