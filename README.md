# metiskit

Pure-Python helpers for sparse graphs and finite-element meshes stored in
the plain-text formats used by multilevel graph partitioners. There are no
runtime dependencies.

## What is in it

- `metiskit.io` – `read_graph` and `write_graph` for graph files (optional
  vertex sizes, several vertex-weight constraints, edge weights; vertex
  numbers start at 1 in the file and at 0 in memory), `read_mesh` for mesh
  files, `read_tpwgts` for target partition-weight files, `read_po_vector`
  for partition/ordering vectors, and `write_partition`,
  `write_mesh_partition` and `write_permutation`, which write to
  `<name>.part.<nparts>`, `<name>.epart.<nparts>` / `<name>.npart.<nparts>`
  and `<name>.iperm` and return the paths. Graphs and meshes come back as
  the `Graph` and `Mesh` dataclasses. Malformed input raises
  `InputFormatError`; a missing file raises `FileNotFoundError`.
- `metiskit.smbfactor` – `smbfct`, a symbolic Cholesky factorization of a
  permuted sparse matrix returning a `SymbolicFactor`, and
  `compute_fill_in(graph, perm, iperm)`, which returns the tuple
  `(nonzeros, operation_count)`. `SubscriptOverflow` is raised when the
  subscript storage runs out.
- `metiskit.stat` – `compute_partition_balance` and
  `compute_element_balance`, the load imbalance `nparts * max / total`.
- `metiskit.nodepart` – `NodeGraph`, a graph split into sides 0 and 1 and a
  separator 2, with `compute_2way_node_partition_params` and
  `project_2way_node_partition`.
- `metiskit.noderefine` – FM-style separator refinement:
  `fm_2way_node_refine_2sided`, `fm_2way_node_refine_1sided`,
  `fm_2way_node_balance` and `refine_2way_node`, driven by a
  `RefineControl` (imbalance factor, iterations, refinement type, seed).
- `metiskit.params` – the `Params` dataclass and the option enumerations
  `PType`, `ObjType`, `CType`, `IPType`, `RType`, `GType`.
- `metiskit.gpmetis_options`, `metiskit.mpmetis_options`,
  `metiskit.ndmetis_options`, `metiskit.m2gmetis_options` – each has
  `parse_cmdline(argv)`, which turns an argument list into `Params` with
  the defaults and validity checks of the matching tool. `-help` or missing
  positional arguments print a summary and raise `SystemExit(0)`; invalid
  values raise `ValueError`.
- `metiskit.timing` (`CpuTimer`, `Timers`), `metiskit.workspace`
  (`NeighborPool`, `compute_core_size`) and `metiskit.util` (argmax helpers,
  `init_random`, `metis_rcode`) – small supporting pieces.

## Command line

One command is installed, `cmpfillin`. It reads a graph and an
inverse-permutation file (one index per line) and prints the number of
nonzeros in the factor and the operation count of that ordering:

```
cmpfillin graph.txt graph.txt.iperm
```

## Library use

```python
from metiskit.io import read_graph
from metiskit.smbfactor import compute_fill_in

graph = read_graph("mesh.graph")
iperm = list(range(graph.nvtxs))
perm = [0] * graph.nvtxs
for i, p in enumerate(iperm):
    perm[p] = i

nonzeros, opcount = compute_fill_in(graph, perm, iperm)
print(nonzeros, opcount)
```

```python
from metiskit.gpmetis_options import parse_cmdline

params = parse_cmdline(["-ptype=rb", "graph.txt", "4"])
print(params.ptype.label, params.nparts, params.ubfactor)
```

## What it does not do

The package does not compute partitions or orderings: there is no
coarsening, initial partitioning, k-way refinement, nested dissection or
mesh-to-graph conversion. The option parsers only produce `Params`; there
are no partitioning, ordering or conversion commands to run them, and
`cmpfillin` is the only command.

## Running the tests

```
pip install -e ".[test]"
pytest
```