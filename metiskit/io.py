"""Reading and writing graphs, meshes, target weights and result vectors."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

PathLike = Union[str, "os.PathLike[str]"]

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_REAL_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class InputFormatError(ValueError):
    """Raised when an input file does not follow its expected format."""


@dataclass
class Graph:
    """A graph in compressed adjacency form with 0-based vertex numbers."""

    xadj: List[int]
    adjncy: List[int]
    ncon: int = 1
    vwgt: Optional[List[int]] = None
    vsize: Optional[List[int]] = None
    adjwgt: Optional[List[int]] = None

    @property
    def nvtxs(self) -> int:
        return len(self.xadj) - 1

    @property
    def nedges(self) -> int:
        """Number of adjacency entries (each undirected edge counts twice)."""
        return self.xadj[-1]


@dataclass
class Mesh:
    """A mesh given as the list of nodes of each element."""

    eptr: List[int]
    eind: List[int]
    nn: int
    ncon: int = 1
    ewgt: List[int] = field(default_factory=list)

    @property
    def ne(self) -> int:
        return len(self.eptr) - 1


class _Scanner:
    """Reads numbers one after another from a line of text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _match(self, pattern: "re.Pattern[str]") -> Optional[str]:
        m = pattern.match(self.text, self.pos)
        if m is None:
            return None
        self.pos = m.end()
        return m.group(1)

    def int(self) -> Optional[int]:
        token = self._match(_INT_RE)
        return None if token is None else int(token)

    def real(self) -> Optional[float]:
        token = self._match(_REAL_RE)
        return None if token is None else float(token)

    def peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def skip(self) -> None:
        self.pos += 1


def _check_exists(filename: PathLike, what: str = "File") -> None:
    if not os.path.isfile(filename):
        raise FileNotFoundError(f"{what} {os.fspath(filename)} does not exist!")


def _next_data_line(lines: Iterator[str], message: str) -> str:
    for line in lines:
        if not line.startswith("%"):
            return line
    raise InputFormatError(message)


def _read_header(line: str, count: int) -> List[int]:
    scanner = _Scanner(line)
    values: List[int] = []
    while len(values) < count:
        value = scanner.int()
        if value is None:
            break
        values.append(value)
    return values


def read_graph(filename: PathLike) -> Graph:
    """Read a graph file; vertex numbers in the file start from 1."""
    _check_exists(filename)
    with open(filename, encoding="utf-8") as fh:
        lines = iter(fh.readlines())

    header = _read_header(
        _next_data_line(lines, f"Premature end of input file: file: {os.fspath(filename)}"),
        4,
    )
    if len(header) < 2:
        raise InputFormatError(
            "The input file does not specify the number of vertices and edges."
        )
    nvtxs, nedges = header[0], header[1]
    fmt = header[2] if len(header) > 2 else 0
    ncon = header[3] if len(header) > 3 else 0

    if nvtxs <= 0 or nedges <= 0:
        raise InputFormatError(
            f"The supplied nvtxs:{nvtxs} and nedges:{nedges} must be positive."
        )
    if fmt > 111:
        raise InputFormatError(f"Cannot read this type of file format [fmt={fmt}]!")

    fmtstr = "%03d" % int(math.fmod(fmt, 1000))
    readvs = fmtstr[0] == "1"
    readvw = fmtstr[1] == "1"
    readew = fmtstr[2] == "1"

    if ncon > 0 and not readvw:
        raise InputFormatError(
            f"You specified ncon={ncon}, but the fmt parameter does not specify "
            "vertex weights. Make sure that the fmt parameter is set to either 10 or 11."
        )
    if ncon < 0:
        raise InputFormatError(f"The number of constraints ({ncon}) must not be negative.")

    nedges *= 2
    ncon = ncon or 1

    xadj = [0]
    adjncy: List[int] = []
    vwgt = [1] * (ncon * nvtxs)
    adjwgt: Optional[List[int]] = [] if readew else None
    vsize = [1] * nvtxs

    for i in range(nvtxs):
        line = _next_data_line(
            lines, f"Premature end of input file while reading vertex {i + 1}."
        )
        scanner = _Scanner(line)

        if readvs:
            value = scanner.int()
            if value is None:
                raise InputFormatError(
                    f"The line for vertex {i + 1} does not have vsize information"
                )
            if value < 0:
                raise InputFormatError(f"The size for vertex {i + 1} must be >= 0")
            vsize[i] = value

        if readvw:
            for con in range(ncon):
                value = scanner.int()
                if value is None:
                    raise InputFormatError(
                        f"The line for vertex {i + 1} does not have enough weights "
                        f"for the {ncon} constraints."
                    )
                if value < 0:
                    raise InputFormatError(
                        f"The weight vertex {i + 1} and constraint {con} must be >= 0"
                    )
                vwgt[i * ncon + con] = value

        while True:
            edge = scanner.int()
            if edge is None:
                break
            if edge < 1 or edge > nvtxs:
                raise InputFormatError(
                    f"Edge {edge} for vertex {i + 1} is out of bounds"
                )
            ewgt = 1
            if readew:
                value = scanner.int()
                if value is None:
                    raise InputFormatError(f"Premature end of line for vertex {i + 1}")
                if value <= 0:
                    raise InputFormatError(
                        f"The weight ({value}) for edge ({i + 1}, {edge}) must be positive."
                    )
                ewgt = value
            if len(adjncy) == nedges:
                raise InputFormatError(
                    f"There are more edges in the file than the {nedges // 2} specified."
                )
            adjncy.append(edge - 1)
            if adjwgt is not None:
                adjwgt.append(ewgt)
        xadj.append(len(adjncy))

    found = len(adjncy)
    if found != nedges:
        message = (
            "In the first line of the file, you specified that the graph contained\n"
            f"{nedges // 2} edges. However, I only found {found // 2} edges in the file.\n"
        )
        if 2 * found == nedges:
            message += (
                "I detected that you specified twice the number of edges that you have "
                "in the file. Remember that the number of edges specified in the first "
                "line counts each edge between vertices v and u only once.\n"
            )
        message += "Please specify the correct number of edges in the first line of the file."
        raise InputFormatError(message)

    return Graph(xadj=xadj, adjncy=adjncy, ncon=ncon, vwgt=vwgt, vsize=vsize, adjwgt=adjwgt)


def read_mesh(filename: PathLike) -> Mesh:
    """Read a mesh file; node numbers in the file start from 1."""
    _check_exists(filename)
    with open(filename, encoding="utf-8") as fh:
        all_lines = fh.readlines()
    nlines = len(all_lines)
    lines = iter(all_lines)

    header = _read_header(
        _next_data_line(lines, f"Premature end of input file: file: {os.fspath(filename)}"),
        2,
    )
    if len(header) < 1:
        raise InputFormatError("The input file does not specify the number of elements.")
    ne = header[0]
    ncon = header[1] if len(header) > 1 else 0

    if ne <= 0:
        raise InputFormatError(f"The supplied number of elements:{ne} must be positive.")
    if ne > nlines:
        raise InputFormatError(
            f"The file has {nlines} lines which smaller than the number of "
            f"elements of {ne} specified in the header line."
        )
    if ncon < 0:
        raise InputFormatError(f"The number of constraints ({ncon}) must not be negative.")

    eptr = [0]
    eind: List[int] = []
    ewgt = [1] * ((ncon or 1) * ne)

    for i in range(ne):
        line = _next_data_line(
            lines, f"Premature end of input file while reading element {i + 1}."
        )
        scanner = _Scanner(line)

        for con in range(ncon):
            value = scanner.int()
            if value is None:
                raise InputFormatError(
                    f"The line for vertex {i + 1} does not have enough weights "
                    f"for the {ncon} constraints."
                )
            if value < 0:
                raise InputFormatError(
                    f"The weight for element {i + 1} and constraint {con} must be >= 0"
                )
            ewgt[i * ncon + con] = value

        while True:
            node = scanner.int()
            if node is None:
                break
            if node < 1:
                raise InputFormatError(f"Node {node} for element {i + 1} is out of bounds")
            eind.append(node - 1)
        eptr.append(len(eind))

    if not eind:
        raise InputFormatError("The mesh does not contain any nodes.")

    return Mesh(eptr=eptr, eind=eind, nn=max(eind) + 1, ncon=ncon or 1, ewgt=ewgt)


def _parse_tpwgts_line(
    raw: str, nparts: int, ncon: int
) -> Tuple[int, int, int, int, float]:
    line = raw.replace(" ", "")
    shown = line.rstrip("\n")
    scanner = _Scanner(line)

    start = scanner.int()
    if start is None:
        raise InputFormatError(
            f"The 'from' component of line <{shown}> in the tpwgts file is incorrect."
        )
    end = start
    if scanner.peek() == "-":
        scanner.skip()
        end = scanner.int()
        if end is None:
            raise InputFormatError(
                f"The 'to' component of line <{shown}> in the tpwgts file is incorrect."
            )

    fromcnum, tocnum = 0, ncon - 1
    if scanner.peek() == ":":
        scanner.skip()
        fromcnum = scanner.int()
        if fromcnum is None:
            raise InputFormatError(
                f"The 'fromcnum' component of line <{shown}> in the tpwgts file is incorrect."
            )
        tocnum = fromcnum
        if scanner.peek() == "-":
            scanner.skip()
            tocnum = scanner.int()
            if tocnum is None:
                raise InputFormatError(
                    f"The 'tocnum' component of line <{shown}> in the tpwgts file is incorrect."
                )

    if scanner.peek() != "=":
        raise InputFormatError(
            f"The 'wgt' component of line <{shown}> in the tpwgts file is missing."
        )
    scanner.skip()
    weight = scanner.real()
    if weight is None:
        raise InputFormatError(
            f"The 'wgt' component of line <{shown}> in the tpwgts file is incorrect."
        )

    if start < 0 or end < 0 or start >= nparts or end >= nparts:
        raise InputFormatError(f"Invalid partition range for {start}:{end}")
    if fromcnum < 0 or tocnum < 0 or fromcnum >= ncon or tocnum >= ncon:
        raise InputFormatError(f"Invalid constraint number range for {fromcnum}:{tocnum}")
    if weight <= 0.0 or weight >= 1.0:
        raise InputFormatError(f"Invalid partition weight of {weight}")
    return start, end, fromcnum, tocnum, weight


def read_tpwgts(filename: Optional[PathLike], nparts: int, ncon: int) -> List[float]:
    """Target weights laid out as ``tpwgts[part*ncon + con]``.

    Without a file every partition gets ``1/nparts``. Weights not given in the
    file share what is left of each constraint equally.
    """
    if filename is None:
        return [1.0 / nparts] * (nparts * ncon)

    _check_exists(filename, "Graph file")
    tpwgts = [-1.0] * (nparts * ncon)
    with open(filename, encoding="utf-8") as fh:
        for raw in fh:
            start, end, fromcnum, tocnum, weight = _parse_tpwgts_line(raw, nparts, ncon)
            for part in range(start, end + 1):
                for con in range(fromcnum, tocnum + 1):
                    tpwgts[part * ncon + con] = weight

    for con in range(ncon):
        column = tpwgts[con::ncon]
        given = [w for w in column if w > 0]
        total = sum(given)
        nleft = nparts - len(given)
        if nleft == 0:
            for part in range(nparts):
                tpwgts[part * ncon + con] *= 1.0 / total
        else:
            if total > 1:
                raise InputFormatError(
                    f"The total specified target partition weights for constraint #{con} "
                    f"of {total} exceeds 1.0."
                )
            share = (1.0 - total) / nleft
            for part in range(nparts):
                if tpwgts[part * ncon + con] < 0:
                    tpwgts[part * ncon + con] = share
    return tpwgts


def read_po_vector(filename: PathLike, nvtxs: int) -> List[int]:
    """Read ``nvtxs`` integers of a partition or ordering vector."""
    with open(filename, encoding="utf-8") as fh:
        scanner = _Scanner(fh.read())
    vector: List[int] = []
    for i in range(nvtxs):
        value = scanner.int()
        if value is None:
            raise InputFormatError(
                f"Premature end of file {os.fspath(filename)} at line {i} [nvtxs: {nvtxs}]"
            )
        vector.append(value)
    return vector


def _write_vector(path: Path, values: Sequence[int]) -> Path:
    with open(path, "w", encoding="utf-8") as fh:
        fh.writelines(f"{value}\n" for value in values)
    return path


def write_partition(fname: PathLike, part: Sequence[int], nparts: int) -> Path:
    """Write ``part`` to ``<fname>.part.<nparts>`` and return that path."""
    return _write_vector(Path(f"{os.fspath(fname)}.part.{nparts}"), part)


def write_mesh_partition(
    fname: PathLike, nparts: int, epart: Sequence[int], npart: Sequence[int]
) -> Tuple[Path, Path]:
    """Write the element and node partitions and return both paths."""
    base = os.fspath(fname)
    return (
        _write_vector(Path(f"{base}.epart.{nparts}"), epart),
        _write_vector(Path(f"{base}.npart.{nparts}"), npart),
    )


def write_permutation(fname: PathLike, iperm: Sequence[int]) -> Path:
    """Write ``iperm`` to ``<fname>.iperm`` and return that path."""
    return _write_vector(Path(f"{os.fspath(fname)}.iperm"), iperm)


def write_graph(graph: Graph, filename: PathLike) -> None:
    """Write ``graph`` in the graph file format, omitting unit weights."""
    nvtxs, ncon, xadj = graph.nvtxs, graph.ncon, graph.xadj
    vwgt, vsize, adjwgt = graph.vwgt, graph.vsize, graph.adjwgt

    hasvwgt = vwgt is not None and any(w != 1 for w in vwgt[: nvtxs * ncon])
    hasvsize = vsize is not None and any(s != 1 for s in vsize[:nvtxs])
    hasewgt = adjwgt is not None and any(w != 1 for w in adjwgt[: xadj[nvtxs]])

    parts = [f"{nvtxs} {xadj[nvtxs] // 2}"]
    if hasvwgt or hasvsize or hasewgt:
        parts.append(f" {int(hasvsize)}{int(hasvwgt)}{int(hasewgt)}")
        if hasvwgt:
            parts.append(f" {ncon}")

    for i in range(nvtxs):
        parts.append("\n")
        if hasvsize:
            parts.append(f" {vsize[i]}")
        if hasvwgt:
            parts.extend(f" {w}" for w in vwgt[i * ncon : (i + 1) * ncon])
        for j in range(xadj[i], xadj[i + 1]):
            parts.append(f" {graph.adjncy[j] + 1}")
            if hasewgt:
                parts.append(f" {adjwgt[j]}")

    with open(filename, "w", encoding="utf-8") as fh:
        fh.write("".join(parts))