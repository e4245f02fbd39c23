"""Command-line parsing for the mesh partitioning tool."""

from __future__ import annotations

import sys
from typing import Dict, Optional, Sequence

from metiskit.gpmetis_options import (
    _atoi,
    _getopt_long_only,
    _lookup,
    _print_lines,
    _render_help,
    _short_help,
)
from metiskit.params import CType, GType, IPType, ObjType, Params, PType, RType

PROGRAM = "mpmetis"

_LONG_OPTIONS: Dict[str, bool] = {
    "gtype": True,
    "ptype": True,
    "objtype": True,
    "ctype": True,
    "iptype": True,
    "minconn": False,
    "contig": False,
    "nooutput": False,
    "ufactor": True,
    "niter": True,
    "ncuts": True,
    "ncommon": True,
    "tpwgts": True,
    "seed": True,
    "dbglvl": True,
    "help": False,
}

_GTYPE_OPTIONS = {"dual": GType.DUAL, "nodal": GType.NODAL}
_PTYPE_OPTIONS = {"rb": PType.RB, "kway": PType.KWAY}
_OBJTYPE_OPTIONS = {"cut": ObjType.CUT, "vol": ObjType.VOL}
_CTYPE_OPTIONS = {"rm": CType.RM, "shem": CType.SHEM}
_IPTYPE_OPTIONS = {"grow": IPType.GROW, "random": IPType.RANDOM}

_USAGE = "mpmetis [options] meshfile nparts"

_REQUIRED = (
    ("meshfile", "file holding the mesh to partition"),
    ("nparts", "number of parts to produce"),
)

_OPTIONAL = (
    ("-gtype=string",
     "Graph that is partitioned: the 'dual' graph of the mesh (default) or "
     "its 'nodal' graph."),
    ("-ptype=string",
     "How the k-way partitioning is computed: 'rb' for recursive bisection "
     "or 'kway' for direct k-way partitioning (default)."),
    ("-ctype=string",
     "Vertex matching used while coarsening: 'rm' for random matching or "
     "'shem' for sorted heavy-edge matching (default)."),
    ("-iptype=string",
     "Initial partitioning scheme, used with -ptype=rb: 'grow' grows a "
     "bisection greedily (default), 'random' picks a random bisection."),
    ("-objtype=string",
     "Objective optimised with -ptype=kway: 'cut' minimises the edge cut "
     "(default), 'vol' minimises the total communication volume."),
    ("-contig",
     "With -ptype=kway, try to make every part contiguous; ignored when the "
     "graph itself is not connected."),
    ("-minconn",
     "With -ptype=kway, try to keep down the largest number of neighbouring "
     "parts that any one part has."),
    ("-tpwgts=filename",
     "File with the target weight of each part; without it every part aims "
     "for the same weight."),
    ("-ufactor=int",
     "Largest load imbalance allowed, as 1+x/1000. With rb it is measured "
     "per bisection as 2*max(left,right)/(left+right); with kway as the "
     "heaviest part over the average part. Defaults: 1 for rb (1.001), "
     "30 for kway (1.03)."),
    ("-ncommon=int",
     "How many nodes two elements must share to be joined in the dual "
     "graph (default 1)."),
    ("-niter=int",
     "Refinement iterations at each uncoarsening level (default 10)."),
    ("-ncuts=int",
     "Number of partitionings to compute, keeping the one with the best "
     "objective (default 1)."),
    ("-nooutput", "Do not write the partition files."),
    ("-seed=int", "Seed for the random number generator."),
    ("-dbglvl=int", "Debugging level."),
    ("-help", "Show this summary."),
)


def parse_cmdline(argv: Optional[Sequence[str]] = None) -> Params:
    """Parse the arguments of the mesh partitioning tool into :class:`Params`.

    Prints the help and exits with status 0 for ``-help`` or when the
    positional arguments are missing; raises :class:`ValueError` for
    invalid options and combinations.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    params = Params(
        gtype=GType.DUAL,
        ptype=PType.KWAY,
        objtype=ObjType.CUT,
        ctype=CType.SHEM,
        iptype=IPType.GROW,
        rtype=None,
        wgtflag=3,
        ncuts=1,
        niter=10,
        ncommon=1,
        seed=-1,
        nparts=1,
        ufactor=-1,
    )

    options, positional = _getopt_long_only(args, _LONG_OPTIONS, PROGRAM)
    for name, value in options:
        if name == "gtype":
            params.gtype = _lookup(_GTYPE_OPTIONS, name, value)
        elif name == "ptype":
            params.ptype = _lookup(_PTYPE_OPTIONS, name, value)
        elif name == "objtype":
            params.objtype = _lookup(_OBJTYPE_OPTIONS, name, value)
        elif name == "ctype":
            params.ctype = _lookup(_CTYPE_OPTIONS, name, value)
        elif name == "iptype":
            params.iptype = _lookup(_IPTYPE_OPTIONS, name, value)
        elif name in ("contig", "minconn", "nooutput"):
            setattr(params, name, True)
        elif name == "tpwgts":
            params.tpwgtsfile = value
        elif name in ("ncuts", "niter", "ncommon", "ufactor", "seed", "dbglvl"):
            setattr(params, name, _atoi(value))
        elif name == "help":
            _print_lines(_render_help(_USAGE, _REQUIRED, _OPTIONAL))
            raise SystemExit(0)

    if len(positional) != 2:
        print("Missing parameters.", end="")
        _print_lines(_short_help("mpmetis [options] <filename> <nparts>", PROGRAM))
        raise SystemExit(0)

    params.filename = positional[0]
    params.nparts = _atoi(positional[1])
    if params.nparts < 2:
        raise ValueError("The number of partitions should be greater than 1!")

    if params.ptype == PType.RB:
        params.rtype = RType.FM
    if params.ptype == PType.KWAY:
        params.iptype = IPType.METISRB
        params.rtype = RType.GREEDY

    if params.ptype == PType.RB:
        if params.contig:
            raise ValueError("The -contig option cannot be specified with rb partitioning.")
        if params.minconn:
            raise ValueError("The -minconn option cannot be specified with rb partitioning.")
        if params.objtype == ObjType.VOL:
            raise ValueError(
                "The -objtype=vol option cannot be specified with rb partitioning."
            )

    return params