"""Command-line parsing for the nested dissection ordering tool."""

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
from metiskit.params import CType, IPType, Params, RType

PROGRAM = "ndmetis"

DEFAULT_UFACTOR = 200

_LONG_OPTIONS: Dict[str, bool] = {
    "ctype": True,
    "iptype": True,
    "rtype": True,
    "ufactor": True,
    "pfactor": True,
    "nocompress": False,
    "ccorder": False,
    "no2hop": False,
    "ondisk": False,
    "nooutput": False,
    "niter": True,
    "nseps": True,
    "seed": True,
    "dbglvl": True,
    "help": False,
}

_CTYPE_OPTIONS = {"rm": CType.RM, "shem": CType.SHEM}
_IPTYPE_OPTIONS = {"edge": IPType.EDGE, "node": IPType.NODE}
_RTYPE_OPTIONS = {"2sided": RType.SEP2SIDED, "1sided": RType.SEP1SIDED}

_USAGE = "ndmetis [options] <filename>"

_REQUIRED = (("filename", "file holding the graph to order"),)

_OPTIONAL = (
    ("-ctype=string",
     "Vertex matching used while coarsening: 'rm' for random matching or "
     "'shem' for sorted heavy-edge matching (default)."),
    ("-iptype=string",
     "How the initial separator is found: 'edge' derives it from an edge "
     "cut, 'node' grows it greedily node by node (default)."),
    ("-rtype=string",
     "Separator refinement: '1sided' (default) or '2sided' node-based "
     "refinement."),
    ("-ufactor=int",
     "Largest imbalance allowed between the two sides of each bisection, "
     "measured as 2*max(left,right)/(left+right) and given as 1+x/1000. "
     "The default 200 allows 1.20."),
    ("-pfactor=int",
     "When x>0, vertices whose degree exceeds 0.1*x times the average "
     "degree are set aside, the rest is ordered, and the set-aside vertices "
     "are placed last. The default 0 sets none aside."),
    ("-no2hop",
     "Do not fall back on 2-hop matchings when ordinary matching leaves the "
     "graph too large."),
    ("-nocompress",
     "Do not merge vertices whose adjacency lists are identical."),
    ("-ccorder",
     "Find the connected components first and order each on its own."),
    ("-niter=int",
     "Most refinement iterations at each uncoarsening level (default 10)."),
    ("-nseps=int",
     "Separators to compute at each dissection level, keeping the smallest "
     "(default 1)."),
    ("-ondisk", "Keep coarser graphs on disk to save memory."),
    ("-nooutput", "Do not write the ordering file."),
    ("-seed=int", "Seed for the random number generator."),
    ("-dbglvl=int", "Debugging level."),
    ("-help", "Show this summary."),
)


def parse_cmdline(argv: Optional[Sequence[str]] = None) -> Params:
    """Parse the arguments of the ordering tool into :class:`Params`.

    Prints the help and exits with status 0 for ``-help`` or when the graph
    file is not given; raises :class:`ValueError` for invalid options.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    params = Params(
        ctype=CType.SHEM,
        iptype=IPType.NODE,
        rtype=RType.SEP1SIDED,
        ufactor=DEFAULT_UFACTOR,
        pfactor=0,
        compress=True,
        ccorder=False,
        no2hop=False,
        ondisk=False,
        nooutput=False,
        wgtflag=1,
        nseps=1,
        niter=10,
        seed=-1,
        dbglvl=0,
        nparts=1,
    )

    options, positional = _getopt_long_only(args, _LONG_OPTIONS, PROGRAM)
    for name, value in options:
        if name == "ctype":
            params.ctype = _lookup(_CTYPE_OPTIONS, name, value)
        elif name == "iptype":
            params.iptype = _lookup(_IPTYPE_OPTIONS, name, value)
        elif name == "rtype":
            params.rtype = _lookup(_RTYPE_OPTIONS, name, value)
        elif name == "nocompress":
            params.compress = False
        elif name in ("ccorder", "no2hop", "ondisk", "nooutput"):
            setattr(params, name, True)
        elif name in ("ufactor", "pfactor", "nseps", "niter", "seed", "dbglvl"):
            setattr(params, name, _atoi(value))
        elif name == "help":
            _print_lines(_render_help(_USAGE, _REQUIRED, _OPTIONAL))
            raise SystemExit(0)

    if len(positional) != 1:
        print("Missing parameters.", end="")
        _print_lines(_short_help(_USAGE, PROGRAM))
        raise SystemExit(0)

    params.filename = positional[0]
    return params