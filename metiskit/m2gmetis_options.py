"""Command-line parsing for the mesh-to-graph conversion tool."""

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
from metiskit.params import GType, Params

PROGRAM = "m2gmetis"

_LONG_OPTIONS: Dict[str, bool] = {
    "gtype": True,
    "ncommon": True,
    "dbglvl": True,
    "help": False,
}

_GTYPE_OPTIONS = {"dual": GType.DUAL, "nodal": GType.NODAL}

_USAGE = "m2gmetis [options] <meshfile> <graphfile>"

_REQUIRED = (
    ("meshfile", "file holding the input mesh"),
    ("graphfile", "name of the graph file to write"),
)

_OPTIONAL = (
    ("-gtype=string",
     "Kind of graph to build: 'dual' connects elements (default), 'nodal' "
     "connects mesh nodes."),
    ("-ncommon=int",
     "For dual graphs, how many nodes two elements must share to be joined "
     "by an edge (default 1)."),
    ("-dbglvl=int", "Debugging level."),
    ("-help", "Show this summary."),
)


def parse_cmdline(argv: Optional[Sequence[str]] = None) -> Params:
    """Parse the arguments of the mesh-to-graph tool into :class:`Params`.

    Prints the help and exits with status 0 for ``-help`` or when the two
    file names are not given; raises :class:`ValueError` for bad options.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    params = Params(gtype=GType.DUAL, ncommon=1, dbglvl=0)

    options, positional = _getopt_long_only(args, _LONG_OPTIONS, PROGRAM)
    for name, value in options:
        if name == "gtype":
            params.gtype = _lookup(_GTYPE_OPTIONS, name, value)
        elif name == "ncommon":
            params.ncommon = _atoi(value)
            if params.ncommon < 1:
                raise ValueError("The -ncommon option should specify a number >= 1.")
        elif name == "dbglvl":
            params.dbglvl = _atoi(value)
        elif name == "help":
            _print_lines(_render_help(_USAGE, _REQUIRED, _OPTIONAL))
            raise SystemExit(0)

    if len(positional) != 2:
        print("Missing parameters.", end="")
        _print_lines(_short_help(_USAGE, PROGRAM))
        raise SystemExit(0)

    params.filename, params.outfile = positional
    return params