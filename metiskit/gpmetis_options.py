"""Command-line parsing for the graph partitioning tool."""

from __future__ import annotations

import re
import sys
import textwrap
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from metiskit.params import CType, IPType, ObjType, Params, PType, RType

PROGRAM = "gpmetis"

_LONG_OPTIONS: Dict[str, bool] = {
    "ptype": True,
    "objtype": True,
    "ctype": True,
    "iptype": True,
    "no2hop": False,
    "minconn": False,
    "contig": False,
    "ondisk": False,
    "dropedges": False,
    "nooutput": False,
    "ufactor": True,
    "niter": True,
    "ncuts": True,
    "niparts": True,
    "tpwgts": True,
    "ubvec": True,
    "seed": True,
    "dbglvl": True,
    "help": False,
}

_PTYPE_OPTIONS = {"rb": PType.RB, "kway": PType.KWAY}
_OBJTYPE_OPTIONS = {"cut": ObjType.CUT, "vol": ObjType.VOL}
_CTYPE_OPTIONS = {"rm": CType.RM, "shem": CType.SHEM}
_IPTYPE_OPTIONS = {"grow": IPType.GROW, "random": IPType.RANDOM, "rb": IPType.METISRB}

_USAGE = "gpmetis [options] graphfile nparts"

_REQUIRED = (
    ("graphfile", "file holding the graph to partition"),
    ("nparts", "number of parts to produce"),
)

_OPTIONAL = (
    ("-ptype=string",
     "How the k-way partitioning is computed: 'rb' for recursive bisection "
     "or 'kway' for direct k-way partitioning (default)."),
    ("-ctype=string",
     "Vertex matching used while coarsening: 'rm' for random matching or "
     "'shem' for sorted heavy-edge matching (default)."),
    ("-iptype=string",
     "Initial partitioning scheme, used with -ptype=rb: 'grow' grows a "
     "bisection greedily (default with one constraint), 'random' picks a "
     "random bisection (default with several constraints)."),
    ("-objtype=string",
     "Objective optimised with -ptype=kway: 'cut' minimises the edge cut "
     "(default), 'vol' minimises the total communication volume."),
    ("-no2hop",
     "Do not fall back on 2-hop matchings when ordinary matching leaves the "
     "graph too large."),
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
    ("-ubvec=string",
     "Per-constraint imbalance limits for multi-constraint graphs, given as "
     "space-separated numbers such as \"1.02 1.2 1.35\". Overrides -ufactor."),
    ("-niparts=int",
     "Number of initial partitionings to try; chosen automatically by default."),
    ("-niter=int",
     "Refinement iterations at each uncoarsening level (default 10)."),
    ("-ncuts=int",
     "Number of partitionings to compute, keeping the one with the best "
     "objective (default 1)."),
    ("-ondisk", "Keep coarser graphs on disk to save memory."),
    ("-nooutput", "Do not write the partition file."),
    ("-seed=int", "Seed for the random number generator."),
    ("-dbglvl=int", "Debugging level."),
    ("-help", "Show this summary."),
)

_ATOI_RE = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Leading integer of ``text``, or 0 when there is none."""
    m = _ATOI_RE.match(text)
    return int(m.group(1)) if m else 0


def _illegal(program: str) -> ValueError:
    return ValueError(
        "Illegal command-line option(s)\n"
        f"Use {program} -help for a summary of the options."
    )


def _render_help(
    usage: str,
    required: Iterable[Tuple[str, str]],
    optional: Iterable[Tuple[str, str]],
) -> List[str]:
    """Lay out the full option summary as lines of text."""
    lines = ["", f"Usage: {usage}", "", "Required parameters"]
    lines.extend(f"  {name:<11} {desc}" for name, desc in required)
    lines.extend(["", "Optional parameters"])
    for flag, desc in optional:
        lines.append(f"  {flag}")
        lines.extend(
            textwrap.wrap(desc, 76, initial_indent="      ", subsequent_indent="      ")
        )
        lines.append("")
    return lines


def _short_help(usage: str, program: str) -> List[str]:
    return ["", f"   Usage: {usage}", f"   Run '{program} -help' to list the options."]


def _getopt_long_only(
    argv: Iterable[str], spec: Dict[str, bool], program: str
) -> Tuple[List[Tuple[str, Optional[str]]], List[str]]:
    """Split ``argv`` into long options and positional arguments.

    Options may start with one or two dashes, may be abbreviated to a unique
    prefix and take their value either after ``=`` or as the next argument.
    Positional arguments may appear anywhere; ``--`` ends the options.
    """
    options: List[Tuple[str, Optional[str]]] = []
    positional: List[str] = []
    args = iter(argv)
    for arg in args:
        if arg == "--":
            positional.extend(args)
            break
        if not arg.startswith("-") or arg == "-":
            positional.append(arg)
            continue
        body = arg[2:] if arg.startswith("--") else arg[1:]
        name, eq, value = body.partition("=")
        if not name:
            raise _illegal(program)
        matches = [o for o in spec if o == name] or [o for o in spec if o.startswith(name)]
        if len(matches) != 1:
            raise _illegal(program)
        opt = matches[0]
        if spec[opt]:
            if not eq:
                value = next(args, None)
                if value is None:
                    raise _illegal(program)
            options.append((opt, value))
        else:
            if eq:
                raise _illegal(program)
            options.append((opt, None))
    return options, positional


def _lookup(table: Dict[str, object], name: str, value: str):
    try:
        return table[value]
    except KeyError:
        raise ValueError(f"Invalid option -{name}={value}") from None


def _print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


def parse_cmdline(argv: Optional[Sequence[str]] = None) -> Params:
    """Parse the arguments of the graph partitioning tool into :class:`Params`.

    Prints the help and exits with status 0 for ``-help`` or when the
    positional arguments are missing; raises :class:`ValueError` for
    invalid options and combinations.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    params = Params(
        ptype=PType.KWAY,
        objtype=ObjType.CUT,
        ctype=CType.SHEM,
        iptype=None,
        rtype=None,
        wgtflag=3,
        ncuts=1,
        niter=10,
        niparts=-1,
        seed=-1,
        nparts=1,
        ufactor=-1,
    )

    options, positional = _getopt_long_only(args, _LONG_OPTIONS, PROGRAM)
    for name, value in options:
        if name == "ptype":
            params.ptype = _lookup(_PTYPE_OPTIONS, name, value)
        elif name == "objtype":
            params.objtype = _lookup(_OBJTYPE_OPTIONS, name, value)
        elif name == "ctype":
            params.ctype = _lookup(_CTYPE_OPTIONS, name, value)
        elif name == "iptype":
            params.iptype = _lookup(_IPTYPE_OPTIONS, name, value)
        elif name in ("no2hop", "contig", "minconn", "ondisk", "dropedges", "nooutput"):
            setattr(params, name, True)
        elif name == "tpwgts":
            params.tpwgtsfile = value
        elif name == "ubvec":
            params.ubvecstr = value
        elif name in ("niparts", "ncuts", "niter", "ufactor", "seed", "dbglvl"):
            setattr(params, name, _atoi(value))
        elif name == "help":
            _print_lines(_render_help(_USAGE, _REQUIRED, _OPTIONAL))
            raise SystemExit(0)

    if len(positional) != 2:
        print("Missing parameters.", end="")
        _print_lines(_short_help("gpmetis [options] <filename> <nparts>", PROGRAM))
        raise SystemExit(0)

    params.filename = positional[0]
    params.nparts = _atoi(positional[1])
    if params.nparts < 2:
        raise ValueError("The number of partitions should be greater than 1!")

    if params.ptype == PType.RB:
        params.rtype = RType.FM
    if params.ptype == PType.KWAY:
        if params.iptype is None:
            params.iptype = IPType.METISRB
        params.rtype = RType.GREEDY

    if params.ptype == PType.RB:
        if params.contig:
            raise ValueError(
                "***The -contig option cannot be specified with rb partitioning. "
                "Will be ignored."
            )
        if params.minconn:
            raise ValueError(
                "***The -minconn option cannot be specified with rb partitioning. "
                "Will be ignored."
            )
        if params.objtype == ObjType.VOL:
            raise ValueError(
                "The -objtype=vol option cannot be specified with rb partitioning."
            )

    return params