"""Run parameters and the option enumerations used by the command-line tools."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from metiskit.timing import CpuTimer


class _LabelledEnum(enum.IntEnum):
    """Integer enumeration whose members carry a short text label."""

    @property
    def label(self) -> str:
        return _LABELS[type(self)][self.value]

    @classmethod
    def from_label(cls, text: str):
        for member in cls:
            if member.label == text:
                return member
        raise ValueError(f"unknown {cls.__name__} label: {text!r}")


class PType(_LabelledEnum):
    """Partitioning scheme."""

    RB = 0
    KWAY = 1


class ObjType(_LabelledEnum):
    """Objective optimised by the partitioner."""

    CUT = 0
    VOL = 1
    NODE = 2


class CType(_LabelledEnum):
    """Matching scheme used during coarsening."""

    RM = 0
    SHEM = 1


class IPType(_LabelledEnum):
    """Initial partitioning scheme."""

    GROW = 0
    RANDOM = 1
    EDGE = 2
    NODE = 3
    METISRB = 4


class RType(_LabelledEnum):
    """Refinement scheme."""

    FM = 0
    GREEDY = 1
    SEP2SIDED = 2
    SEP1SIDED = 3


class GType(_LabelledEnum):
    """Kind of graph derived from a mesh."""

    DUAL = 0
    NODAL = 1


_LABELS = {
    PType: ("rb", "kway"),
    ObjType: ("cut", "vol", "node"),
    CType: ("rm", "shem"),
    RType: ("fm", "greedy", "2sided", "1sided"),
    IPType: ("grow", "random", "edge", "node", "metisrb"),
    GType: ("dual", "nodal"),
}


def i2r_ubfactor(ufactor: int) -> float:
    """Convert an integer imbalance factor (in thousandths) to a ratio."""
    return 1.0 + 0.001 * ufactor


@dataclass
class Params:
    """Settings gathered from the command line for one run."""

    ptype: PType = PType.RB
    objtype: ObjType = ObjType.CUT
    ctype: CType = CType.RM
    iptype: Optional[IPType] = IPType.GROW
    rtype: Optional[RType] = RType.FM

    no2hop: bool = False
    minconn: bool = False
    contig: bool = False

    ondisk: bool = False

    dropedges: bool = False

    nooutput: bool = False

    balance: bool = False
    ncuts: int = 0
    niter: int = 0
    niparts: int = 0

    gtype: GType = GType.DUAL
    ncommon: int = 0

    seed: int = 0
    dbglvl: int = 0

    nparts: int = 0

    nseps: int = 0
    ufactor: int = 0
    pfactor: int = 0
    compress: bool = False
    ccorder: bool = False

    filename: Optional[str] = None
    outfile: Optional[str] = None
    xyzfile: Optional[str] = None
    tpwgtsfile: Optional[str] = None
    ubvecstr: Optional[str] = None

    wgtflag: int = 0
    numflag: int = 0
    tpwgts: Optional[List[float]] = None
    ubvec: Optional[List[float]] = None

    iotimer: CpuTimer = field(default_factory=CpuTimer)
    parttimer: CpuTimer = field(default_factory=CpuTimer)
    reporttimer: CpuTimer = field(default_factory=CpuTimer)

    maxmemory: int = 0

    @property
    def ubfactor(self) -> float:
        """The imbalance ratio that ``ufactor`` stands for."""
        return i2r_ubfactor(self.ufactor)