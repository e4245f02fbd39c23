"""CPU timers and the timing report of a multilevel run."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, fields
from typing import Optional


@dataclass
class CpuTimer:
    """Accumulates processor time over any number of start/stop intervals."""

    seconds: float = 0.0
    _started: Optional[float] = field(default=None, repr=False, compare=False)

    @property
    def running(self) -> bool:
        return self._started is not None

    def start(self) -> None:
        if self._started is not None:
            raise RuntimeError("timer is already running")
        self._started = time.process_time()

    def stop(self) -> None:
        if self._started is None:
            raise RuntimeError("timer is not running")
        self.seconds += time.process_time() - self._started
        self._started = None

    def clear(self) -> None:
        self.seconds = 0.0
        self._started = None

    def __enter__(self) -> "CpuTimer":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()


_REPORT = (
    ("\n Multilevel: \t\t ", "total"),
    ("\n     Coarsening: \t\t ", "coarsen"),
    ("\n            Matching: \t\t\t ", "match"),
    ("\n            Contract: \t\t\t ", "contract"),
    ("\n     Initial Partition: \t ", "init_part"),
    ("\n     Uncoarsening: \t\t ", "uncoarsen"),
    ("\n          Refinement: \t\t\t ", "ref"),
    ("\n          Projection: \t\t\t ", "project"),
    ("\n     Splitting: \t\t ", "split"),
)


@dataclass
class Timers:
    """The set of phase timers kept during a partitioning run."""

    total: CpuTimer = field(default_factory=CpuTimer)
    init_part: CpuTimer = field(default_factory=CpuTimer)
    match: CpuTimer = field(default_factory=CpuTimer)
    contract: CpuTimer = field(default_factory=CpuTimer)
    coarsen: CpuTimer = field(default_factory=CpuTimer)
    uncoarsen: CpuTimer = field(default_factory=CpuTimer)
    ref: CpuTimer = field(default_factory=CpuTimer)
    project: CpuTimer = field(default_factory=CpuTimer)
    split: CpuTimer = field(default_factory=CpuTimer)
    aux1: CpuTimer = field(default_factory=CpuTimer)
    aux2: CpuTimer = field(default_factory=CpuTimer)
    aux3: CpuTimer = field(default_factory=CpuTimer)

    def clear_all(self) -> None:
        for f in fields(self):
            getattr(self, f.name).clear()

    def report(self) -> str:
        """Return the timing summary as text."""
        parts = ["\nTiming Information -------------------------------------------------"]
        parts.extend(
            f"{label}{getattr(self, name).seconds:7.3f}" for label, name in _REPORT
        )
        parts.append("\n********************************************************************\n")
        return "".join(parts)