"""Small numeric helpers: argmax variants, random seeding and return codes."""

from __future__ import annotations

import enum
import random
import signal
from typing import Sequence

DEFAULT_SEED = 4321

SIGMEM = int(signal.SIGABRT)
SIGERR = int(signal.SIGTERM)


class ReturnCode(enum.IntEnum):
    """Status reported by the partitioning library."""

    OK = 1
    ERROR_INPUT = -2
    ERROR_MEMORY = -3
    ERROR = -4


def init_random(seed: int) -> random.Random:
    """Return a generator seeded with ``seed``; -1 selects the default seed."""
    return random.Random(DEFAULT_SEED if seed == -1 else seed)


def _require(x: Sequence, minimum: int) -> None:
    if len(x) < minimum:
        raise ValueError(f"need at least {minimum} element(s), got {len(x)}")


def iargmax_nrm(x: Sequence[float], y: Sequence[float]) -> int:
    """Index of the largest ``x[i]*y[i]``; the first one wins ties."""
    _require(x, 1)
    products = [a * b for a, b in zip(x, y)]
    best = 0
    for i, value in enumerate(products):
        if value > products[best]:
            best = i
    return best


def iargmax_strd(x: Sequence[float], incx: int) -> int:
    """Index, counted in strides, of the largest of ``x[0], x[incx], ...``."""
    if incx < 1:
        raise ValueError("stride must be positive")
    strided = x[::incx]
    _require(strided, 1)
    best = 0
    for i, value in enumerate(strided):
        if value > strided[best]:
            best = i
    return best


def _argmax2(values: Sequence[float]) -> int:
    _require(values, 2)
    if values[0] > values[1]:
        max1, max2 = 0, 1
    else:
        max1, max2 = 1, 0
    for i in range(2, len(values)):
        if values[i] > values[max1]:
            max2, max1 = max1, i
        elif values[i] > values[max2]:
            max2 = i
    return max2


def rargmax2(x: Sequence[float]) -> int:
    """Index of the second largest element of ``x``."""
    return _argmax2(x)


def iargmax2_nrm(x: Sequence[float], y: Sequence[float]) -> int:
    """Index of the second largest ``x[i]*y[i]``."""
    return _argmax2([a * b for a, b in zip(x, y)])


def metis_rcode(sigrval: int) -> ReturnCode:
    """Map a signal code to a library return code."""
    if sigrval == 0:
        return ReturnCode.OK
    if sigrval == SIGMEM:
        return ReturnCode.ERROR_MEMORY
    return ReturnCode.ERROR