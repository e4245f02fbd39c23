"""Symbolic Cholesky factorisation of a permuted sparse matrix."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


class SubscriptOverflow(RuntimeError):
    """Raised when the compressed subscript storage is too small."""


@dataclass
class SymbolicFactor:
    """Structure of the factor ``L`` found by :func:`smbfct`.

    All positions and row numbers are 0-based and refer to the permuted
    numbering.  ``xlnz[k]`` is where column ``k`` starts in the nonzero
    storage, ``nzsub`` holds the compressed row subscripts and ``xnzsub[k]``
    is where the subscripts of column ``k`` start in ``nzsub``.
    """

    xlnz: List[int]
    xnzsub: List[int]
    nzsub: List[int]
    maxlnz: int
    maxsub: int

    @property
    def column_counts(self) -> List[int]:
        """Number of below-diagonal nonzeros in each column of ``L``."""
        return [b - a for a, b in zip(self.xlnz, self.xlnz[1:])]


def _check_ordering(perm: Sequence[int], invp: Sequence[int]) -> None:
    n = len(perm)
    if len(invp) != n:
        raise ValueError("perm and its inverse must have the same length")
    if sorted(perm) != list(range(n)):
        raise ValueError("perm is not a permutation")
    if any(invp[v] != k for k, v in enumerate(perm)):
        raise ValueError("invp is not the inverse of perm")


def smbfct(
    xadj: Sequence[int],
    adjncy: Sequence[int],
    perm: Sequence[int],
    invp: Sequence[int],
    maxsub: Optional[int] = None,
) -> SymbolicFactor:
    """Symbolically factor the matrix of ``(xadj, adjncy)`` under ``perm``.

    ``perm[k]`` is the vertex placed at position ``k`` and ``invp`` its
    inverse.  ``maxsub`` bounds the subscript storage; when it is exceeded
    :class:`SubscriptOverflow` is raised.
    """
    n = len(perm)
    if len(xadj) != n + 1:
        raise ValueError("xadj must have one more entry than there are vertices")
    _check_ordering(perm, invp)
    if maxsub is None:
        maxsub = 8 * (n + xadj[n])
    if n == 0:
        return SymbolicFactor(xlnz=[0], xnzsub=[0], nzsub=[], maxlnz=0, maxsub=0)

    # 1-based working copies; index 0 is unused.
    xa = [0] + [v + 1 for v in xadj]
    adj = [0] + [v + 1 for v in adjncy]
    pm = [0] + [v + 1 for v in perm]
    ip = [0] + [v + 1 for v in invp]

    xlnz = [0] * (n + 2)
    xnzsub = [0] * (n + 2)
    nzsub = [0] * (maxsub + 2)
    rchlnk = [0] * (n + 2)
    marker = [0] * (n + 2)
    mrglnk = [0] * (n + 2)

    nzbeg, nzend = 1, 0
    xlnz[1] = 1

    for k in range(1, n + 1):
        xnzsub[k] = nzend
        node = pm[k]
        knz = 0
        mrgk = mrglnk[k]
        mrkflg = False
        marker[k] = marker[mrgk] if mrgk != 0 else k

        if xa[node] >= xa[node + 1]:
            xlnz[k + 1] = xlnz[k]
            continue

        # Link the structure of A(*,k) below the diagonal through rchlnk.
        rchlnk[k] = n + 1
        for j in range(xa[node], xa[node + 1]):
            nabor = ip[adj[j]]
            if nabor <= k:
                continue
            rchm = k
            while True:
                m = rchm
                rchm = rchlnk[m]
                if rchm > nabor:
                    break
            knz += 1
            rchlnk[m] = nabor
            rchlnk[nabor] = rchm
            if marker[nabor] != marker[k]:
                mrkflg = True

        copy = False
        if not mrkflg and mrgk != 0 and mrglnk[mrgk] == 0:
            # Mass symbolic elimination.
            xnzsub[k] = xnzsub[mrgk] + 1
            knz = xlnz[mrgk + 1] - (xlnz[mrgk] + 1)
        else:
            lmax = 0
            i = mrglnk[k]
            while i != 0:
                inz = xlnz[i + 1] - (xlnz[i] + 1)
                jstrt = xnzsub[i] + 1
                jstop = xnzsub[i] + inz
                if inz > lmax:
                    lmax = inz
                    xnzsub[k] = jstrt
                rchm = k
                for j in range(jstrt, jstop + 1):
                    nabor = nzsub[j]
                    while True:
                        m = rchm
                        rchm = rchlnk[m]
                        if rchm >= nabor:
                            break
                    if rchm != nabor:
                        knz += 1
                        rchlnk[m] = nabor
                        rchlnk[nabor] = rchm
                        rchm = nabor
                i = mrglnk[i]

            if knz != lmax:
                copy = True
                if nzbeg <= nzend:
                    # Does the tail of the previous column match this one?
                    i = rchlnk[k]
                    found = None
                    for jstrt in range(nzbeg, nzend + 1):
                        if nzsub[jstrt] < i:
                            continue
                        if nzsub[jstrt] == i:
                            found = jstrt
                        break
                    if found is not None:
                        xnzsub[k] = found
                        for j in range(found, nzend + 1):
                            if nzsub[j] != i:
                                break
                            i = rchlnk[i]
                            if i > n:
                                copy = False
                                break
                        else:
                            nzend = found - 1

        if copy:
            nzbeg = nzend + 1
            nzend += knz
            if nzend >= maxsub:
                raise SubscriptOverflow(
                    f"subscript storage of {maxsub} entries is too small"
                )
            i = k
            for j in range(nzbeg, nzend + 1):
                i = rchlnk[i]
                nzsub[j] = i
                marker[i] = k
            xnzsub[k] = nzbeg
            marker[k] = k

        if knz > 1:
            i = nzsub[xnzsub[k]]
            mrglnk[k] = mrglnk[i]
            mrglnk[i] = k

        xlnz[k + 1] = xlnz[k] + knz

    maxlnz = xlnz[n] - 1
    used = xnzsub[n]
    xnzsub[n + 1] = xnzsub[n]

    return SymbolicFactor(
        xlnz=[v - 1 for v in xlnz[1 : n + 2]],
        xnzsub=[v - 1 for v in xnzsub[1 : n + 2]],
        nzsub=[v - 1 for v in nzsub[1 : nzend + 1]],
        maxlnz=maxlnz,
        maxsub=used,
    )


def compute_fill_in(graph, perm: Sequence[int], iperm: Sequence[int]) -> Tuple[int, int]:
    """Return ``(nonzeros, operation count)`` of factoring ``graph`` under ``perm``.

    ``graph`` needs ``xadj`` and ``adjncy``.  The subscript storage is
    doubled once if the first attempt runs out of room.
    """
    xadj, adjncy = graph.xadj, graph.adjncy
    nvtxs = len(xadj) - 1
    if len(perm) != nvtxs:
        raise ValueError("the ordering does not match the number of vertices")
    maxsub = 8 * (nvtxs + xadj[nvtxs])
    try:
        factor = smbfct(xadj, adjncy, perm, iperm, maxsub)
    except SubscriptOverflow:
        try:
            factor = smbfct(xadj, adjncy, perm, iperm, 2 * maxsub)
        except SubscriptOverflow as exc:
            raise SubscriptOverflow("MAXSUB is too small!") from exc
    opc = sum(c * c - c for c in factor.column_counts)
    return factor.maxlnz, opc