"""Graph and mesh file I/O, symbolic factorization, separator refinement and option parsing."""

__version__ = "0.1.0"

__all__ = [
    "cmpfillin",
    "gpmetis_options",
    "io",
    "m2gmetis_options",
    "mpmetis_options",
    "ndmetis_options",
    "nodepart",
    "noderefine",
    "params",
    "smbfactor",
    "stat",
    "timing",
    "util",
    "workspace",
]