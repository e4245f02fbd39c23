import pytest

from metiskit.ndmetis_options import DEFAULT_UFACTOR, parse_cmdline
from metiskit.params import CType, IPType, RType


def test_defaults():
    params = parse_cmdline(["graph.txt"])
    assert params.filename == "graph.txt"
    assert params.ctype == CType.SHEM
    assert params.iptype == IPType.NODE
    assert params.rtype == RType.SEP1SIDED
    assert params.ufactor == DEFAULT_UFACTOR == 200
    assert params.pfactor == 0
    assert params.compress is True
    assert params.ccorder is False
    assert params.no2hop is False
    assert params.ondisk is False
    assert params.nooutput is False
    assert params.wgtflag == 1
    assert params.nseps == 1
    assert params.niter == 10
    assert params.seed == -1
    assert params.dbglvl == 0
    assert params.nparts == 1


def test_string_options():
    params = parse_cmdline(["-ctype=rm", "-iptype=edge", "-rtype=2sided", "graph.txt"])
    assert params.ctype == CType.RM
    assert params.iptype == IPType.EDGE
    assert params.rtype == RType.SEP2SIDED


def test_flags():
    params = parse_cmdline(
        ["-nocompress", "-ccorder", "-no2hop", "-ondisk", "-nooutput", "graph.txt"]
    )
    assert params.compress is False
    assert params.ccorder and params.no2hop and params.ondisk and params.nooutput


def test_integer_options():
    params = parse_cmdline(
        ["-ufactor=30", "-pfactor=60", "-nseps=3", "-niter=5", "-seed=9", "-dbglvl=2", "g"]
    )
    assert params.ufactor == 30
    assert params.pfactor == 60
    assert params.nseps == 3
    assert params.niter == 5
    assert params.seed == 9
    assert params.dbglvl == 2


def test_value_as_next_argument():
    params = parse_cmdline(["-rtype", "2sided", "graph.txt"])
    assert params.rtype == RType.SEP2SIDED
    assert params.filename == "graph.txt"


@pytest.mark.parametrize(
    "arg, message",
    [
        ("-rtype=fm", "Invalid option -rtype=fm"),
        ("-iptype=grow", "Invalid option -iptype=grow"),
        ("-ctype=heavy", "Invalid option -ctype=heavy"),
    ],
)
def test_invalid_values(arg, message):
    with pytest.raises(ValueError, match=message):
        parse_cmdline([arg, "graph.txt"])


def test_unknown_option():
    with pytest.raises(ValueError, match="Illegal command-line option"):
        parse_cmdline(["-ptype=rb", "graph.txt"])


def test_missing_parameters(capsys):
    with pytest.raises(SystemExit) as info:
        parse_cmdline([])
    assert info.value.code == 0
    out = capsys.readouterr().out
    assert out.startswith("Missing parameters.")
    assert "Usage: ndmetis [options] <filename>" in out


def test_too_many_parameters(capsys):
    with pytest.raises(SystemExit) as info:
        parse_cmdline(["graph.txt", "4"])
    assert info.value.code == 0
    assert "Missing parameters." in capsys.readouterr().out