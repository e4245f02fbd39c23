import pytest

from metiskit.m2gmetis_options import parse_cmdline
from metiskit.params import GType


def test_defaults():
    params = parse_cmdline(["mesh.txt", "out.graph"])
    assert params.filename == "mesh.txt"
    assert params.outfile == "out.graph"
    assert params.gtype == GType.DUAL
    assert params.ncommon == 1
    assert params.dbglvl == 0


def test_nodal_and_ncommon():
    params = parse_cmdline(["-gtype=nodal", "-ncommon", "3", "m", "o"])
    assert params.gtype == GType.NODAL
    assert params.ncommon == 3


def test_dbglvl_and_positionals_anywhere():
    params = parse_cmdline(["m", "-dbglvl=8", "o"])
    assert params.dbglvl == 8
    assert (params.filename, params.outfile) == ("m", "o")


@pytest.mark.parametrize("value", ["0", "-2", "abc"])
def test_ncommon_must_be_positive(value):
    with pytest.raises(ValueError, match="ncommon"):
        parse_cmdline([f"-ncommon={value}", "m", "o"])


def test_invalid_gtype():
    with pytest.raises(ValueError, match="Invalid option -gtype=mixed"):
        parse_cmdline(["-gtype=mixed", "m", "o"])


def test_unknown_option():
    with pytest.raises(ValueError, match="Use m2gmetis -help"):
        parse_cmdline(["-ptype=rb", "m", "o"])


@pytest.mark.parametrize("args", [["m"], ["m", "o", "x"]])
def test_wrong_number_of_files(args, capsys):
    with pytest.raises(SystemExit) as exc:
        parse_cmdline(args)
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert out.startswith("Missing parameters.")
    assert "Usage: m2gmetis [options] <meshfile> <graphfile>" in out


def test_help(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_cmdline(["--help"])
    assert exc.value.code == 0
    assert "-gtype=string" in capsys.readouterr().out