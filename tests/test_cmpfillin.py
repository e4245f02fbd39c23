from metiskit.cmpfillin import main


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_usage_when_arguments_missing(capsys):
    assert main([]) == 0
    assert "Usage" in capsys.readouterr().out


def test_path_graph_reports_no_fill(tmp_path, capsys):
    graph = _write(tmp_path, "path.graph", "4 3\n2\n1 3\n2 4\n3\n")
    perm = _write(tmp_path, "path.iperm", "0\n1\n2\n3\n")
    assert main([graph, perm]) == 0
    out = capsys.readouterr().out
    assert "Nonzeros: 3.000e+00" in out
    assert "#Vertices: 4, #Edges: 3" in out


def test_star_center_first_fills(tmp_path, capsys):
    graph = _write(tmp_path, "star.graph", "4 3\n2 3 4\n1\n1\n1\n")
    perm = _write(tmp_path, "star.iperm", "0\n1\n2\n3\n")
    assert main([graph, perm]) == 0
    assert "Nonzeros: 6.000e+00" in capsys.readouterr().out


def test_multi_constraint_graph_refused(tmp_path, capsys):
    graph = _write(tmp_path, "mc.graph", "3 2 10 2\n1 1 2\n1 1 1 3\n1 1 2\n")
    perm = _write(tmp_path, "mc.iperm", "0\n1\n2\n")
    assert main([graph, perm]) == 0
    assert "one constraint" in capsys.readouterr().out


def test_missing_perm_file_fails(tmp_path, capsys):
    graph = _write(tmp_path, "p.graph", "2 1\n2\n1\n")
    assert main([graph, str(tmp_path / "absent")]) == 1
    assert capsys.readouterr().err.strip()


def test_non_permutation_fails(tmp_path, capsys):
    graph = _write(tmp_path, "p.graph", "3 2\n2\n1 3\n2\n")
    perm = _write(tmp_path, "p.iperm", "0\n0\n1\n")
    assert main([graph, perm]) == 1
    assert "permutation" in capsys.readouterr().err