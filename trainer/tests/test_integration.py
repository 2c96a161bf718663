"""Integration tests for the command-line scripts"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

pytestmark = pytest.mark.integration


def run_main(main, *argv):
    with patch.object(sys, "argv", ["prog", *argv]):
        main()


def test_graph_cli_queries_builtin_opening(capsys):
    from opening_graph import main

    run_main(main, "--opening", "Ruy Lopez", "--moves", "1. e4 e5 2. Nf3", "--seed", "1")
    out = capsys.readouterr().out
    assert "Built graph:" in out
    assert "Line: Ruy Lopez: Closed" in out
    assert "Book moves: Nc6" in out
    assert "Random pick: Nc6" in out


def test_graph_cli_off_book_moves_exit_1(capsys):
    from opening_graph import main

    with pytest.raises(SystemExit) as exc_info:
        run_main(main, "--opening", "Ruy Lopez", "--moves", "1. d4")
    assert exc_info.value.code == 1
    assert "leave the book" in capsys.readouterr().err


def test_graph_cli_bad_source_line_exits_1(tmp_path, capsys):
    from opening_graph import main

    tsv = tmp_path / "bad.tsv"
    tsv.write_text("eco\tname\tpgn\nC20\tBroken Line\t1. e4 e9\n")
    with pytest.raises(SystemExit) as exc_info:
        run_main(main, "--source", str(tsv))
    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "e9" in err
    assert "Broken Line" in err


def test_graph_cli_from_tsv_source(tmp_path, capsys):
    from opening_graph import main

    tsv = tmp_path / "c.tsv"
    tsv.write_text(
        "eco\tname\tpgn\n"
        "C50\tItalian Game\t1. e4 e5 2. Nf3 Nc6 3. Bc4\n"
        "C60\tRuy Lopez\t1. e4 e5 2. Nf3 Nc6 3. Bb5\n"
    )
    run_main(main, "--source", str(tsv), "--moves", "1. e4 e5 2. Nf3 Nc6")
    out = capsys.readouterr().out
    assert "Built graph: 7 positions, 6 moves, 2 leaves, 0 transpositions." in out
    assert "Book moves: Bc4, Bb5" in out


def test_transposition_cli_reports_french_move_orders(capsys):
    from transposition_resolver import main

    run_main(main, "--opening", "French Defense")
    out = capsys.readouterr().out
    assert "Found 1 transposed positions, 1 links." in out


def test_line_sources_cli(tmp_path, capsys):
    from line_sources import main

    tsv = tmp_path / "b.tsv"
    tsv.write_text("eco\tname\tpgn\nB20\tSicilian Defense\t1. e4 c5\n")
    run_main(main, "--source", str(tsv))
    out = capsys.readouterr().out
    assert "Loaded 1 lines." in out
    assert "Sicilian Defense" in out


def test_graph_cli_bad_pgn_game_exits_1(tmp_path, capsys):
    from opening_graph import main

    pgn = tmp_path / "bad.pgn"
    pgn.write_text('[Opening "Broken Line"]\n\n1. e4 e9 2. Nf3 *\n')
    with pytest.raises(SystemExit) as exc_info:
        run_main(main, "--source", str(pgn))
    assert exc_info.value.code == 1
    assert "Broken Line" in capsys.readouterr().err


@pytest.mark.parametrize("script", ["opening_graph.py", "line_sources.py", "transposition_resolver.py"])
def test_scripts_start_with_shebang(script):
    path = Path(__file__).resolve().parent.parent / script
    assert path.read_text().startswith("#!/usr/bin/env python3\n")


def test_distribution_lists_every_module():
    """Each top-level module and the api directory are installed."""
    root = Path(__file__).resolve().parent.parent
    pyproject = (root.parent / "pyproject.toml").read_text()

    assert 'packages = ["api"]' in pyproject
    for module in sorted(p.stem for p in root.glob("*.py")):
        assert f'"{module}"' in pyproject, f"{module} missing from py-modules"
