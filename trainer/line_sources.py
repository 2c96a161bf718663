#!/usr/bin/env python3
"""
Line sources

Loads named opening lines from files so they can be compiled into an
opening graph. Supports lichess chess-openings TSV files (eco, name, pgn
columns) and PGN files where each game's mainline is one line.

Usage:
  python line_sources.py --source data/eco
  python line_sources.py --source repertoire.pgn
"""

import argparse
import csv
import re
import sys
from pathlib import Path

import chess.pgn

sys.path.insert(0, str(Path(__file__).resolve().parent))
from models import Line

RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")


class LineSourceError(ValueError):
    """A game in a line source could not be read as a legal move sequence."""

    def __init__(self, source: Path, index: int, line_name: str, error: Exception):
        self.source = source
        self.index = index
        self.line_name = line_name
        self.error = error
        super().__init__(f"Game {index} '{line_name}' in {source}: {error}")


def parse_pgn_moves(pgn: str) -> list[str]:
    """
    Parse PGN movetext (e.g. "1. e4 e5 2. Nf3 Nc6") into a list of SAN moves.
    Comments, variations, NAGs and results are dropped.
    """
    pgn = re.sub(r"\{[^}]*\}", " ", pgn)
    # Strip nested variations innermost first
    while re.search(r"\([^()]*\)", pgn):
        pgn = re.sub(r"\([^()]*\)", " ", pgn)

    moves = []
    for token in pgn.split():
        if re.match(r"^\d+\.+$", token):
            continue
        if re.match(r"^\d+\.", token):
            token = re.sub(r"^\d+\.+", "", token)
        if not token or token.startswith("$"):
            continue
        if token not in RESULT_TOKENS:
            moves.append(token)
    return moves


def parse_line_row(name: str, pgn: str) -> Line:
    """Parse one name/movetext pair into a Line."""
    return Line(name=name.strip(), moves=parse_pgn_moves(pgn))


def load_lines_from_tsv(source: str | Path) -> list[Line]:
    """Load lines from a TSV file or a directory of *.tsv files."""
    source = Path(source)
    if source.is_dir():
        tsv_files = sorted(source.glob("*.tsv"))
    else:
        tsv_files = [source]

    if not tsv_files:
        raise FileNotFoundError(f"No TSV files found in {source}")

    lines = []
    for tsv_path in tsv_files:
        with open(tsv_path, encoding="utf-8") as f:
            reader = csv.DictReader(f, delimiter="\t")
            for row in reader:
                name = (row.get("name") or "").strip()
                pgn = row.get("pgn") or ""
                if not name or not pgn:
                    print(f"Warning: skip row without name or pgn in {tsv_path}: {row}", file=sys.stderr)
                    continue

                line = parse_line_row(name, pgn)
                if not line.moves:
                    print(f"Warning: skip {name}: no moves", file=sys.stderr)
                    continue
                lines.append(line)
    return lines


def line_name_for_game(game: chess.pgn.Game, index: int) -> str:
    """Opening header, else Event header, else a positional name."""
    for header in ("Opening", "Event"):
        value = game.headers.get(header, "").strip()
        if value and value != "?":
            return value
    return f"Line {index}"


def load_lines_from_pgn(source: str | Path) -> list[Line]:
    """
    Load one line per game mainline from a PGN file.
    Raises LineSourceError for a game with unreadable or illegal moves.
    """
    source = Path(source)
    lines = []
    with open(source, encoding="utf-8", errors="replace") as f:
        index = 0
        while True:
            game = chess.pgn.read_game(f)
            if game is None:
                break
            index += 1
            if game.errors:
                raise LineSourceError(source, index, line_name_for_game(game, index), game.errors[0])

            board = game.board()
            moves = []
            for move in game.mainline_moves():
                moves.append(board.san(move))
                board.push(move)
            if not moves:
                continue
            lines.append(Line(name=line_name_for_game(game, index), moves=moves))
    return lines


def load_lines(source: str | Path) -> list[Line]:
    """Load lines from a .pgn file, a .tsv file, or a directory of either."""
    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"Line source {source} does not exist")

    if source.is_dir():
        lines = []
        for pgn_path in sorted(source.glob("*.pgn")):
            lines.extend(load_lines_from_pgn(pgn_path))
        if any(source.glob("*.tsv")):
            lines.extend(load_lines_from_tsv(source))
        if not lines:
            raise FileNotFoundError(f"No lines found in {source}")
        return lines

    if source.suffix.lower() == ".pgn":
        return load_lines_from_pgn(source)
    return load_lines_from_tsv(source)


def main():
    parser = argparse.ArgumentParser(description="List opening lines from a TSV or PGN source")
    parser.add_argument("--source", required=True, help="Path to a .tsv/.pgn file or a directory")
    args = parser.parse_args()

    try:
        lines = load_lines(args.source)
    except (FileNotFoundError, LineSourceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Loaded {len(lines)} lines.")
    for line in lines[:50]:
        print(f"  {len(line.moves):3d} plies | {line.name[:60]}")
    if len(lines) > 50:
        print(f"  ... and {len(lines) - 50} more")


if __name__ == "__main__":
    main()
