#!/usr/bin/env python3
"""
Opening line graph

Compiles named move sequences into one graph keyed by position (FEN).
Lines that transpose into the same position share a node, so the book moves
from any position are the union of every line passing through it.

Usage:
  python opening_graph.py --opening "Ruy Lopez"
  python opening_graph.py --source data/eco --moves "1. e4 e5 2. Nf3"
"""

import argparse
import random
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))
from line_sources import parse_pgn_moves
from models import GraphNode, Line
from rules import ChessRules, IllegalMoveError

ROOT_LABEL = "Root"


class InvalidMoveError(ValueError):
    """A configured line contains a move that is illegal where it is played."""

    def __init__(self, move: str, line_name: str, position: str):
        self.move = move
        self.line_name = line_name
        self.position = position
        super().__init__(f"Invalid move '{move}' in line '{line_name}' from FEN: {position}")


def as_line(item) -> Line:
    """Accept a Line, a {"name", "moves"} mapping or a (name, moves) pair."""
    if isinstance(item, Line):
        name, moves = item.name, item.moves
    elif isinstance(item, Mapping):
        name, moves = item.get("name", ""), item.get("moves", [])
    else:
        name, moves = item
    if isinstance(moves, str):
        moves = parse_pgn_moves(moves)
    return Line(name=name, moves=list(moves))


class OpeningGraph:
    """
    Map-of-maps over positions: position -> {move -> position} for edges,
    position -> line name for labels. Nodes are only ever added.
    """

    def __init__(self, rules: ChessRules | None = None, rng: random.Random | None = None):
        self.rules = rules or ChessRules()
        self.rng = rng or random.Random()
        self.root = self.rules.starting_position()
        self._edges: dict[str, dict[str, str]] = {self.root: {}}
        self._labels: dict[str, str] = {self.root: ROOT_LABEL}

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, position) -> bool:
        return position in self._edges

    def ingest_lines(self, lines: Iterable) -> None:
        """
        Replay every line from the starting position and record each move.
        Raises InvalidMoveError on the first illegal move; whatever was recorded
        before it stays in the graph.
        """
        for item in lines:
            line = as_line(item)
            board = self.rules.new_game()
            current = self.rules.position_id(board)
            self._edges.setdefault(current, {})

            for move in line.moves:
                try:
                    san = self.rules.apply(board, move)
                except IllegalMoveError as e:
                    raise InvalidMoveError(move, line.name, current) from e

                child = self.rules.position_id(board)
                self._edges.setdefault(child, {})
                self._edges[current][san] = child

                # First line through a position names it
                if child not in self._labels:
                    self._labels[child] = line.name

                current = child

    def get_next_moves(self, position: str) -> list[str]:
        """Book moves from position. Empty for positions outside the graph."""
        return list(self._edges.get(position, {}))

    def get_random_move(self, position: str) -> str | None:
        """Pick a book move uniformly at random, or None once the line is played out."""
        moves = self.get_next_moves(position)
        if not moves:
            return None
        return self.rng.choice(moves)

    def get_line_label(self, position: str) -> str | None:
        return self._labels.get(position)

    def node(self, position: str) -> GraphNode | None:
        """Snapshot of the node at position."""
        if position not in self._edges:
            return None
        return GraphNode(
            position=position,
            outgoing_moves=dict(self._edges[position]),
            line_label=self._labels.get(position),
        )

    def positions(self) -> list[str]:
        return list(self._edges)

    def leaves(self) -> list[str]:
        return [fen for fen, moves in self._edges.items() if not moves]

    def is_book_move(self, position: str, move: str) -> bool:
        """True if move, in any SAN spelling the rules accept, is recorded from position."""
        moves = self._edges.get(position)
        if not moves:
            return False
        if move in moves:
            return True
        try:
            san, _ = self.rules.play(position, move)
        except ValueError:
            return False
        return san in moves

    def replay(self, moves: Iterable[str], start: str | None = None) -> str | None:
        """
        Walk book moves from start (the root by default).
        Returns the position reached, or None off-book.
        """
        if isinstance(moves, str):
            moves = parse_pgn_moves(moves)
        position = start or self.root
        for move in moves:
            edges = self._edges.get(position, {})
            if move not in edges:
                try:
                    move, _ = self.rules.play(position, move)
                except ValueError:
                    return None
            if move not in edges:
                return None
            position = edges[move]
        return position


def summarize(graph: OpeningGraph) -> dict:
    """Counts printed by the command line."""
    from transposition_resolver import find_transpositions

    return {
        "positions": len(graph),
        "edges": sum(len(graph.get_next_moves(fen)) for fen in graph.positions()),
        "leaves": len(graph.leaves()),
        "transpositions": len(find_transpositions(graph)),
    }


def main():
    from line_sources import LineSourceError, load_lines
    from openings import OPENING_LINES

    parser = argparse.ArgumentParser(description="Build an opening graph and query it")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--source", help="TSV/PGN file or directory of lines")
    source.add_argument("--opening", choices=sorted(OPENING_LINES), help="Built-in opening")
    parser.add_argument("--fen", help="Position to query")
    parser.add_argument("--moves", help='Moves to play from the start, e.g. "1. e4 e5"')
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random book move")
    args = parser.parse_args()

    graph = OpeningGraph(rng=random.Random(args.seed))
    try:
        lines = load_lines(args.source) if args.source else OPENING_LINES[args.opening]
        graph.ingest_lines(lines)
    except (FileNotFoundError, LineSourceError, InvalidMoveError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    stats = summarize(graph)
    print(
        f"Built graph: {stats['positions']} positions, {stats['edges']} moves, "
        f"{stats['leaves']} leaves, {stats['transpositions']} transpositions."
    )

    fen = args.fen
    if args.moves:
        fen = graph.replay(args.moves)
        if fen is None:
            print(f"Moves leave the book: {args.moves}", file=sys.stderr)
            sys.exit(1)
    if fen:
        print(f"Position: {fen}")
        print(f"Line: {graph.get_line_label(fen) or '-'}")
        print(f"Book moves: {', '.join(graph.get_next_moves(fen)) or '-'}")
        print(f"Random pick: {graph.get_random_move(fen) or '-'}")


if __name__ == "__main__":
    main()
