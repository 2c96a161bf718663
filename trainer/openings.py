"""
Named openings for the trainer.

Each ChessOpening owns a graph compiled from its lines. Move lists are SAN
from the standard starting position.
"""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))
from line_sources import load_lines
from models import Line, PlayerColor
from opening_graph import OpeningGraph, as_line
from rules import ChessRules

OPENING_LINES: dict[str, list[Line]] = {
    "Ruy Lopez": [
        Line(
            name="Ruy Lopez: Closed",
            moves=["e4", "e5", "Nf3", "Nc6", "Bb5", "a6", "Ba4", "Nf6", "O-O", "Be7",
                   "Re1", "b5", "Bb3", "d6", "c3", "O-O", "h3"],
        ),
        Line(
            name="Ruy Lopez: Open Variation",
            moves=["e4", "e5", "Nf3", "Nc6", "Bb5", "a6", "Ba4", "Nf6", "O-O", "Nxe4",
                   "d4", "b5", "Bb3", "d5", "dxe5", "Be6"],
        ),
        Line(
            name="Ruy Lopez: Berlin Defense",
            moves=["e4", "e5", "Nf3", "Nc6", "Bb5", "Nf6", "O-O", "Nxe4", "d4", "Nd6",
                   "Bxc6", "dxc6", "dxe5", "Nf5", "Qxd8+", "Kxd8"],
        ),
        Line(
            name="Ruy Lopez: Exchange Variation",
            moves=["e4", "e5", "Nf3", "Nc6", "Bb5", "a6", "Bxc6", "dxc6", "O-O", "f6", "d4"],
        ),
    ],
    "French Defense": [
        Line(
            name="French Defense: Advance Variation",
            moves=["e4", "e6", "d4", "d5", "e5", "c5", "c3", "Nc6", "Nf3", "Qb6"],
        ),
        Line(
            name="French Defense: Exchange Variation",
            moves=["e4", "e6", "d4", "d5", "exd5", "exd5", "Nf3", "Nf6", "Bd3", "Bd6"],
        ),
        Line(
            name="French Defense: via 1.d4",
            moves=["d4", "e6", "e4", "d5", "Nc3", "Nf6"],
        ),
    ],
}

OPENING_COLORS: dict[str, PlayerColor] = {
    "Ruy Lopez": "white",
    "French Defense": "black",
}


class ChessOpening:
    """An opening the user rehearses, played from one side."""

    def __init__(
        self,
        name: str,
        player_color: PlayerColor,
        lines: list,
        initial_position: str = "start",
        rules: ChessRules | None = None,
        rng: random.Random | None = None,
    ):
        self.name = name
        self.player_color = player_color
        self.rules = rules or ChessRules()
        if initial_position == "start":
            self.initial_position = self.rules.starting_position()
        else:
            self.initial_position = initial_position

        self.lines = [as_line(line) for line in lines]
        self.graph = OpeningGraph(rules=self.rules, rng=rng)
        self.graph.ingest_lines(self.lines)
        self.line_names = [line.name for line in self.lines]

    def get_next_moves(self, fen: str | None = None) -> list[str]:
        return self.graph.get_next_moves(fen or self.initial_position)

    def get_random_move(self, fen: str | None = None) -> str | None:
        return self.graph.get_random_move(fen or self.initial_position)

    def get_line_label(self, fen: str | None = None) -> str | None:
        return self.graph.get_line_label(fen or self.initial_position)

    def is_player_turn(self, fen: str | None = None) -> bool:
        """True when the trainee's colour is to move in fen."""
        return self.rules.side_to_move(fen or self.initial_position) == self.player_color


def build_openings(
    extra_source: str | Path | None = None, rng: random.Random | None = None
) -> dict[str, ChessOpening]:
    """
    Build every built-in opening, plus one opening from extra_source if given.
    Raises InvalidMoveError for bad configured lines.
    """
    openings = {
        name: ChessOpening(name, OPENING_COLORS.get(name, "white"), lines, rng=rng)
        for name, lines in OPENING_LINES.items()
    }
    if extra_source:
        extra_source = Path(extra_source)
        openings[extra_source.stem] = ChessOpening(
            extra_source.stem, "white", load_lines(extra_source), rng=rng
        )
    return openings
