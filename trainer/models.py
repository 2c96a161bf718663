"""Data models for the Opening Trainer line graph."""

from dataclasses import dataclass, field
from typing import Literal


@dataclass
class Line:
    """A named, ordered sequence of SAN moves played from the starting position."""

    name: str = ""
    moves: list[str] = field(default_factory=list)


@dataclass
class GraphNode:
    """One distinct position reached while compiling lines."""

    position: str = ""
    outgoing_moves: dict[str, str] = field(default_factory=dict)
    line_label: str | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.outgoing_moves


PlayerColor = Literal["white", "black"]
