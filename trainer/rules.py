"""
Chess rules adapter.

Wraps python-chess so the opening graph only ever sees FEN strings and SAN
moves. Everything about legality lives here.
"""

import chess


class IllegalMoveError(ValueError):
    """A move could not be parsed or is not legal in the given position."""


class ChessRules:
    """Starting position, move application and legal-move listing on top of chess.Board."""

    def starting_position(self) -> str:
        return chess.Board().fen()

    def new_game(self, position: str | None = None) -> chess.Board:
        """Fresh scratch board, at the starting position unless one is given."""
        if position is None:
            return chess.Board()
        return chess.Board(position)

    def position_id(self, board: chess.Board) -> str:
        return board.fen()

    def apply(self, board: chess.Board, move: str) -> str:
        """
        Play a SAN move on board. Returns the move's canonical SAN.
        Raises IllegalMoveError if the move is malformed, illegal or ambiguous.
        """
        try:
            parsed = board.parse_san(move)
        except ValueError as e:
            raise IllegalMoveError(f"{move}: {e}") from e
        san = board.san(parsed)
        board.push(parsed)
        return san

    def play(self, position: str, move: str) -> tuple[str, str]:
        """Play move from position. Returns (san, resulting position)."""
        board = self.new_game(position)
        san = self.apply(board, move)
        return san, self.position_id(board)

    def side_to_move(self, position: str) -> str:
        return "white" if chess.Board(position).turn == chess.WHITE else "black"

    def legal_moves(self, position: str) -> list[str]:
        """All legal moves from position, in SAN."""
        board = chess.Board(position)
        return [board.san(m) for m in board.legal_moves]

    def legal_targets(self, position: str, square: str) -> list[str]:
        """Destination squares for the piece on square. Empty for empty or unknown squares."""
        board = chess.Board(position)
        try:
            from_square = chess.parse_square(square)
        except ValueError:
            return []
        targets = []
        for move in board.legal_moves:
            if move.from_square != from_square:
                continue
            name = chess.square_name(move.to_square)
            # promotions list the same square once per piece
            if name not in targets:
                targets.append(name)
        return targets
