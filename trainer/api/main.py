"""
FastAPI Query API for the Opening Trainer

Endpoints:
  GET /openings  - Built-in openings and their lines
  GET /opening/{name}/moves?fen=...  - Book moves and current line at a position
  GET /opening/{name}/random-move?fen=...  - Opponent reply picked from the book
  POST /opening/{name}/walk  - Replay PGN moves through the book
  GET /legal-moves?fen=...&square=...  - Legal moves for board highlighting
"""

import os
import random
import sys
import threading
from contextlib import asynccontextmanager
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from line_sources import parse_pgn_moves
from openings import ChessOpening, build_openings
from rules import ChessRules

rules = ChessRules()
_openings: dict[str, ChessOpening] | None = None
_openings_lock = threading.Lock()


class PgnWalkRequest(BaseModel):
    moves: str  # e.g. "1.e4 e5 2.Nf3 Nc6 3.Bb5"


def get_openings() -> dict[str, ChessOpening]:
    """Build the opening registry once. Bad configured lines fail here."""
    global _openings
    with _openings_lock:
        if _openings is None:
            seed = os.environ.get("TRAINER_RANDOM_SEED")
            rng = random.Random(int(seed)) if seed else None
            _openings = build_openings(os.environ.get("TRAINER_LINES_SOURCE"), rng=rng)
        return _openings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Built before the first request is served
    get_openings()
    yield


app = FastAPI(title="Opening Trainer API", version="1.0.0", lifespan=lifespan)


def get_opening(name: str) -> ChessOpening:
    opening = get_openings().get(name)
    if opening is None:
        raise HTTPException(status_code=404, detail=f"Opening '{name}' not found")
    return opening


def position_to_response(opening: ChessOpening, fen: str) -> dict:
    """Convert a position in an opening to an API response dict."""
    return {
        "fen": fen,
        "line": opening.get_line_label(fen),
        "moves": opening.get_next_moves(fen),
        "player_turn": opening.is_player_turn(fen),
    }


@app.get("/openings")
def list_openings():
    return [
        {"name": o.name, "player_color": o.player_color, "lines": o.line_names}
        for o in get_openings().values()
    ]


@app.get("/opening/{name}/moves")
def get_book_moves(name: str, fen: str | None = Query(None)):
    """Book moves from fen, or from the opening's initial position."""
    opening = get_opening(name)
    fen = fen or opening.initial_position
    try:
        return position_to_response(opening, fen)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {fen}")


@app.get("/opening/{name}/random-move")
def get_random_book_move(name: str, fen: str | None = Query(None)):
    opening = get_opening(name)
    return {"fen": fen or opening.initial_position, "move": opening.get_random_move(fen)}


@app.post("/opening/{name}/walk")
def walk_pgn(name: str, body: PgnWalkRequest):
    """Walk the book by PGN move sequence, return the position reached."""
    opening = get_opening(name)
    moves = parse_pgn_moves(body.moves)
    if not moves:
        raise HTTPException(status_code=400, detail="Invalid PGN")

    board = rules.new_game(opening.initial_position)
    for san in moves:
        try:
            rules.apply(board, san)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid move: {san}")

    fen = opening.graph.replay(moves, start=opening.initial_position)
    if fen is None:
        raise HTTPException(status_code=404, detail="Moves leave the opening book")
    return position_to_response(opening, fen)


@app.get("/legal-moves")
def get_legal_moves(fen: str = Query(...), square: str | None = Query(None)):
    """All legal SAN moves, or destination squares of the piece on square."""
    try:
        if square:
            return {"fen": fen, "square": square, "targets": rules.legal_targets(fen, square)}
        return {"fen": fen, "moves": rules.legal_moves(fen)}
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {fen}")


@app.get("/health")
def health():
    return {"status": "ok"}
