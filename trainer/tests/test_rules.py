"""Tests for rules.py"""

import sys
from pathlib import Path

import chess
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rules import ChessRules, IllegalMoveError

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


@pytest.fixture
def rules():
    return ChessRules()


def test_starting_position(rules):
    assert rules.starting_position() == START_FEN


def test_play_returns_san_and_fen(rules):
    san, fen = rules.play(START_FEN, "e4")
    assert san == "e4"
    assert fen == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"


def test_play_normalizes_san(rules):
    board = chess.Board()
    board.push_san("e4")
    board.push_san("e5")
    san, _ = rules.play(board.fen(), "Ng1f3")
    assert san == "Nf3"


@pytest.mark.parametrize("move", ["e9", "Ke2", "Nf6", "", "hello"])
def test_illegal_moves_raise(rules, move):
    with pytest.raises(IllegalMoveError):
        rules.play(START_FEN, move)


def test_apply_pushes_onto_board(rules):
    board = rules.new_game()
    rules.apply(board, "d4")
    rules.apply(board, "d5")
    assert board.fullmove_number == 2
    assert rules.position_id(board) == board.fen()


def test_new_game_from_position(rules):
    _, fen = rules.play(START_FEN, "e4")
    assert rules.new_game(fen).fen() == fen


def test_side_to_move(rules):
    assert rules.side_to_move(START_FEN) == "white"
    _, fen = rules.play(START_FEN, "Nf3")
    assert rules.side_to_move(fen) == "black"


def test_legal_moves_from_start(rules):
    moves = rules.legal_moves(START_FEN)
    assert len(moves) == 20
    assert "e4" in moves
    assert "Nf3" in moves


def test_legal_targets_for_knight(rules):
    assert sorted(rules.legal_targets(START_FEN, "g1")) == ["f3", "h3"]


def test_legal_targets_empty_and_bad_squares(rules):
    assert rules.legal_targets(START_FEN, "e4") == []
    assert rules.legal_targets(START_FEN, "z9") == []


def test_invalid_fen_raises_value_error(rules):
    with pytest.raises(ValueError):
        rules.legal_moves("not a fen")
