"""
Tests for the command-line interface and the text board.
"""

import pytest

from ..ascii_board import board_to_lines, field_label, show
from ..cli import main
from ..engine_core.state import BoardState, Player, StoneStack, Stone, StoneType
from .conftest import put


class TestAsciiBoard:
    def test_field_labels(self):
        assert field_label(StoneStack()) == "."
        assert field_label(StoneStack([Stone(Player.FIRST, StoneType.FLAT)])) == "F"
        assert field_label(StoneStack([Stone(Player.SECOND, StoneType.STANDING)])) == "s"
        stack = StoneStack([
            Stone(Player.SECOND, StoneType.FLAT),
            Stone(Player.FIRST, StoneType.CAPSTONE),
        ])
        assert field_label(stack) == "C2"

    def test_board_lines(self):
        board = BoardState.create(3)
        put(board, 0, 0, Player.FIRST)
        put(board, 2, 2, Player.SECOND, StoneType.STANDING)

        assert board_to_lines(board) == [
            "2 . . s",
            "1 . . .",
            "0 F . .",
            "  a b c",
        ]

    def test_show_with_header(self):
        lines = []
        show(BoardState.create(3), header="Start", out=lambda *args: lines.append(args[0] if args else ""))

        assert lines[0] == "Start"
        assert "First: 10 stone(s), 0 capstone(s)" in lines
        assert lines[-1] == ""


class TestCLI:
    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_setup_all(self, capsys):
        assert main(["setup"]) == 0

        out = capsys.readouterr().out
        assert "3x3: 10 stones, 0 capstones" in out
        assert "8x8: 50 stones, 2 capstones" in out

    def test_setup_unknown_size(self, capsys):
        assert main(["setup", "9"]) == 1
        assert "no setup known" in capsys.readouterr().out

    def test_replay_game(self, capsys):
        moves = ["c2", "c0", "a1", "a2", "b1", "b0", "c1"]

        assert main(["replay", "--size", "3", *moves]) == 0

        out = capsys.readouterr().out
        assert "After 7 move(s):" in out
        assert "Game over: First wins with 15 points" in out

    def test_replay_rejected_move(self, capsys):
        assert main(["replay", "--size", "3", "a0", "a0"]) == 1

        out = capsys.readouterr().out
        assert "Move 2 'a0' rejected" in out

    def test_replay_invalid_size(self, capsys):
        assert main(["replay", "--size", "12", "a0"]) == 1
        assert "Invalid board size 12" in capsys.readouterr().out

    def test_play_until_eof(self, capsys, monkeypatch):
        inputs = iter(["a0", "zz", "c2"])

        def fake_input(prompt):
            try:
                return next(inputs)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)

        assert main(["play", "--size", "3"]) == 0

        out = capsys.readouterr().out
        assert "Rejected:" in out
        assert "Game over" not in out

    def test_play_quit(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt: "quit")
        assert main(["play", "--size", "4"]) == 0

    @pytest.mark.parametrize("level", ["debug", "INFO"])
    def test_log_level(self, capsys, level):
        assert main(["--log-level", level, "setup", "5"]) == 0
        assert "5x5: 21 stones, 1 capstones" in capsys.readouterr().out
