from __future__ import annotations

import pytest

from bitchess.cli.render import render_ascii, render_compact
from bitchess.engine.state import GameState


def test_render_compact_startpos() -> None:
    text = render_compact(GameState.initial().board)
    lines = text.splitlines()
    assert lines[0] == "8 r n b q k b n r"
    assert lines[1] == "7 p p p p p p p p"
    assert lines[4] == "4 . . . . . . . ."
    assert lines[7] == "1 R N B Q K B N R"
    assert lines[8] == "  a b c d e f g h"


def test_render_ascii_frames_every_square() -> None:
    text = render_ascii(GameState.initial().board)
    lines = text.splitlines()
    # border, then (padding, pieces, padding, border) per rank, then file labels
    assert len(lines) == 1 + 8 * 4 + 1
    assert lines[0] == "  " + "#" * 56
    assert lines[2].startswith("8 #  r  ##  n  #")
    assert lines[-4].startswith("1 #  R  ##  N  #")
    assert lines[-3] == "  " + "#     #" * 8
    assert lines[-1].split() == list("ABCDEFGH")


def test_render_ascii_custom_empty_marker() -> None:
    board = GameState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1").board
    text = render_ascii(board, empty=".")
    assert "#  .  #" in text
    assert text.count("#  K  #") == 1


def test_render_ascii_rejects_long_marker() -> None:
    with pytest.raises(ValueError):
        render_ascii(GameState.initial().board, empty="..")
