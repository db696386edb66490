"""Shared pytest fixtures: a scripted UCI engine executable."""

import os
import sys
from pathlib import Path

import pytest

# Answers uci/isready/position/d/go like Stockfish would, using
# python-chess for legal moves. Candidates are the legal moves sorted by
# UCI string, scored 30, 20, 10, ... in MultiPV order. One decoy line at
# depth - 1 is printed first.
FAKE_ENGINE_SOURCE = '''\
import sys

import chess

board = chess.Board()
multipv = 1


def out(line):
    sys.stdout.write(line + "\\n")
    sys.stdout.flush()


for raw in sys.stdin:
    parts = raw.split()
    if not parts:
        continue
    cmd = parts[0]

    if cmd == "uci":
        out("id name FakeFish")
        out("uciok")
    elif cmd == "isready":
        out("readyok")
    elif cmd == "setoption" and parts[2] == "MultiPV":
        multipv = int(parts[4])
    elif cmd == "position":
        if parts[1] == "startpos":
            board = chess.Board()
            moves = parts[3:]
        else:
            board = chess.Board(" ".join(parts[2:8]))
            moves = []
        for move in moves:
            board.push_uci(move)
    elif cmd == "d":
        out("")
        out(str(board))
        out("")
        out("Fen: " + board.fen())
        out("Key: 0000000000000000")
        out("Checkers: ")
    elif cmd == "go":
        depth = int(parts[2])
        legal = sorted(move.uci() for move in board.legal_moves)
        if legal and depth > 1:
            out(f"info depth {depth - 1} seldepth {depth} multipv 1 score cp 999 nodes 10 pv {legal[0]}")
        for i, move in enumerate(legal[:multipv], start=1):
            out(f"info depth {depth} seldepth {depth + 2} multipv {i} score cp {40 - 10 * i} nodes 1000 pv {move}")
        out("bestmove " + (legal[0] if legal else "(none)"))
    elif cmd == "quit":
        break
'''


@pytest.fixture
def fake_engine_path(tmp_path) -> Path:
    """Write the scripted engine to tmp_path and make it executable."""
    if sys.platform.startswith("win"):
        pytest.skip("Scripted engine needs a POSIX shebang")

    path = tmp_path / "fakefish"
    path.write_text(f"#!{sys.executable}\n" + FAKE_ENGINE_SOURCE)
    os.chmod(path, 0o755)
    return path
