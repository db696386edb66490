"""
Engine Module

Client for an external UCI engine (Stockfish by default) running as a
subprocess, plus the parsers for the engine's output lines.

Key Components:
    - EngineClient: process lifecycle, options, position, search
    - parse_candidate: progress line -> (move, centipawns)
    - parse_fen: board dump line -> position key

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from opening_tree.engine.client import EngineClient
from opening_tree.engine.parsing import parse_candidate, parse_fen

__all__ = ['EngineClient', 'parse_candidate', 'parse_fen']
