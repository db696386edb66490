"""
Move and move-sequence data model.

A Move is an engine-notation token (e2e4, e7e8q) together with the
centipawn evaluation the engine reported for it. A MoveSequence is the
played line from the standard starting position.

Only the tokens are serialized: str(sequence) is the space-joined line
that the engine receives in "position startpos moves ..." and that ends
up in the result set.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

import chess


@dataclass(frozen=True)
class Move:
    """A candidate move and its evaluation."""

    token: str
    evaluation: int = 0  # centipawns, side to move

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class MoveSequence:
    """An immutable, ordered line of moves from the start position."""

    moves: Tuple[Move, ...] = ()

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "MoveSequence":
        return cls(tuple(Move(token) for token in tokens))

    @classmethod
    def from_string(cls, text: str, validate: bool = True) -> "MoveSequence":
        """
        Build a sequence from a space-separated move string.

        Args:
            text: Moves in engine notation, e.g. "e2e4 e7e5 g1f3"
            validate: Check that every token is well-formed UCI notation

        Returns:
            MoveSequence (empty for an empty or blank string)

        Raises:
            ValueError: If validate is set and a token is malformed
        """
        tokens = text.split()
        if validate:
            for token in tokens:
                try:
                    chess.Move.from_uci(token)
                except ValueError as e:
                    raise ValueError(f"Invalid move token {token!r}: {e}") from e
        return cls.from_tokens(tokens)

    @property
    def tokens(self) -> Tuple[str, ...]:
        return tuple(move.token for move in self.moves)

    def extended(self, move: Move) -> "MoveSequence":
        """Return a new sequence with move appended."""
        return MoveSequence(self.moves + (move,))

    def to_string(self) -> str:
        return " ".join(self.tokens)

    def to_board(self) -> chess.Board:
        """
        Replay the line on a board from the starting position.

        Raises:
            ValueError: If a move is illegal in the position it is played
        """
        board = chess.Board()
        for ply, token in enumerate(self.tokens, start=1):
            move = chess.Move.from_uci(token)
            if move not in board.legal_moves:
                raise ValueError(f"Illegal move {token} at ply {ply}")
            board.push(move)
        return board

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return len(self.moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self.moves)

    def __getitem__(self, index: int) -> Move:
        return self.moves[index]
