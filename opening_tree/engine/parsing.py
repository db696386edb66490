"""
Parsers for engine output lines.

Search progress looks like:
    info depth 20 seldepth 27 multipv 2 score cp 31 nodes 4188390 ... pv e2e4 e7e5 g1f3

and the board dump printed in reply to "d" contains:
    Fen: rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1

Lines that do not have the expected shape are ignored by returning None.
Mate scores ("score mate 3") have no cp field and are never matched.
"""

import re
from typing import Optional

from opening_tree.moves import Move

# Whole-word fields, so "seldepth" and "multipv" are not mistaken for
# "depth" and "pv".
PROGRESS_RE = re.compile(r"\bdepth (\d+)\b.*?\bcp (-?\d+)\b.*?\bpv (\S+)")

# Move counters are dropped so the same position reached at a different
# move number gives the same key.
FEN_RE = re.compile(r"Fen: (.+) \d+ \d+")


def parse_candidate(line: str, depth: int) -> Optional[Move]:
    """
    Extract the first principal-variation move from a progress line.

    Args:
        line: Raw engine output line
        depth: Search depth that was requested

    Returns:
        Move with the cp evaluation, or None if the line does not match
        or was reported at a different depth
    """
    match = PROGRESS_RE.search(line)
    if match is None:
        return None

    if int(match.group(1)) != depth:
        return None

    return Move(token=match.group(3), evaluation=int(match.group(2)))


def parse_fen(line: str) -> Optional[str]:
    """Extract the position key from a board-dump "Fen:" line."""
    match = FEN_RE.search(line.strip())
    if match is None:
        return None
    return match.group(1)
