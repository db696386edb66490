"""
Variation Explorer

Expands a starting line into a pruned opening tree by asking the engine
for candidate moves at every node and recursing into them.

Modes:
    - Branching: follow every candidate the engine reports (MultiPV lines)
    - Only-best: follow the single best reply

The mode alternates every ply. Which one the root starts in depends on
the length of the initial line and the is_white flag, so one side's moves
are always branched and the other side always answers with its best move.

Pruning:
    Evaluations are compared against CP_THRESHOLD as reported by the
    engine (side to move), without flipping the sign per side.
    - Only-best: a move below the threshold drops the whole line.
    - Branching: a move at or below the threshold gets one more ply in
      only-best mode to confirm the assessment. If no move beats the
      threshold the line before the move is kept as a terminal too.

Transpositions:
    Positions are keyed by the engine's FEN. A position seen earlier in
    the same run is not expanded again; the line reaching it becomes a
    terminal.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

from opening_tree.errors import EngineError, ExplorationError
from opening_tree.moves import Move, MoveSequence

logger = logging.getLogger(__name__)

CP_THRESHOLD = -250  # about a minor piece down


@dataclass
class ExplorationProgress:
    """Snapshot passed to the progress callback after each expanded node."""

    sequence: MoveSequence
    candidates: MoveSequence
    depth_remaining: int
    variations_found: int
    nodes_expanded: int


ProgressCallback = Callable[[ExplorationProgress], None]


class _Run:
    """Per-call state: visited positions and terminal lines."""

    def __init__(self):
        self.results: Set[str] = set()
        self.visited: Set[str] = set()
        self.nodes_expanded = 0
        self.last_milestone = 0


class VariationExplorer:
    """
    Recursive variation search driven by an engine.

    The engine needs a ``multipv`` attribute and the ``set_position``,
    ``get_current_fen`` and ``find_best_moves`` methods of EngineClient.
    """

    def __init__(
        self,
        engine,
        search_depth: int,
        threshold: int = CP_THRESHOLD,
        progress: Optional[ProgressCallback] = None,
        milestone_every: int = 100,
    ):
        """
        Args:
            engine: EngineClient (or anything with the same interface)
            search_depth: Engine depth for every "go depth" search
            threshold: Pruning threshold in centipawns
            progress: Called after each node the engine evaluated
            milestone_every: Log the variation count every N variations
        """
        if search_depth <= 0:
            raise ValueError(f"search_depth must be positive, got {search_depth}")

        self.engine = engine
        self.search_depth = search_depth
        self.threshold = threshold
        self.progress = progress
        self.milestone_every = milestone_every

    def explore(
        self, initial: MoveSequence, variation_depth: int, is_white: bool
    ) -> Set[str]:
        """
        Build the set of terminal lines reachable from initial.

        Args:
            initial: Starting line
            variation_depth: Number of plies to add to the line
            is_white: Side flag selecting which plies are branched

        Returns:
            Set of space-joined move strings

        Raises:
            ExplorationError: If the engine fails at any point; no partial
                result is returned
        """
        if variation_depth < 0:
            raise ValueError(f"variation_depth must be non-negative, got {variation_depth}")

        only_best = (len(initial) % 2 == 1) != is_white
        run = _Run()

        logger.info(
            f"Exploring from '{initial}': variation_depth={variation_depth}, "
            f"search_depth={self.search_depth}, start_mode={'only-best' if only_best else 'branching'}"
        )

        try:
            self._expand(initial, variation_depth, only_best, run)
        except EngineError as e:
            raise ExplorationError(f"Error making variations: {e}") from e

        logger.info(
            f"Exploration complete: {len(run.results)} variations, "
            f"{run.nodes_expanded} nodes, {len(run.visited)} positions"
        )
        return run.results

    def _record(self, sequence: MoveSequence, run: _Run):
        run.results.add(str(sequence))

        count = len(run.results)
        if self.milestone_every and count - run.last_milestone >= self.milestone_every:
            run.last_milestone = count - count % self.milestone_every
            logger.info(f"Variations calculated: {run.last_milestone}")

    def _expand(
        self, sequence: MoveSequence, depth: int, only_best: bool, run: _Run
    ):
        if depth == 0:
            self._record(sequence, run)
            return

        self.engine.set_position(sequence)
        fen = self.engine.get_current_fen()
        if fen:
            if fen in run.visited:
                logger.debug(f"Transposition: {sequence}")
                self._record(sequence, run)
                return
            run.visited.add(fen)

        num_lines = 1 if only_best else self.engine.multipv
        best_moves: Dict[str, int] = self.engine.find_best_moves(
            sequence, self.search_depth, num_lines
        )
        candidates = [Move(token, evaluation) for token, evaluation in best_moves.items()]
        run.nodes_expanded += 1

        logger.debug(
            f"Node '{sequence}': best={[(m.token, m.evaluation) for m in candidates]}, "
            f"depth left={depth - 1}"
        )
        if self.progress is not None:
            self.progress(
                ExplorationProgress(
                    sequence=sequence,
                    candidates=MoveSequence(tuple(candidates)),
                    depth_remaining=depth - 1,
                    variations_found=len(run.results),
                    nodes_expanded=run.nodes_expanded,
                )
            )

        if not candidates:
            self._record(sequence, run)
            return

        if only_best:
            move = candidates[-1]
            if move.evaluation < self.threshold:
                logger.debug(f"Dropping '{sequence} {move}': {move.evaluation}cp")
                return
            self._expand(sequence.extended(move), depth - 1, False, run)
            return

        good_eval = False
        for move in candidates:
            if move.evaluation > self.threshold:
                good_eval = True
                self._expand(sequence.extended(move), depth - 1, True, run)
            else:
                self._expand(sequence.extended(move), 1, True, run)

        if not good_eval:
            self._record(sequence, run)


def explore_variations(
    engine,
    initial: MoveSequence,
    variation_depth: int,
    search_depth: int,
    is_white: bool,
    threshold: int = CP_THRESHOLD,
    progress: Optional[ProgressCallback] = None,
) -> Set[str]:
    """Convenience wrapper around VariationExplorer.explore()."""
    explorer = VariationExplorer(
        engine, search_depth, threshold=threshold, progress=progress
    )
    return explorer.explore(initial, variation_depth, is_white)
