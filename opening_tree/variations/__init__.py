"""
Variations Module

Recursive opening-tree exploration on top of the engine client.

Key Components:
    - VariationExplorer: alternating branching / only-best search with
      transposition cutoff and centipawn pruning
    - explore_variations: one-call wrapper
    - CP_THRESHOLD: default pruning threshold (-250 cp)
"""

from opening_tree.variations.explorer import (
    CP_THRESHOLD,
    ExplorationProgress,
    VariationExplorer,
    explore_variations,
)

__all__ = [
    'CP_THRESHOLD',
    'ExplorationProgress',
    'VariationExplorer',
    'explore_variations',
]
