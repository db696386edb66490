"""
opening-tree

Builds a tree of plausible opening variations by driving a UCI engine
(Stockfish by default) from a starting line.

## Architecture

1. **moves**: Move / MoveSequence data model
   - Engine-notation tokens with centipawn evaluations
   - Space-joined string form used as the result key

2. **engine**: UCI engine client
   - Subprocess lifecycle and line-based I/O
   - Options (Threads, Hash, MultiPV), position, fixed-depth search
   - Progress-line and board-dump parsing

3. **variations**: Variation explorer
   - Alternating branching / only-best recursion
   - Transposition cutoff keyed by FEN
   - Centipawn threshold pruning

4. **config**, **output**, **cli**: JSON config file, result writing,
   command-line entry point

## Quick Start

```python
from opening_tree import EngineClient, MoveSequence, explore_variations

with EngineClient("stockfish", threads=4, hash_mb=512, multipv=3) as engine:
    lines = explore_variations(
        engine,
        MoveSequence.from_string("e2e4 e7e5"),
        variation_depth=4,
        search_depth=18,
        is_white=True,
    )

for line in sorted(lines):
    print(line)
```

```bash
python -m opening_tree --config config.json
```
"""

__version__ = "0.1.0"
__license__ = "MIT"

from opening_tree.engine import EngineClient
from opening_tree.errors import (
    ConfigError,
    EngineError,
    ExplorationError,
    LaunchError,
    OpeningTreeError,
    PipeError,
    ProtocolError,
)
from opening_tree.moves import Move, MoveSequence
from opening_tree.variations import CP_THRESHOLD, VariationExplorer, explore_variations

__all__ = [
    'EngineClient',
    'Move',
    'MoveSequence',
    'VariationExplorer',
    'explore_variations',
    'CP_THRESHOLD',
    'OpeningTreeError',
    'EngineError',
    'LaunchError',
    'PipeError',
    'ProtocolError',
    'ExplorationError',
    'ConfigError',
]
