"""
Writing the result set.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


def write_variations(variations: Iterable[str], path: Optional[Path] = None) -> int:
    """
    Write one variation per line, sorted.

    Args:
        variations: Terminal lines from the explorer
        path: Output file (created or truncated); stdout if None

    Returns:
        Number of lines written
    """
    lines = sorted(variations)

    if path is None:
        for line in lines:
            print(line, file=sys.stdout)
        return len(lines)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

    logger.info(f"Wrote {len(lines)} variations to {path}")
    return len(lines)
