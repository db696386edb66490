"""
Configuration for a variation run.

The configuration file is JSON:

    {
        "engine-path": "stockfish",
        "output-path": "variations.txt",
        "engine-settings": {
            "memory": 2048,
            "threads": 8,
            "print-all": false,
            "print-progress": true
        },
        "variation-config": {
            "initial-moves": "e2e4 e7e5",
            "engine-depth": 20,
            "variation-depth": 6,
            "is-white": true
        }
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from opening_tree.engine.client import DEFAULT_ENGINE
from opening_tree.errors import ConfigError
from opening_tree.moves import MoveSequence

logger = logging.getLogger(__name__)


@dataclass
class EngineSettings:
    """Engine options. None keeps the client default."""

    threads: Optional[int] = None
    hash_mb: Optional[int] = None
    multipv: Optional[int] = None
    print_all: bool = False
    print_progress: bool = False

    def __post_init__(self):
        for name in ("threads", "hash_mb", "multipv"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass
class VariationConfig:
    """What to explore."""

    initial_moves: str = ""
    engine_depth: int = 20
    variation_depth: int = 4
    is_white: bool = True

    def __post_init__(self):
        if self.engine_depth <= 0:
            raise ValueError(f"engine_depth must be positive, got {self.engine_depth}")

        if self.variation_depth < 0:
            raise ValueError(
                f"variation_depth must be non-negative, got {self.variation_depth}"
            )

        # Raises ValueError on malformed tokens
        MoveSequence.from_string(self.initial_moves)

    @property
    def initial_sequence(self) -> MoveSequence:
        return MoveSequence.from_string(self.initial_moves)


@dataclass
class AppConfig:
    """Top-level configuration."""

    engine_path: str = DEFAULT_ENGINE
    output_path: Optional[Path] = None
    engine: EngineSettings = field(default_factory=EngineSettings)
    variations: VariationConfig = field(default_factory=VariationConfig)

    def __post_init__(self):
        if not self.engine_path:
            self.engine_path = DEFAULT_ENGINE
        if self.output_path is not None:
            self.output_path = Path(self.output_path)


def _get(section: dict, key: str, default, kind):
    value = section.get(key, default)
    if value is None:
        return None
    # bool is a subclass of int
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigError(f"'{key}' must be {kind.__name__}, got {value!r}")
    return value


def _section(data: dict, key: str) -> dict:
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{key}' must be an object, got {section!r}")
    return section


def config_from_dict(data: dict) -> AppConfig:
    """
    Build an AppConfig from the parsed JSON document.

    Raises:
        ConfigError: If a value has the wrong type or is out of range
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    engine_section = _section(data, "engine-settings")
    variation_section = _section(data, "variation-config")

    try:
        engine = EngineSettings(
            threads=_get(engine_section, "threads", None, int),
            hash_mb=_get(engine_section, "memory", None, int),
            multipv=_get(engine_section, "multipv", None, int),
            print_all=_get(engine_section, "print-all", False, bool),
            print_progress=_get(engine_section, "print-progress", False, bool),
        )
        variations = VariationConfig(
            initial_moves=_get(variation_section, "initial-moves", "", str),
            engine_depth=_get(variation_section, "engine-depth", 20, int),
            variation_depth=_get(variation_section, "variation-depth", 4, int),
            is_white=_get(variation_section, "is-white", True, bool),
        )
        return AppConfig(
            engine_path=_get(data, "engine-path", "", str) or DEFAULT_ENGINE,
            output_path=_get(data, "output-path", None, str) or None,
            engine=engine,
            variations=variations,
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e


def load_config(path) -> AppConfig:
    """
    Load the JSON configuration file.

    Args:
        path: Path to config.json

    Raises:
        ConfigError: If the file is missing, not JSON, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error reading {path}: {e}") from e

    config = config_from_dict(data)
    logger.info(f"Loaded config: {path}")
    return config
