"""
Exception hierarchy for opening-tree.

Engine failures are split by where they happen:
    - LaunchError: the engine process could not be started
    - PipeError: stdin/stdout of the process are not available
    - ProtocolError: a read hit end of stream before an expected marker,
      or a write to the engine failed

ExplorationError wraps any engine failure raised while walking the
variation tree. All of them are fatal for the current run.
"""


class OpeningTreeError(Exception):
    """Base class for all opening-tree errors."""


class EngineError(OpeningTreeError):
    """Base class for failures talking to the engine process."""


class LaunchError(EngineError):
    """The engine executable could not be started."""


class PipeError(EngineError):
    """The engine's standard input or output stream is unavailable."""


class ProtocolError(EngineError):
    """The engine stream closed or failed before an expected reply."""


class ExplorationError(OpeningTreeError):
    """An engine failure aborted variation exploration."""


class ConfigError(OpeningTreeError):
    """The configuration file is missing or invalid."""
