"""
UCI Engine Client

Owns one engine subprocess and gives a typed request/response surface
over its line-based text protocol. Only the part of UCI needed for
variation search is covered.

Protocol Flow:
    → uci
    → setoption name Threads value 8
    → setoption name Hash value 2048
    → setoption name MultiPV value 5
    → isready
    → ucinewgame
    ← ... readyok
    → position startpos moves e2e4 e7e5
    → go depth 20
    ← info depth 20 ... score cp 31 ... pv g1f3 b8c6 ...
    ← bestmove g1f3 ponder b8c6
    → d
    ← ... Fen: <fen> 0 3 ... Checkers:

Every exchange is a blocking write followed by a blocking read until a
marker line. Reads have no timeout: an engine that stops answering
blocks the caller.
"""

import logging
import shutil
import subprocess
from typing import Callable, Dict, List, Optional, Union

from opening_tree.engine.parsing import parse_candidate, parse_fen
from opening_tree.errors import LaunchError, PipeError, ProtocolError
from opening_tree.moves import MoveSequence

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = "stockfish"
DEFAULT_THREADS = 8
DEFAULT_HASH_MB = 2048
DEFAULT_MULTIPV = 5

READY_MARKER = "readyok"
BESTMOVE_MARKER = "bestmove"
BOARD_DUMP_MARKER = "Checkers:"


class EngineClient:
    """
    Client for a UCI-speaking engine process.

    Attributes:
        engine_path: Executable name or path
        threads: Search threads (Threads option)
        hash_mb: Hash table size in MB (Hash option)
        multipv: Number of principal variations to report (MultiPV option)
        echo_output: Log every line received from the engine at INFO level
    """

    def __init__(
        self,
        engine_path: str = DEFAULT_ENGINE,
        threads: int = DEFAULT_THREADS,
        hash_mb: int = DEFAULT_HASH_MB,
        multipv: int = DEFAULT_MULTIPV,
        echo_output: bool = False,
    ):
        self.engine_path = engine_path
        self.threads = threads
        self.hash_mb = hash_mb
        self.multipv = multipv
        self.echo_output = echo_output

        self.process: Optional[subprocess.Popen] = None
        self._stdin = None
        self._stdout = None

    @property
    def is_running(self) -> bool:
        return self.process is not None

    def start(self):
        """
        Launch the engine and wait until it reports readiness.

        Raises:
            LaunchError: If the process cannot be started
            PipeError: If stdin or stdout is not available
            ProtocolError: If the stream closes before "readyok"
        """
        if self.is_running:
            raise LaunchError(f"Engine already running: {self.engine_path}")

        executable = shutil.which(self.engine_path) or self.engine_path

        try:
            process = subprocess.Popen(
                [executable],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise LaunchError(f"Could not start engine {self.engine_path!r}: {e}") from e

        if process.stdin is None or process.stdout is None:
            process.kill()
            process.wait()
            raise PipeError(f"Engine {self.engine_path!r} has no stdin/stdout pipe")

        self.process = process
        self._stdin = process.stdin
        self._stdout = process.stdout
        logger.info(f"Started engine: {executable} (pid={process.pid})")

        try:
            self.write("uci")
            self.set_option("Threads", self.threads)
            self.set_option("Hash", self.hash_mb)
            self.set_option("MultiPV", self.multipv)
            self.write("isready")
            self.new_game()
            self.skip_until(READY_MARKER)
        except ProtocolError:
            self.quit()
            raise

        logger.info(
            f"Engine ready: threads={self.threads}, hash={self.hash_mb}MB, multipv={self.multipv}"
        )

    def quit(self, timeout: float = 2.0):
        """Shut down the engine. Safe to call more than once."""
        if not self.is_running:
            return

        process = self.process
        try:
            self.write("quit")
        except ProtocolError:
            logger.debug("Engine pipe already closed on quit")

        try:
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Engine did not exit within {timeout}s, killing it")
            process.kill()
            process.wait()

        self.process = None
        self._stdin = None
        self._stdout = None
        logger.info("Engine stopped")

    def __enter__(self) -> "EngineClient":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.quit()

    # ------------------------------------------------------------------
    # Line I/O
    # ------------------------------------------------------------------

    def write(self, command: str):
        """
        Send one command line to the engine.

        Raises:
            ProtocolError: If the engine is not running or the pipe is broken
        """
        if self._stdin is None:
            raise ProtocolError(f"Engine not running, cannot send: {command}")

        logger.debug(f">>> {command}")
        try:
            self._stdin.write(command + "\n")
            self._stdin.flush()
        except (OSError, ValueError) as e:
            raise ProtocolError(f"Error writing to engine: {e}") from e

    def read_line(self) -> str:
        """
        Read one newline-terminated line from the engine.

        Raises:
            ProtocolError: On end of stream or a read failure
        """
        if self._stdout is None:
            raise ProtocolError("Engine not running, cannot read")

        try:
            line = self._stdout.readline()
        except (OSError, ValueError) as e:
            raise ProtocolError(f"Error reading from engine: {e}") from e

        if not line:
            raise ProtocolError("Engine closed its output stream")

        line = line.rstrip("\r\n")
        if self.echo_output:
            logger.info(line)
        else:
            logger.debug(f"<<< {line}")
        return line

    def read_until(
        self, marker: str, on_line: Optional[Callable[[str], None]] = None
    ) -> str:
        """
        Read lines until one contains marker.

        Args:
            marker: Substring that ends the read
            on_line: Called with every line read before the marker line

        Returns:
            The line containing the marker
        """
        line = self.read_line()
        while marker not in line:
            if on_line is not None:
                on_line(line)
            line = self.read_line()
        return line

    def skip_until(self, marker: str) -> str:
        return self.read_until(marker)

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def set_option(self, name: str, value):
        """Send a setoption command. The engine does not acknowledge it."""
        self.write(f"setoption name {name} value {value}")

    def set_threads(self, threads: int):
        if self.is_running:
            self.set_option("Threads", threads)
        self.threads = threads

    def set_hash(self, hash_mb: int):
        if self.is_running:
            self.set_option("Hash", hash_mb)
        self.hash_mb = hash_mb

    def set_multipv(self, multipv: int):
        if self.is_running:
            self.set_option("MultiPV", multipv)
        self.multipv = multipv

    # ------------------------------------------------------------------
    # Position and search
    # ------------------------------------------------------------------

    def new_game(self):
        self.write("ucinewgame")

    def set_position(self, position: Union[MoveSequence, str]):
        """
        Declare the position for the next search or board dump.

        Args:
            position: MoveSequence played from the start position,
                or a FEN string
        """
        if isinstance(position, MoveSequence):
            if len(position) == 0:
                self.write("position startpos")
            else:
                self.write(f"position startpos moves {position}")
        else:
            self.write(f"position fen {position}")

    def get_current_fen(self) -> str:
        """
        Return the FEN of the current position without move counters.

        Returns:
            FEN string, or "" if the board dump had no Fen line
        """
        found = []

        def collect(line: str):
            fen = parse_fen(line)
            if fen is not None:
                found.append(fen)

        self.write("d")
        self.read_until(BOARD_DUMP_MARKER, collect)

        if not found:
            logger.warning("No Fen line in board dump")
            return ""
        return found[-1]

    def board_dump(self, sequence: Optional[MoveSequence] = None) -> List[str]:
        """Return the engine's printed board, optionally for a given line."""
        if sequence is not None:
            self.set_position(sequence)

        lines: List[str] = []
        self.write("d")
        self.read_until(BOARD_DUMP_MARKER, lines.append)
        return lines

    def start_search(self, depth: int):
        self.write(f"go depth {depth}")

    def find_best_moves(
        self, sequence: MoveSequence, depth: int, num_variations: int
    ) -> Dict[str, int]:
        """
        Search a position and collect the candidate moves at a fixed depth.

        Args:
            sequence: Line to search from the start position
            depth: Search depth; only progress lines at exactly this
                depth are used
            num_variations: MultiPV value for this search

        Returns:
            Dict of move token -> centipawn evaluation. A move reported
            more than once keeps its last evaluation and its position
            follows that last report.

        Raises:
            ProtocolError: If the stream fails before "bestmove"
        """
        self.set_option("MultiPV", num_variations)
        self.set_position(sequence)
        self.start_search(depth)

        candidates: Dict[str, int] = {}

        def collect(line: str):
            move = parse_candidate(line, depth)
            if move is not None:
                candidates.pop(move.token, None)
                candidates[move.token] = move.evaluation

        self.read_until(BESTMOVE_MARKER, collect)
        logger.debug(f"Best moves after {sequence or '(start)'}: {candidates}")
        return candidates
