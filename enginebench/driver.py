"""Owns the engine subprocess and runs the UCI handshake and search loop."""

from __future__ import annotations

import queue
import subprocess
import threading
from enum import Enum
from typing import Callable, Dict, Optional, Sequence

from . import protocol
from .errors import (
    DriverStateError,
    EngineTimeout,
    EngineUnavailable,
    MissingFieldDefaulted,
    PipeAttachFailure,
    ProcessSpawnFailure,
)
from .position import Position
from .protocol import FinalMove, HandshakeAck, Message, ProgressInfo
from .result import SearchResult
from .utils import received_text, sending_text, warning_text

# ProgressInfo attribute -> name used in messages and snapshots
REQUIRED_FIELDS: Dict[str, str] = {
    "nodes": "nodes",
    "time_ms": "time",
    "score": "score",
}


class DriverState(Enum):
    UNSTARTED = "unstarted"
    HANDSHAKING = "handshaking"
    READY = "ready"
    SEARCHING = "searching"
    CLOSED = "closed"


class EngineDriver:
    """Drive a single UCI engine process, one search at a time.

    Use as a context manager so the process and its pipes are released on
    every exit path::

        with EngineDriver(["./engine"]) as driver:
            result = driver.search(Position.parse("startpos"), depth=10)
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        read_timeout: Optional[float] = None,
        strict_fields: bool = True,
        include_stderr: bool = False,
        shutdown_timeout: float = 2.0,
        logger: Optional[Callable[[str], None]] = None,
        warn: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.command = list(command)
        self.read_timeout = read_timeout
        self.strict_fields = strict_fields
        self.include_stderr = include_stderr
        self.shutdown_timeout = shutdown_timeout
        self._logger = logger or (lambda message: None)
        self._warn = warn or self._logger
        self._proc: Optional[subprocess.Popen[str]] = None
        self._reader_thread: Optional[threading.Thread] = None
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._state = DriverState.UNSTARTED

    @property
    def state(self) -> DriverState:
        return self._state

    def __enter__(self) -> "EngineDriver":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def start(self) -> None:
        if self._state is not DriverState.UNSTARTED:
            raise DriverStateError(f"Cannot start a driver that is {self._state.value}")

        stderr = subprocess.STDOUT if self.include_stderr else subprocess.DEVNULL
        try:
            self._proc = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=stderr,
                text=True,
                bufsize=1,
                errors="replace",
            )
        except OSError as exc:
            self._state = DriverState.CLOSED
            raise ProcessSpawnFailure(self.command, str(exc)) from exc

        try:
            if self._proc.stdin is None or self._proc.stdout is None:
                raise PipeAttachFailure("Failed to open pipes to engine process")
            self._reader_thread = threading.Thread(target=self._reader_loop, daemon=True)
            self._reader_thread.start()

            self._state = DriverState.HANDSHAKING
            self._send(protocol.uci())
            self._await_handshake()
        except BaseException:
            self.close()
            raise
        self._state = DriverState.READY

    def search(
        self, position: Position, depth: int, moves: Sequence[str] = ()
    ) -> SearchResult:
        """Search ``position`` to ``depth`` and return the collected metrics.

        Per-position problems (missing fields, zero search time) raise a
        :class:`~enginebench.errors.PositionError` and leave the driver ready
        for the next search. Anything else closes the driver.
        """
        if self._state is not DriverState.READY:
            raise DriverStateError(f"Cannot search while the driver is {self._state.value}")

        go_command = protocol.go_depth(depth)
        context = f"position {position}, depth {depth}"
        latest: Dict[str, int] = {}

        self._state = DriverState.SEARCHING
        try:
            self._send(protocol.ucinewgame())
            self._send(protocol.position(position, moves))
            self._send(go_command)
            while True:
                message = self._next_message("bestmove", context)
                if isinstance(message, ProgressInfo):
                    latest.update(message.fields())
                elif isinstance(message, FinalMove):
                    final = message
                    break
        except BaseException:
            self.close()
            raise
        self._state = DriverState.READY

        return self._build_result(position, depth, latest, final, context)

    def close(self) -> None:
        """Stop the engine and release its pipes. Safe to call repeatedly."""
        if self._state is DriverState.CLOSED:
            return
        self._state = DriverState.CLOSED
        proc = self._proc
        if proc is None:
            return

        if proc.poll() is None:
            try:
                self._write(protocol.quit())
            except OSError as exc:
                self._warn(warning_text(f"Could not send quit to engine: {exc}"))
            try:
                proc.wait(timeout=self.shutdown_timeout)
            except subprocess.TimeoutExpired:
                self._warn(warning_text("Engine unresponsive; forcing termination"))
                proc.kill()
                proc.wait()

        if self._reader_thread is not None:
            self._reader_thread.join(timeout=1)

        for pipe in (proc.stdin, proc.stdout):
            if pipe is None:
                continue
            try:
                pipe.close()
            except OSError as exc:
                self._warn(warning_text(f"Error closing engine pipe: {exc}"))

    def _build_result(
        self,
        position: Position,
        depth: int,
        latest: Dict[str, int],
        final: FinalMove,
        context: str,
    ) -> SearchResult:
        missing = [name for key, name in REQUIRED_FIELDS.items() if key not in latest]
        if missing:
            if self.strict_fields:
                raise MissingFieldDefaulted(missing, context)
            self._warn(
                warning_text(f"Engine never reported {', '.join(missing)} for {context}; using 0")
            )
        return SearchResult.from_search(
            position=position,
            depth=depth,
            nodes=latest.get("nodes", 0),
            time_ms=latest.get("time_ms", 0),
            score=latest.get("score", 0),
            best_move=final.move,
        )

    def _await_handshake(self) -> None:
        while True:
            message = self._next_message(protocol.UCI_OK, "handshake")
            if isinstance(message, HandshakeAck):
                return

    def _next_message(self, awaiting: str, context: str) -> Message:
        line = self._read_line(awaiting, context)
        return protocol.parse_line(line)

    def _read_line(self, awaiting: str, context: str) -> str:
        try:
            if self.read_timeout is None:
                line = self._queue.get()
            else:
                line = self._queue.get(timeout=self.read_timeout)
        except queue.Empty:
            self._kill()
            raise EngineTimeout(awaiting, self.read_timeout or 0.0, context) from None

        if line is None:
            raise EngineUnavailable(f"Engine output closed while waiting for '{awaiting}'", context)
        self._logger(received_text(line))
        return line

    def _kill(self) -> None:
        if self._proc is not None and self._proc.poll() is None:
            self._proc.kill()
            self._proc.wait()

    def _reader_loop(self) -> None:
        assert self._proc and self._proc.stdout
        try:
            for raw in self._proc.stdout:
                self._queue.put(raw.rstrip("\r\n"))
        except (OSError, ValueError):
            # Pipe closed underneath us during shutdown.
            pass
        finally:
            self._queue.put(None)

    def _send(self, command: str) -> None:
        if self._proc is None or self._state is DriverState.CLOSED:
            raise DriverStateError("Engine session is not active")
        self._logger(sending_text(command))
        try:
            self._write(command)
        except OSError as exc:
            raise EngineUnavailable(f"Engine stopped accepting input: {exc}", command) from exc

    def _write(self, command: str) -> None:
        assert self._proc is not None and self._proc.stdin is not None
        self._proc.stdin.write(protocol.encode(command))
        self._proc.stdin.flush()
