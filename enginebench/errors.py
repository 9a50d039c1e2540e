"""Exception hierarchy shared by the driver, diff engine and run loop."""

from __future__ import annotations

from typing import Optional, Sequence


class BenchError(RuntimeError):
    """Base class for every error raised by enginebench."""


class FatalError(BenchError):
    """Error that aborts the whole run."""


class PositionError(BenchError):
    """Error confined to a single position; the run carries on."""


class ProcessSpawnFailure(FatalError):
    """The engine process could not be started."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        self.command = list(command)
        super().__init__(f"Failed to start engine '{' '.join(self.command)}': {reason}")


class PipeAttachFailure(FatalError):
    """The engine process started but its stdin/stdout could not be opened."""


class EngineUnavailable(FatalError):
    """The engine went away: its output closed or its input stopped accepting writes."""

    def __init__(self, message: str, context: Optional[str] = None) -> None:
        self.context = context
        if context:
            message += f" ({context})"
        super().__init__(message)


class EngineTimeout(FatalError):
    """No line arrived from the engine within the read timeout."""

    def __init__(self, awaiting: str, timeout: float, context: Optional[str] = None) -> None:
        self.awaiting = awaiting
        self.timeout = timeout
        self.context = context
        message = f"Timed out after {timeout:g}s waiting for '{awaiting}' from engine"
        if context:
            message += f" ({context})"
        super().__init__(message)


class DriverStateError(FatalError):
    """An operation was requested in a state that does not allow it."""


class ProtocolParseFailure(BenchError):
    """A line or token from the engine could not be interpreted.

    Recovered locally by the codec and never propagated to callers.
    """


class MissingFieldDefaulted(PositionError):
    """The engine finished a search without reporting some result fields."""

    def __init__(self, fields: Sequence[str], context: Optional[str] = None) -> None:
        self.fields = tuple(fields)
        self.context = context
        message = f"Engine never reported {', '.join(self.fields)}"
        if context:
            message += f" for {context}"
        super().__init__(message)


class InvalidMetricInput(PositionError, ValueError):
    """A derived metric would divide by zero or by a negative count."""


class UndefinedRelativeChange(PositionError, ArithmeticError):
    """Relative change requested against a zero baseline with a nonzero value."""

    def __init__(self, metric: str, first: float, second: float) -> None:
        self.metric = metric
        self.first = first
        self.second = second
        super().__init__(
            f"Relative change of {metric} is undefined: baseline is 0, fresh is {second}"
        )


class PositionMismatch(PositionError):
    """A diff was requested between results for different positions."""

    def __init__(self, first: str, second: str) -> None:
        self.first = first
        self.second = second
        super().__init__(f"Cannot diff results for different positions: '{first}' vs '{second}'")


class DepthMismatch(PositionError):
    """A diff was requested between results searched to different depths."""

    def __init__(self, position: str, first: int, second: int) -> None:
        self.position = position
        self.first = first
        self.second = second
        super().__init__(
            f"Cannot diff results searched to different depths: baseline depth {first}, fresh depth {second}"
        )


class FileIOFailure(FatalError):
    """A snapshot or suite file could not be read or written."""


class SnapshotFormatError(FileIOFailure):
    """A snapshot file exists but does not hold valid result records."""


class SuiteFormatError(FileIOFailure):
    """A suite file holds a line that is not a valid position."""
