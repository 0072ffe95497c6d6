from __future__ import annotations
from typing import Sequence

"""Exception hierarchy shared by the services and the benchmark client."""


class BenchError(Exception):
    """Root of every error raised by pqzkbench."""


class InvalidParameter(BenchError):
    """A request field holds a value outside its enumerated set."""

    def __init__(self, field: str, value: object, choices: Sequence[str]) -> None:
        self.field = field
        self.value = value
        self.choices = tuple(choices)
        super().__init__(
            f"Invalid {field} '{value}'. Valid options: {', '.join(self.choices)}"
        )


class UnknownOperation(InvalidParameter):
    """The operation identity does not resolve to a registered invoker."""


class MalformedRequest(BenchError):
    """Request body is missing a field or carries the wrong type."""


class SamplingFailure(BenchError):
    """A single timed iteration failed (e.g. a consistency check)."""


class TransportFailure(BenchError):
    """A measurement call did not produce a usable response."""


class MalformedResponse(TransportFailure):
    """The server answered, but the body is not a measurement."""


class BatchCancelled(TransportFailure):
    """The call was never issued because the batch was cancelled."""
