"""
File: queue_planner/errors.py
Purpose: Error taxonomy raised by the planner client.
Key responsibilities:
- Separate caller mistakes (bad arguments, wrong lifecycle state) from
  remote-side failures (incompatible service, malformed body, transport).
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for every failure surfaced by the planner client."""


class InvalidArgument(PlannerError, ValueError):
    """A required argument is missing or malformed."""


class IllegalLifecycle(PlannerError, RuntimeError):
    """Operation attempted in a lifecycle state that forbids it."""

    def __init__(self, message: str, state: object) -> None:
        super().__init__(message)
        self.state = state


class IncompatibleService(PlannerError):
    """The endpoint did not identify itself as a queue planner."""

    def __init__(self, content: str) -> None:
        super().__init__(f"Not a queue planner: {content!r}")
        self.content = content


class MalformedResponse(PlannerError):
    """Response body could not be decoded into the expected shape."""


class TransportFailure(PlannerError):
    """Network or HTTP status failure; the httpx error is kept as __cause__."""
