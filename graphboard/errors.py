"""
Exception types raised by the editor core.

Precondition violations and malformed external input raise; invariant-adjacent
no-ops (selecting twice, self-loop in the edges tool, duplicate edge) do not.
"""

from typing import Optional


class GraphboardError(Exception):
    """Root of every error the editor core raises."""


class SelfLoopError(GraphboardError, ValueError):
    """An edge was constructed with the same node on both ends."""


class UnknownToolError(GraphboardError, KeyError):
    """A tool name or hotkey that is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Unknown tool"


class GraphFormatError(GraphboardError, ValueError):
    """A persisted record, clipboard payload or edge list could not be parsed."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)
