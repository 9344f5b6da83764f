"""
Algorithm precondition failures.

Each error carries a short machine-readable ``kind`` so UI call sites can
tell invalid input apart without matching on messages.
"""

from graphboard.errors import GraphboardError


class AlgorithmError(GraphboardError, ValueError):
    """An algorithm refused its input."""
    kind = "invalid-input"


class StartNodeNotFoundError(AlgorithmError, KeyError):
    """The start node is not part of the adjacency view."""
    kind = "start-not-found"

    def __init__(self, start):
        self.start = start
        super().__init__(f"Start node '{start}' not found in the graph")

    def __str__(self) -> str:
        return self.args[0]


class CycleError(AlgorithmError):
    """The graph has a cycle where an acyclic one is required."""
    kind = "cycle"


class InconsistentDurationError(AlgorithmError):
    """Edges leaving the same node carry different weights (PERT)."""
    kind = "inconsistent-duration"

    def __init__(self, node):
        self.node = node
        super().__init__(
            f"All edges coming from the same node must have the same weight, check edges from node '{node}'"
        )
