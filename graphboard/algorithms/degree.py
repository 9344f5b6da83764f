"""Node degrees."""

from dataclasses import dataclass
from typing import Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from graphboard.state import GraphState


@dataclass
class Degree:
    in_degree: int = 0
    out_degree: int = 0
    # Undirected edges touching the node
    undirected: int = 0

    @property
    def total(self) -> int:
        return self.in_degree + self.out_degree + self.undirected


def node_degrees(state: "GraphState") -> Dict[str, Degree]:
    degrees = {node.id: Degree() for node in state.nodes}
    for edge in state.edges:
        if edge.directed:
            degrees[edge.src.id].out_degree += 1
            degrees[edge.dst.id].in_degree += 1
        else:
            degrees[edge.src.id].undirected += 1
            degrees[edge.dst.id].undirected += 1
    return degrees
