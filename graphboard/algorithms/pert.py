"""
PERT / critical path method.

Each node is an activity whose duration is the weight shared by all of its
outgoing edges (sinks last 0). Early times propagate forward in topological
order from the sources, late times backward from the project finish.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from graphboard.algorithms.adjacency import Adjacency
from graphboard.algorithms.errors import CycleError, InconsistentDurationError
from graphboard.algorithms.toposort import toposort_kahn


@dataclass
class PertNode:
    duration: float = 0
    early_start: float = 0
    early_finish: float = 0
    late_start: float = 0
    late_finish: float = 0
    float: float = 0
    free_float: float = 0
    critical: bool = False
    predecessors: List[str] = field(default_factory=list)
    successors: List[str] = field(default_factory=list)


@dataclass
class PertResult:
    nodes: Dict[str, PertNode]
    critical_path: List[str]
    start_nodes: List[str]
    end_nodes: List[str]

    @property
    def project_duration(self) -> float:
        return max((data.early_finish for data in self.nodes.values()), default=0)


def pert_cpm(adj: Adjacency) -> PertResult:
    """
    Raises CycleError on a cyclic graph and InconsistentDurationError when a
    node's outgoing edges disagree on the weight.
    """
    topo = toposort_kahn(adj)
    if topo.has_cycle:
        raise CycleError("The graph has a cycle")

    nodes = {node: PertNode() for node in adj}
    for node, entries in adj.items():
        weights = {entry.weight for entry in entries}
        if len(weights) > 1:
            raise InconsistentDurationError(node)
        if weights:
            nodes[node].duration = weights.pop()
        for entry in entries:
            nodes[node].successors.append(entry.dst)
            nodes[entry.dst].predecessors.append(node)

    start_nodes = [node for node, data in nodes.items() if not data.predecessors]
    end_nodes = [node for node, data in nodes.items() if not data.successors]

    for node in topo.order:
        data = nodes[node]
        data.early_start = max((nodes[p].early_finish for p in data.predecessors), default=0)
        data.early_finish = data.early_start + data.duration

    finish = max((data.early_finish for data in nodes.values()), default=0)
    for node in reversed(topo.order):
        data = nodes[node]
        data.late_finish = min((nodes[s].late_start for s in data.successors), default=finish)
        data.late_start = data.late_finish - data.duration

    critical_path = []
    for node in topo.order:
        data = nodes[node]
        data.float = data.late_start - data.early_start
        data.free_float = min((nodes[s].early_start - data.early_finish for s in data.successors),
                              default=finish - data.early_finish)
        data.critical = data.float == 0
        if data.critical:
            critical_path.append(node)

    return PertResult(nodes, critical_path, start_nodes, end_nodes)
