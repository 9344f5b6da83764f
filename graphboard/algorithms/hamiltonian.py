"""
Hamiltonian cycle and path search by backtracking.

Exponential in the worst case. With ``find_all`` every solution is
collected, otherwise the search stops at the first one.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from graphboard.algorithms.adjacency import Adjacency
from graphboard.algorithms.errors import StartNodeNotFoundError


@dataclass
class HamiltonianResult:
    path: List[str]
    all_paths: List[List[str]] = field(default_factory=list)


def _closes_cycle(adj: Adjacency, path: List[str]) -> bool:
    return any(entry.dst == path[0] for entry in adj[path[-1]])


def _search(adj: Adjacency, start: str, cycle: bool, find_all: bool) -> Optional[HamiltonianResult]:
    if start is None or start not in adj:
        raise StartNodeNotFoundError(start)

    total = len(adj)
    path = [start]
    visited = {start}
    solutions: List[List[str]] = []

    def extend() -> bool:
        if len(visited) == total:
            if cycle and not _closes_cycle(adj, path):
                return False
            solution = path + [path[0]] if cycle else list(path)
            solutions.append(solution)
            return not find_all

        for entry in adj[path[-1]]:
            if entry.dst in visited:
                continue
            path.append(entry.dst)
            visited.add(entry.dst)
            if extend():
                return True
            path.pop()
            visited.discard(entry.dst)
        return False

    extend()
    if not solutions:
        return None
    return HamiltonianResult(path=solutions[0], all_paths=solutions if find_all else [])


def hamiltonian_cycle(adj: Adjacency, start: str, find_all: bool = False) -> Optional[HamiltonianResult]:
    """Cycle through every node once, returned with the start repeated at the end."""
    return _search(adj, start, cycle=True, find_all=find_all)


def hamiltonian_path(adj: Adjacency, start: str, find_all: bool = False) -> Optional[HamiltonianResult]:
    return _search(adj, start, cycle=False, find_all=find_all)
