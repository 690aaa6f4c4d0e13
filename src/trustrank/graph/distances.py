"""Hop distance from the nearest trusted seed.

Unweighted multi-source BFS, run once per solve. Which edges count as
neighbours depends on DistanceMode:
- UNDIRECTED: successors and predecessors
- DIRECTED: successors only (seed -> attested nodes)
- REVERSE: predecessors only (attesters of a seed, and so on)
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

from ..core.config import DistanceMode


def trust_distances(
    successors: Sequence[Sequence[int]],
    predecessors: Sequence[Sequence[int]],
    seeds: Iterable[int],
    mode: DistanceMode = DistanceMode.UNDIRECTED,
) -> dict[int, int]:
    """Compute shortest hop distance from any seed to every reachable node.

    Args:
        successors: For each node index, the indices it has edges to.
        predecessors: For each node index, the indices with edges to it.
        seeds: Indices of seed nodes (distance 0).
        mode: Which view of the graph to walk.

    Returns:
        Mapping of node index to distance. Unreachable nodes are absent.
    """
    distances: dict[int, int] = {}
    queue: deque[int] = deque()

    for seed in sorted(set(seeds)):
        distances[seed] = 0
        queue.append(seed)

    while queue:
        current = queue.popleft()
        next_distance = distances[current] + 1

        for neighbor in _neighbors(current, successors, predecessors, mode):
            if neighbor not in distances:
                distances[neighbor] = next_distance
                queue.append(neighbor)

    return distances


def _neighbors(
    node: int,
    successors: Sequence[Sequence[int]],
    predecessors: Sequence[Sequence[int]],
    mode: DistanceMode,
) -> Iterable[int]:
    if mode is DistanceMode.DIRECTED:
        return successors[node]
    if mode is DistanceMode.REVERSE:
        return predecessors[node]
    return (*successors[node], *predecessors[node])
