"""
Hop distance between faces.

Plain breadth-first search over the adjacency list. Cities are strongholds:
a path may end on a city but never pass through one, so a city is never
expanded unless it is the search origin. Unreachable targets give ``None``.
"""

from collections import deque
from typing import Optional, Sequence

import numpy as np

from .gm import GM, FaceType

UNREACHABLE = -1


def _check_index(index: int, size: int) -> None:
    if not 0 <= index < size:
        raise IndexError(f"Face {index} out of range for map of {size} faces")


def hop_distance(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    source: int,
    target: int,
) -> Optional[int]:
    """
    Hop count from ``source`` to ``target`` under the city-blocking rule.

    Args:
        face_types: FaceType value per face
        edges: Neighbor ids per face
        source: Start face
        target: Destination face

    Returns:
        Number of hops, or None if every route transits a city
    """
    size = len(face_types)
    _check_index(source, size)
    _check_index(target, size)

    if source == target:
        return 0

    visited = {source}
    queue = deque([(source, 0)])

    while queue:
        current, hops = queue.popleft()

        for neighbor in edges[current]:
            if neighbor in visited:
                continue
            visited.add(neighbor)

            if neighbor == target:
                return hops + 1

            # Reachable, but no through traffic
            if face_types[neighbor] == FaceType.CITY:
                continue

            queue.append((neighbor, hops + 1))

    return None


def distances_from(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    source: int,
) -> np.ndarray:
    """Hop count from ``source`` to every face, ``UNREACHABLE`` where blocked."""
    size = len(face_types)
    _check_index(source, size)

    dist = np.full(size, UNREACHABLE, dtype=np.int32)
    dist[source] = 0
    queue = deque([source])

    while queue:
        current = queue.popleft()
        if current != source and face_types[current] == FaceType.CITY:
            continue
        for neighbor in edges[current]:
            if dist[neighbor] == UNREACHABLE:
                dist[neighbor] = dist[current] + 1
                queue.append(neighbor)

    return dist


def distance(gm: GM, from_face: int, to_face: int) -> Optional[int]:
    """Hop distance between two faces of a finished map, or None."""
    return hop_distance(gm.face_types, gm.edges, from_face, to_face)
