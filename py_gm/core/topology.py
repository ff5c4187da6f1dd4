"""Lattice construction for the three supported map topologies."""

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import structlog

from .errors import UnsupportedTopology
from .gm import FaceType, GMMode

logger = structlog.get_logger()


@dataclass
class Lattice:
    """Raw tile lattice: default face types plus geometric adjacency.

    Faces are laid out row-major in a ``width x height`` box; the last row
    may be partial. ``flip`` is the triangle orientation parity (unused for
    the other modes).
    """

    mode: GMMode
    width: int
    height: int
    face_types: np.ndarray       # all FaceType.PLAIN
    edges: List[List[int]]       # edges[i] = sorted neighbor ids of face i
    flip: int = 0

    @property
    def size(self) -> int:
        return len(self.face_types)

    def to_pos(self, index: int) -> Tuple[int, int]:
        return to_pos(index, self.width)

    def to_index(self, row: int, col: int) -> int:
        return to_index(row, col, self.width)

    def points_up(self, index: int) -> bool:
        """Whether a triangle face has its apex at the top."""
        row, col = self.to_pos(index)
        return (row + col + self.flip) % 2 == 0


def to_pos(index: int, width: int) -> Tuple[int, int]:
    """Convert a linear face index to ``(row, col)``.

    >>> to_pos(4, 3)
    (1, 1)
    """
    return index // width, index % width


def to_index(row: int, col: int, width: int) -> int:
    """Convert ``(row, col)`` to a linear face index.

    >>> to_index(1, 1, 3)
    4
    """
    return row * width + col


def lattice_dimensions(face_count: int) -> Tuple[int, int]:
    """Pick a near-square ``(width, height)`` box holding ``face_count`` faces."""
    width = math.ceil(math.sqrt(face_count))
    height = math.ceil(face_count / width)
    return width, height


def _square_neighbors(row: int, col: int, flip: int) -> List[Tuple[int, int]]:
    return [(row - 1, col), (row, col - 1), (row, col + 1), (row + 1, col)]


def _hexagon_neighbors(row: int, col: int, flip: int) -> List[Tuple[int, int]]:
    # Pointy-top hexes, odd rows shoved right
    shift = row % 2
    return [
        (row - 1, col - 1 + shift),
        (row - 1, col + shift),
        (row, col - 1),
        (row, col + 1),
        (row + 1, col - 1 + shift),
        (row + 1, col + shift),
    ]


def _triangle_neighbors(row: int, col: int, flip: int) -> List[Tuple[int, int]]:
    # An up triangle shares its base with the row below, a down one with the row above
    vertical = row + 1 if (row + col + flip) % 2 == 0 else row - 1
    return [(row, col - 1), (row, col + 1), (vertical, col)]


_NEIGHBOR_RULES = {
    GMMode.HEXAGON: _hexagon_neighbors,
    GMMode.SQUARE: _square_neighbors,
    GMMode.TRIANGLE: _triangle_neighbors,
}


def resolve_mode(mode) -> GMMode:
    """Coerce ``mode`` to a :class:`GMMode` or raise ``UnsupportedTopology``."""
    try:
        return GMMode(mode)
    except (ValueError, TypeError):
        raise UnsupportedTopology(mode) from None


def build(mode, face_count: int) -> Lattice:
    """
    Build the face lattice and its adjacency for a topology.

    Args:
        mode: GMMode (or its integer value)
        face_count: Number of faces wanted

    Returns:
        Lattice with every face PLAIN and a symmetric, connected adjacency

    Raises:
        UnsupportedTopology: If mode is not a known lattice
        ValueError: If face_count is not positive
    """
    mode = resolve_mode(mode)
    if face_count < 1:
        raise ValueError(f"face_count must be positive, got {face_count}")

    width, height = lattice_dimensions(face_count)
    # First face of the last row must point down so a lone face there
    # still touches the row above.
    flip = height % 2 if mode == GMMode.TRIANGLE else 0

    logger.info(
        "Building lattice",
        mode=mode.name,
        faces=face_count,
        width=width,
        height=height,
    )

    neighbor_rule = _NEIGHBOR_RULES[mode]
    edges: List[List[int]] = []
    for index in range(face_count):
        row, col = to_pos(index, width)
        neighbors = set()
        for n_row, n_col in neighbor_rule(row, col, flip):
            if n_row < 0 or n_col < 0 or n_col >= width:
                continue
            n_index = to_index(n_row, n_col, width)
            if n_index < face_count and n_index != index:
                neighbors.add(n_index)
        edges.append(sorted(neighbors))

    face_types = np.full(face_count, FaceType.PLAIN, dtype=np.uint8)

    logger.info(
        "Lattice built",
        faces=face_count,
        edges=sum(len(n) for n in edges) // 2,
    )
    return Lattice(
        mode=mode,
        width=width,
        height=height,
        face_types=face_types,
        edges=edges,
        flip=flip,
    )
