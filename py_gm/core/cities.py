"""
City placement.

Cities are picked one at a time from a shuffled list of plain faces. A
candidate must lie further than the current spacing (in hops, with the
city-blocking rule) from every city already placed, and must not cut the
remaining plain faces apart. When a spacing level yields nothing after a
bounded number of candidates, the spacing is relaxed by one; the floor
level scans every candidate before giving up.
"""

import math
from typing import List, Optional, Sequence

import numpy as np
import structlog
from pydantic import BaseModel, Field

from .alea_prng import AleaPRNG
from .errors import PlacementExhausted
from .gm import FaceType
from .gm_analysis import count_components
from .pathfinding import UNREACHABLE, distances_from

logger = structlog.get_logger()


class CityOptions(BaseModel):
    """City placement options."""

    cities_per_player: float = Field(default=0.5, gt=0, description="Contested cities per player, rounded up")
    city_spacing: int = Field(default=3, ge=1, description="Initial hop distance cities must exceed")
    min_city_spacing: int = Field(default=1, ge=1, description="Spacing floor before placement gives up")
    placement_attempts: int = Field(default=64, ge=1, description="Rejected candidates before relaxing spacing")


def city_count(players: int, options: Optional[CityOptions] = None) -> int:
    """Number of cities a map for ``players`` players gets."""
    options = options or CityOptions()
    return max(1, math.ceil(players * options.cities_per_player))


def _far_enough(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    candidate: int,
    placed: List[int],
    spacing: int,
) -> bool:
    if not placed:
        return True
    dist = distances_from(face_types, edges, candidate)
    for city in placed:
        if dist[city] == UNREACHABLE or dist[city] <= spacing:
            return False
    return True


def _keeps_plain_connected(
    face_types: np.ndarray, edges: Sequence[Sequence[int]], candidate: int
) -> bool:
    plain = face_types != FaceType.CITY
    plain[candidate] = False
    return count_components(edges, plain) <= 1


def _find_candidate(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    placed: List[int],
    spacing: int,
    prng: AleaPRNG,
    attempts: Optional[int],
) -> Optional[int]:
    plain = np.flatnonzero(face_types == FaceType.PLAIN).tolist()
    candidates = prng.shuffled(plain)
    if attempts is not None:
        candidates = candidates[:attempts]

    for candidate in candidates:
        if not _far_enough(face_types, edges, candidate, placed, spacing):
            continue
        if not _keeps_plain_connected(face_types, edges, candidate):
            continue
        return candidate
    return None


def place_cities(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    players: int,
    prng: AleaPRNG,
    options: Optional[CityOptions] = None,
) -> np.ndarray:
    """
    Mark cities on a copy of ``face_types``.

    Args:
        face_types: FaceType value per face (left untouched)
        edges: Neighbor ids per face
        players: Player count, drives the number of cities
        prng: Generator owned by the current generation call
        options: Placement options

    Returns:
        New face type array with the chosen faces set to CITY

    Raises:
        PlacementExhausted: If no city fits even at the spacing floor
    """
    options = options or CityOptions()
    types = np.array(face_types, dtype=np.uint8, copy=True)
    wanted = city_count(players, options)
    floor = options.min_city_spacing
    spacing = max(options.city_spacing, floor)
    placed: List[int] = []

    logger.info("Placing cities", wanted=wanted, spacing=spacing, faces=len(types))

    while len(placed) < wanted:
        attempts = None if spacing <= floor else options.placement_attempts
        candidate = _find_candidate(types, edges, placed, spacing, prng, attempts)

        if candidate is None:
            if spacing <= floor:
                raise PlacementExhausted(len(placed), wanted, len(types))
            spacing -= 1
            logger.warning("Relaxing city spacing", spacing=spacing, placed=len(placed))
            continue

        types[candidate] = FaceType.CITY
        placed.append(candidate)

    logger.info("Placed cities", cities=placed, spacing=spacing)
    return types
