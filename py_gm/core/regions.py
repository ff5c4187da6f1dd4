"""
Region assignment.

Splits the non-city faces into one contiguous region per player:

1. Seeds are chosen by greedy farthest-point selection on hop distance.
2. Regions grow round-robin, one face per region per round, each in
   breadth-first order from its seed.
3. A region boxed in by its neighbours stops growing while the others carry
   on, so sizes are then evened out by passing boundary faces along a chain
   of bordering regions from a large region to the smallest one.
4. If that still leaves sizes more than one face apart, seeding restarts
   from a different first seed.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

import numpy as np
import structlog
from pydantic import BaseModel, Field

from .alea_prng import AleaPRNG
from .errors import InsufficientFaces, RegionImbalance
from .gm import NO_REGION, FaceType
from .gm_analysis import count_components
from .pathfinding import UNREACHABLE, distances_from

logger = structlog.get_logger()


class RegionOptions(BaseModel):
    """Region assignment options."""

    region_attempts: int = Field(default=8, ge=1, description="Reseeding attempts when regions cannot be balanced")


def pick_seeds(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    players: int,
    first: int,
) -> List[int]:
    """
    Greedy farthest-point seeding.

    Each new seed is the plain face whose hop distance to the nearest
    existing seed is largest; ties go to the lowest face id.
    """
    plain = face_types != FaceType.CITY
    seeds = [first]
    nearest = np.full(len(face_types), np.inf)

    while len(seeds) < players:
        dist = distances_from(face_types, edges, seeds[-1]).astype(float)
        dist[dist == UNREACHABLE] = np.inf
        nearest = np.minimum(nearest, dist)

        score = np.where(plain, nearest, -1.0)
        score[seeds] = -1.0
        seeds.append(int(np.argmax(score)))

    return seeds


def _next_frontier_face(
    frontier: Deque[int], regions: np.ndarray, plain: np.ndarray
) -> Optional[int]:
    while frontier:
        face = frontier.popleft()
        if plain[face] and regions[face] == NO_REGION:
            return face
    return None


def grow_regions(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    seeds: Sequence[int],
) -> np.ndarray:
    """Round-robin breadth-first flood fill from the seeds over plain faces."""
    plain = face_types != FaceType.CITY
    regions = np.full(len(face_types), NO_REGION, dtype=np.int16)
    frontiers: List[Deque[int]] = []

    for region, seed in enumerate(seeds):
        regions[seed] = region
        frontiers.append(deque(edges[seed]))

    remaining = int(np.sum(plain)) - len(seeds)
    while remaining > 0:
        grown = False
        for region, frontier in enumerate(frontiers):
            face = _next_frontier_face(frontier, regions, plain)
            if face is None:
                continue
            regions[face] = region
            frontier.extend(edges[face])
            remaining -= 1
            grown = True
            if remaining == 0:
                break
        if not grown:
            break

    return regions


def region_sizes(regions: np.ndarray, players: int) -> np.ndarray:
    return np.bincount(regions[regions != NO_REGION], minlength=players)


def _bordering_regions(
    regions: np.ndarray, edges: Sequence[Sequence[int]], region: int
) -> Set[int]:
    bordering = set()
    for face in np.flatnonzero(regions == region):
        for neighbor in edges[face]:
            other = int(regions[neighbor])
            if other != NO_REGION and other != region:
                bordering.add(other)
    return bordering


def _movable_face(
    regions: np.ndarray,
    edges: Sequence[Sequence[int]],
    seeds: Sequence[int],
    donor: int,
    receiver: int,
) -> Optional[int]:
    """A donor face touching the receiver whose loss keeps the donor whole."""
    members = regions == donor
    for face in np.flatnonzero(members):
        if face == seeds[donor]:
            continue
        if not any(regions[n] == receiver for n in edges[face]):
            continue
        members[face] = False
        whole = count_components(edges, members) == 1
        members[face] = True
        if whole:
            return int(face)
    return None


def _find_chain(
    regions: np.ndarray,
    edges: Sequence[Sequence[int]],
    seeds: Sequence[int],
    sizes: np.ndarray,
) -> Optional[List[int]]:
    """Chain of bordering regions from an oversized donor to the smallest region."""
    smallest = int(np.argmin(sizes))
    wanted = sizes[smallest] + 2
    parent: Dict[int, Optional[int]] = {smallest: None}
    queue = deque([smallest])

    while queue:
        receiver = queue.popleft()
        for donor in sorted(_bordering_regions(regions, edges, receiver)):
            if donor in parent:
                continue
            if _movable_face(regions, edges, seeds, donor, receiver) is None:
                continue
            parent[donor] = receiver
            if sizes[donor] >= wanted:
                chain = [donor]
                while parent[chain[-1]] is not None:
                    chain.append(parent[chain[-1]])
                return chain
            queue.append(donor)

    return None


def rebalance_regions(
    regions: np.ndarray,
    edges: Sequence[Sequence[int]],
    seeds: Sequence[int],
    players: int,
) -> bool:
    """
    Even out region sizes in place.

    Returns:
        True once every region is within one face of every other
    """
    max_rounds = len(regions) * players
    for _ in range(max_rounds):
        sizes = region_sizes(regions, players)
        if sizes.max() - sizes.min() <= 1:
            return True

        chain = _find_chain(regions, edges, seeds, sizes)
        if chain is None:
            return False

        # Feed the smallest region first so every intermediate donor keeps its size
        for i in reversed(range(len(chain) - 1)):
            donor, receiver = chain[i], chain[i + 1]
            face = _movable_face(regions, edges, seeds, donor, receiver)
            if face is None:
                break
            regions[face] = receiver

    sizes = region_sizes(regions, players)
    return sizes.max() - sizes.min() <= 1


def assign_regions(
    face_types: np.ndarray,
    edges: Sequence[Sequence[int]],
    players: int,
    prng: AleaPRNG,
    options: Optional[RegionOptions] = None,
) -> Tuple[np.ndarray, List[int]]:
    """
    Partition the non-city faces into contiguous, near-equal regions.

    Args:
        face_types: FaceType value per face, cities already placed
        edges: Neighbor ids per face
        players: Number of regions
        prng: Generator owned by the current generation call
        options: Region options

    Returns:
        Tuple of (region id per face with NO_REGION for cities, seed face per region)

    Raises:
        InsufficientFaces: If there are fewer non-city faces than players
        RegionImbalance: If no seeding yields balanced contiguous regions
    """
    options = options or RegionOptions()
    plain_faces = np.flatnonzero(face_types != FaceType.CITY).tolist()
    if players > len(plain_faces):
        raise InsufficientFaces(players, len(plain_faces))

    logger.info("Assigning regions", players=players, faces=len(plain_faces))

    sizes = np.zeros(players, dtype=np.int64)
    first_seeds = prng.shuffled(plain_faces)[: options.region_attempts]
    for attempt, first in enumerate(first_seeds):
        seeds = pick_seeds(face_types, edges, players, first)
        regions = grow_regions(face_types, edges, seeds)
        if rebalance_regions(regions, edges, seeds, players):
            sizes = region_sizes(regions, players)
            logger.info("Regions assigned", seeds=seeds, sizes=sizes.tolist())
            return regions, seeds

        sizes = region_sizes(regions, players)
        logger.warning(
            "Regions unbalanced, reseeding",
            attempt=attempt + 1,
            sizes=sizes.tolist(),
        )

    raise RegionImbalance(sizes.tolist())
