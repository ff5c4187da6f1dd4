"""
Structural checks and summaries for generated maps.

The map assembler runs :func:`check_gm` as its post-condition; the sample
script and the tests use :func:`analyze_gm` for a readable summary.
"""

from typing import List, Optional, Sequence

import numpy as np
import structlog
from pydantic import BaseModel, Field
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from .gm import GM, FaceType

logger = structlog.get_logger()


class GMReport(BaseModel):
    """Summary of a generated map."""

    mode: str = Field(description="Topology name")
    faces: int = Field(description="Number of faces")
    edges: int = Field(description="Number of undirected edges")
    cities: List[int] = Field(default_factory=list, description="City face ids")
    region_sizes: List[int] = Field(default_factory=list, description="Faces per region")
    seeds: List[int] = Field(default_factory=list, description="Seed face per region")
    symmetric: bool = Field(description="Every edge is listed in both directions")
    connected: bool = Field(description="Whole face graph is one component")
    plain_connected: bool = Field(description="Non-city faces form one component")
    cities_adjacent: bool = Field(description="Some pair of cities shares an edge")
    regions_contiguous: bool = Field(description="Each region is one component")

    @property
    def region_gap(self) -> int:
        if not self.region_sizes:
            return 0
        return max(self.region_sizes) - min(self.region_sizes)


def adjacency_matrix(
    edges: Sequence[Sequence[int]], mask: Optional[np.ndarray] = None
) -> csr_matrix:
    """Sparse adjacency of the faces selected by ``mask`` (all faces if None)."""
    size = len(edges)
    rows = []
    cols = []
    for i, neighbors in enumerate(edges):
        if mask is not None and not mask[i]:
            continue
        for j in neighbors:
            if mask is None or mask[j]:
                rows.append(i)
                cols.append(j)
    data = np.ones(len(rows), dtype=np.int8)
    return csr_matrix((data, (rows, cols)), shape=(size, size))


def count_components(
    edges: Sequence[Sequence[int]], mask: Optional[np.ndarray] = None
) -> int:
    """Number of connected components among the masked faces."""
    if len(edges) == 0:
        return 0
    _, labels = connected_components(adjacency_matrix(edges, mask), directed=False)
    if mask is None:
        return len(np.unique(labels))
    return len(np.unique(labels[mask]))


def is_symmetric(edges: Sequence[Sequence[int]]) -> bool:
    for i, neighbors in enumerate(edges):
        for j in neighbors:
            if i not in edges[j]:
                return False
    return True


def has_adjacent_cities(face_types: np.ndarray, edges: Sequence[Sequence[int]]) -> bool:
    for i in np.flatnonzero(face_types == FaceType.CITY):
        if any(face_types[j] == FaceType.CITY for j in edges[i]):
            return True
    return False


def analyze_gm(gm: GM) -> GMReport:
    """Summarise a map and evaluate its structural invariants."""
    plain = gm.face_types != FaceType.CITY
    regions_contiguous = all(
        count_components(gm.edges, gm.regions == r) == 1 for r in range(gm.players)
    )

    return GMReport(
        mode=gm.mode.name,
        faces=len(gm),
        edges=sum(len(n) for n in gm.edges) // 2,
        cities=gm.cities,
        region_sizes=gm.region_sizes(),
        seeds=list(gm.seeds),
        symmetric=is_symmetric(gm.edges),
        connected=count_components(gm.edges) == 1,
        plain_connected=count_components(gm.edges, plain) <= 1,
        cities_adjacent=has_adjacent_cities(gm.face_types, gm.edges),
        regions_contiguous=regions_contiguous,
    )


def check_gm(gm: GM) -> List[str]:
    """
    List every broken map invariant.

    Returns:
        Human readable problems; empty when the map is sound
    """
    problems = []

    if len(gm.edges) != len(gm.face_types) or len(gm.regions) != len(gm.face_types):
        problems.append(
            f"index spaces differ: {len(gm.face_types)} faces, "
            f"{len(gm.edges)} adjacency entries, {len(gm.regions)} region entries"
        )
        return problems

    size = len(gm)
    for i, neighbors in enumerate(gm.edges):
        if any(not 0 <= j < size for j in neighbors):
            problems.append(f"face {i} lists a neighbor outside the map")
        if i in neighbors:
            problems.append(f"face {i} is its own neighbor")
        if len(set(neighbors)) != len(neighbors):
            problems.append(f"face {i} lists a neighbor twice")
    if problems:
        return problems

    report = analyze_gm(gm)
    if not report.symmetric:
        problems.append("adjacency is not symmetric")
    if not report.connected:
        problems.append("face graph is not connected")
    if not report.plain_connected:
        problems.append("non-city faces are split apart")
    if report.cities_adjacent:
        problems.append("two cities share an edge")
    if not report.regions_contiguous:
        problems.append("a region is not contiguous")
    if report.region_gap > 1:
        problems.append(f"region sizes differ by {report.region_gap}")
    if any(gm.regions[c] != -1 for c in report.cities):
        problems.append("a city belongs to a region")

    if problems:
        logger.warning("Map invariants broken", problems=problems)
    return problems
