"""Game map (GM) data model."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

NO_REGION = -1


class FaceType(IntEnum):
    """Kind of tile. Stored as uint8 in the per-face arrays."""

    PLAIN = 0
    CITY = 1


class GMMode(IntEnum):
    """Tessellation shape of a map."""

    HEXAGON = 0
    SQUARE = 1
    TRIANGLE = 2


class Face(NamedTuple):
    """Record view of one face."""

    type: FaceType
    owner_region: Optional[int] = None


class GMConfig(NamedTuple):
    """Input descriptor for map generation.

    ``namespace`` is ``"@"`` for native maps, otherwise the name of a custom
    map author. ``seed`` pins the generated map; a random one is drawn when
    left out.
    """

    namespace: str
    title: str
    players: int
    mode: GMMode
    seed: Optional[str] = None


def _frozen(array: np.ndarray, dtype) -> np.ndarray:
    frozen = np.array(array, dtype=dtype, copy=True)
    frozen.flags.writeable = False
    return frozen


@dataclass(frozen=True, eq=False)
class GM:
    """Generated game map.

    Per-face data lives in parallel arrays indexed by face id:
    ``face_types[i]`` is a FaceType value and ``regions[i]`` the owning
    region (``NO_REGION`` for cities). ``edges[i]`` holds the sorted
    neighbors of face ``i``. Nothing here is writable after construction.
    """

    mode: GMMode
    width: int
    height: int
    players: int
    seed: str
    face_types: np.ndarray
    regions: np.ndarray
    edges: Tuple[Tuple[int, ...], ...]
    seeds: Tuple[int, ...]
    flip: int = 0

    @classmethod
    def from_arrays(
        cls,
        mode: GMMode,
        width: int,
        height: int,
        players: int,
        seed: str,
        face_types: np.ndarray,
        regions: np.ndarray,
        edges: Sequence[Iterable[int]],
        seeds: Sequence[int],
        flip: int = 0,
    ) -> "GM":
        """Build a GM from stage outputs, taking read-only copies."""
        return cls(
            mode=GMMode(mode),
            width=width,
            height=height,
            players=players,
            seed=seed,
            face_types=_frozen(face_types, np.uint8),
            regions=_frozen(regions, np.int16),
            edges=tuple(tuple(int(n) for n in neighbors) for neighbors in edges),
            seeds=tuple(int(s) for s in seeds),
            flip=flip,
        )

    def __len__(self) -> int:
        return len(self.face_types)

    def face(self, index: int) -> Face:
        region = int(self.regions[index])
        return Face(
            type=FaceType(int(self.face_types[index])),
            owner_region=None if region == NO_REGION else region,
        )

    @property
    def faces(self) -> Tuple[Face, ...]:
        return tuple(self.face(i) for i in range(len(self)))

    def neighbors(self, index: int) -> Tuple[int, ...]:
        return self.edges[index]

    def is_city(self, index: int) -> bool:
        return self.face_types[index] == FaceType.CITY

    @property
    def cities(self) -> List[int]:
        return np.flatnonzero(self.face_types == FaceType.CITY).tolist()

    def region_faces(self, region: int) -> List[int]:
        return np.flatnonzero(self.regions == region).tolist()

    def region_sizes(self) -> List[int]:
        return [int(np.sum(self.regions == r)) for r in range(self.players)]

    def to_pos(self, index: int) -> Tuple[int, int]:
        return index // self.width, index % self.width
