"""
Map generation entry points.

``generate_gm`` resolves a config's ``(namespace, title)`` pair through the
generator table; native maps live in the ``"@"`` namespace. The only native
map so far is ``"random"``, built by :func:`generate_random_gm` as a chain of
value-returning stages: lattice -> cities -> regions -> GM.
"""

import uuid
from typing import Callable, Dict, Optional, Tuple

import structlog
from pydantic import BaseModel, Field

from ..config import Settings, settings
from .alea_prng import AleaPRNG
from .cities import CityOptions, city_count, place_cities
from .errors import GenerationError, InsufficientFaces, Unimplemented
from .gm import GM, GMConfig
from .gm_analysis import check_gm
from .regions import RegionOptions, assign_regions
from .topology import build

logger = structlog.get_logger()

NATIVE_NAMESPACE = "@"

Generator = Callable[[GMConfig, Optional["GenerationOptions"]], GM]


class GenerationOptions(BaseModel):
    """Parameters for one generation call."""

    base_faces: int = Field(default=16, ge=0, description="Faces added regardless of player count")
    faces_per_player: int = Field(default=24, ge=1, description="Faces added per player")
    face_count: Optional[int] = Field(default=None, ge=1, description="Exact face count, overrides the scaling rule")
    cities: CityOptions = Field(default_factory=CityOptions)
    regions: RegionOptions = Field(default_factory=RegionOptions)

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "GenerationOptions":
        """Options populated from environment settings."""
        source = source or settings
        return cls(
            base_faces=source.base_faces,
            faces_per_player=source.faces_per_player,
            cities=CityOptions(
                cities_per_player=source.cities_per_player,
                city_spacing=source.city_spacing,
                min_city_spacing=source.min_city_spacing,
                placement_attempts=source.placement_attempts,
            ),
            regions=RegionOptions(region_attempts=source.region_attempts),
        )

    def faces_for(self, players: int) -> int:
        """Face count for a map with ``players`` players."""
        if self.face_count is not None:
            return self.face_count
        return self.base_faces + self.faces_per_player * players


_GENERATORS: Dict[Tuple[str, str], Generator] = {}


def register_generator(namespace: str, title: str) -> Callable[[Generator], Generator]:
    """Decorator adding a generator to the ``(namespace, title)`` table."""

    def decorator(func: Generator) -> Generator:
        _GENERATORS[(namespace, title)] = func
        return func

    return decorator


def get_generator(namespace: str, title: str) -> Generator:
    try:
        return _GENERATORS[(namespace, title)]
    except KeyError:
        raise Unimplemented(namespace, title) from None


@register_generator(NATIVE_NAMESPACE, "random")
def generate_random_gm(
    config: GMConfig, options: Optional[GenerationOptions] = None
) -> GM:
    """
    Generate a random native map.

    Args:
        config: Map config; ``config.seed`` pins the result
        options: Generation parameters, environment settings when omitted

    Returns:
        Immutable GM satisfying every map invariant

    Raises:
        UnsupportedTopology: Unknown mode
        InsufficientFaces: Fewer non-city faces than players
        PlacementExhausted: Cities cannot be spaced on this map
        RegionImbalance: Regions cannot be balanced
    """
    if config.players < 1:
        raise ValueError(f"players must be positive, got {config.players}")

    options = options or GenerationOptions.from_settings()
    seed = config.seed if config.seed is not None else uuid.uuid4().hex
    prng = AleaPRNG(seed)
    face_count = options.faces_for(config.players)

    log = logger.bind(players=config.players, seed=seed)
    log.info("Generating random map", mode=config.mode, faces=face_count)

    lattice = build(config.mode, face_count)

    cities = city_count(config.players, options.cities)
    available = lattice.size - cities
    if available < config.players:
        raise InsufficientFaces(config.players, max(available, 0))

    face_types = place_cities(
        lattice.face_types, lattice.edges, config.players, prng, options.cities
    )
    regions, seeds = assign_regions(
        face_types, lattice.edges, config.players, prng, options.regions
    )

    gm = GM.from_arrays(
        mode=lattice.mode,
        width=lattice.width,
        height=lattice.height,
        players=config.players,
        seed=seed,
        face_types=face_types,
        regions=regions,
        edges=lattice.edges,
        seeds=seeds,
        flip=lattice.flip,
    )

    problems = check_gm(gm)
    if problems:
        raise GenerationError("; ".join(problems))

    log.info("Random map generated", faces=len(gm), cities=gm.cities)
    return gm


def generate_gm(config: GMConfig, options: Optional[GenerationOptions] = None) -> GM:
    """
    Generate the map a config asks for.

    Raises:
        Unimplemented: No generator for ``(config.namespace, config.title)``
    """
    generator = get_generator(config.namespace, config.title)
    return generator(config, options)
