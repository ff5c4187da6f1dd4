"""
Generation failures.

Every failure aborts the whole generation call; no partially built map is
ever handed back to the caller. An unreachable face in a distance query is
not an error and has no exception here.
"""


class GenerationError(Exception):
    """Base class for all map generation failures."""


class UnsupportedTopology(GenerationError):
    """The requested tessellation mode is not one of the known lattices."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Unsupported topology mode: {mode!r}")


class PlacementExhausted(GenerationError):
    """City spacing cannot be satisfied even at the minimum spacing."""

    def __init__(self, placed: int, wanted: int, face_count: int):
        self.placed = placed
        self.wanted = wanted
        self.face_count = face_count
        super().__init__(
            f"Placed {placed} of {wanted} cities on {face_count} faces; "
            f"shrink the player count or enlarge the map"
        )


class InsufficientFaces(GenerationError):
    """More players than faces that can be assigned to a region."""

    def __init__(self, players: int, available: int):
        self.players = players
        self.available = available
        super().__init__(
            f"{players} players need at least {players} non-city faces, "
            f"only {available} available"
        )


class RegionImbalance(GenerationError):
    """Regions could not be grown to sizes within one face of each other."""

    def __init__(self, sizes):
        self.sizes = list(sizes)
        super().__init__(f"Could not balance region sizes: {self.sizes}")


class Unimplemented(GenerationError):
    """No generator is registered for the requested namespace and title."""

    def __init__(self, namespace: str, title: str):
        self.namespace = namespace
        self.title = title
        super().__init__(f"No generator for map {namespace}/{title}")
