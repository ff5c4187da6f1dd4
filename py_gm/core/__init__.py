"""
Core map generation functionality.
"""

from .errors import (
    GenerationError, UnsupportedTopology, PlacementExhausted,
    InsufficientFaces, RegionImbalance, Unimplemented,
)
from .gm import GM, GMConfig, GMMode, Face, FaceType, NO_REGION
from .topology import Lattice, build
from .pathfinding import distance, distances_from
from .generator import GenerationOptions, generate_gm, generate_random_gm, register_generator
from .gm_analysis import GMReport, analyze_gm, check_gm

__all__ = ['GenerationError', 'UnsupportedTopology', 'PlacementExhausted',
           'InsufficientFaces', 'RegionImbalance', 'Unimplemented',
           'GM', 'GMConfig', 'GMMode', 'Face', 'FaceType', 'NO_REGION',
           'Lattice', 'build', 'distance', 'distances_from',
           'GenerationOptions', 'generate_gm', 'generate_random_gm', 'register_generator',
           'GMReport', 'analyze_gm', 'check_gm']
