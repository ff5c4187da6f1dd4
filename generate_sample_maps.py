#!/usr/bin/env python3
"""
Generate one random map per topology and print it.

This runs the full pipeline:
1. Lattice construction
2. City placement
3. Region assignment
4. Invariant checks

Usage:
    python generate_sample_maps.py [players] [seed]

Defaults to 4 players and seed "default_seed".
"""

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent))

from py_gm.config import settings
from py_gm.core import GMConfig, GMMode, analyze_gm, distance, generate_gm
from py_gm.core.gm import GM
from py_gm.log import configure_logging

REGION_GLYPHS = "0123456789abcdefghijklmnopqrstuvwxyz"


def render_ascii(gm: GM) -> str:
    """Cities as ``#``, every other face as its region glyph."""
    lines = []
    for row in range(gm.height):
        cells = []
        for col in range(gm.width):
            index = row * gm.width + col
            if index >= len(gm):
                break
            face = gm.face(index)
            if face.owner_region is None:
                cells.append("#")
            else:
                cells.append(REGION_GLYPHS[face.owner_region % len(REGION_GLYPHS)])
        indent = " " if gm.mode == GMMode.HEXAGON and row % 2 else ""
        lines.append(indent + " ".join(cells))
    return "\n".join(lines)


def create_sample_map(mode: GMMode, players: int, seed: str) -> GM:
    """Generate and describe one map."""
    print(f"\nGenerating {mode.name.lower()} map...")
    print(f"  Players: {players}")
    print(f"  Seed: {seed}")

    gm = generate_gm(GMConfig(namespace="@", title="random", players=players, mode=mode, seed=seed))
    report = analyze_gm(gm)

    print(f"  Faces: {report.faces} ({gm.width}x{gm.height}), edges: {report.edges}")
    print(f"  Cities: {report.cities}")
    print(f"  Region sizes: {report.region_sizes}")
    print(f"  Connected: {report.connected}, regions contiguous: {report.regions_contiguous}")

    if len(gm.seeds) > 1:
        hops = distance(gm, gm.seeds[0], gm.seeds[1])
        print(f"  Distance between first two seeds: {hops}")

    print(render_ascii(gm))
    return gm


def main():
    players = int(sys.argv[1]) if len(sys.argv) > 1 else 4
    seed = sys.argv[2] if len(sys.argv) > 2 else "default_seed"

    configure_logging(settings.log_level, settings.log_format)

    for mode in GMMode:
        create_sample_map(mode, players, seed)


if __name__ == "__main__":
    main()
