#!/usr/bin/env python3
"""
Demonstration of cell map generation.

Shows the pipeline stages:
1. Seeded point sampling
2. Clipped Voronoi tessellation
3. Lloyd relaxation
4. Corner and neighbour graphs
5. Visibility culling
"""

from py_cellmap.core import MapGenerator, MapOptions, Rect
from py_cellmap.core.geometry import area_spread
from py_cellmap.utils import configure_logging


def main():
    configure_logging(fmt="plain")

    print("=== Cell Map Demo ===\n")

    # 1-3. Step through the pipeline
    options = MapOptions(seed="demo_seed", width=800, height=600, numPoints=200, maxRelax=2)
    generator = MapGenerator(options, auto_generate=False)

    generator.sample()
    before = area_spread(cell.area for cell in generator.tessellate().cells)
    after = area_spread(cell.area for cell in generator.relax().cells)
    print(f"1. Area spread before relaxation: {before:.1f}")
    print(f"   Area spread after {generator.relax_counter} passes: {after:.1f}")

    # 4. Topology
    generator.finalize()
    cells = generator.cells
    degrees = [len(cell.neighbors) for cell in cells]
    print(f"\n2. {len(cells)} cells, {len(generator.corners)} corners")
    print(f"   Neighbours per cell: min={min(degrees)}, max={max(degrees)}, "
          f"mean={sum(degrees) / len(degrees):.2f}")

    # 5. Culling
    viewport = Rect.from_viewport(100, 100, 200, 150)
    print(f"\n3. Cells visible in {tuple(viewport)}: {len(generator.get_cells(viewport))}")
    print(f"   Without margin: {len(generator.get_cells(viewport, margin=0))}")


if __name__ == "__main__":
    main()
