#!/usr/bin/env python
"""
Generate an axonometric drawing from wall centerlines.

Usage:
    python generate_axon.py input.json [output.dxf|output.json] [options]
    python generate_axon.py input.dxf [output.dxf|output.json] [options]
    python generate_axon.py --mock [output.dxf|output.json] [options]

Options:
    --mock          Use the 10 x 8 m mock rectangular building
    --golden        Use the single 4 x 3 m golden wall loop
    --cleanup       Run polyline cleanup on DXF paths before simplification
    --workers=N     Process walls on N threads
    --config=PATH   JSON config (defaults to d25d/config/axon_defaults.json)
    --verbose       Show debug logging

Input JSON is either a list of walls or an object with a "walls" list. Each
wall is {centerline, thickness, height, closed?} or a topology segment
{start, end, thickness?, height?}.

Example:
    python generate_axon.py --mock output/mock_axon.dxf --workers=4
"""

import json
import sys
from pathlib import Path

from loguru import logger

from d25d.core.config import get_default_config, load_config
from d25d.core.models import RawPath
from d25d.export.dxf_writer import write_axon_dxf
from d25d.parsers.polyline_extractor import read_raw_paths
from d25d.pipeline.wall_pipeline import process_walls
from d25d.simplification.path_simplifier import is_closed_path, simplify_raw_paths
from d25d.simplification.polyline_cleanup import cleanup_polylines
from d25d.topology.convert import golden_wall, mock_rectangular_building, walls_from_raw_paths


def _parse_args(argv):
    positional = []
    flags = {}
    for arg in argv:
        if arg.startswith("--"):
            name, _, value = arg[2:].partition("=")
            flags[name] = value or True
        else:
            positional.append(arg)
    return positional, flags


def _as_wall_input(item, config):
    # Topology segments become open two-point wall dicts so a bad one only fails itself
    if isinstance(item, dict) and "start" in item and "centerline" not in item:
        return {
            "centerline": [item.get("start"), item.get("end")],
            "closed": False,
            "thickness": item.get("thickness", config.get_value("walls", "default_thickness_mm", 200)),
            "height": item.get("height", config.get_value("walls", "default_height_mm", 2700)),
        }
    return item


def load_walls_json(input_file, config):
    with open(input_file, "r") as f:
        data = json.load(f)
    items = data.get("walls", []) if isinstance(data, dict) else data
    return [_as_wall_input(item, config) for item in items]


def load_walls_dxf(input_file, config, cleanup=False):
    paths = read_raw_paths(input_file)
    if cleanup:
        # closed paths carry their closing point so closure survives the cleanup
        explicit = [list(p.points) + ([p.points[0]] if p.closed else []) for p in paths]
        cleaned = cleanup_polylines(explicit, config.get_section("cleanup"))
        paths = [RawPath(points=[tuple(pt[:2]) for pt in p], closed=is_closed_path(p)) for p in cleaned]
    simplified = simplify_raw_paths(paths, config.simplify_options())
    return walls_from_raw_paths(
        simplified,
        thickness=config.get_value("walls", "default_thickness_mm", 200),
        height=config.get_value("walls", "default_height_mm", 2700),
    )


def main():
    positional, flags = _parse_args(sys.argv[1:])
    use_mock = "mock" in flags
    use_golden = "golden" in flags

    if not positional and not (use_mock or use_golden):
        print("Usage: python generate_axon.py input.json|input.dxf [output.dxf|output.json] [options]")
        print()
        print("Examples:")
        print("  python generate_axon.py walls.json")
        print("  python generate_axon.py plan.dxf plan_axon.dxf --cleanup")
        print("  python generate_axon.py --mock mock_axon.json --workers=4")
        sys.exit(1)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if "verbose" in flags else "WARNING")

    if use_mock or use_golden:
        input_file = None
        output_file = positional[0] if positional else ("golden_axon.dxf" if use_golden else "mock_axon.dxf")
    else:
        input_file = positional[0]
        output_file = positional[1] if len(positional) >= 2 else str(Path(input_file).with_suffix(".axon.dxf"))

        if not Path(input_file).exists():
            print(f"Error: Input file not found: {input_file}")
            sys.exit(1)

    print("=" * 60)
    print("2D25D - Wall Centerlines to Axonometric Drawing")
    print("=" * 60)
    print(f"Input:  {input_file or ('golden wall' if use_golden else 'mock building')}")
    print(f"Output: {output_file}")
    print()

    try:
        config = load_config(flags["config"]) if isinstance(flags.get("config"), str) else get_default_config()
        workers = int(flags["workers"]) if isinstance(flags.get("workers"), str) else config.max_workers

        # Step 1: Load walls
        print("[1/3] Loading walls...")
        if use_golden:
            walls = [golden_wall()]
        elif use_mock:
            walls = mock_rectangular_building(
                wall_thickness=config.get_value("walls", "default_thickness_mm", 200),
                wall_height=config.get_value("walls", "default_height_mm", 2700),
            )
        elif Path(input_file).suffix.lower() == ".dxf":
            walls = load_walls_dxf(input_file, config, cleanup="cleanup" in flags)
        else:
            walls = load_walls_json(input_file, config)
        print(f"      [OK] Walls: {len(walls)}")
        print()

        # Step 2: Run the pipeline
        print("[2/3] Building axonometric faces...")
        drawing = process_walls(walls, max_workers=workers, miter_limit=config.miter_limit)
        print(f"      [OK] Faces: {len(drawing.faces)}")
        for result in drawing.failed_walls:
            print(f"      [SKIP] Wall {result.wall_index}: {result.error_type}: {result.error}")
        print()

        # Step 3: Write output
        print("[3/3] Writing output...")
        if Path(output_file).suffix.lower() == ".json":
            Path(output_file).parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, "w") as f:
                json.dump(drawing.to_dicts(), f, indent=2)
        else:
            write_axon_dxf(drawing, output_file, layers=config.get_section("export").get("layers"))
        print(f"      [OK] Wrote {output_file}")
        print()

        print("=" * 60)
        print("SUCCESS!")
        print("=" * 60)
        print(f"  - {len(walls) - len(drawing.failed_walls)}/{len(walls)} walls drawn")
        print(f"  - {len(drawing.faces)} faces")
        box = drawing.bounding_box()
        if box is not None:
            print(f"  - Extent: {box.width():.0f} x {box.height():.0f} (axonometric mm)")
        print()

    except Exception as e:
        print()
        print("=" * 60)
        print("ERROR!")
        print("=" * 60)
        print(f"Failed to generate drawing: {e}")
        print()
        print("Common issues:")
        print("  - Malformed walls JSON -> Each wall needs a centerline (or start/end) and thickness")
        print("  - Empty DXF output -> Check the DXF has LWPOLYLINE/POLYLINE entities")
        print("  - Config error -> Check the --config path points to valid JSON")
        print()
        print("Run with --verbose to see debug logging.")
        sys.exit(1)


if __name__ == "__main__":
    main()
