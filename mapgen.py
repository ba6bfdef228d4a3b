"""
Command-line map generator.

Generates a terrain map from a profile and seed, prints it as ASCII and
optionally answers path and reachability queries against it.
"""

import logging

from hexengine import (
    PathfindingEngine, ProfileRegistry, TerrainSynthesizer, UNREACHABLE,
    configure_logging, load_settings,
)

logger = logging.getLogger(__name__)


def parse_coordinate(text: str) -> tuple[int, int]:
    """Parse 'col,row' into a coordinate."""
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"Expected COL,ROW, got {text!r}")
    return (int(parts[0]), int(parts[1]))


def main(argv=None):
    """Generate a map and run optional queries."""
    import argparse

    settings = load_settings()

    parser = argparse.ArgumentParser(description="Hex strategy map generator")
    parser.add_argument("--profile", default=settings.profile, help="Map archetype name")
    parser.add_argument("--seed", type=int, default=None, help="Map seed (random if omitted)")
    parser.add_argument("--width", type=int, default=settings.map_width, help="Map width in tiles")
    parser.add_argument("--height", type=int, default=settings.map_height, help="Map height in tiles")
    parser.add_argument("--data", default=settings.data_path, help="Directory holding profiles.yaml")
    parser.add_argument("--path", nargs=2, metavar="COL,ROW", help="Report the shortest path between two tiles")
    parser.add_argument("--reach", metavar="COL,ROW", help="Report tiles reachable from a tile")
    parser.add_argument("--budget", type=int, default=4, help="Movement budget for --reach")
    parser.add_argument("--list-profiles", action="store_true", help="List available profiles and exit")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    registry = ProfileRegistry(args.data)
    if args.list_profiles:
        for name in registry.names():
            print(f"{name}: {registry.get(name).description}")
        return 0

    try:
        path_ends = [parse_coordinate(c) for c in args.path] if args.path else None
        reach_from = parse_coordinate(args.reach) if args.reach else None
    except ValueError as e:
        parser.error(str(e))

    synthesizer = TerrainSynthesizer(registry)
    try:
        result = synthesizer.synthesize(args.seed, args.width, args.height, args.profile)
    except ValueError as e:
        parser.error(str(e))
    hex_map = result.hex_map

    print(f"{result.profile.name} map, seed {result.seed}, {hex_map.width}x{hex_map.height}")
    print(hex_map.render_ascii())
    print()
    for kind, count in hex_map.terrain_distribution().items():
        print(f"  {kind.value:<10} {count:>4}")

    engine = PathfindingEngine(hex_map.cells)
    if path_ends:
        start, goal = path_ends
        path = engine.shortest_path(start, goal, hex_map.cells)
        cost = engine.path_cost(start, goal, hex_map.cells)
        if not path or cost == UNREACHABLE:
            print(f"\nNo path from {start} to {goal}")
        else:
            print(f"\nPath {start} -> {goal} (cost {cost}): {' '.join(map(str, path))}")

    if reach_from:
        costs = engine.path_costs_from(reach_from, args.budget, hex_map.cells)
        print(f"\nReachable from {reach_from} with {args.budget} MP: {len(costs)} tiles")
        for coord, cost in sorted(costs.items(), key=lambda item: (item[1], item[0])):
            print(f"  {coord}: {cost}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
