from __future__ import annotations

import argparse
import json
from pathlib import Path

from warmpath.core.config import get_settings
from warmpath.services.pathfinding.edges import edges_from_records
from warmpath.services.pathfinding.finder import find_paths
from warmpath.services.pathfinding.options import PathQueryOptions


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rank warm-introduction paths over a JSON edge list.")
    parser.add_argument("--edges", required=True, type=Path, help="JSON file holding a list of edge records")
    parser.add_argument("--source", dest="sources", action="append", required=True, help="Source entity id (repeatable)")
    parser.add_argument("--target", required=True, help="Target entity id")
    parser.add_argument("--max-hops", type=int, default=None)
    parser.add_argument("--min-strength", type=float, default=None)
    parser.add_argument("--max-results", type=int, default=None)
    parser.add_argument("--symmetric", action="store_true", help="Traverse every edge in both directions")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = get_settings()
    options = PathQueryOptions.resolve(
        settings,
        max_hops=args.max_hops,
        min_strength=args.min_strength,
        max_results=args.max_results,
        symmetric=True if args.symmetric else None,
    )

    records = json.loads(args.edges.read_text(encoding="utf-8"))
    if isinstance(records, dict):
        records = records.get("edges") or []
    edges = options.prepare(edges_from_records(records, default_strength=settings.path_default_edge_strength))

    paths = find_paths(edges, args.sources, args.target, **options.find_kwargs())
    print(json.dumps([path.to_dict() for path in paths], indent=2))


if __name__ == "__main__":
    main()
