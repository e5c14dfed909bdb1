"""
Command-Line Interface

CLI for sampling regions and benchmarking the index strategies.
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from pds_policies import PoissonSamplingPolicy
from pds_policies.sampling import INDEX_STRATEGIES, SELECTION_RULES
from .core.errors import PoissonSamplingError
from .core.region import CircleRegion, RectRegion, RegionSpec, region_from_dict
from .core.types import Point2D
from .ops.poisson import poisson_disk_sample, sample_poisson_points

logger = logging.getLogger(__name__)

EXIT_INVALID = 2


def _parse_floats(text: str, count: int, name: str) -> List[float]:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != count:
        raise argparse.ArgumentTypeError(f"{name} expects {count} comma-separated numbers, got {text!r}")
    try:
        return [float(p) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"{name} expects numbers, got {text!r}")


def _rect_arg(text: str) -> List[float]:
    return _parse_floats(text, 4, "--rect")


def _circle_arg(text: str) -> List[float]:
    return _parse_floats(text, 3, "--circle")


def _point_arg(text: str) -> List[float]:
    return _parse_floats(text, 2, "--seed-point")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poisson-disk",
        description="Poisson-disk (blue noise) sampling inside 2D regions",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Sample command
    sample_parser = subparsers.add_parser("sample", help="Sample points inside a region")
    region_group = sample_parser.add_mutually_exclusive_group(required=True)
    region_group.add_argument(
        "--rect",
        type=_rect_arg,
        metavar="MINX,MINY,MAXX,MAXY",
        help="Axis-aligned rectangle",
    )
    region_group.add_argument(
        "--circle",
        type=_circle_arg,
        metavar="CX,CY,R",
        help="Disk with center and radius",
    )
    region_group.add_argument(
        "--region",
        type=str,
        metavar="FILE",
        help="JSON region document (rect, circle or polygon)",
    )
    sample_parser.add_argument(
        "-k",
        type=int,
        default=30,
        help="Candidate attempts per active sample (default: 30)",
    )
    sample_parser.add_argument(
        "-r",
        type=float,
        required=True,
        help="Minimum distance between points",
    )
    sample_parser.add_argument(
        "--seed-point",
        type=_point_arg,
        default=None,
        metavar="X,Y",
        help="Starting sample (default: random point inside the region)",
    )
    sample_parser.add_argument(
        "--rng-seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    sample_parser.add_argument(
        "--index",
        choices=INDEX_STRATEGIES,
        default="quadtree",
        help="Spatial index strategy (default: quadtree)",
    )
    sample_parser.add_argument(
        "--selection",
        choices=SELECTION_RULES,
        default="last",
        help="Active-set selection rule (default: last)",
    )
    sample_parser.add_argument(
        "--max-points",
        type=int,
        default=None,
        help="Stop after this many points",
    )
    sample_parser.add_argument(
        "--output", "-O",
        type=str,
        default=None,
        help="Output JSON file (default: stdout)",
    )
    sample_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar",
    )

    # Benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Time the reference scenarios")
    bench_parser.add_argument(
        "--repeat",
        type=int,
        default=5,
        help="Runs per scenario and index (default: 5)",
    )
    bench_parser.add_argument(
        "--index",
        choices=INDEX_STRATEGIES,
        action="append",
        default=None,
        help="Index strategy to benchmark (repeatable, default: all)",
    )

    return parser


def load_region(args: argparse.Namespace) -> RegionSpec:
    """Build the region selected on the command line."""
    if args.rect is not None:
        min_x, min_y, max_x, max_y = args.rect
        return RectRegion(x_min=min_x, x_max=max_x, y_min=min_y, y_max=max_y)
    if args.circle is not None:
        cx, cy, radius = args.circle
        return CircleRegion(radius=radius, center=Point2D(cx, cy))
    with open(args.region, "r") as f:
        document = json.load(f)
    try:
        return region_from_dict(document)
    except KeyError as e:
        raise ValueError(f"Region document {args.region} is missing field {e}") from e


def run_sample(args: argparse.Namespace) -> int:
    region = load_region(args)
    policy = PoissonSamplingPolicy(
        k=args.k,
        min_distance=args.r,
        index=args.index,
        selection=args.selection,
        seed_point=args.seed_point,
        rng_seed=args.rng_seed,
        max_points=args.max_points,
        show_progress=args.progress,
    )
    points, report = sample_poisson_points(region, policy)

    document = {
        "points": [[p.x, p.y] for p in points],
        "report": report.to_dict(),
    }
    text = json.dumps(document, indent=2)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text)
        logger.info(f"Wrote {len(points)} points to {output_path}")
    else:
        print(text)
    return 0


BENCHMARK_SCENARIOS = {
    "rect": lambda: RectRegion.from_corners((-100.0, -100.0), (100.0, 100.0)),
    "circle": lambda: CircleRegion(radius=200.0, center=Point2D(-100.0, -100.0)),
}


def run_benchmark(args: argparse.Namespace) -> int:
    strategies = args.index or list(INDEX_STRATEGIES)
    for name, make_region in BENCHMARK_SCENARIOS.items():
        region = make_region()
        for strategy in strategies:
            timings = []
            n_points = 0
            for run in range(args.repeat):
                start = time.perf_counter()
                points = poisson_disk_sample(region, k=20, r=10.0, index=strategy, rng_seed=run)
                timings.append(time.perf_counter() - start)
                n_points = len(points)
            mean_ms = 1000.0 * sum(timings) / len(timings)
            min_ms = 1000.0 * min(timings)
            print(
                f"{name:<8} {strategy:<9} points={n_points:<6} "
                f"mean={mean_ms:9.2f} ms  min={min_ms:9.2f} ms"
            )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command == "sample":
            return run_sample(args)
        if args.command == "benchmark":
            if args.repeat < 1:
                print("Error: --repeat must be >= 1", file=sys.stderr)
                return EXIT_INVALID
            return run_benchmark(args)
    except (PoissonSamplingError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
