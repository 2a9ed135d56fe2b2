"""
Command line entry point.

Usage:
    fftcheck                          # Full sweep
    fftcheck --quick                  # Small sweep
    fftcheck --kind r2c_1d --flags 0 3 --fail-fast
    fftcheck --config sweep.json --report report.json

Exit status is 0 when every case passed, 1 otherwise.
"""

import argparse
import sys
from typing import List, Optional

from .backends import BACKENDS, get_backend
from .descriptor import TransformKind
from .errors import ValidationError
from .sweep import SweepConfig, SweepController


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fftcheck",
        description="Validate an FFT library against a reference implementation",
    )
    parser.add_argument("--kind", action="append", choices=[k.value for k in TransformKind],
                        help="Transform kind to sweep (repeatable, default: all)")
    parser.add_argument("--quick", action="store_true",
                        help="Small sizes only")
    parser.add_argument("--max-size-1d", type=int,
                        help="Exclusive upper bound for 1D sizes (c2c and r2c)")
    parser.add_argument("--max-size-2d", type=int,
                        help="Exclusive upper bound for each 2D dimension")
    parser.add_argument("--flags", type=int, nargs="+",
                        help="Flag values to sweep (default: 0..7)")
    parser.add_argument("--epsilon", type=float,
                        help="Base tolerance, scaled by sqrt(sample count)")
    parser.add_argument("--seed", type=int,
                        help="Input generator seed")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop at the first failing case")
    parser.add_argument("--workers", type=int,
                        help="Run cases on this many threads")
    parser.add_argument("--config", type=str,
                        help="JSON sweep configuration file")
    parser.add_argument("--report", type=str,
                        help="Write a JSON report to this file")
    parser.add_argument("--tested", choices=sorted(BACKENDS), default="torch",
                        help="Library under test")
    parser.add_argument("--reference", choices=sorted(BACKENDS), default="scipy",
                        help="Reference library")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the final summary")
    return parser


def config_from_args(args: argparse.Namespace) -> SweepConfig:
    """Merge the config file (if any) with command line overrides"""
    if args.config:
        base = SweepConfig.load(args.config).to_dict()
    elif args.quick:
        base = SweepConfig.quick().to_dict()
    else:
        base = SweepConfig().to_dict()

    if args.kind:
        base["kinds"] = args.kind
    if args.max_size_1d is not None:
        base["max_size_1d"] = args.max_size_1d
        base["max_size_r2c"] = args.max_size_1d
    if args.max_size_2d is not None:
        base["max_size_2d"] = args.max_size_2d
    if args.flags is not None:
        base["flags"] = args.flags
    if args.epsilon is not None:
        base["epsilon"] = args.epsilon
    if args.seed is not None:
        base["seed"] = args.seed
    if args.fail_fast:
        base["fail_fast"] = True
    if args.workers is not None:
        base["workers"] = args.workers

    return SweepConfig.from_dict(base)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    controller = SweepController(
        tested=get_backend(args.tested),
        reference=get_backend(args.reference),
        config=config,
        verbose=not args.quiet,
    )

    try:
        report = controller.run()
    except ValidationError as e:
        print(f"FAILED: {e.kind.value}: {e}", file=sys.stderr)
        return 1

    if args.quiet:
        print(report.summary())
    if args.report:
        report.save(args.report)

    return 0 if report.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
