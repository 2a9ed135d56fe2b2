#!/usr/bin/env python3
"""
fftcheck Validation Runner

Validates each transform kind in turn and prints a per-kind verdict.
Run this to verify your installation and the library under test.

Usage:
    python scripts/run_validation.py          # Quick validation
    python scripts/run_validation.py --full   # Full parameter space
"""

import sys
import argparse

sys.path.insert(0, 'src')


def validate_kind(kind, full: bool) -> bool:
    """Sweep one transform kind and print its failures."""
    from fftcheck import SweepConfig, SweepController

    print("\n" + "=" * 60)
    print(f"VALIDATING {kind.value.upper()}")
    print("=" * 60)

    config = SweepConfig(kinds=(kind,)) if full else SweepConfig.quick(kinds=(kind,))
    report = SweepController(config=config, verbose=False).run()

    for outcome in report.failures[:5]:
        print(f"  FAIL {outcome.descriptor.label}: {outcome.failure.value}")

    worst = max((o.max_delta / o.tolerance for o in report.outcomes
                 if o.max_delta is not None), default=0.0)
    status = "PASSED" if report.all_passed else "FAILED"
    print(f"  {report.passed}/{report.total} cases, worst delta {worst:.1%} of tolerance: {status}")
    return report.all_passed


def validate_determinism() -> bool:
    """Same case, same input bytes."""
    print("\n" + "=" * 60)
    print("VALIDATING INPUT DETERMINISM")
    print("=" * 60)

    from fftcheck import TransformDescriptor, generate_input, make_generator

    for d in [TransformDescriptor.c2c_1d(1024), TransformDescriptor.r2c_1d(1024),
              TransformDescriptor.c2c_2d(32, 16)]:
        a = generate_input(d, make_generator())
        b = generate_input(d, make_generator())
        if a.tobytes() != b.tobytes():
            print(f"  {d.label}: FAILED")
            return False
        print(f"  {d.label}: PASSED")

    return True


def main():
    parser = argparse.ArgumentParser(description="Validate the FFT library under test")
    parser.add_argument("--full", action="store_true", help="Run the full parameter space")
    args = parser.parse_args()

    from fftcheck import TransformKind

    results = {"determinism": validate_determinism()}
    for kind in TransformKind:
        results[kind.value] = validate_kind(kind, args.full)

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    for name, passed in results.items():
        print(f"  {name}: {'PASSED' if passed else 'FAILED'}")

    all_passed = all(results.values())
    print("\nALL VALIDATIONS PASSED" if all_passed else "\nSOME VALIDATIONS FAILED")
    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
