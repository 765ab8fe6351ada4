#!/usr/bin/env python3
"""
Cascading Selection Test Matrix

Runs the scripted product scenarios against the comprehensive catalogue
and prints every change notification followed by the final
availability matrix.

Usage:
    python scripts/run_matrix.py
    python scripts/run_matrix.py --ordering topological --strict
    python scripts/run_matrix.py --quiet --json
"""

import argparse
import json
import sys
import os

# Ensure cascading is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cascading.bootstrap.config import EngineConfig, LoggingConfig, configure_logging, ORDERINGS
from cascading.errors import ErrorAggregator
from cascading.fixtures import create_product_engine
from cascading.reporting import ScenarioMatrix, SelectionLogReporter


def print_header(title: str):
    """Print a formatted header."""
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def run_matrix(
    ordering: str = "legacy",
    strict: bool = False,
    verbose: bool = True,
) -> dict:
    """
    Run the default scenario matrix.

    Args:
        ordering: Selection ordering ("legacy" or "topological")
        strict: Reject out-of-order selections
        verbose: Print notifications and the availability matrix

    Returns:
        Summary dictionary
    """
    errors = ErrorAggregator()
    engine = create_product_engine(
        config=EngineConfig(ordering=ordering, strict=strict),
        error_aggregator=errors,
    )
    reporter = SelectionLogReporter(sink=print if verbose else None)
    matrix = ScenarioMatrix(engine, reporter)

    if verbose:
        print_header("DROPDOWN TEST MATRIX - ALL SCENARIOS")
        print(f"Selection sequence: {', '.join(engine.get_selection_sequence())}")

    for result in matrix.run_default_matrix():
        if verbose:
            print(f"\n--- {result.name}: {result.event_count} events, "
                  f"{result.reset_count} cascade resets ---")

    summary = matrix.summary()
    summary["observer_errors"] = len(errors)

    if verbose:
        print_header("CURRENT AVAILABILITY MATRIX")
        for line in matrix.availability_matrix().lines():
            print(line)
        print_header("TEST MATRIX SUMMARY")
        print(f"Scenarios run: {summary['scenarios']}")
        print(f"Total events logged: {summary['total_events']}")
        print(f"Cascade resets: {summary['cascade_resets']}")
        for line in errors.generate_report().lines():
            print(line)

    return summary


def main():
    parser = argparse.ArgumentParser(description="Run the cascading selection scenario matrix")
    parser.add_argument("--ordering", choices=ORDERINGS, default="legacy",
                        help="Field ordering strategy (default: legacy)")
    parser.add_argument("--strict", action="store_true",
                        help="Reject selections made before their prerequisites")
    parser.add_argument("--log-level", default="WARNING",
                        help="Log level for the cascading logger (default: WARNING)")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the final summary")
    parser.add_argument("--json", action="store_true",
                        help="Print the summary as JSON")

    args = parser.parse_args()

    configure_logging(LoggingConfig(level=args.log_level))

    summary = run_matrix(
        ordering=args.ordering,
        strict=args.strict,
        verbose=not args.quiet,
    )

    if args.json:
        print(json.dumps(summary, indent=2))

    return 0 if summary["observer_errors"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
