#!/usr/bin/env python3
"""
C-Store Prefill Engine - Entry point script

Reconciles one business address from the command line and prints the pre-filled
form fields, the property validation verdict and the ownership determination.
"""

import argparse
import json
import sys

from prefill_engine.main import PropertyReconciliationGraph


def print_summary(result):
    """Print a human-readable summary of a reconciliation result."""
    if not result.get("success"):
        print(f"\n❌ {result.get('message', 'Reconciliation failed')}")
        for error in result.get("errors") or []:
            print(f"- {error}")
        return

    print(f"\n✅ {result['message']}")

    if result["errors"]:
        print("\nErrors encountered during reconciliation:")
        for error in result["errors"]:
            print(f"- {error}")

    validation = result.get("validation") or {}
    print("\nProperty Validation:")
    print(f"Valid: {validation.get('isValid')}")
    print(f"Property Type: {validation.get('propertyType')}")
    print(f"Confidence: {validation.get('confidence')}")
    for warning in validation.get("warnings") or []:
        print(f"  {warning}")
    for note in validation.get("info") or []:
        print(f"  {note}")

    ownership = result.get("ownership") or {}
    print("\nOwnership Information:")
    print(f"Status: {ownership.get('status', 'unknown')}")
    print(f"Matched Owner: {ownership.get('matchedName') or 'Unknown'}")
    print(f"Registry Business: {ownership.get('registryBusinessName') or 'Unknown'}")

    print("\nForm Fields:")
    for field, value in sorted(result["data"].items()):
        print(f"  {field}: {value}")


def main(argv=None):
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="C-Store Prefill Engine")
    parser.add_argument("address", type=str, help="Business address to reconcile")
    parser.add_argument(
        "--json", action="store_true", help="Print the raw reconciliation result as JSON"
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Save the workflow diagram to workflow_diagram.mmd",
    )

    args = parser.parse_args(argv)

    graph = PropertyReconciliationGraph()
    graph.compile()

    if args.visualize:
        graph.visualize()

    result = graph.run(args.address)

    if args.json:
        print(json.dumps(result, indent=2, default=str))
    else:
        print_summary(result)

    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
