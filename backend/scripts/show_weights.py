#!/usr/bin/env python3
"""
Similo Weight Inspection Script

Prints the learned weight table stored in a weights file.

Usage:
    python show_weights.py [--file WEIGHTS_FILE] [--context CONTEXT]

Examples:
    python show_weights.py
    python show_weights.py --file /path/to/weights.properties
    python show_weights.py --context form
"""

import os
import sys
import argparse
from pathlib import Path

# Get the backend directory path
SCRIPT_DIR = Path(__file__).parent.resolve()
BACKEND_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(BACKEND_DIR / "app"))

from similo import DynamicWeightMatcher, PageContext, SimiloConfig  # noqa: E402

DEFAULT_WEIGHTS_FILE = BACKEND_DIR / "app" / "data" / "similo" / "weights.properties"


def main():
    parser = argparse.ArgumentParser(description="Show learned Similo weights")
    parser.add_argument(
        "--file", "-f",
        default=os.getenv("SIMILO_WEIGHTS_FILE", str(DEFAULT_WEIGHTS_FILE)),
        help="Weights file to read"
    )
    parser.add_argument(
        "--context", "-c",
        choices=[c.value for c in PageContext],
        help="Only show this context (default: all)"
    )
    args = parser.parse_args()

    weights_file = Path(args.file)
    if not weights_file.exists():
        print(f"Error: weights file not found: {weights_file}")
        sys.exit(1)

    matcher = DynamicWeightMatcher(SimiloConfig(weights_file=str(weights_file), auto_save=False))
    if not matcher.load_weights():
        print(f"Error: could not read {weights_file}")
        sys.exit(1)

    pinned = matcher.get_context()
    print(f"Weights file: {weights_file}")
    print(f"Pinned context: {pinned.value if pinned else 'none'}\n")

    contexts = [PageContext(args.context)] if args.context else list(PageContext)
    for context in contexts:
        print(matcher.format_weight_statistics(context))
        print()


if __name__ == "__main__":
    main()
