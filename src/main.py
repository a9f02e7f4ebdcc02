"""
1) Load the family roster (JSON export of the family endpoint, or a GEDCOM file).
2) Validate it and report anything the tree can only partly show.
3) Lay out the three-generation tree around the chosen root person.
4) Write the layout as an image, a pinned Graphviz file, or JSON.
"""

import argparse
import logging
from pathlib import Path
import sys

from config import LayoutConfig
from layout import compute_layout
from models import Person
from plotting import write_layout
from relationships import make_resolver
from roster import load_roster
from validation import validate_roster


# ============================================================================
# Arguments
# ============================================================================


def parse_person_id(value: str):
    """Roster ids are ints for GEDCOM and REST data; anything else stays a string."""
    try:
        return int(value)
    except ValueError:
        return value


def match_person_id(value: str | None, roster: list[Person]):
    """
    The roster id typed on the command line. JSON rosters may use ints or
    strings of digits, so an exact match in the roster wins over int parsing.
    """
    if value is None:
        return None
    for p in roster:
        if str(p.id) == value:
            return p.id
    return parse_person_id(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="famtree",
        description="Lay out a family tree around one person.",
    )
    parser.add_argument("roster", type=Path, help="Roster file (.json or .ged)")
    parser.add_argument("--root", help="Id of the person to center the tree on")
    parser.add_argument(
        "--resolver",
        choices=("explicit", "free-text"),
        default="explicit",
        help="Use father/mother/spouse ids, or free-text relationship labels",
    )
    parser.add_argument(
        "--self",
        dest="self_id",
        help="Person the free-text labels are relative to",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file: .png, .svg, .pdf, .dot or .json (default: <roster>_tree.png)",
    )
    parser.add_argument("--no-validate", action="store_true", help="Skip roster validation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


# ============================================================================
# Steps
# ============================================================================


def print_roster(roster: list[Person]):
    print("Pick a root person with --root ID:")
    for p in roster:
        label = f" ({p.relationship})" if p.relationship else ""
        print(f"  {p.id}: {p.name}{label}")


def report_warnings(warnings: list[str]):
    if not warnings:
        print("  No validation issues found")
        return
    print(f"  Found {len(warnings)} validation warnings:")
    for w in warnings[:10]:  # Show first 10 warnings
        print(f"    - {w}")
    if len(warnings) > 10:
        print(f"    ... and {len(warnings) - 10} more")


# ============================================================================
# Main
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Loading roster: {args.roster}")
    try:
        roster = load_roster(args.roster)
        config = LayoutConfig.from_env()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"  Found {len(roster)} people")

    if not args.no_validate:
        print("Validating roster...")
        report_warnings(validate_roster(roster))

    if args.root is None:
        print_roster(roster)
        return 0

    root_id = match_person_id(args.root, roster)
    self_id = match_person_id(args.self_id, roster)
    resolver = make_resolver(args.resolver, roster, self_id=self_id)
    print(f"Computing layout around {root_id}...")
    layout = compute_layout(root_id, roster, resolver, config)
    if not layout:
        print(f"No person with id {root_id} in the roster.")
        print_roster(roster)
        return 0
    print(
        f"  Placed {len(layout.nodes)} people and {len(layout.lines)} lines "
        f"around {layout.root.name}"
    )

    output = args.output or args.roster.with_name(f"{args.roster.stem}_tree.png")
    write_layout(layout, output, config)
    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
