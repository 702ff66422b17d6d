"""
Command line front end.

Usage:
  structdiff <left.json> <right.json> [--verbose] [--max-depth N]

Exit status: 0 diff printed, 1 usage error, 2 input could not be diffed.
"""

import argparse
import logging
import sys

from .core import MAX_DEPTH, DiffError, TypeMismatch, classify, diff_values
from .formats import InputError, load_file
from .render import render_lines

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INPUT = 2


class _ArgumentParser(argparse.ArgumentParser):
    """argparse exits with 2 on bad usage; we reserve 2 for input errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def _positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog="structdiff",
        description="Structural, order-aware diff of two JSON documents")
    ap.add_argument("left", help="Original JSON file")
    ap.add_argument("right", help="Changed JSON file")
    ap.add_argument("--max-depth", type=_positive_int, default=MAX_DEPTH,
                    metavar="N",
                    help=f"Give up on documents nested deeper than N (default: {MAX_DEPTH})")
    ap.add_argument("--verbose", action="store_true",
                    help="Print diagnostic messages to stderr")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        left = load_file(args.left)
        right = load_file(args.right)
    except InputError as e:
        print(f"ERROR: while reading input files: {e}", file=sys.stderr)
        return EXIT_INPUT

    root_kind = classify(left)
    try:
        result = diff_values(left, right, max_depth=args.max_depth)
    except TypeMismatch as e:
        if e.path == () and e.left_kind is not e.right_kind:
            print(f"ERROR: top level types should be the same: had "
                  f"{e.left_kind} and {e.right_kind}", file=sys.stderr)
        else:
            print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INPUT
    except DiffError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INPUT

    logger.debug("%d top-level entries", len(result))
    for line in render_lines(result, root_kind):
        print(line)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
