"""
Terminal maze generator (randomized depth-first search).

Usage:
    python main.py --width 12 --height 8 --seed 42
    python main.py -w 6 -H 4 --debug --delay 0.05

Sizes are given in cells; the printed grid is (2*height+1) rows by
(4*width+1) columns.
"""

import argparse
import logging
import sys

from maze_generator import InvalidDimension, create
from maze_render import debug_sink, display, supports_color

DEFAULT_WIDTH = 10
DEFAULT_HEIGHT = 10
DEFAULT_DELAY = 0.0

logger = logging.getLogger(__name__)


def parse_args(argv):
    p = argparse.ArgumentParser(description="Terminal maze generator")
    p.add_argument("--width", "-w", type=int, default=DEFAULT_WIDTH, help="cells in X")
    p.add_argument("--height", "-H", type=int, default=DEFAULT_HEIGHT, help="cells in Y")
    p.add_argument("--seed", type=int, default=None, help="random seed for reproducibility")
    p.add_argument("--debug", action="store_true", help="print the grid after every carving step")
    p.add_argument("--delay", type=float, default=DEFAULT_DELAY, help="seconds to wait per debug step")
    p.add_argument("--no-color", action="store_true", help="disable ANSI colors")
    p.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    return p.parse_args(argv)


def main(argv=None):
    ns = parse_args(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    color = supports_color(sys.stdout) and not ns.no_color
    sink = None
    if ns.debug:
        sink = debug_sink(color=color, delay=ns.delay, redraw=ns.delay > 0)

    try:
        maze = create(ns.width, ns.height, debug=ns.debug, seed=ns.seed, sink=sink)
    except InvalidDimension as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    display(maze, color=color)
    logger.debug("passages carved: %d", maze.passage_count())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
