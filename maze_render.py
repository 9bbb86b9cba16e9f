import sys
import time

import numpy as np

from maze_generator import OPEN, VISITED, WALL

# === ANSI helpers ===
RESET = "\x1b[0m"
DIM = "\x1b[2m"
FG_YELLOW = "\x1b[33m"


def supports_color(stream):
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def render(maze, debug=False):
    """Canvas rows joined by line breaks, followed by a blank line.

    Outside debug mode visited markers are written as open space. The canvas
    itself is left untouched.
    """
    canvas = maze.canvas
    if not debug:
        canvas = np.where(canvas == VISITED, OPEN, canvas)
    return "".join("".join(row) + "\n" for row in canvas) + "\n"


def colorize(text):
    """Dims walls and highlights visited markers."""
    text = text.replace(WALL, DIM + WALL + RESET)
    return text.replace(VISITED, FG_YELLOW + VISITED + RESET)


def clear(stream=None):
    stream = stream or sys.stdout
    stream.write("\x1b[2J\x1b[H")
    stream.flush()


def display(maze, debug=False, stream=None, color=False):
    stream = stream or sys.stdout
    text = render(maze, debug)
    if color:
        text = colorize(text)
    stream.write(text)
    stream.flush()


def debug_sink(stream=None, color=False, delay=0.0, redraw=False):
    """Builds the display sink called after every carving step in debug mode.

    The whole grid is printed, markers included. With ``redraw`` the screen is
    cleared first so the grid animates in place.
    """
    def show(maze):
        out = stream or sys.stdout
        if redraw:
            clear(out)
        display(maze, debug=True, stream=out, color=color)
        if delay > 0:
            time.sleep(delay)

    return show
