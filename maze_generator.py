import logging
import random
from collections import deque

import numpy as np

logger = logging.getLogger(__name__)

WALL = "X"
OPEN = " "
VISITED = "V"


class InvalidDimension(ValueError):
    """Width or height of a maze is not a positive integer."""

    def __init__(self, width, height):
        super().__init__(
            f"maze dimensions must be positive integers, got width={width!r} height={height!r}"
        )
        self.width = width
        self.height = height


class Cell:
    """A node of the maze graph, placed at canvas column ``x`` and row ``y``."""

    __slots__ = ("x", "y", "neighbors")

    def __init__(self, x, y):
        self.x = x
        self.y = y
        # indices into GridGraph.cells
        self.neighbors = []

    def __str__(self):
        return f"({self.x}, {self.y})"

    def __repr__(self):
        return f"Cell(x={self.x}, y={self.y}, neighbors={self.neighbors})"


class GridGraph:
    """Arena of cells plus the character canvas they are drawn on."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.canvas = np.full((2 * height + 1, 4 * width + 1), WALL, dtype="<U1")
        self.cells = []
        self.index = {}

    def add_cell(self, col, row):
        idx = len(self.cells)
        self.cells.append(Cell(col, row))
        self.index[(col, row)] = idx
        return idx

    def link(self, a, b):
        self.cells[a].neighbors.append(b)
        self.cells[b].neighbors.append(a)

    def cell_at(self, col, row):
        return self.cells[self.index[(col, row)]]

    def index_of(self, cell):
        return self.index[(cell.x, cell.y)]


def _check_dimension(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool) and value > 0


def build_grid(width, height):
    """
    Builds the cell graph and the canvas for a ``width`` x ``height`` maze.

    Every cell sits on an odd row at a column with ``col % 4 == 2``. The two
    columns beside a cell are open, columns with ``col % 4 == 0`` and even
    rows are walls. Cells are linked to their left and upper neighbours as
    they are registered, which yields the full four-directional grid.
    """
    if not (_check_dimension(width) and _check_dimension(height)):
        raise InvalidDimension(width, height)

    graph = GridGraph(width, height)
    canvas = graph.canvas
    rows, cols = canvas.shape

    canvas[:, 1::4] = OPEN
    canvas[:, 3::4] = OPEN
    canvas[1::2, 2::4] = OPEN

    for row in range(1, rows, 2):
        for col in range(2, cols, 4):
            idx = graph.add_cell(col, row)
            if col > 4:
                graph.link(idx, graph.index[(col - 4, row)])
            if row > 2:
                graph.link(idx, graph.index[(col, row - 2)])

    # entrance and exit
    canvas[0, 2] = OPEN
    canvas[rows - 1, cols - 3] = OPEN

    logger.debug("built %dx%d grid: %d cells, canvas %dx%d",
                 width, height, len(graph.cells), cols, rows)
    return graph


def carve(graph, start, rng, on_visit=None):
    """
    Randomized depth-first search (recursive backtracker) from ``start``.

    Edges are removed from the graph as they are examined and the wall between
    a cell and a newly reached neighbour is opened on the canvas. The descent
    uses an explicit stack, so the depth is not limited by the interpreter's
    recursion limit. Returns the set of visited cell indices.
    """
    visited = set()
    if start is None:
        return visited

    cells = graph.cells
    canvas = graph.canvas
    start_idx = graph.index_of(start)

    visited.add(start_idx)
    if on_visit is not None:
        on_visit(start)

    stack = [start_idx]
    while stack:
        current = cells[stack[-1]]
        if not current.neighbors:
            # backtrack; the parent frame marks the finished cell as visited
            visited.add(stack.pop())
            continue

        current_idx = stack[-1]
        chosen_idx = current.neighbors[rng.randrange(len(current.neighbors))]
        for neighbor_idx in current.neighbors:
            # back-edge may already be gone from an earlier pass
            back = cells[neighbor_idx].neighbors
            if current_idx in back:
                back.remove(current_idx)
        current.neighbors.remove(chosen_idx)

        if chosen_idx in visited:
            continue

        chosen = cells[chosen_idx]
        canvas[current.y + (chosen.y - current.y) // 2,
               current.x + (chosen.x - current.x) // 2] = OPEN
        if on_visit is not None:
            on_visit(chosen)
        stack.append(chosen_idx)

    logger.debug("carved %d of %d cells", len(visited), len(cells))
    return visited


class Maze:
    """A perfect maze: the carved canvas and the graph it was carved from."""

    def __init__(self, width, height, rng=None, observer=None):
        self._graph = build_grid(width, height)
        if rng is None:
            rng = random.Random()
        on_visit = None
        if observer is not None:
            on_visit = lambda cell: observer(self, cell)
        self.visited = carve(self._graph, self._graph.cell_at(2, 1), rng, on_visit)

    @property
    def graph(self):
        return self._graph

    @property
    def width(self):
        return self._graph.width

    @property
    def height(self):
        return self._graph.height

    @property
    def canvas(self):
        return self._graph.canvas

    @property
    def canvas_width(self):
        return self._graph.canvas.shape[1]

    @property
    def canvas_height(self):
        return self._graph.canvas.shape[0]

    @property
    def entrance(self):
        return (2, 0)

    @property
    def exit(self):
        return (self.canvas_width - 3, self.canvas_height - 1)

    def cell_positions(self):
        """Canvas (col, row) of every cell, in row-major order."""
        return [(cell.x, cell.y) for cell in self._graph.cells]

    def passage_count(self):
        """Number of opened walls between two distinct cells."""
        canvas = self.canvas
        rows, cols = canvas.shape
        horizontal = canvas[1:rows - 1:2, 4:cols - 1:4]
        vertical = canvas[2:rows - 1:2, 2::4]
        return int(np.count_nonzero(horizontal != WALL) + np.count_nonzero(vertical != WALL))

    def _open_neighbors(self, col, row):
        canvas = self.canvas
        for dc, dr in ((4, 0), (-4, 0), (0, 2), (0, -2)):
            ncol, nrow = col + dc, row + dr
            if (ncol, nrow) in self._graph.index and canvas[row + dr // 2, col + dc // 2] != WALL:
                yield ncol, nrow

    def reachable_cells(self, start=None):
        """Flood fill over open passages from ``start`` (defaults to the first cell)."""
        if start is None:
            start = (2, 1)
        seen = {start}
        queue = deque([start])
        while queue:
            col, row = queue.popleft()
            for nxt in self._open_neighbors(col, row):
                if nxt not in seen:
                    seen.add(nxt)
                    queue.append(nxt)
        return seen

    def is_perfect(self):
        total = self.width * self.height
        return self.passage_count() == total - 1 and len(self.reachable_cells()) == total


def mark_visited(sink=None):
    """Debug hook: marks each visited cell with ``VISITED`` and hands the maze to ``sink``."""
    def on_visit(maze, cell):
        maze.canvas[cell.y, cell.x] = VISITED
        if sink is not None:
            sink(maze)

    return on_visit


def create(width, height, debug=False, seed=None, rng=None, observer=None, sink=None):
    """
    Builds and fully carves a ``width`` x ``height`` maze.

    With ``debug`` set and no ``observer`` given, every visited cell is marked
    on the canvas and ``sink`` is called with the maze after each step.
    """
    if rng is None:
        rng = random.Random(seed)
    if debug and observer is None:
        observer = mark_visited(sink)
    maze = Maze(width, height, rng=rng, observer=observer)
    logger.debug("created %dx%d maze (debug=%s)", width, height, debug)
    return maze
