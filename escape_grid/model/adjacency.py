"""Five-neighbour adjacency of the staggered pentagon grid.

Rows alternate orientation, so the same direction key resolves to a
different (dr, dc) offset depending on the parity of the mover's row:

    key   even row   odd row
    q     (-1, -1)   (-1,  0)
    w     (-1,  0)   (+1,  0)
    e     (+1,  0)   (+1, +1)
    a     ( 0, -1)   ( 0, -1)
    d     ( 0, +1)   ( 0, +1)

The table is symmetric: every move has an inverse move from the target cell.
Both the move resolver and the pathfinder read it from here.
"""

import re
from enum import Enum
from typing import Dict, List, Tuple

from .grid import Position


class Direction(Enum):
    """Logical direction tokens, named after their keyboard keys."""
    Q = "q"
    W = "w"
    E = "e"
    A = "a"
    D = "d"

    @classmethod
    def from_token(cls, token: str) -> "Direction":
        try:
            return cls(token.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown direction token: {token!r}") from None


# Keyed by row parity (0 = even, 1 = odd)
NEIGHBOR_OFFSETS: Dict[int, Dict[Direction, Tuple[int, int]]] = {
    0: {
        Direction.Q: (-1, -1),
        Direction.W: (-1, 0),
        Direction.E: (1, 0),
        Direction.A: (0, -1),
        Direction.D: (0, 1),
    },
    1: {
        Direction.Q: (-1, 0),
        Direction.W: (1, 0),
        Direction.E: (1, 1),
        Direction.A: (0, -1),
        Direction.D: (0, 1),
    },
}


def resolve_offset(row: int, direction: Direction) -> Tuple[int, int]:
    """(dr, dc) for a move in `direction` from a cell on `row`."""
    return NEIGHBOR_OFFSETS[row % 2][direction]


def step(position: Position, direction: Direction) -> Position:
    """Target cell of a single move. May lie outside the grid."""
    row, col = position
    dr, dc = resolve_offset(row, direction)
    return (row + dr, col + dc)


def neighbors(position: Position) -> List[Tuple[Direction, Position]]:
    """All five (direction, target) pairs of a cell, unfiltered."""
    return [(direction, step(position, direction)) for direction in Direction]


def are_adjacent(a: Position, b: Position) -> bool:
    return any(target == b for _, target in neighbors(a))


_SEPARATORS = re.compile(r"[\s,;]+")


def parse_tokens(text: str) -> List[Direction]:
    """
    Parse a string of direction keys such as "ddeqa" or "d, d, e".

    Separators (whitespace, commas, semicolons) are ignored; any other
    character raises ValueError.
    """
    return [Direction.from_token(ch) for ch in _SEPARATORS.sub("", text)]
