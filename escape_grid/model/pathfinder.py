"""Temporal breadth-first search over a frozen maze snapshot."""

from collections import deque
from typing import Dict, List, Optional, Tuple

from .adjacency import neighbors
from .grid import CellKind, MazeSnapshot, Position

# (position, phase): phase is the step count while dynamic walls can still
# change, then horizon + turn parity once only parity matters.
_StateKey = Tuple[Position, int]


def _phase(steps: int, horizon: int, start_turn: int,
           parity_matters: bool) -> int:
    if steps < horizon:
        return steps
    if parity_matters:
        return horizon + (start_turn + steps) % 2
    return horizon


def _reconstruct(parents: Dict[_StateKey, Optional[_StateKey]],
                 goal_key: _StateKey) -> List[Position]:
    path = []
    key: Optional[_StateKey] = goal_key
    while key is not None:
        path.append(key[0])
        key = parents[key]
    path.reverse()
    return path


def _reachable_ignoring_time(snapshot: MazeSnapshot, start: Position,
                             goal: Position) -> bool:
    """
    Plain BFS with every timed wall treated as open. A goal that fails this
    check can never be reached, however long the player waits.
    """
    def passable(row: int, col: int) -> bool:
        kind = CellKind(int(snapshot.grid[row, col]))
        if kind == CellKind.WALL:
            return False
        # A dynamic wall without a timer never opens
        return kind != CellKind.DYNAMIC_WALL or (row, col) in snapshot.timers

    seen = {start}
    frontier = deque([start])
    while frontier:
        position = frontier.popleft()
        if position == goal:
            return True
        for _, (nr, nc) in neighbors(position):
            if (nr, nc) in seen or not snapshot.in_bounds(nr, nc):
                continue
            if not passable(nr, nc):
                continue
            seen.add((nr, nc))
            frontier.append((nr, nc))
    return False


def find_shortest_path(snapshot: MazeSnapshot, start: Position,
                       goal: Position) -> List[Position]:
    """
    Shortest move sequence from `start` to `goal`, launched at `snapshot.turn`.

    Each step is legal only if the destination is open at the absolute turn
    the path reaches it. Walkability depends on time, so the search runs over
    (position, time) states rather than positions alone. Dynamic walls only
    ever open, so once every countdown in the snapshot has run out the time
    component collapses to turn parity and the state space stays bounded by
    rows * cols * (horizon + 2). A goal cut off by permanent walls is rejected
    by a plain BFS before the timed search starts.

    Returns [] if either endpoint is outside the grid, if `start` is not
    walkable at the launch turn, or if the goal is unreachable. Returns
    [start] if start equals goal. The snapshot is never modified.
    """
    if not (snapshot.in_bounds(*start) and snapshot.in_bounds(*goal)):
        return []

    start_turn = snapshot.turn
    if not snapshot.is_open_at(start[0], start[1], start_turn):
        return []
    if start == goal:
        return [start]
    if not _reachable_ignoring_time(snapshot, start, goal):
        return []

    horizon = snapshot.opening_horizon()
    parity_matters = snapshot.has_alternating_walls

    start_key = (start, _phase(0, horizon, start_turn, parity_matters))
    parents: Dict[_StateKey, Optional[_StateKey]] = {start_key: None}
    frontier = deque([(start, 0)])

    while frontier:
        position, steps = frontier.popleft()
        key = (position, _phase(steps, horizon, start_turn, parity_matters))
        next_steps = steps + 1
        arrival_turn = start_turn + next_steps

        for _, (nr, nc) in neighbors(position):
            if not snapshot.is_open_at(nr, nc, arrival_turn):
                continue
            next_key = ((nr, nc), _phase(next_steps, horizon, start_turn,
                                         parity_matters))
            if next_key in parents:
                continue
            parents[next_key] = key
            if (nr, nc) == goal:
                return _reconstruct(parents, next_key)
            frontier.append(((nr, nc), next_steps))

    return []


def path_is_valid(snapshot: MazeSnapshot, path: List[Position]) -> bool:
    """Check adjacency and timed walkability of every step of a path."""
    if not path:
        return True
    if not snapshot.is_open_at(path[0][0], path[0][1], snapshot.turn):
        return False
    for steps, (prev, nxt) in enumerate(zip(path, path[1:]), start=1):
        if nxt not in [target for _, target in neighbors(prev)]:
            return False
        if not snapshot.is_open_at(nxt[0], nxt[1], snapshot.turn + steps):
            return False
    return True
