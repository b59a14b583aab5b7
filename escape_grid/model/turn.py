"""Turn counter tied to committed player moves."""

from typing import List

from .grid import MazeModel, Position


class TurnEngine:
    """
    Advances time by exactly one turn per committed player move.

    There is no independent ticking: rejected moves never reach this class.
    """

    def __init__(self, maze: MazeModel):
        self.maze = maze
        self._turn = 0
        self.opened_walls: List[Position] = []

    @property
    def turn(self) -> int:
        return self._turn

    def commit_move(self) -> int:
        """Increment the turn and decay dynamic walls. Returns the new turn."""
        self._turn += 1
        self.opened_walls.extend(self.maze.advance_turn(self._turn))
        return self._turn
