"""Game engine for the escape-the-grid game."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, TYPE_CHECKING

from .adjacency import Direction, step
from .entity import Entity, MovementHistory, PursuerReplay, commit_move
from .grid import (CellKind, MazeLayout, MazeLoadError, MazeModel, Position,
                   layout_timers)
from .pathfinder import find_shortest_path
from .state import EntitySnapshot, GameSnapshot
from .turn import TurnEngine

if TYPE_CHECKING:
    from ..config import GameConfig

logger = logging.getLogger(__name__)

DEFAULT_CLONE_ACTIVATION_TURN = 6


class GameStatus(Enum):
    """Game states. WON and LOST are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a single move attempt."""
    moved: bool
    status: GameStatus
    turn: int


class GameEngine:
    """
    Orchestrates one game of escaping the grid.

    Each `attempt_move` call runs to completion:
    1. Resolve the direction against the player's row parity
    2. Check the target with the maze and the clone's current cell
    3. Commit the move and record it
    4. Advance the turn and decay dynamic walls
    5. Activate and update the clone
    6. Evaluate lose, then win

    Blocked attempts change nothing, not even the turn.
    """

    def __init__(self, layout: MazeLayout,
                 clone_activation_turn: int = DEFAULT_CLONE_ACTIVATION_TURN):
        self.layout = layout
        self.clone_activation_turn = clone_activation_turn
        self._reset()

    @classmethod
    def from_config(cls, config: "GameConfig") -> "GameEngine":
        from ..maze_file import layout_from_config
        return cls(layout_from_config(config.maze),
                   clone_activation_turn=config.rules.clone_activation_turn)

    def _reset(self) -> None:
        """Build all mutable state from the layout."""
        self.maze = MazeModel(self.layout.grid, layout_timers(self.layout),
                              self.layout.default_wall_turns)
        self.goal = self._validate_goal()
        self.start = self._resolve_start()

        self.turns = TurnEngine(self.maze)
        self.player = Entity(self.start, active=True)
        self.history = MovementHistory()
        self.clone = PursuerReplay(self.clone_activation_turn)
        self.status = GameStatus.PLAYING

        self.moves_committed = 0
        self.moves_rejected = 0
        self.clone_activated_on: Optional[int] = None

    def _validate_goal(self) -> Position:
        goal = self.layout.resolved_goal()
        if not self.maze.in_bounds(*goal):
            raise MazeLoadError(f"Goal {goal} is outside the "
                                f"{self.maze.rows}x{self.maze.cols} grid")
        if self.maze.cell_kind(*goal) == CellKind.WALL:
            raise MazeLoadError(f"Goal {goal} is on a wall")
        return goal

    def _resolve_start(self) -> Position:
        """Use the configured start, or fall back to the first path cell."""
        start = self.layout.start
        if self.maze.is_walkable(*start, turn_at_entry=0):
            return start

        fallback = self.maze.first_cell_of(CellKind.PATH)
        if fallback is None:
            raise MazeLoadError("No walkable starting position in the maze")
        logger.warning("Start position %s is not walkable, using %s instead",
                       start, fallback)
        return fallback

    def restart(self) -> None:
        """Start over from the original layout."""
        self._reset()
        logger.info("Game restarted")

    @property
    def turn(self) -> int:
        return self.turns.turn

    def attempt_move(self, direction: Direction) -> MoveResult:
        """Try to move the player one cell. Never raises for illegal moves."""
        if self.status != GameStatus.PLAYING:
            return MoveResult(False, self.status, self.turn)

        target = step(self.player.position, direction)
        if not self.maze.is_walkable(*target, turn_at_entry=self.turn + 1,
                                     blocked_positions=self.clone.blocked_positions()):
            self.moves_rejected += 1
            logger.debug("Move %s to %s rejected on turn %d",
                         direction.value, target, self.turn)
            return MoveResult(False, self.status, self.turn)

        commit_move(self.player, self.history, target)
        self.moves_committed += 1
        turn = self.turns.commit_move()
        logger.debug("Turn %d: player moved %s to %s",
                     turn, direction.value, target)

        if self.clone.should_activate(turn):
            self.clone.activate()
            self.clone_activated_on = turn
            logger.info("Clone activated on turn %d", turn)
        self.clone.update(self.history, turn)

        if self.clone.active and self.player.position == self.clone.position:
            self.status = GameStatus.LOST
            logger.info("Caught by the clone at %s on turn %d", target, turn)
        elif self.player.position == self.goal:
            self.status = GameStatus.WON
            logger.info("Escaped on turn %d", turn)

        return MoveResult(True, self.status, turn)

    def hint_path(self) -> List[Position]:
        """Shortest path from the player to the goal. Does not mutate state."""
        snapshot = self.maze.snapshot(self.turn)
        return find_shortest_path(snapshot, self.player.position, self.goal)

    def is_finished(self) -> bool:
        return self.status != GameStatus.PLAYING

    def snapshot(self, include_hint: bool = False) -> GameSnapshot:
        """Create a read-only copy of the current game state."""
        grid = self.maze.cells.copy()
        grid.setflags(write=False)
        return GameSnapshot(
            turn=self.turn,
            status=self.status.value,
            player=EntitySnapshot(self.player.row, self.player.col,
                                  self.player.active),
            clone=EntitySnapshot(self.clone.entity.row, self.clone.entity.col,
                                 self.clone.active),
            goal=self.goal,
            grid=grid,
            dynamic_walls={t.position: t.turns_remaining
                           for t in self.maze.timers if t.turns_remaining > 0},
            hint_path=self.hint_path() if include_hint else [],
            metrics=self._metrics(),
        )

    def _metrics(self) -> Dict[str, int]:
        return {
            'moves_committed': self.moves_committed,
            'moves_rejected': self.moves_rejected,
            'walls_opened': len(self.turns.opened_walls),
            'history_length': len(self.history),
        }

    def get_summary(self) -> Dict:
        """Get summary statistics for the game."""
        return {
            'status': self.status.value,
            'total_turns': self.turn,
            'moves_committed': self.moves_committed,
            'moves_rejected': self.moves_rejected,
            'clone_activated_on': self.clone_activated_on,
            'walls_opened': len(self.turns.opened_walls),
            'start': self.start,
            'goal': self.goal,
        }
