#!/usr/bin/env python3
"""
Escape the Grid

A turn-based maze escape on a staggered pentagon grid. Reach the goal before
your clone, which replays your own moves a few turns behind, catches you.

Usage:
    escape-grid --config configs/default.yaml [options]
    escape-grid --maze mazes/example.txt --moves "ddede" [options]

Keys (q w e a d move, see escape_grid.model.adjacency):
    s  toggle hint path    r  restart    x  quit (interactive only)

Examples:
    escape-grid --config configs/default.yaml --interactive --hint
    escape-grid --maze mazes/example.txt --moves "dd e d" --gif --out-dir results/
    escape-grid --config configs/default.yaml --moves dddd --no-csv --quiet
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from rich.logging import RichHandler

from escape_grid.config import (ConfigError, GameConfig, config_for_maze_file,
                                load_config)
from escape_grid.export.csv_writer import CSVWriter
from escape_grid.export.reporter import Reporter, render_board
from escape_grid.export.visualizer import Visualizer
from escape_grid.model.adjacency import Direction, parse_tokens
from escape_grid.model.engine import GameEngine, GameStatus
from escape_grid.model.grid import MazeLoadError

logger = logging.getLogger("escape_grid")

TOGGLE_HINT = 's'
RESTART = 'r'
QUIT = 'x'


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Escape the Grid - temporal maze escape',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    escape-grid --config configs/default.yaml --interactive --hint
    escape-grid --maze mazes/example.txt --moves "dd e d" --gif --out-dir results/
    escape-grid --config configs/default.yaml --moves dddd --no-csv --quiet
        """
    )

    # Maze source (one required)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--config', type=Path,
                        help='Path to YAML configuration file')
    source.add_argument('--maze', type=Path,
                        help='Path to maze text file (default rules)')

    # Play mode
    parser.add_argument('--moves', type=str, default='',
                        help='Direction keys to play, e.g. "ddeqa"')
    parser.add_argument('--interactive', action='store_true', default=False,
                        help='Read keys from stdin after the scripted moves')
    parser.add_argument('--hint', action='store_true', default=False,
                        help='Show the shortest path to the goal')

    # Optional overrides
    parser.add_argument('--clone-turn', type=int, default=None,
                        help='Override the clone activation turn')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV turn log (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV turn log')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: WARNING)')

    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


class Session:
    """Ties a game engine to its exporters for one CLI run."""

    def __init__(self, engine: GameEngine, config: GameConfig, source: str,
                 show_hint: bool, out: TextIO):
        self.engine = engine
        self.config = config
        self.source = source
        self.show_hint = show_hint
        self.out = out

        self.csv_writer: Optional[CSVWriter] = None
        if config.csv_enabled:
            self.csv_writer = CSVWriter(config.out_dir / 'turn_log.csv')
            self.csv_writer.open()

        self.visualizer = Visualizer(engine.maze.rows, engine.maze.cols)
        self.reporter = Reporter(source, engine.clone_activation_turn)
        self.record()

    def say(self, message: str = "") -> None:
        if not self.config.quiet:
            print(message, file=self.out)

    def _take_snapshot(self):
        self.state = self.engine.snapshot(include_hint=self.show_hint)
        self.state_has_hint = self.show_hint
        return self.state

    def record(self):
        """Export the current turn to every enabled sink."""
        state = self._take_snapshot()
        if self.csv_writer:
            self.csv_writer.append(state)
        if self.config.gif_enabled:
            self.visualizer.buffer_frame(state)
        self.reporter.update(state)
        return state

    def move(self, direction: Direction) -> None:
        result = self.engine.attempt_move(direction)
        if not result.moved:
            self.say(f"  Move '{direction.value}' blocked (turn {result.turn})")
            return
        self.record()
        if result.status == GameStatus.WON:
            self.say(f"  You escaped on turn {result.turn}!")
        elif result.status == GameStatus.LOST:
            self.say(f"  The clone caught you on turn {result.turn}.")

    def restart(self) -> None:
        self.engine.restart()
        self.visualizer.clear_frames()
        self.reporter = Reporter(self.source, self.engine.clone_activation_turn)
        self.record()
        self.say("  Restarted.")

    def show(self) -> None:
        if self.config.quiet:
            return
        # Reuse the recorded turn unless the hint was toggled since
        state = self.state
        if self.show_hint != self.state_has_hint:
            state = self._take_snapshot()
        self.say(f"Turn {state.turn} | {state.status}")
        self.say(render_board(state))
        if self.show_hint:
            path = state.hint_path
            self.say(f"Hint: {len(path) - 1} moves" if path else "Hint: no path")

    def close(self) -> None:
        if self.csv_writer:
            self.csv_writer.close()


def run_interactive(session: Session, stream: TextIO) -> None:
    """Play keys read line by line until EOF or the quit key."""
    session.show()
    for line in stream:
        for key in line.strip().lower():
            if key in ' ,;':
                continue
            if key == QUIT:
                return
            if key == TOGGLE_HINT:
                session.show_hint = not session.show_hint
            elif key == RESTART:
                session.restart()
            else:
                try:
                    direction = Direction.from_token(key)
                except ValueError as e:
                    print(f"Warning: {e}", file=sys.stderr)
                    continue
                session.move(direction)
        session.show()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    # Load configuration
    try:
        if args.config is not None:
            config = load_config(args.config)
            source = str(args.config)
        else:
            config = config_for_maze_file(args.maze)
            source = str(args.maze)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except (ConfigError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        moves = parse_tokens(args.moves)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.clone_turn is not None:
        if args.clone_turn < 1:
            print("Error: rules.clone_activation_turn must be >= 1", file=sys.stderr)
            return 1
        config.rules.clone_activation_turn = args.clone_turn
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    config.out_dir = args.out_dir

    # Initialize engine
    try:
        engine = GameEngine.from_config(config)
    except FileNotFoundError as e:
        print(f"Error: Maze file not found: {e.filename}", file=sys.stderr)
        return 1
    except (MazeLoadError, ValueError) as e:
        print(f"Error loading maze: {e}", file=sys.stderr)
        return 1

    logger.info("Loaded %s (%dx%d)", source, engine.maze.rows, engine.maze.cols)
    session = Session(engine, config, source, args.hint, sys.stdout)
    session.say(f"Maze {engine.maze.rows}x{engine.maze.cols} | start {engine.start} "
                f"| goal {engine.goal} | clone after {engine.clone_activation_turn} turns")

    try:
        for direction in moves:
            if engine.is_finished():
                break
            session.move(direction)
        if args.interactive:
            run_interactive(session, sys.stdin)
        elif moves:
            session.show()
    except KeyboardInterrupt:
        session.say("\nGame interrupted by user.")
    finally:
        session.close()

    final_state = engine.snapshot(include_hint=session.show_hint)

    if session.csv_writer:
        session.say(f"\nCSV saved: {session.csv_writer.output_path} "
                    f"({session.csv_writer.rows_written} rows)")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_state.png'
        session.visualizer.save_snapshot(final_state, snapshot_path)
        session.say(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'game.gif'
        session.say(f"Generating GIF ({len(session.visualizer.frames)} frames)...")
        session.visualizer.generate_gif(gif_path)
        session.say(f"Animation saved: {gif_path}")

    session.say(session.reporter.generate_summary(
        final_state,
        config.out_dir,
        config.csv_enabled,
        config.snapshot_enabled,
        config.gif_enabled
    ))

    return 0


if __name__ == '__main__':
    sys.exit(main())
