"""Per-turn CSV log for the escape-the-grid game."""

import csv
from pathlib import Path
from typing import IO, Optional

from ..model.state import GameSnapshot


class CSVWriter:
    """
    Streams one row per recorded turn, flushing after every row so a log
    survives an interrupted game.

    Output format:
        turn,player_row,player_col,clone_row,clone_col,clone_active,status
        0,0,0,-1,-1,0,playing
        1,1,0,-1,-1,0,playing
        ...

    A restart keeps writing to the same file, so the turn column can
    drop back to 0 within one log.
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.rows_written = 0
        self._handle: Optional[IO[str]] = None
        self._writer: Optional[csv.DictWriter] = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> None:
        """Create the file (and its directory) and write the header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(self.output_path, 'w', newline='')
        self._writer = csv.DictWriter(self._handle,
                                      fieldnames=GameSnapshot.CSV_FIELDS)
        self._writer.writeheader()
        self.rows_written = 0

    def append(self, state: GameSnapshot) -> None:
        if not self.is_open:
            self.open()
        self._writer.writerow(state.to_csv_row())
        self._handle.flush()
        self.rows_written += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._writer = None

    def __enter__(self) -> "CSVWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
