# game_state.py
# Holds the data of one 2048 game. Knows nothing about how tiles slide or merge.

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

import board
from best_score import BestScoreStore, MemoryBestScoreStore
from tiles import RandomTileSource, TileSource

logger = logging.getLogger(__name__)

class GameStatus(str, Enum):
    """Represents the current progress state of the game."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

class GameState:
    """
    Grid, score, best score, status and move counter of a single game.

    A new instance is empty (no tiles); call reset() to start playing.
    Args:
        tile_source (Optional[TileSource]): Where new tiles come from. Defaults to
                                            an unseeded RandomTileSource.
        best_score_store (Optional[BestScoreStore]): Where the best score is loaded
                                                     from and saved to.
    """

    def __init__(self,
                 tile_source: Optional[TileSource] = None,
                 best_score_store: Optional[BestScoreStore] = None):
        self.tile_source = tile_source if tile_source is not None else RandomTileSource()
        self.best_score_store = best_score_store if best_score_store is not None else MemoryBestScoreStore()

        self.grid: board.Grid = board.empty_grid()
        self.score = 0
        self.status = GameStatus.PLAYING
        self.move_count = 0
        # Set once the player chooses to continue past 2048.
        self.keep_playing = False
        self.best_score = self.best_score_store.load_best_score()

    # --- Accessors ---

    def get_grid(self) -> board.Grid:
        return self.grid

    def get_score(self) -> int:
        return self.score

    def get_best_score(self) -> int:
        self._refresh_best_score()
        return self.best_score

    def get_game_status(self) -> GameStatus:
        return self.status

    def set_game_status(self, status: GameStatus) -> None:
        self.status = status

    def get_cell(self, row: int, col: int) -> int:
        """Returns the cell value, or 0 if (row, col) is off the board."""
        if board.is_valid_position(row, col):
            return self.grid[row][col]
        return 0

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Overwrites a cell. Positions off the board are ignored."""
        if board.is_valid_position(row, col):
            self.grid[row][col] = value

    def set_grid(self, new_grid: board.Grid) -> None:
        """
        Replaces the whole grid with a copy of new_grid.
        Anything that is not exactly 4x4 is ignored and the grid is left as it was.
        """
        if not board.is_valid_grid(new_grid):
            logger.warning("Ignoring grid with wrong shape: %r", new_grid)
            return
        self.grid = board.copy_grid(new_grid)

    # --- Mutators ---

    def add_score(self, points: int) -> None:
        """
        Adds points to the score and raises the best score if it was beaten.
        The best score never goes down, even if points is negative.
        """
        self.score += points
        self._refresh_best_score()
        if self.score > self.best_score:
            self.best_score = self.score
            self.best_score_store.save_best_score(self.best_score)

    def _refresh_best_score(self) -> None:
        # Other games may have raised the shared best score since we last looked.
        self.best_score = max(self.best_score, self.best_score_store.load_best_score())

    def increment_move_count(self) -> None:
        self.move_count += 1

    def get_empty_cells(self) -> List[Tuple[int, int]]:
        return board.get_empty_cells(self.grid)

    def add_random_tile(self) -> bool:
        """
        Puts a 2 (90%) or a 4 (10%) on a random empty cell.
        Returns:
            bool: False, without touching the grid, if there is no empty cell.
        """
        empty_cells = self.get_empty_cells()
        if not empty_cells:
            return False

        row, col = self.tile_source.choose_empty_cell(empty_cells)
        value = self.tile_source.next_tile_value()
        self.set_cell(row, col, value)
        logger.debug("Spawned %d at (%d, %d)", value, row, col)
        return True

    def reset(self) -> None:
        """Clears the game and places the two starting tiles. The best score is kept."""
        self.grid = board.empty_grid()
        self.score = 0
        self.status = GameStatus.PLAYING
        self.move_count = 0
        self.keep_playing = False
        self._refresh_best_score()

        self.add_random_tile()
        self.add_random_tile()

    def continue_game(self) -> bool:
        """
        Lets the player keep going after reaching 2048.
        Returns:
            bool: True if the status went from WON back to PLAYING.
        """
        if self.status != GameStatus.WON:
            return False
        self.status = GameStatus.PLAYING
        self.keep_playing = True
        return True

    # --- Queries ---

    def has_won(self) -> bool:
        return board.contains_win_tile(self.grid)

    def is_game_over(self) -> bool:
        return not board.has_available_moves(self.grid)

    def get_stats(self) -> Dict[str, object]:
        self._refresh_best_score()
        return {
            "score": self.score,
            "best_score": self.best_score,
            "move_count": self.move_count,
            "status": self.status,
        }
