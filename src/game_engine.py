# game_engine.py
# Slide/merge rules of 2048 as free functions over a GameState passed in by the caller.

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

import board
from game_state import GameState, GameStatus

logger = logging.getLogger(__name__)

class DIRECTION(str, Enum):
    """Represents the possible move directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

def parse_direction(token: Union[DIRECTION, str, None]) -> Optional[DIRECTION]:
    """
    Turns a direction token ("up", "LEFT", DIRECTION.DOWN, ...) into a DIRECTION.
    Returns:
        Optional[DIRECTION]: None if the token is not a known direction.
    """
    if isinstance(token, DIRECTION):
        return token
    if not isinstance(token, str):
        return None
    try:
        return DIRECTION(token.strip().lower())
    except ValueError:
        return None

# --- Line Manipulation ---

def move_line(line: List[int]) -> Tuple[List[int], int]:
    """
    Collapses a single line towards index 0.

    Zeros are dropped, then equal neighbours are merged scanning left to right.
    A merged pair is skipped as a whole, so a tile made by a merge never merges
    again in the same move: [2, 2, 2, 2] gives [4, 4, 0, 0], not [8, 0, 0, 0].
    Args:
        line (List[int]): The line, already read in collapse order.
    Returns:
        Tuple[List[int], int]: The new line padded with zeros to the original
                               length, and the score gained from merges.
    """
    tiles = [value for value in line if value != 0]
    merged = []
    score_gained = 0
    i = 0

    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            merged_value = tiles[i] * 2
            merged.append(merged_value)
            score_gained += merged_value
            i += 2
        else:
            merged.append(tiles[i])
            i += 1

    merged += [0] * (len(line) - len(merged))
    return merged, score_gained

def _line_cells(direction: DIRECTION, index: int) -> List[Tuple[int, int]]:
    """
    (row, col) positions of one line, in the order tiles collapse for direction.
    index selects the row for LEFT/RIGHT and the column for UP/DOWN.
    """
    forward = range(board.BOARD_SIZE)
    backward = range(board.BOARD_SIZE - 1, -1, -1)

    if direction == DIRECTION.LEFT:
        return [(index, col) for col in forward]
    if direction == DIRECTION.RIGHT:
        return [(index, col) for col in backward]
    if direction == DIRECTION.UP:
        return [(row, index) for row in forward]
    return [(row, index) for row in backward]

def _slide(state: GameState, direction: DIRECTION) -> bool:
    """Applies move_line to every row or column. Returns True if any line changed."""
    moved = False

    for index in range(board.BOARD_SIZE):
        cells = _line_cells(direction, index)
        original_line = [state.get_cell(row, col) for row, col in cells]
        new_line, score_gained = move_line(original_line)

        if new_line != original_line:
            moved = True
            for (row, col), value in zip(cells, new_line):
                state.set_cell(row, col, value)
            if score_gained:
                state.add_score(score_gained)

    return moved

# --- Game Move Processing ---

def move(state: GameState, direction: Union[DIRECTION, str]) -> bool:
    """
    Plays one move on state.

    Nothing happens unless the game is PLAYING and direction is valid. When at
    least one tile moves, the move counter goes up, a random tile is added and
    the status is recomputed (a win is checked before a loss).
    Args:
        state (GameState): The game to play on.
        direction (Union[DIRECTION, str]): The direction to move.
    Returns:
        bool: True if the grid changed.
    """
    if state.get_game_status() != GameStatus.PLAYING:
        return False

    parsed = parse_direction(direction)
    if parsed is None:
        logger.debug("Ignoring unknown direction %r", direction)
        return False

    moved = _slide(state, parsed)
    if moved:
        state.increment_move_count()
        state.add_random_tile()
        update_game_status(state)
        logger.debug("Moved %s: score=%d status=%s", parsed.value, state.get_score(), state.get_game_status().value)

    return moved

def update_game_status(state: GameState) -> None:
    if state.has_won() and state.get_game_status() == GameStatus.PLAYING and not state.keep_playing:
        state.set_game_status(GameStatus.WON)
        return

    if not can_move(state):
        state.set_game_status(GameStatus.LOST)
        return

    state.set_game_status(GameStatus.PLAYING)

# --- Game State Checks ---

def can_move(state: GameState) -> bool:
    """True if a cell is empty or two row/column neighbours are equal."""
    return board.has_available_moves(state.get_grid())

def get_engine_info(state: GameState) -> Dict[str, object]:
    return {
        "can_move": can_move(state),
        "empty_cells": len(state.get_empty_cells()),
        "game_status": state.get_game_status(),
    }
