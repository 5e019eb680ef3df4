# board.py
# Pure helpers over a 4x4 grid, shared by the game state and the game engine.

from typing import List, Tuple

BOARD_SIZE = 4
WIN_TILE = 2048

Grid = List[List[int]]

def empty_grid() -> Grid:
    """Returns a new BOARD_SIZE x BOARD_SIZE grid filled with zeros."""
    return [[0] * BOARD_SIZE for _ in range(BOARD_SIZE)]

def copy_grid(grid: Grid) -> Grid:
    return [list(row) for row in grid]

def is_valid_grid(grid) -> bool:
    """
    Checks that a grid has exactly BOARD_SIZE rows of BOARD_SIZE cells.
    Args:
        grid: Anything that might be a grid.
    Returns:
        bool: True if the shape is correct, False otherwise (including None).
    """
    if not grid or len(grid) != BOARD_SIZE:
        return False
    return all(row is not None and len(row) == BOARD_SIZE for row in grid)

def is_valid_position(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

def get_empty_cells(grid: Grid) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty (0-value) cells in the given grid, row-major.
    Args:
        grid (Grid): The grid to check.
    Returns:
        List[Tuple[int, int]]: List of (row, col) tuples for empty cells.
    """
    empty_cells = []
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if grid[row][col] == 0:
                empty_cells.append((row, col))
    return empty_cells

def contains_win_tile(grid: Grid) -> bool:
    """True if some cell holds exactly WIN_TILE (4096 alone does not count)."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if grid[row][col] == WIN_TILE:
                return True
    return False

def has_available_moves(grid: Grid) -> bool:
    """
    Checks whether any move can still change the grid.
    A move exists if a cell is empty or two row/column neighbours are equal.
    Both GameState.is_game_over and the engine's can_move rely on this.
    Args:
        grid (Grid): The grid to check.
    Returns:
        bool: True if at least one move is possible.
    """
    if get_empty_cells(grid):
        return True

    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            current = grid[row][col]
            if col < BOARD_SIZE - 1 and current == grid[row][col + 1]:
                return True
            if row < BOARD_SIZE - 1 and current == grid[row + 1][col]:
                return True
    return False
