"""
Deterministic collaborators shared by the tests.
"""
from best_score import MemoryBestScoreStore
from game_state import GameState

class FirstCellTileSource:
    """Always puts `value` on the first empty cell in row-major order."""

    def __init__(self, value=2):
        self.value = value
        self.calls = 0

    def next_tile_value(self):
        return self.value

    def choose_empty_cell(self, candidates):
        self.calls += 1
        return candidates[0]

class NoSpawnTileSource(FirstCellTileSource):
    """Records spawn requests but writes 0, so the grid only changes by sliding."""

    def __init__(self):
        super().__init__(value=0)

def make_state(grid=None, tile_source=None, best_score=0):
    state = GameState(
        tile_source=tile_source if tile_source is not None else NoSpawnTileSource(),
        best_score_store=MemoryBestScoreStore(best_score),
    )
    if grid is not None:
        state.set_grid(grid)
    return state

INCREASING_GRID = [
    [2, 4, 8, 16],
    [32, 64, 128, 256],
    [512, 1024, 2048, 4096],
    [8192, 16384, 32768, 65536],
]
