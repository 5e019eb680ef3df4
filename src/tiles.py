# tiles.py
# Source of randomness for new tiles. Swap in a seeded or scripted source for tests.

import random
from typing import Optional, Protocol, Sequence, Tuple

FOUR_PROBABILITY = 0.1

Cell = Tuple[int, int]

class TileSource(Protocol):
    """Chooses where a new tile goes and what value it gets."""

    def next_tile_value(self) -> int:
        ...

    def choose_empty_cell(self, candidates: Sequence[Cell]) -> Cell:
        ...

class RandomTileSource:
    """
    TileSource backed by a private random.Random instance.
    Args:
        seed (Optional[int]): Seed for reproducible games. None uses system entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_tile_value(self) -> int:
        """Returns 4 with a 10% chance, 2 otherwise."""
        return 4 if self._rng.random() < FOUR_PROBABILITY else 2

    def choose_empty_cell(self, candidates: Sequence[Cell]) -> Cell:
        """Picks one of the candidate cells uniformly at random."""
        return self._rng.choice(candidates)
