"""
Set of test for the tile source, best score stores and settings.
"""
import tempfile
from collections import Counter
from pathlib import Path
from unittest import TestCase, main

from pydantic import ValidationError

from best_score import FileBestScoreStore, MemoryBestScoreStore
from game_state import GameState
from settings import Settings, load_settings
from tiles import RandomTileSource


class TestRandomTileSource(TestCase):
    def test_values_are_two_or_four(self):
        source = RandomTileSource(seed=3)
        counts = Counter(source.next_tile_value() for _ in range(10000))
        self.assertEqual(set(counts), {2, 4})
        # 10% fours, with a generous margin.
        self.assertTrue(700 < counts[4] < 1300, counts)

    def test_choice_is_one_of_candidates(self):
        source = RandomTileSource(seed=5)
        candidates = [(0, 1), (2, 3), (3, 3)]
        picks = {source.choose_empty_cell(candidates) for _ in range(200)}
        self.assertEqual(picks, set(candidates))

    def test_same_seed_same_sequence(self):
        first, second = RandomTileSource(11), RandomTileSource(11)
        self.assertEqual(
            [first.next_tile_value() for _ in range(50)],
            [second.next_tile_value() for _ in range(50)],
        )


class TestFileBestScoreStore(TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "best"

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_loads_zero(self):
        self.assertEqual(FileBestScoreStore(self.path).load_best_score(), 0)

    def test_save_then_load(self):
        FileBestScoreStore(self.path).save_best_score(4096)
        self.assertEqual(self.path.read_text(encoding="utf-8"), "4096")
        self.assertEqual(FileBestScoreStore(self.path).load_best_score(), 4096)

    def test_lower_value_is_not_saved(self):
        FileBestScoreStore(self.path).save_best_score(2048)
        FileBestScoreStore(self.path).save_best_score(16)
        self.assertEqual(self.path.read_text(encoding="utf-8"), "2048")

    def test_malformed_file_loads_zero(self):
        self.path.write_text("not a number", encoding="utf-8")
        with self.assertLogs("best_score", level="WARNING"):
            self.assertEqual(FileBestScoreStore(self.path).load_best_score(), 0)

    def test_unreadable_path_loads_zero(self):
        # A directory cannot be read as a file.
        self.assertEqual(FileBestScoreStore(self.tmp.name).load_best_score(), 0)

    def test_failed_save_is_swallowed(self):
        store = FileBestScoreStore(self.tmp.name)
        with self.assertLogs("best_score", level="WARNING"):
            store.save_best_score(10)

    def test_game_keeps_best_score_when_saving_fails(self):
        state = GameState(best_score_store=FileBestScoreStore(self.tmp.name))
        with self.assertLogs("best_score", level="WARNING"):
            state.add_score(64)
        self.assertEqual(state.get_best_score(), 64)

    def test_game_loads_saved_best_score(self):
        FileBestScoreStore(self.path).save_best_score(300)
        state = GameState(best_score_store=FileBestScoreStore(self.path))
        self.assertEqual(state.get_best_score(), 300)


class TestMemoryBestScoreStore(TestCase):
    def test_round_trip(self):
        store = MemoryBestScoreStore()
        self.assertEqual(store.load_best_score(), 0)
        store.save_best_score(8)
        self.assertEqual(store.load_best_score(), 8)

    def test_lower_value_is_not_saved(self):
        store = MemoryBestScoreStore(64)
        store.save_best_score(8)
        self.assertEqual(store.load_best_score(), 64)


class TestSettings(TestCase):
    def test_defaults(self):
        settings = load_settings({})
        self.assertEqual(settings, Settings())
        self.assertEqual(settings.rate_limit, "100/minute")
        self.assertIsNone(settings.seed)

    def test_environment_overrides(self):
        settings = load_settings({
            "GAME2048_SEED": "42",
            "GAME2048_LOG_LEVEL": "debug",
            "GAME2048_BEST_SCORE_FILE": "/tmp/best",
            "UNRELATED": "x",
        })
        self.assertEqual(settings.seed, 42)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.max_sessions, 1000)
        self.assertEqual(settings.best_score_store().path, Path("/tmp/best"))

    def test_invalid_values(self):
        with self.assertRaises(ValidationError):
            load_settings({"GAME2048_LOG_LEVEL": "chatty"})
        with self.assertRaises(ValidationError):
            load_settings({"GAME2048_SEED": "abc"})
        with self.assertRaises(ValidationError):
            load_settings({"GAME2048_MAX_SESSIONS": "0"})


if __name__ == '__main__':
    main()
