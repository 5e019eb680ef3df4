# best_score.py
# Best-effort persistence of the single best-score value.

import logging
import threading
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger(__name__)

class BestScoreStore(Protocol):
    def load_best_score(self) -> int:
        ...

    def save_best_score(self, value: int) -> None:
        ...

class MemoryBestScoreStore:
    """Keeps the best score in process. Used by tests and by default."""

    def __init__(self, initial: int = 0):
        self.value = initial
        self._lock = threading.Lock()

    def load_best_score(self) -> int:
        return self.value

    def save_best_score(self, value: int) -> None:
        with self._lock:
            self.value = max(self.value, value)

class FileBestScoreStore:
    """
    Stores the best score as a plain integer in a text file.

    Reads fall back to 0 when the file is missing or unreadable, and failed
    writes are logged and dropped: the in-memory best score of the running
    game stays correct either way.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def load_best_score(self) -> int:
        try:
            text = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.warning("Could not read best score from %s: %s", self.path, e)
            return 0

        try:
            value = int(text)
        except ValueError:
            logger.warning("Ignoring malformed best score %r in %s", text, self.path)
            return 0
        return max(value, 0)

    def save_best_score(self, value: int) -> None:
        """Writes value unless the file already holds a score at least as high."""
        with self._lock:
            if value <= self.load_best_score():
                return
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(str(value), encoding="utf-8")
            except OSError as e:
                logger.warning("Could not save best score to %s: %s", self.path, e)
