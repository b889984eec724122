import json
import logging
import os
import tempfile
import threading
from typing import Dict


logger = logging.getLogger(__name__)

# Guards the read-modify-write of every high score file in this process
HIGH_SCORE_FILE_LOCK = threading.Lock()


def high_score_key(mode) -> str:
    return f"EmojiTapper{mode.storage_key}HighScore"


class HighScoreStore:
    """Port for the one integer high score kept per game mode."""

    def load_high_score(self, mode) -> int:
        raise NotImplementedError

    def save_high_score(self, mode, value: int) -> None:
        raise NotImplementedError


class MemoryHighScoreStore(HighScoreStore):
    def __init__(self, initial: Dict[str, int] = None):
        self.values: Dict[str, int] = dict(initial or {})

    def load_high_score(self, mode) -> int:
        return int(self.values.get(high_score_key(mode), 0))

    def save_high_score(self, mode, value: int) -> None:
        self.values[high_score_key(mode)] = int(value)


class JsonFileHighScoreStore(HighScoreStore):
    """High scores kept as a flat JSON object of key -> int on disk."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, int]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning(f"[highscore-read] unreadable file {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def load_high_score(self, mode) -> int:
        try:
            return int(self._read().get(high_score_key(mode), 0))
        except (TypeError, ValueError):
            return 0

    def save_high_score(self, mode, value: int) -> None:
        with HIGH_SCORE_FILE_LOCK:
            data = self._read()
            data[high_score_key(mode)] = int(value)
            self._write(data)

    def _write(self, data: Dict[str, int]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
