import logging
from dataclasses import dataclass, field
from typing import List


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameResult:
    mode: str
    score: int
    high_score: int
    is_new_high_score: bool
    round_scores: List[int] = field(default_factory=list)

    def to_dict(self):
        return {
            'mode': self.mode,
            'score': self.score,
            'high_score': self.high_score,
            'is_new_high_score': self.is_new_high_score,
            'round_scores': list(self.round_scores),
        }


class EngineObserver:
    """Receives engine notifications. Override what you need."""

    def on_entities_changed(self, engine) -> None:
        pass

    def on_game_ended(self, engine, result: GameResult) -> None:
        pass


class ObserverList:
    def __init__(self):
        self._observers: List[EngineObserver] = []

    def add(self, observer: EngineObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove(self, observer: EngineObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def entities_changed(self, engine) -> None:
        for observer in list(self._observers):
            try:
                observer.on_entities_changed(engine)
            except Exception:
                logger.exception('[observer] on_entities_changed failed')

    def game_ended(self, engine, result: GameResult) -> None:
        for observer in list(self._observers):
            try:
                observer.on_game_ended(engine, result)
            except Exception:
                logger.exception('[observer] on_game_ended failed')
