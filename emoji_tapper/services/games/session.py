import logging
from typing import Optional

from .classic import ClassicGameEngine
from .events import EngineObserver, GameResult
from .levels import get_level
from .modes import GameMode
from .penguin_ball import PenguinBallEngine
from .scheduler import ManualScheduler


logger = logging.getLogger(__name__)


def create_engine(mode, store, scheduler=None, **options):
    """Build the engine for ``mode``.

    Options are passed through to the variant: ``level``/``rng`` for
    Classic, ``max_rounds``/``display_area``/``rng``/... for Penguin Ball.
    """
    mode = GameMode.from_value(mode)
    if mode is GameMode.CLASSIC:
        level = options.pop('level', None)
        if isinstance(level, str):
            level = get_level(level)
        return ClassicGameEngine(store, scheduler=scheduler, level=level, **options)
    return PenguinBallEngine(store, scheduler=scheduler, **options)


class GameSession(EngineObserver):
    """Owns the engine for one player; a mode switch discards the old engine."""

    def __init__(self, store, scheduler=None, mode=GameMode.CLASSIC, observer: Optional[EngineObserver] = None,
                 **engine_options):
        self.store = store
        self.scheduler = scheduler or ManualScheduler()
        self.observer = observer
        self.engine_options = dict(engine_options)
        self.last_result: Optional[GameResult] = None
        self.engine = None
        self._install(GameMode.from_value(mode))

    @property
    def mode(self) -> GameMode:
        return self.engine.game_mode

    @property
    def is_active(self) -> bool:
        return self.engine.is_active

    @property
    def is_new_high_score(self) -> bool:
        return bool(self.last_result and self.last_result.is_new_high_score)

    def _install(self, mode: GameMode) -> None:
        options = {k: v for k, v in self.engine_options.items() if self._accepts(mode, k)}
        self.engine = create_engine(mode, self.store, scheduler=self.scheduler, **options)
        self.engine.observers.add(self)

    @staticmethod
    def _accepts(mode: GameMode, option: str) -> bool:
        if option == 'rng':
            return True
        if mode is GameMode.CLASSIC:
            return option == 'level'
        return option in ('max_rounds', 'grace_delay', 'removal_interval', 'removal_batch', 'display_area')

    def select_mode(self, mode) -> bool:
        mode = GameMode.from_value(mode)
        if self.engine.is_active:
            return False
        self.engine.teardown()
        self.engine.observers.remove(self)
        self._install(mode)
        logger.info(f"[mode-select] mode={mode.value}")
        return True

    def start(self) -> None:
        self.last_result = None
        self.engine.start()

    def tap(self, entity_id: str) -> bool:
        return self.engine.tap(entity_id)

    def proceed(self) -> None:
        self.engine.proceed_to_next_round()

    def pause(self) -> None:
        self.engine.pause()

    def resume(self) -> None:
        self.engine.resume()

    def close(self) -> None:
        self.engine.teardown()

    def state(self):
        return self.engine.to_dict()

    # ---- EngineObserver ----

    def on_entities_changed(self, engine) -> None:
        if self.observer is not None:
            self.observer.on_entities_changed(engine)

    def on_game_ended(self, engine, result: GameResult) -> None:
        self.last_result = result
        if self.observer is not None:
            self.observer.on_game_ended(engine, result)
