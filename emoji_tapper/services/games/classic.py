"""Classic mode: tap emojis against the clock.

The board grows by one emoji every two seconds of play (capped at 50).
Normal emojis score and stretch the clock by a fraction of what is left;
skulls end the game on the spot.
"""

import logging
import random
from typing import Optional, Tuple

from .emoji import EmojiKind, GameEmoji, find_emoji
from .events import GameResult, ObserverList
from .levels import BasicLevel, GameLevel, SPAWN_CAPS
from .modes import GameMode
from .scheduler import ManualScheduler, cancel_timer


logger = logging.getLogger(__name__)

TICK_INTERVAL = 0.1
MAX_EMOJIS = 50
SECONDS_PER_EXTRA_EMOJI = 2.0
MIN_SIZE_MULTIPLIER = 0.1
MAX_SIZE_MULTIPLIER = 3.0
SIZE_STEP = 0.25
HIDDEN_OPACITY = 0.2


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ClassicGameEngine:
    game_mode = GameMode.CLASSIC

    def __init__(self, store, scheduler=None, level: Optional[GameLevel] = None, rng=None):
        self.store = store
        self.scheduler = scheduler or ManualScheduler()
        self.level = level or BasicLevel()
        self.rng = rng or random.Random()
        self.observers = ObserverList()

        self.score = 0
        self.time_remaining = self.level.initial_time
        self.is_active = False
        self.entities: Tuple[GameEmoji, ...] = ()
        self.size_multiplier = 1.0
        self.opacity = 1.0
        self.high_score = int(store.load_high_score(self.game_mode))
        self.last_result: Optional[GameResult] = None

        self._tick_timer = None
        self._end_notified = True

    # ---- read-only views ----

    @property
    def status_text(self) -> str:
        return f"{max(0.0, self.time_remaining):.1f}"

    @property
    def total_time(self) -> float:
        return self.level.initial_time

    @property
    def elapsed(self) -> float:
        return max(0.0, self.level.initial_time - self.time_remaining)

    @property
    def target_entity_count(self) -> int:
        return min(MAX_EMOJIS, 1 + int(self.elapsed / SECONDS_PER_EXTRA_EMOJI))

    # ---- lifecycle ----

    def set_level(self, level: GameLevel) -> bool:
        if self.is_active:
            return False
        self.level = level
        self.time_remaining = level.initial_time
        return True

    def start(self) -> None:
        cancel_timer(self._tick_timer)
        self.score = 0
        self.time_remaining = self.level.initial_time
        self.size_multiplier = 1.0
        self.opacity = 1.0
        self.is_active = True
        self.last_result = None
        self._end_notified = False
        logger.info(f"[game-start] mode={self.game_mode.value} level={self.level.name} time={self.time_remaining}")
        self._regenerate()
        self._tick_timer = self.scheduler.call_every(TICK_INTERVAL, self._on_tick)

    def _on_tick(self) -> None:
        self.tick(TICK_INTERVAL)

    def tick(self, delta_seconds: float) -> None:
        if not self.is_active:
            return
        self.time_remaining -= delta_seconds
        if self.time_remaining <= 0:
            self.time_remaining = 0.0
            self.end()

    def tap(self, entity_id: str) -> bool:
        """Apply a tap. Returns False when the tap was ignored."""
        if not self.is_active:
            return False
        emoji = find_emoji(self.entities, entity_id)
        if emoji is None:
            logger.debug(f"[tap-miss] id={entity_id} not on board")
            return False

        kind = emoji.kind
        if kind == EmojiKind.NORMAL:
            points = self.level.points_for(emoji.symbol)
            self.score += points
            if points > 0:
                # Compounds with every tap; intentionally uncapped
                self.time_remaining += self.time_remaining * self.level.time_bonus
        elif kind == EmojiKind.SKULL:
            self.end()
            return True
        elif kind == EmojiKind.HOURGLASS:
            self.time_remaining += self.level.hourglass_bonus
        elif kind == EmojiKind.CHERRY:
            self.score += self.level.cherry_bonus
        elif kind == EmojiKind.PLUS:
            self.size_multiplier = _clamp(self.size_multiplier + SIZE_STEP, MIN_SIZE_MULTIPLIER, MAX_SIZE_MULTIPLIER)
        elif kind == EmojiKind.MINUS:
            self.size_multiplier = _clamp(self.size_multiplier - SIZE_STEP, MIN_SIZE_MULTIPLIER, MAX_SIZE_MULTIPLIER)
        elif kind == EmojiKind.RESET_SIZE:
            self.size_multiplier = 1.0
            self.opacity = 1.0
        elif kind == EmojiKind.HIDE:
            self.opacity = HIDDEN_OPACITY
        elif kind in (EmojiKind.TIME_PENALTY_SMALL, EmojiKind.TIME_PENALTY_LARGE):
            if kind == EmojiKind.TIME_PENALTY_SMALL:
                self.time_remaining -= self.level.small_penalty
            else:
                self.time_remaining /= 2.0
            if self.time_remaining <= 0:
                self.time_remaining = 0.0
                self.end()
                return True

        self._regenerate()
        return True

    def end(self) -> None:
        if self._end_notified:
            return
        self._end_notified = True
        self.is_active = False
        cancel_timer(self._tick_timer)
        self._tick_timer = None

        is_new = self.score > self.high_score
        if is_new:
            self.high_score = self.score
            self.store.save_high_score(self.game_mode, self.high_score)
        self.last_result = GameResult(
            mode=self.game_mode.value,
            score=self.score,
            high_score=self.high_score,
            is_new_high_score=is_new,
        )
        logger.info(f"[game-end] mode={self.game_mode.value} score={self.score} high={self.high_score}")
        self.observers.game_ended(self, self.last_result)

    def teardown(self) -> None:
        """End any game in progress and drop every outstanding timer."""
        if self.is_active:
            self.end()
        cancel_timer(self._tick_timer)
        self._tick_timer = None

    def reset_high_score(self) -> None:
        self.high_score = 0
        self.store.save_high_score(self.game_mode, 0)

    # Round and pause hooks exist so callers can treat every mode alike
    def proceed_to_next_round(self) -> None:
        pass

    def pause(self) -> None:
        pass

    def resume(self) -> None:
        pass

    # ---- board ----

    def _regenerate(self) -> None:
        target = self.target_entity_count
        normals = self.level.normal_emojis
        board = [GameEmoji(symbol=self.rng.choice(normals), kind=EmojiKind.NORMAL, render_priority=0)]
        counts = {}
        for priority in range(1, target):
            kind = self.level.draw_kind(self.rng.random())
            cap = SPAWN_CAPS.get(kind)
            if cap is not None and counts.get(kind, 0) >= cap:
                kind = EmojiKind.NORMAL
            if kind == EmojiKind.NORMAL:
                board.append(GameEmoji(symbol=self.rng.choice(normals), kind=kind, render_priority=priority))
            else:
                counts[kind] = counts.get(kind, 0) + 1
                board.append(GameEmoji.special(kind, render_priority=priority))
        self.entities = tuple(board)
        self.observers.entities_changed(self)

    def to_dict(self):
        return {
            'mode': self.game_mode.value,
            'level': self.level.name,
            'score': self.score,
            'high_score': self.high_score,
            'is_active': self.is_active,
            'status_text': self.status_text,
            'time_remaining': round(self.time_remaining, 3),
            'total_time': self.total_time,
            'size_multiplier': self.size_multiplier,
            'opacity': self.opacity,
            'entities': [e.to_dict() for e in self.entities],
        }
