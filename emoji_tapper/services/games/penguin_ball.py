"""Penguin Ball: find the penguin hidden among a crowd of emojis.

Each round fills the board with one penguin and a crowd of distractors.
After a short grace period distractors start vanishing in small batches.
The sooner the penguin is found the more of the crowd is still standing,
and the round pays ``max(1, ceil(100 * remaining / total))``.

Round flow::

    idle -> round n -> (round complete -> round n+1)* -> ended

The engine stops in "round complete" after each find so the caller can
play a celebration before calling :meth:`proceed_to_next_round`.
"""

import logging
import math
import random
from typing import List, Optional, Tuple

from .emoji import DISTRACTOR_EMOJIS, EmojiKind, GameEmoji, find_emoji
from .events import GameResult, ObserverList
from .modes import GameMode
from .scheduler import ManualScheduler, cancel_timer


logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 5
MIN_ENTITIES = 80
MAX_ENTITIES = 500
AREA_PER_ENTITY = 2500.0   # roughly one 50x50 point emoji
GRACE_DELAY = 1.0
REMOVAL_INTERVAL = 0.2
REMOVAL_BATCH = (3, 5)

PHASE_GRACE = 'grace'
PHASE_REMOVING = 'removing'


def entity_count_for_area(display_area: Optional[float]) -> int:
    if not display_area or math.isnan(display_area) or display_area <= 0:
        return MIN_ENTITIES
    if math.isinf(display_area):
        return MAX_ENTITIES
    return max(MIN_ENTITIES, min(MAX_ENTITIES, int(display_area // AREA_PER_ENTITY)))


def round_score(remaining: int, total: int) -> int:
    if total <= 0:
        return 1
    return max(1, math.ceil(100 * remaining / total))


class PenguinBallEngine:
    game_mode = GameMode.PENGUIN_BALL

    def __init__(
        self,
        store,
        scheduler=None,
        rng=None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        grace_delay: float = GRACE_DELAY,
        removal_interval: float = REMOVAL_INTERVAL,
        removal_batch: Tuple[int, int] = REMOVAL_BATCH,
        display_area: Optional[float] = None,
    ):
        if max_rounds < 1:
            raise ValueError('max_rounds must be at least 1')
        low, high = removal_batch
        if low < 1 or high < low:
            raise ValueError('removal_batch must be (low, high) with 1 <= low <= high')
        self.store = store
        self.scheduler = scheduler or ManualScheduler()
        self.rng = rng or random.Random()
        self.max_rounds = max_rounds
        self.grace_delay = grace_delay
        self.removal_interval = removal_interval
        self.removal_batch = (low, high)
        self.display_area = display_area
        self.observers = ObserverList()

        self.score = 0
        self.is_active = False
        self.entities: Tuple[GameEmoji, ...] = ()
        self.current_round = 0
        self.round_scores: List[int] = []
        self.total_entities = 0
        self.entities_remaining = 0
        self.is_round_complete = False
        self.is_paused = False
        self.high_score = int(store.load_high_score(self.game_mode))
        self.last_result: Optional[GameResult] = None

        self._target_id: Optional[str] = None
        self._grace_timer = None
        self._removal_timer = None
        self._phase: Optional[str] = None
        self._end_notified = True

    @property
    def possible_points(self) -> int:
        return round_score(self.entities_remaining, self.total_entities)

    @property
    def status_text(self) -> str:
        if not self.is_active:
            return ''
        return f"Round {self.current_round}/{self.max_rounds} • Points: {self.possible_points}"

    @property
    def target_id(self) -> Optional[str]:
        return self._target_id

    def set_display_area(self, area: Optional[float]) -> None:
        """Board density for the next round; the current round is untouched."""
        self.display_area = area

    # ---- lifecycle ----

    def start(self) -> None:
        self._cancel_timers()
        self.score = 0
        self.current_round = 0
        self.round_scores = []
        self.is_active = True
        self.is_paused = False
        self.last_result = None
        self._end_notified = False
        logger.info(f"[game-start] mode={self.game_mode.value} rounds={self.max_rounds}")
        self.start_next_round()

    def start_next_round(self) -> None:
        board, target_id = self._build_board()
        self._cancel_timers()
        self.current_round += 1
        self.is_round_complete = False
        self.is_paused = False
        self._install_board(board, target_id)
        self._phase = PHASE_GRACE
        self._grace_timer = self.scheduler.call_later(self.grace_delay, self._begin_removal)
        logger.debug(f"[round-start] round={self.current_round} entities={self.total_entities}")

    def proceed_to_next_round(self) -> None:
        if not self.is_active or not self.is_round_complete:
            return
        if self.current_round >= self.max_rounds:
            return
        self.start_next_round()

    def tap(self, entity_id: str) -> bool:
        """Apply a tap. Only the penguin changes engine state."""
        if not self.is_active or self.is_round_complete:
            return False
        emoji = find_emoji(self.entities, entity_id)
        if emoji is None:
            logger.debug(f"[tap-miss] id={entity_id} not on board")
            return False
        if emoji.id != self._target_id:
            # Wrong emoji: no penalty
            return True

        earned = self.possible_points
        self.score += earned
        self.round_scores.append(earned)
        self._cancel_timers()
        self._phase = None
        logger.info(f"[round-found] round={self.current_round} points={earned} remaining={self.entities_remaining}/{self.total_entities}")
        if self.current_round >= self.max_rounds:
            self.end()
        else:
            self.is_round_complete = True
        return True

    def end(self) -> None:
        if self._end_notified:
            return
        self._end_notified = True
        self.is_active = False
        self.is_paused = False
        self._cancel_timers()
        self._phase = None

        is_new = self.score > self.high_score
        if is_new:
            self.high_score = self.score
            self.store.save_high_score(self.game_mode, self.high_score)
        self.last_result = GameResult(
            mode=self.game_mode.value,
            score=self.score,
            high_score=self.high_score,
            is_new_high_score=is_new,
            round_scores=list(self.round_scores),
        )
        logger.info(f"[game-end] mode={self.game_mode.value} score={self.score} rounds={self.round_scores}")
        self.observers.game_ended(self, self.last_result)

    def teardown(self) -> None:
        if self.is_active:
            self.end()
        self._cancel_timers()

    def reset_high_score(self) -> None:
        self.high_score = 0
        self.store.save_high_score(self.game_mode, 0)

    # ---- disappearance schedule ----

    def pause(self) -> None:
        if not self.is_active or self.is_round_complete or self.is_paused:
            return
        self.is_paused = True
        self._cancel_timers()

    def resume(self) -> None:
        if not self.is_active or self.is_round_complete or not self.is_paused:
            return
        self.is_paused = False
        if self._phase == PHASE_GRACE:
            self._grace_timer = self.scheduler.call_later(self.grace_delay, self._begin_removal)
        elif self._phase == PHASE_REMOVING:
            self._removal_timer = self.scheduler.call_every(self.removal_interval, self._remove_batch)

    def _begin_removal(self) -> None:
        self._grace_timer = None
        if not self.is_active:
            return
        self._phase = PHASE_REMOVING
        self._removal_timer = self.scheduler.call_every(self.removal_interval, self._remove_batch)

    def _remove_batch(self) -> None:
        if not self.is_active:
            self._cancel_timers()
            return
        distractors = [e for e in self.entities if e.id != self._target_id]
        if not distractors:
            self._finish_removal()
            return
        count = min(self.rng.randint(*self.removal_batch), len(distractors))
        doomed = {e.id for e in self.rng.sample(distractors, count)}
        self.entities = tuple(e for e in self.entities if e.id not in doomed)
        self.entities_remaining -= len(doomed)
        self.observers.entities_changed(self)
        if len(distractors) == count:
            self._finish_removal()

    def _finish_removal(self) -> None:
        cancel_timer(self._removal_timer)
        self._removal_timer = None
        self._phase = None

    def _cancel_timers(self) -> None:
        cancel_timer(self._grace_timer)
        cancel_timer(self._removal_timer)
        self._grace_timer = None
        self._removal_timer = None

    # ---- board ----

    def _build_board(self) -> Tuple[Tuple[GameEmoji, ...], str]:
        count = entity_count_for_area(self.display_area)
        penguin = GameEmoji.special(EmojiKind.PENGUIN, render_priority=count + 10)
        board = [penguin]
        for priority in range(1, count):
            board.append(GameEmoji(symbol=self.rng.choice(DISTRACTOR_EMOJIS), kind=EmojiKind.NORMAL, render_priority=priority))
        self.rng.shuffle(board)
        return tuple(board), penguin.id

    def _install_board(self, board, target_id: str) -> None:
        self._target_id = target_id
        self.entities = board
        self.total_entities = len(board)
        self.entities_remaining = len(board)
        self.observers.entities_changed(self)

    def to_dict(self):
        return {
            'mode': self.game_mode.value,
            'score': self.score,
            'high_score': self.high_score,
            'is_active': self.is_active,
            'status_text': self.status_text,
            'current_round': self.current_round,
            'max_rounds': self.max_rounds,
            'round_scores': list(self.round_scores),
            'total_entities': self.total_entities,
            'entities_remaining': self.entities_remaining,
            'possible_points': self.possible_points,
            'is_round_complete': self.is_round_complete,
            'is_paused': self.is_paused,
            'entities': [e.to_dict() for e in self.entities],
        }
