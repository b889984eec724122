"""Classic mode levels.

A level decides how long a game lasts, how taps are rewarded and which
emoji kinds fill the board. Spawn tables are cumulative: each row is
``(upper_threshold, kind)`` over a uniform draw in [0, 1); the first row
whose threshold exceeds the draw wins and anything past the last row is
a normal emoji.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .emoji import EmojiKind, NORMAL_EMOJIS


# Kinds that may appear at most N times on the board; overflow becomes normal.
SPAWN_CAPS: Dict[EmojiKind, int] = {
    EmojiKind.HOURGLASS: 1,
    EmojiKind.CHERRY: 3,
    EmojiKind.PLUS: 1,
    EmojiKind.MINUS: 1,
    EmojiKind.RESET_SIZE: 1,
    EmojiKind.HIDE: 1,
    EmojiKind.TIME_PENALTY_SMALL: 1,
    EmojiKind.TIME_PENALTY_LARGE: 1,
}

BASIC_SPAWN_TABLE: Tuple[Tuple[float, EmojiKind], ...] = (
    (0.4, EmojiKind.SKULL),
    (0.5, EmojiKind.HOURGLASS),
    (0.6, EmojiKind.CHERRY),
)

FRENZY_SPAWN_TABLE: Tuple[Tuple[float, EmojiKind], ...] = (
    (0.20, EmojiKind.SKULL),
    (0.30, EmojiKind.HOURGLASS),
    (0.40, EmojiKind.CHERRY),
    (0.45, EmojiKind.PLUS),
    (0.50, EmojiKind.MINUS),
    (0.53, EmojiKind.RESET_SIZE),
    (0.56, EmojiKind.HIDE),
    (0.61, EmojiKind.TIME_PENALTY_SMALL),
    (0.63, EmojiKind.TIME_PENALTY_LARGE),
)


@dataclass(frozen=True)
class GameLevel:
    name: str
    initial_time: float
    time_bonus: float            # fraction of the remaining time granted per scoring tap
    hourglass_bonus: float = 5.0
    cherry_bonus: int = 2
    small_penalty: float = 2.0
    spawn_table: Tuple[Tuple[float, EmojiKind], ...] = BASIC_SPAWN_TABLE
    normal_emojis: Tuple[str, ...] = field(default=NORMAL_EMOJIS)

    def points_for(self, symbol: str) -> int:
        return 1

    def draw_kind(self, value: float) -> EmojiKind:
        for threshold, kind in self.spawn_table:
            if value < threshold:
                return kind
        return EmojiKind.NORMAL


@dataclass(frozen=True)
class BasicLevel(GameLevel):
    name: str = 'Basic'
    initial_time: float = 10.0
    time_bonus: float = 0.1


@dataclass(frozen=True)
class SelectiveLevel(GameLevel):
    """Only the target emoji scores; everything else is a decoy."""
    name: str = 'Selective'
    initial_time: float = 15.0
    time_bonus: float = 0.15
    target_emoji: str = '⭐'
    normal_emojis: Tuple[str, ...] = NORMAL_EMOJIS + ('⭐',)

    def points_for(self, symbol: str) -> int:
        return 2 if symbol == self.target_emoji else 0


@dataclass(frozen=True)
class FrenzyLevel(GameLevel):
    name: str = 'Frenzy'
    initial_time: float = 20.0
    time_bonus: float = 0.05
    hourglass_bonus: float = 3.0
    cherry_bonus: int = 3
    spawn_table: Tuple[Tuple[float, EmojiKind], ...] = FRENZY_SPAWN_TABLE


LEVELS = {
    'basic': BasicLevel,
    'selective': SelectiveLevel,
    'frenzy': FrenzyLevel,
}


def get_level(name: str) -> GameLevel:
    """Build a level by (case-insensitive) name. Unknown names raise KeyError."""
    return LEVELS[(name or '').strip().lower()]()
