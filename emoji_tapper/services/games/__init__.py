"""Game domain services: mode engines, levels and timers.

This package contains pure domain logic that is driven by socket handlers
(or any other presentation layer), keeping transport concerns separated
from core game mechanics.
"""

from .classic import ClassicGameEngine
from .emoji import EmojiKind, GameEmoji
from .events import EngineObserver, GameResult
from .levels import BasicLevel, FrenzyLevel, GameLevel, SelectiveLevel, get_level
from .modes import GameMode
from .penguin_ball import PenguinBallEngine
from .persistence import HighScoreStore, JsonFileHighScoreStore, MemoryHighScoreStore
from .scheduler import BackgroundScheduler, ManualScheduler, Timer
from .session import GameSession, create_engine
