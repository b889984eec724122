import enum
import uuid
from dataclasses import dataclass, field


class EmojiKind(str, enum.Enum):
    NORMAL = 'normal'
    SKULL = 'skull'                            # ends the game
    HOURGLASS = 'hourglass'                    # adds time
    CHERRY = 'cherry'                          # bonus points
    PLUS = 'plus'                              # grows emojis
    MINUS = 'minus'                            # shrinks emojis
    RESET_SIZE = 'reset_size'
    HIDE = 'hide'                              # fades emojis out
    TIME_PENALTY_SMALL = 'time_penalty_small'
    TIME_PENALTY_LARGE = 'time_penalty_large'
    PENGUIN = 'penguin'                        # Penguin Ball target


SKULL = '💀'
HOURGLASS = '⏳'
CHERRY = '🍒'
PENGUIN = '🐧'

NORMAL_EMOJIS = (
    '😀', '😊', '😂', '🥰', '😎', '🤔', '😮', '😋', '🙂', '😆', '😍', '🤗', '😴', '🤯', '😇',
)

SPECIAL_SYMBOLS = {
    EmojiKind.SKULL: SKULL,
    EmojiKind.HOURGLASS: HOURGLASS,
    EmojiKind.CHERRY: CHERRY,
    EmojiKind.PLUS: '➕',
    EmojiKind.MINUS: '➖',
    EmojiKind.RESET_SIZE: '🔄',
    EmojiKind.HIDE: '🙈',
    EmojiKind.TIME_PENALTY_SMALL: '🐌',
    EmojiKind.TIME_PENALTY_LARGE: '🧨',
    EmojiKind.PENGUIN: PENGUIN,
}

# Penguin Ball distractors. The penguin itself must never appear here.
DISTRACTOR_EMOJIS = NORMAL_EMOJIS + (
    '🐶', '🐱', '🐭', '🐹', '🐰', '🦊', '🐻', '🐼', '🐨', '🐯', '🦁', '🐮', '🐷', '🐸', '🐵',
    '🙈', '🙉', '🙊', '🐒', '🐔', '🐦', '🐤', '🐣', '🐥', '🦆', '🦅', '🦉', '🦇', '🐺', '🐗',
    '🐴', '🦄', '🐝', '🐛', '🦋', '🐌', '🐞', '🐜', '🦟', '🦗', '🦂', '🐢', '🐍', '🦎', '🦖',
    '🦕', '🐙', '🦑', '🦐', '🦞', '🦀', '🐡', '🐠', '🐟', '🐬', '🐳', '🐋', '🦈', '🐊', '🐅',
    '🐆', '🦓', '🦍', '🦧', '🐘', '🦛', '🦏', '🐪', '🐫', '🦒', '🦘', '🐃', '🐂', '🐄', '🐎',
    '🐖', '🐏', '🐑', '🦙', '🐐', '🦌', '🐕', '🐩', '🦮', '🐈', '🐓', '🦃', '🦚', '🦜', '🦢',
    '🦩', '🐇', '🦝', '🦨', '🦡', '🦦', '🦫', '🦔',
)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class GameEmoji:
    """One tappable emoji tracked by an engine.

    Position is the presentation layer's business; the engine only knows
    what the emoji is and how it stacks against its neighbours.
    """
    symbol: str
    kind: EmojiKind
    render_priority: int = 0
    id: str = field(default_factory=_new_id)

    @classmethod
    def special(cls, kind: EmojiKind, render_priority: int = 0) -> 'GameEmoji':
        return cls(symbol=SPECIAL_SYMBOLS[kind], kind=kind, render_priority=render_priority)

    def to_dict(self):
        return {
            'id': self.id,
            'symbol': self.symbol,
            'kind': self.kind.value,
            'render_priority': self.render_priority,
        }


def find_emoji(entities, entity_id):
    for emoji in entities:
        if emoji.id == entity_id:
            return emoji
    return None


def topmost(entities):
    """Return the entity a tap on overlapping emojis resolves to."""
    if not entities:
        return None
    return max(entities, key=lambda e: e.render_priority)
