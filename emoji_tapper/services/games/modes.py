import enum


class GameMode(str, enum.Enum):
    CLASSIC = 'Classic'
    PENGUIN_BALL = 'Penguin Ball'

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        if self is GameMode.CLASSIC:
            return 'Tap emojis to score points and earn time'
        return 'Find the penguin among many emojis in 5 rounds'

    @property
    def storage_key(self) -> str:
        return self.value.replace(' ', '')

    @classmethod
    def from_value(cls, value) -> 'GameMode':
        """Accept 'Penguin Ball', 'PENGUIN_BALL' or 'penguin_ball'."""
        if isinstance(value, cls):
            return value
        text = str(value or '').strip()
        for mode in cls:
            if text in (mode.value, mode.name, mode.name.lower(), mode.storage_key):
                return mode
        raise ValueError(f"Unknown game mode: {value!r}")
