import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///emoji_tapper.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma-separated list; '*' keeps the leaderboard open to any client
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Local high score file for live game sessions. Empty keeps scores in memory.
    HIGH_SCORE_FILE = os.environ.get('HIGH_SCORE_FILE', '')
    # Game mode tuning
    CLASSIC_LEVEL = os.environ.get('CLASSIC_LEVEL', 'Basic')
    PENGUIN_MAX_ROUNDS = int(os.environ.get('PENGUIN_MAX_ROUNDS', '5'))
    # Leaderboard client (used when a finished game submits its score)
    LEADERBOARD_BASE_URL = os.environ.get('LEADERBOARD_BASE_URL', 'http://localhost:5000')
    LEADERBOARD_REQUEST_TIMEOUT_SEC = float(os.environ.get('LEADERBOARD_REQUEST_TIMEOUT_SEC', '30'))
    LEADERBOARD_RESOURCE_TIMEOUT_SEC = float(os.environ.get('LEADERBOARD_RESOURCE_TIMEOUT_SEC', '60'))
    # Submit finished live games for players who gave a name on start
    LEADERBOARD_SUBMIT_ON_END = os.environ.get('LEADERBOARD_SUBMIT_ON_END', '0') == '1'
    LEADERBOARD_GAME_NAME = os.environ.get('LEADERBOARD_GAME_NAME', 'Emoji Tapper')
    LEADERBOARD_PLATFORM = os.environ.get('LEADERBOARD_PLATFORM', 'Python')
