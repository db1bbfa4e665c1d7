import os

DEFAULT_SYMBOLS = "🍒,🍋,🍇,🍉,🥝,🍑,🍓,🍍"


def _symbols_from_env(raw):
    return [s.strip() for s in (raw or '').split(',') if s.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///memory_match.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Board: each symbol appears exactly twice
    MEMORY_SYMBOLS = _symbols_from_env(os.environ.get('MEMORY_SYMBOLS', DEFAULT_SYMBOLS))
    # Resolution delays (ms): mismatched pairs stay visible longer than matches
    FLIP_DELAY_MS = int(os.environ.get('FLIP_DELAY_MS', '700'))
    MATCH_DELAY_MS = int(os.environ.get('MATCH_DELAY_MS', '350'))
    # Game clock granularity (ms)
    TICK_MS = int(os.environ.get('TICK_MS', '1000'))
    SCORE_BASE = int(os.environ.get('SCORE_BASE', '1000'))
    SCORE_PENALTY = int(os.environ.get('SCORE_PENALTY', '25'))
    # Leaderboard
    LEADERBOARD_ENABLED = os.environ.get('LEADERBOARD_ENABLED', '1').lower() not in ('0', 'false', 'no', 'off')
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '10'))
    PLAYER_NAME_MAX_LEN = int(os.environ.get('PLAYER_NAME_MAX_LEN', '20'))
    # Grace period before a game is dropped after its owner disconnects (sec)
    OWNER_GRACE_SEC = float(os.environ.get('OWNER_GRACE_SEC', '2'))
    # Games with no player activity for this long are dropped (sec). 0 disables.
    SESSION_IDLE_TTL_SEC = float(os.environ.get('SESSION_IDLE_TTL_SEC', '1800'))
