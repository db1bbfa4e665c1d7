DEFAULT_SCORE_BASE = 1000
DEFAULT_SCORE_PENALTY = 25


def score_for_attempts(attempts: int, base: int = DEFAULT_SCORE_BASE, penalty: int = DEFAULT_SCORE_PENALTY) -> int:
    """Score a finished (or running) game from its attempt count.

    Every attempt costs ``penalty`` points off ``base``; the score never
    drops below zero.
    """
    return max(0, base - attempts * penalty)


def format_time(ms: int) -> str:
    total_seconds = max(0, int(ms)) // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"
