from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app import db
from app.models import LeaderboardEntry
from app.services.games.engine import GameResult
from app.services.games.leaderboard import (
    LOAD_FAILED,
    NOT_CONFIGURED,
    SAVE_FAILED,
    DisabledLeaderboard,
    SqlLeaderboard,
    build_submission,
    get_leaderboard,
    normalize_player_name,
)


def test_normalize_player_name():
    assert normalize_player_name('  Bob  ') == 'Bob'
    assert normalize_player_name('') == 'Anonymous'
    assert normalize_player_name('   ') == 'Anonymous'
    assert normalize_player_name(None) == 'Anonymous'
    assert normalize_player_name('x' * 30) == 'x' * 20
    assert normalize_player_name('abcdef', max_len=3) == 'abc'


def test_build_submission():
    payload = build_submission(' Ann ', GameResult(attempts=9, time_ms=42000, score=775))
    assert payload == {'player_name': 'Ann', 'attempts': 9, 'time_ms': 42000, 'score': 775}


def test_submit_and_fetch(flask_app):
    board = SqlLeaderboard(db.session)
    outcome = board.submit({'player_name': 'Ann', 'attempts': 8, 'time_ms': 30000, 'score': 800})
    assert outcome.ok
    assert outcome.entry['player_name'] == 'Ann'
    assert outcome.entry['id'] is not None

    top = board.top(10)
    assert top.ok
    assert [e['player_name'] for e in top.entries] == ['Ann']


def test_top_orders_by_score_then_earliest(flask_app):
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    rows = [
        ('late-tie', 900, base + timedelta(minutes=5)),
        ('low', 500, base),
        ('early-tie', 900, base + timedelta(minutes=1)),
        ('best', 975, base + timedelta(minutes=9)),
    ]
    for name, score, created in rows:
        db.session.add(LeaderboardEntry(player_name=name, attempts=1, time_ms=1000, score=score, created_at=created))
    db.session.commit()

    top = SqlLeaderboard(db.session).top(3)
    assert [e['player_name'] for e in top.entries] == ['best', 'early-tie', 'late-tie']


def test_submit_failure_is_reported(flask_app):
    board = SqlLeaderboard(db.session)
    with patch.object(db.session, 'commit', side_effect=OperationalError('INSERT', {}, Exception('down'))):
        outcome = board.submit({'player_name': 'Ann', 'attempts': 8, 'time_ms': 30000, 'score': 800})
    assert not outcome.ok
    assert outcome.error == SAVE_FAILED


def test_fetch_failure_is_reported(flask_app):
    db.drop_all()
    outcome = SqlLeaderboard(db.session).top(10)
    assert not outcome.ok
    assert outcome.error == LOAD_FAILED


def test_db_reset_command(flask_app):
    db.session.add(LeaderboardEntry(player_name='x', attempts=1, time_ms=1000, score=975))
    db.session.commit()

    result = flask_app.test_cli_runner().invoke(args=['db-reset'])
    assert result.exit_code == 0
    assert 'Leaderboard has been reset!' in result.output
    db.session.remove()
    assert LeaderboardEntry.query.count() == 0


def test_disabled_leaderboard(flask_app):
    flask_app.config['LEADERBOARD_ENABLED'] = False
    board = get_leaderboard(flask_app)
    assert isinstance(board, DisabledLeaderboard)
    assert board.submit({}).error == NOT_CONFIGURED
    assert board.top(5).error == NOT_CONFIGURED
