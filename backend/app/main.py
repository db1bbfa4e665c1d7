from flask import Blueprint, jsonify, request, current_app
from app.services.games.leaderboard import NOT_CONFIGURED, get_leaderboard

main = Blueprint('main', __name__)

MAX_LEADERBOARD_LIMIT = 100


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Memory Match game server!'})


@main.route('/api/leaderboard', methods=['GET'])
def get_top_scores():
    default_limit = int(current_app.config.get('LEADERBOARD_LIMIT', 10))
    raw_limit = request.args.get('limit')
    try:
        limit = int(raw_limit) if raw_limit is not None else default_limit
    except ValueError:
        limit = 0
    if limit <= 0:
        return jsonify({'error': 'limit must be a positive integer'}), 400
    limit = min(limit, MAX_LEADERBOARD_LIMIT)

    outcome = get_leaderboard(current_app).top(limit)
    if not outcome.ok:
        current_app.logger.warning(f"[leaderboard-fetch] error={outcome.error}")
        status = 503 if outcome.error == NOT_CONFIGURED else 502
        return jsonify({'error': outcome.error}), status
    return jsonify({'entries': outcome.entries})
