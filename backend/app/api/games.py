from flask import Blueprint, jsonify, request, current_app, abort
from app import socketio
from app.services.games.engine import MemoryGame
from app.services.games.leaderboard import NOT_CONFIGURED, build_submission, get_leaderboard
from app.services.games.sessions import create_session, get_session


games = Blueprint('games', __name__)


def _emit_state(game_code: str) -> None:
    socketio.emit('state_update', {'game_code': game_code}, to=f"game:{game_code}", namespace='/ws')


def _build_game(app, game_code: str) -> MemoryGame:
    cfg = app.config
    logger = app.logger
    idle_ttl = float(cfg.get('SESSION_IDLE_TTL_SEC', 0))

    def _on_change(game):
        _emit_state(game_code)
        # ticks keep firing for an abandoned game; drop it once it goes idle
        session = get_session(game_code)
        if session and idle_ttl > 0 and session.idle_for() > idle_ttl:
            logger.info(f"[session-idle] game={game_code} idle={session.idle_for():.0f}s")
            from app.socketio_events import _end_session
            _end_session(game_code)

    def _on_complete(game, result):
        session = get_session(game_code)
        if session:
            with session.lock:
                session.result = result
        logger.info(f"[finish] game={game_code} attempts={result.attempts} time_ms={result.time_ms} score={result.score}")
        socketio.emit(
            'game_complete',
            {'game_code': game_code, **result._asdict()},
            to=f"game:{game_code}",
            namespace='/ws',
        )

    return MemoryGame(
        cfg.get('MEMORY_SYMBOLS', []),
        app.extensions['memory_scheduler'],
        match_delay_ms=int(cfg.get('MATCH_DELAY_MS', 350)),
        mismatch_delay_ms=int(cfg.get('FLIP_DELAY_MS', 700)),
        tick_ms=int(cfg.get('TICK_MS', 1000)),
        score_base=int(cfg.get('SCORE_BASE', 1000)),
        score_penalty=int(cfg.get('SCORE_PENALTY', 25)),
        on_change=_on_change,
        on_complete=_on_complete,
    )


def _session_or_404(game_code):
    session = get_session(game_code)
    if not session:
        abort(404)
    session.touch()
    return session


def flip_tile(session, tile_id) -> None:
    """Shared by the HTTP route and the socket ``flip`` event."""
    before = session.game.state
    session.game.flip(tile_id)
    if session.game.state is before:
        current_app.logger.debug(f"[flip-ignored] game={session.game_code} tile={tile_id}")
    else:
        current_app.logger.info(
            f"[flip] game={session.game_code} tile={tile_id} attempts={session.game.state.attempts}"
        )


@games.route('/create', methods=['POST'])
def create_game():
    app = current_app._get_current_object()
    session = create_session(
        lambda code: _build_game(app, code),
        idle_ttl_sec=float(app.config.get('SESSION_IDLE_TTL_SEC', 0)),
    )
    app.logger.info(f"[create] game={session.game_code} tiles={len(session.game.deck)}")
    return jsonify(session.to_dict()), 201


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    session = _session_or_404(game_code)
    return jsonify(session.to_dict())


@games.route('/<string:game_code>/flip', methods=['POST'])
def flip(game_code):
    session = _session_or_404(game_code)
    data = request.get_json(silent=True) or {}
    tile_id = data.get('tile_id')
    if not tile_id:
        return jsonify({'error': 'tile_id is required'}), 400
    # Invalid flips (locked board, face-up or matched tile) are ignored, not errors
    flip_tile(session, str(tile_id))
    return jsonify(session.to_dict())


@games.route('/<string:game_code>/restart', methods=['POST'])
def restart(game_code):
    session = _session_or_404(game_code)
    with session.lock:
        session.game.restart()
        session.reset_submission()
    current_app.logger.info(f"[restart] game={session.game_code} epoch={session.game.state.epoch}")
    return jsonify(session.to_dict())


@games.route('/<string:game_code>/score', methods=['POST'])
def submit_score(game_code):
    session = _session_or_404(game_code)
    data = request.get_json(silent=True) or {}
    max_len = int(current_app.config.get('PLAYER_NAME_MAX_LEN', 20))

    with session.lock:
        if not session.game.is_complete:
            return jsonify({'error': 'Game is not complete'}), 400
        if session.has_submitted:
            return jsonify({'error': 'Score already submitted'}), 409
        if session.saving:
            return jsonify({'error': 'Score submission in progress'}), 409
        session.saving = True
        session.save_error = ''
        session.player_name = str(data.get('name') or '')
        epoch = session.game.state.epoch
        result = session.result or session.game.result()
        payload = build_submission(session.player_name, result, max_len)

    leaderboard = get_leaderboard(current_app)
    outcome = leaderboard.submit(payload)

    with session.lock:
        # a restart while saving belongs to a new game; leave its status alone
        if session.game.state.epoch == epoch:
            session.saving = False
            if outcome.ok:
                session.has_submitted = True
            else:
                session.save_error = outcome.error

    if not outcome.ok:
        current_app.logger.warning(f"[score-submit] game={session.game_code} error={outcome.error}")
        status = 503 if outcome.error == NOT_CONFIGURED else 502
        return jsonify({'error': outcome.error}), status

    current_app.logger.info(f"[score-submit] game={session.game_code} score={payload['score']}")
    _emit_state(session.game_code)
    top = leaderboard.top(int(current_app.config.get('LEADERBOARD_LIMIT', 10)))
    return jsonify({
        'entry': outcome.entry,
        'leaderboard': top.entries if top.ok else [],
    }), 201
