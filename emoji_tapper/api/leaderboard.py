from flask import Blueprint, jsonify, request, current_app
from werkzeug.exceptions import MethodNotAllowed
from emoji_tapper import db
from emoji_tapper.services import leaderboard as svc
from emoji_tapper.services.leaderboard import ValidationError


leaderboard = Blueprint('leaderboard', __name__)

# Routes accept every method and reject the wrong ones themselves so that
# a 405 still carries the JSON error body and CORS headers.
ANY_METHOD = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def _preflight_or_reject(allowed: str):
    if request.method == 'OPTIONS':
        # flask-cors decorates the preflight; we only pick the status
        return current_app.response_class(status=204)
    if request.method != allowed:
        return _error('Method not allowed', 405)
    return None


def _error(message: str, status: int):
    return jsonify({'success': False, 'error': message}), status


def _internal_error(action: str):
    db.session.rollback()
    current_app.logger.exception(f"[leaderboard-error] {action} failed")
    return _error('Internal server error', 500)


@leaderboard.route('/submitScore', methods=ANY_METHOD)
def submit_score():
    early = _preflight_or_reject('POST')
    if early is not None:
        return early
    try:
        entry = svc.submit_score(request.get_json(silent=True))
    except ValidationError as exc:
        return _error(str(exc), 400)
    except Exception:
        return _internal_error('submitScore')
    return jsonify({
        'success': True,
        'id': entry.id,
        'message': 'High score submitted successfully',
    }), 201


@leaderboard.route('/getTopScores', methods=ANY_METHOD)
def get_top_scores():
    early = _preflight_or_reject('GET')
    if early is not None:
        return early
    try:
        params = svc.require_params(request.args, 'game', 'mode', 'platform')
        period = svc.parse_period(request.args.get('period'))
        limit = svc.parse_limit(request.args.get('limit'))
        scores = svc.get_top_scores(period=period, limit=limit, **params)
    except ValidationError as exc:
        return _error(str(exc), 400)
    except Exception:
        return _internal_error('getTopScores')
    return jsonify({
        'success': True,
        'scores': [s.to_dict() for s in scores],
        'count': len(scores),
        'period': period,
        'game': params['game'],
        'mode': params['mode'],
        'platform': params['platform'],
    })


@leaderboard.route('/getPlayerBest', methods=ANY_METHOD)
def get_player_best():
    early = _preflight_or_reject('GET')
    if early is not None:
        return early
    try:
        params = svc.require_params(request.args, 'game', 'mode', 'platform', 'player')
        best = svc.get_player_best(**params)
    except ValidationError as exc:
        return _error(str(exc), 400)
    except Exception:
        return _internal_error('getPlayerBest')
    if best is None:
        return jsonify({'success': True, 'playerBest': None, 'message': 'No scores found for this player'})
    return jsonify({'success': True, 'playerBest': best.to_dict()})


@leaderboard.route('/getLeaderboardStats', methods=ANY_METHOD)
def get_leaderboard_stats():
    early = _preflight_or_reject('GET')
    if early is not None:
        return early
    try:
        params = svc.require_params(request.args, 'game', 'mode', 'platform')
        stats = svc.get_leaderboard_stats(**params)
    except ValidationError as exc:
        return _error(str(exc), 400)
    except Exception:
        return _internal_error('getLeaderboardStats')
    stats.update(params)
    return jsonify({'success': True, 'stats': stats})


@leaderboard.app_errorhandler(MethodNotAllowed)
def method_not_allowed(exc):
    return _error('Method not allowed', 405)
