"""Live game sessions over Socket.IO.

Each connected socket owns one :class:`GameSession`. Client messages map
onto engine operations; engine notifications are pushed back to that
socket only. Ticks and taps for a session are serialised by its lock.
"""

from flask_socketio import emit
from emoji_tapper import socketio
from flask import current_app, request
from emoji_tapper.services.games import (
    BackgroundScheduler,
    EngineObserver,
    GameSession,
    JsonFileHighScoreStore,
    ManualScheduler,
    MemoryHighScoreStore,
    get_level,
)
from typing import Dict, Any
import math
import threading


_sessions: Dict[str, Dict[str, Any]] = {}
_memory_store = MemoryHighScoreStore()


class _SocketObserver(EngineObserver):
    def __init__(self, sid: str, namespace: str, app):
        self.sid = sid
        self.namespace = namespace
        self.app = app
        self.player = None
        self.platform = None

    def on_entities_changed(self, engine) -> None:
        socketio.emit('entities_changed', engine.to_dict(), to=self.sid, namespace=self.namespace)

    def on_game_ended(self, engine, result) -> None:
        socketio.emit('game_ended', result.to_dict(), to=self.sid, namespace=self.namespace)
        if self.player and self.app.config.get('LEADERBOARD_SUBMIT_ON_END'):
            socketio.start_background_task(_submit_result, self.app, result, self.player, self.platform)


def _submit_result(app, result, player, platform) -> None:
    from emoji_tapper.client import LeaderboardClient
    client = LeaderboardClient.from_config(app.config, platform=platform)
    # Gameplay is already over; a failed submission is only logged
    client.submit_result(result, player)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _high_score_store():
    path = current_app.config.get('HIGH_SCORE_FILE')
    if path:
        return JsonFileHighScoreStore(path)
    return _memory_store


def _session_options() -> Dict[str, Any]:
    cfg = current_app.config
    return {
        'level': get_level(cfg.get('CLASSIC_LEVEL', 'Basic')),
        'max_rounds': int(cfg.get('PENGUIN_MAX_ROUNDS', 5)),
    }


def _current():
    return _sessions.get(_get_sid())


def _emit_state(ctx) -> None:
    emit('state_update', ctx['session'].state())


def handle_connect(auth=None):
    sid = _get_sid()
    lock = threading.Lock()
    if current_app.config.get('TESTING'):
        # Tests drive the clock by hand through the session's scheduler
        scheduler = ManualScheduler()
    else:
        scheduler = BackgroundScheduler(socketio, lock=lock)
    observer = _SocketObserver(sid, request.namespace, current_app._get_current_object())
    session = GameSession(_high_score_store(), scheduler=scheduler, observer=observer, **_session_options())
    _sessions[sid] = {'session': session, 'lock': lock, 'scheduler': scheduler, 'observer': observer}
    current_app.logger.info(f"[session-open] sid={sid}")
    emit('connected', {'message': 'Connected to /ws', 'state': session.state()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    ctx = _sessions.pop(sid, None)
    if not ctx:
        return
    with ctx['lock']:
        ctx['session'].close()
    current_app.logger.info(f"[session-close] sid={sid}")


def _with_session(action):
    """Run ``action(ctx, data)`` for the caller's session under its lock."""
    def handler(data=None):
        ctx = _current()
        if not ctx:
            emit('error', {'message': 'No active session'})
            return
        with ctx['lock']:
            error = action(ctx, data or {})
            if error:
                emit('error', {'message': error})
                return
            _emit_state(ctx)
    handler.__name__ = f"handle_{action.__name__.lstrip('_')}"
    return handler


def _select_mode(ctx, data):
    try:
        changed = ctx['session'].select_mode(data.get('mode'))
    except ValueError as exc:
        return str(exc)
    if not changed:
        return 'Cannot switch mode while a game is in progress'
    return None


def _set_level(ctx, data):
    engine = ctx['session'].engine
    if not hasattr(engine, 'set_level'):
        return 'Levels only apply to Classic mode'
    try:
        level = get_level(data.get('level'))
    except KeyError:
        return f"Unknown level: {data.get('level')!r}"
    if not engine.set_level(level):
        return 'Cannot change level while a game is in progress'
    return None


def _set_display_area(ctx, data):
    engine = ctx['session'].engine
    if not hasattr(engine, 'set_display_area'):
        return 'Display area only applies to Penguin Ball'
    try:
        area = float(data.get('area'))
    except (TypeError, ValueError):
        return 'area must be a number'
    if not math.isfinite(area):
        return 'area must be a finite number'
    engine.set_display_area(area)
    return None


def _start_game(ctx, data):
    ctx['observer'].player = (data.get('player') or '').strip() or None
    ctx['observer'].platform = (data.get('platform') or '').strip() or None
    ctx['session'].start()
    return None


def _tap(ctx, data):
    entity_id = data.get('entity_id')
    if not entity_id:
        return 'entity_id is required'
    # Unknown ids are fine: the board may have changed under the tap
    ctx['session'].tap(entity_id)
    return None


def _proceed(ctx, data):
    ctx['session'].proceed()


def _pause(ctx, data):
    ctx['session'].pause()


def _resume(ctx, data):
    ctx['session'].resume()


def _get_state(ctx, data):
    return None


def _reset_high_score(ctx, data):
    ctx['session'].engine.reset_high_score()


SESSION_EVENTS = {
    'select_mode': _select_mode,
    'set_level': _set_level,
    'set_display_area': _set_display_area,
    'start_game': _start_game,
    'tap': _tap,
    'proceed': _proceed,
    'pause': _pause,
    'resume': _resume,
    'get_state': _get_state,
    'reset_high_score': _reset_high_score,
}


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        for event, action in SESSION_EVENTS.items():
            socketio.on_event(event, _with_session(action), namespace=namespace)
