from flask import current_app, request
from flask_socketio import emit, join_room
from caro import socketio
from caro.services.gate import PasswordGate
from caro.services.game import Session
from typing import Any, Optional

NAMESPACE = '/ws'


def make_room_emitter(room: str):
    """Build the session's outbound channel: whole room by default, one sid with ``to``."""
    def _emit(event: str, payload: Any = None, to: Optional[str] = None) -> None:
        # socketio.emit works from background tasks (the turn clock) as well as handlers
        socketio.emit(event, payload, to=to or room, namespace=NAMESPACE)
    return _emit


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session() -> Session:
    return current_app.extensions['caro_session']


def _gate() -> PasswordGate:
    return current_app.extensions['caro_gate']


def _admit(sid: str) -> None:
    join_room(current_app.config['ROOM_ID'])
    _session().join(sid)


def handle_connect(auth=None):
    emit('connected', {'message': f'Connected to {NAMESPACE}'})
    sid = _get_sid()
    current_app.logger.info(f"[connect] sid={sid} addr={request.remote_addr}")
    gate = _gate()
    if gate.is_open:
        gate.admit(sid)
        _admit(sid)
    else:
        emit('password_required')


def handle_disconnect(*_args):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    if _gate().forget(sid):
        _session().leave(sid)


def handle_verify_password(password=None):
    sid = _get_sid()
    gate = _gate()
    if gate.is_admitted(sid):
        return
    if not gate.admit(sid, password):
        current_app.logger.info(f"[gate] sid={sid} wrong password")
        emit('password_fail')
        return
    current_app.logger.info(f"[gate] sid={sid} admitted")
    emit('password_ok')
    _admit(sid)


def handle_confirm_start(_data=None):
    sid = _get_sid()
    if not _gate().is_admitted(sid):
        return
    _session().confirm_start(sid)


def handle_make_move(data=None):
    sid = _get_sid()
    if not _gate().is_admitted(sid):
        return
    # Non-dict payloads fall through as malformed coordinates
    payload = data if isinstance(data, dict) else {}
    _session().move(sid, payload.get('x'), payload.get('y'))


def handle_reset_game(_data=None):
    sid = _get_sid()
    if not _gate().is_admitted(sid):
        return
    _session().request_reset(sid)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('verify_password', handle_verify_password, namespace=NAMESPACE)
    socketio.on_event('confirm_start', handle_confirm_start, namespace=NAMESPACE)
    socketio.on_event('make_move', handle_make_move, namespace=NAMESPACE)
    socketio.on_event('reset_game', handle_reset_game, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
