from flask_socketio import emit
from flask import current_app, request
from countdown_board import socketio
from countdown_board.services.countdowns import board, DuplicateCoordinateError, ValidationError
from countdown_board.services.countdowns.sweeper import start_sweeper
from typing import Any, Dict
import time


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def handle_connect(auth=None):
    sid = _get_sid()
    # The expiry loop starts with the first client, never in CLI processes
    start_sweeper(current_app._get_current_object(), board)
    board.connect(sid)
    emit('welcome', {
        'message': 'Welcome!',
        'socketId': sid,
        'serverTime': int(time.time() * 1000),
    })


def handle_disconnect(reason=None):
    board.disconnect(_get_sid())


def handle_set_user_info(data):
    data = _payload(data)
    board.identify(_get_sid(), data.get('name'), data.get('color'))


def handle_request_sync(data=None):
    board.sync(_get_sid())


def handle_add_countdown(data):
    data = _payload(data)
    sid = _get_sid()
    try:
        board.add_countdown(
            data.get('x'),
            data.get('y'),
            data.get('minutes', 0),
            data.get('seconds', 0),
            creator=data.get('user'),
            sid=sid,
        )
    except DuplicateCoordinateError as exc:
        current_app.logger.info(f"[countdown-duplicate] x={exc.x} y={exc.y} existing={exc.existing_id}")
        board.gateway.reply_error(sid, str(exc), duplicate_id=exc.existing_id, remaining_seconds=exc.remaining_seconds)
    except ValidationError as exc:
        current_app.logger.info(f"[countdown-invalid] sid={sid} error={exc}")
        board.gateway.reply_error(sid, str(exc))


def handle_remove_countdown(data):
    board.remove_countdown(_payload(data).get('id'))


def handle_clear_all(data=None):
    board.clear_all()


def handle_ping(data=None):
    emit('pong', data or {})


def handle_socket_error(exc):
    """Log unexpected handler failures and tell the caller; keep serving."""
    event = getattr(request, 'event', None) or {}
    current_app.logger.exception(f"[socket-error] event={event.get('message')} error={exc}")
    emit('error', {'message': 'Operation failed'})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the board namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('set-user-info', handle_set_user_info, namespace=namespace)
    socketio.on_event('request-sync', handle_request_sync, namespace=namespace)
    socketio.on_event('add-countdown', handle_add_countdown, namespace=namespace)
    socketio.on_event('remove-countdown', handle_remove_countdown, namespace=namespace)
    socketio.on_event('clear-all', handle_clear_all, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
    socketio.on_error_default(handle_socket_error)
