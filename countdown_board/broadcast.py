from typing import Any, Iterable, Optional

from flask_socketio import SocketIO

from countdown_board.models import CountdownItem


class BroadcastGateway:
    """Fan-out of board changes to connected Socket.IO clients.

    Everything goes through ``socketio.emit`` rather than the request-bound
    ``emit`` helper so the same calls work from handlers and from background
    tasks such as the expiry sweeper. Delivery is best-effort, without
    acknowledgements.
    """

    def __init__(self, socketio: Optional[SocketIO] = None, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def _emit(self, event: str, payload: Any = None, **kwargs) -> None:
        if self.socketio is None:
            return
        if payload is None:
            self.socketio.emit(event, namespace=self.namespace, **kwargs)
        else:
            self.socketio.emit(event, payload, namespace=self.namespace, **kwargs)

    def broadcast_added(self, item: CountdownItem) -> None:
        self._emit('countdown-added', item.to_dict())

    def broadcast_removed(self, item_id: int) -> None:
        self._emit('countdown-removed', {'id': item_id})

    def broadcast_cleared(self) -> None:
        self._emit('countdowns-cleared')

    def broadcast_list(self, items: Iterable[CountdownItem]) -> None:
        self._emit('countdown-list', [item.to_dict() for item in items])

    def sync_one(self, sid: str, items: Iterable[CountdownItem]) -> None:
        self._emit('countdown-list', [item.to_dict() for item in items], to=sid)

    def notify_others(self, event: str, payload: Any, sid: str) -> None:
        self._emit(event, payload, skip_sid=sid)

    def reply_error(self, sid: str, message: str, duplicate_id: Optional[int] = None, remaining_seconds: Optional[int] = None) -> None:
        payload = {'message': message}
        if duplicate_id is not None:
            payload['duplicateId'] = duplicate_id
        if remaining_seconds is not None:
            payload['remainingSeconds'] = remaining_seconds
        self._emit('error', payload, to=sid)
