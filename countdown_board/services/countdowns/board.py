import logging
import threading
import time
from typing import Any, Dict, List, Optional, Tuple

from countdown_board.broadcast import BroadcastGateway
from countdown_board.models import CountdownItem, Session, now_ms
from countdown_board.sessions import SessionManager
from .errors import NotFoundError, PersistenceError
from .registry import TimerRegistry, duration_from
from .snapshot import SnapshotStore


class CountdownBoard:
    """Process-wide board state and the mutate -> persist -> broadcast flow.

    Created once at import time and bound to an application with
    ``init_app``, the same way Flask extensions are.
    """

    def __init__(self) -> None:
        self.registry = TimerRegistry()
        self.sessions = SessionManager()
        self.gateway = BroadcastGateway()
        self.store: Optional[SnapshotStore] = None
        self.socketio = None
        self.logger = logging.getLogger(__name__)
        self.clock = now_ms
        self.grace_ms = 60_000
        self.debounce_ms = 0
        self.started_at = time.time()
        self._persist_lock = threading.Lock()
        self._save_pending = False
        self._dirty = False

    def init_app(self, app, socketio, namespace: str = '/') -> None:
        cfg = app.config
        self.logger = app.logger
        self.socketio = socketio
        self.clock = now_ms
        self.grace_ms = int(cfg.get('EXPIRY_GRACE_SEC', 60)) * 1000
        self.debounce_ms = int(cfg.get('SNAPSHOT_DEBOUNCE_MS', 0))
        self.started_at = time.time()
        self._save_pending = False
        self._dirty = False
        self.registry = TimerRegistry()
        self.sessions = SessionManager(
            default_name=cfg.get('DEFAULT_USER_NAME', 'Unknown user'),
            default_color=cfg.get('DEFAULT_USER_COLOR', '#3b82f6'),
            max_name_length=int(cfg.get('MAX_NAME_LENGTH', 32)),
        )
        self.gateway = BroadcastGateway(socketio, namespace)
        self.store = SnapshotStore(cfg.get('SNAPSHOT_PATH', 'data.json'))
        self.load()
        app.extensions['countdown_board'] = self

    def now(self) -> int:
        return self.clock()

    # ---- persistence ----

    def load(self) -> int:
        loaded = self.store.load(self.now(), self.grace_ms) if self.store else None
        if loaded is None:
            self.registry.restore([], 1)
            self.logger.info(f"[snapshot-load] path={self.store.path if self.store else None} empty")
            return 0
        items, next_id = loaded
        self.registry.restore(items, next_id)
        self.logger.info(f"[snapshot-load] path={self.store.path} items={len(items)} next_id={self.registry.next_id}")
        return len(items)

    def flush(self) -> bool:
        """Write the current registry state immediately."""
        if self.store is None:
            return False
        items, next_id = self.registry.snapshot()
        try:
            self.store.save(items, next_id, self.now())
        except PersistenceError as exc:
            self.logger.error(f"[snapshot-save-failed] path={self.store.path} error={exc}")
            return False
        self._dirty = False
        return True

    def flush_if_dirty(self) -> bool:
        """Write only when a mutation has not reached the file yet."""
        if not self._dirty:
            return False
        return self.flush()

    def persist(self) -> None:
        """Mirror the registry to disk after a mutation.

        With a debounce configured, the first mutation schedules one save and
        later mutations inside the window ride along with it.
        """
        self._dirty = True
        if self.debounce_ms <= 0 or self.socketio is None:
            self.flush()
            return
        with self._persist_lock:
            if self._save_pending:
                return
            self._save_pending = True
        self.socketio.start_background_task(self._delayed_flush, self.debounce_ms / 1000.0)

    def _delayed_flush(self, delay: float) -> None:
        self.socketio.sleep(delay)
        with self._persist_lock:
            self._save_pending = False
        self.flush()

    # ---- sessions ----

    def connect(self, sid: str) -> Session:
        session = self.sessions.connect(sid)
        self.logger.info(f"[connect] sid={sid} sessions={self.sessions.count()}")
        return session

    def identify(self, sid: str, name: Any, color: Any) -> Session:
        session = self.sessions.set_identity(sid, name, color)
        self.sync(sid)
        self.gateway.notify_others('participant-joined', session.to_participant(), sid)
        self.logger.info(f"[identify] sid={sid} name={session.display_name}")
        return session

    def disconnect(self, sid: str) -> Optional[Session]:
        session = self.sessions.disconnect(sid)
        if session is None:
            return None
        self.gateway.notify_others('participant-left', sid, sid)
        self.logger.info(f"[disconnect] sid={sid} sessions={self.sessions.count()}")
        return session

    def sync(self, sid: str) -> List[CountdownItem]:
        items = self.registry.active_items(self.now())
        self.gateway.sync_one(sid, items)
        return items

    # ---- countdowns ----

    def _resolve_creator(self, creator: Any, sid: Optional[str]) -> Tuple[str, str]:
        session = self.sessions.get(sid) if sid else None
        name = session.display_name if session else self.sessions.default_name
        color = session.color if session else self.sessions.default_color
        if isinstance(creator, dict):
            if isinstance(creator.get('name'), str) and creator['name'].strip():
                name = creator['name'].strip()[:self.sessions.max_name_length]
            if isinstance(creator.get('color'), str) and creator['color'].strip():
                color = creator['color'].strip()
        return name, color

    def add_countdown(self, x: Any, y: Any, minutes: Any, seconds: Any, creator: Any = None, sid: Optional[str] = None) -> CountdownItem:
        """Validate, insert, persist and broadcast a new countdown.

        ValidationError and DuplicateCoordinateError propagate to the caller,
        which reports them to the originating connection only.
        """
        duration = duration_from(minutes, seconds)
        item = self.registry.add(x, y, duration, self._resolve_creator(creator, sid), self.now())
        self.persist()
        self.gateway.broadcast_added(item)
        self.logger.info(f"[countdown-add] id={item.id} x={item.x} y={item.y} duration={duration}s by={item.created_by}")
        return item

    def remove_countdown(self, item_id: Any) -> Optional[CountdownItem]:
        try:
            item = self.registry.remove(item_id)
        except NotFoundError:
            # Already swept or removed by another client
            self.logger.debug(f"[countdown-remove-miss] id={item_id}")
            return None
        self.persist()
        self.gateway.broadcast_removed(item.id)
        self.logger.info(f"[countdown-remove] id={item.id}")
        return item

    def clear_all(self) -> int:
        count = self.registry.clear()
        self.persist()
        self.gateway.broadcast_cleared()
        self.logger.info(f"[countdown-clear] removed={count}")
        return count

    def active_items(self) -> List[CountdownItem]:
        return self.registry.active_items(self.now())

    def status(self) -> Dict[str, Any]:
        return {
            'uptimeSeconds': round(time.time() - self.started_at, 3),
            'countdowns': {
                'active': len(self.registry.active_items(self.now())),
                'total': len(self.registry),
            },
            'users': self.sessions.count(),
        }


board = CountdownBoard()
