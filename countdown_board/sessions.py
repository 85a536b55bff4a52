import threading
from typing import Any, Dict, Optional

from countdown_board.models import Session


class SessionManager:
    """One ephemeral identity per live Socket.IO connection."""

    def __init__(self, default_name: str = 'Unknown user', default_color: str = '#3b82f6', max_name_length: int = 32):
        self.default_name = default_name
        self.default_color = default_color
        self.max_name_length = max_name_length
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def connect(self, sid: str) -> Session:
        session = Session(connection_id=sid, display_name=self.default_name, color=self.default_color)
        with self._lock:
            self._sessions[sid] = session
        return session

    def set_identity(self, sid: str, name: Any, color: Any) -> Session:
        """Overwrite the display name and color of a connection.

        Unknown sids get a fresh session so a client that raced its own
        connect handler still ends up registered.
        """
        clean_name = name.strip()[:self.max_name_length] if isinstance(name, str) else ''
        clean_color = color.strip() if isinstance(color, str) else ''
        with self._lock:
            session = self._sessions.get(sid)
            if session is None:
                session = Session(connection_id=sid, display_name=self.default_name, color=self.default_color)
                self._sessions[sid] = session
            session.display_name = clean_name or self.default_name
            session.color = clean_color or self.default_color
            session.identified = True
            return session

    def disconnect(self, sid: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.pop(sid, None)

    def get(self, sid: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(sid)

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)
