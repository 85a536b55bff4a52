import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from countdown_board.models import CountdownItem, is_int, now_ms
from .errors import PersistenceError


class SnapshotStore:
    """Mirror of the registry in a single JSON file.

    Layout: ``{"countdowns": [...], "nextId": int, "lastUpdated": iso8601}``.
    The file is a best-effort copy; the in-memory registry stays
    authoritative.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self, now: Optional[int] = None, grace_ms: int = 0) -> Optional[Tuple[List[CountdownItem], int]]:
        """Read the snapshot.

        Returns None when the file is missing or unreadable so callers start
        with an empty board. Items that expired more than ``grace_ms`` before
        ``now`` are dropped, as is a second active item on an occupied cell,
        and the id counter is moved past every id found in the file.
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                raw = json.load(fh)
        except (OSError, ValueError):
            return None
        if not isinstance(raw, dict) or not isinstance(raw.get('countdowns', []), list):
            return None

        now = now_ms() if now is None else now
        cutoff = now - grace_ms
        items: List[CountdownItem] = []
        seen_ids = set()
        active_cells = set()
        # Highest id ever written, including entries dropped below
        highest = 0
        for entry in raw.get('countdowns') or []:
            if not isinstance(entry, dict):
                continue
            if is_int(entry.get('id')):
                highest = max(highest, entry['id'])
            try:
                item = CountdownItem.from_dict(entry)
            except (KeyError, ValueError):
                continue
            if item.end_time <= cutoff or item.id in seen_ids:
                continue
            if item.is_active(now):
                cell = (item.x, item.y)
                if cell in active_cells:
                    continue
                active_cells.add(cell)
            seen_ids.add(item.id)
            items.append(item)

        next_id = raw.get('nextId')
        if not is_int(next_id) or next_id <= highest:
            next_id = highest + 1
        return items, max(next_id, 1)

    def save(self, items: Iterable[CountdownItem], next_id: int, now: Optional[int] = None) -> None:
        now = now_ms() if now is None else now
        payload = {
            'countdowns': [item.to_dict() for item in items],
            'nextId': next_id,
            'lastUpdated': datetime.fromtimestamp(now / 1000, tz=timezone.utc).isoformat(),
        }
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix='.snapshot-', suffix='.json', dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(payload, fh, indent=2)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise PersistenceError(f'Could not write snapshot {self.path}: {exc}') from exc
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def reset(self) -> None:
        self.save([], 1)
