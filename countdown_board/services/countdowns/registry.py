import threading
from typing import Any, Iterable, List, Optional, Tuple

from countdown_board.models import CountdownItem, is_int, now_ms
from .errors import DuplicateCoordinateError, NotFoundError, ValidationError


MAX_MINUTES = 59
MAX_SECONDS = 59


def duration_from(minutes: Any, seconds: Any) -> int:
    """Combine minute/second inputs into a positive duration in seconds.

    Each component must be an integer in [0, 59] and at least one of them
    must be non-zero.
    """
    for label, value, upper in (('minutes', minutes, MAX_MINUTES), ('seconds', seconds, MAX_SECONDS)):
        if not is_int(value):
            raise ValidationError(f'{label} must be an integer')
        if value < 0 or value > upper:
            raise ValidationError(f'{label} must be between 0 and {upper}')
    total = minutes * 60 + seconds
    if total <= 0:
        raise ValidationError('Duration must be greater than zero')
    return total


class TimerRegistry:
    """Ordered, in-memory collection of countdown items.

    The registry is the only owner of the item list and the id counter.
    Callers get copies, never the list itself, and every operation runs
    under one lock so the duplicate check and the insert in ``add`` cannot
    interleave with another mutation.
    """

    def __init__(self) -> None:
        self._items: List[CountdownItem] = []
        self._next_id = 1
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def next_id(self) -> int:
        return self._next_id

    def add(self, x: Any, y: Any, duration_seconds: Any, creator: Tuple[str, str], now: Optional[int] = None) -> CountdownItem:
        """Place a new countdown at (x, y).

        ``creator`` is a ``(name, color)`` pair copied onto the item.
        Raises ValidationError or DuplicateCoordinateError; on either the
        registry is left untouched.
        """
        if not is_int(x) or not is_int(y) or x < 0 or y < 0:
            raise ValidationError('Coordinates must be non-negative integers')
        if not is_int(duration_seconds) or duration_seconds <= 0:
            raise ValidationError('Duration must be greater than zero')
        name, color = creator
        with self._lock:
            now = now_ms() if now is None else now
            existing = self._find_active_at(x, y, now)
            if existing is not None:
                raise DuplicateCoordinateError(x, y, existing.id, existing.remaining_ms(now))
            item = CountdownItem(
                id=self._next_id,
                x=x,
                y=y,
                end_time=now + duration_seconds * 1000,
                created_at=now,
                created_by=name,
                created_by_color=color,
            )
            self._next_id += 1
            self._items.append(item)
            return item

    def remove(self, item_id: Any) -> CountdownItem:
        if not is_int(item_id):
            raise NotFoundError(item_id)
        with self._lock:
            for idx, item in enumerate(self._items):
                if item.id == item_id:
                    return self._items.pop(idx)
        raise NotFoundError(item_id)

    def clear(self) -> int:
        with self._lock:
            count = len(self._items)
            self._items = []
            return count

    def get(self, item_id: int) -> Optional[CountdownItem]:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
        return None

    def _find_active_at(self, x: int, y: int, now: int) -> Optional[CountdownItem]:
        # Linear scan; boards hold a handful of timers
        for item in self._items:
            if item.x == x and item.y == y and item.is_active(now):
                return item
        return None

    def active_items(self, now: Optional[int] = None) -> List[CountdownItem]:
        now = now_ms() if now is None else now
        with self._lock:
            return [item for item in self._items if item.is_active(now)]

    def sweep_expired(self, now: int, grace_ms: int) -> int:
        """Drop items that expired more than ``grace_ms`` ago.

        Returns the number removed; 0 means nothing changed.
        """
        cutoff = now - grace_ms
        with self._lock:
            kept = [item for item in self._items if item.end_time > cutoff]
            removed = len(self._items) - len(kept)
            if removed:
                self._items = kept
            return removed

    def snapshot(self) -> Tuple[List[CountdownItem], int]:
        with self._lock:
            return list(self._items), self._next_id

    def restore(self, items: Iterable[CountdownItem], next_id: int) -> None:
        """Replace the registry contents with a loaded snapshot."""
        with self._lock:
            self._items = list(items)
            highest = max((item.id for item in self._items), default=0)
            self._next_id = max(int(next_id), highest + 1, 1)
