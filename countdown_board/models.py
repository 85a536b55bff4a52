from dataclasses import dataclass
from typing import Any, Dict
import time


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class CountdownItem:
    id: int
    x: int
    y: int
    end_time: int
    created_at: int
    created_by: str
    created_by_color: str

    def is_active(self, now: int) -> bool:
        return self.end_time > now

    def remaining_ms(self, now: int) -> int:
        return max(0, self.end_time - now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'endTime': self.end_time,
            'createdAt': self.created_at,
            'createdBy': self.created_by,
            'createdByColor': self.created_by_color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CountdownItem':
        """Build an item from its wire/file form.

        ``id``, ``x``, ``y`` and ``endTime`` must be real integers and the
        coordinates non-negative. Raises KeyError or ValueError on malformed
        input so the caller can decide whether to skip the entry.
        """
        for key in ('id', 'x', 'y', 'endTime'):
            if not is_int(data[key]):
                raise ValueError(f'{key} must be an integer')
        if data['x'] < 0 or data['y'] < 0:
            raise ValueError('Coordinates must be non-negative')
        created_at = data.get('createdAt')
        return cls(
            id=data['id'],
            x=data['x'],
            y=data['y'],
            end_time=data['endTime'],
            created_at=created_at if is_int(created_at) else 0,
            created_by=str(data.get('createdBy') or ''),
            created_by_color=str(data.get('createdByColor') or ''),
        )


@dataclass
class Session:
    connection_id: str
    display_name: str
    color: str
    identified: bool = False

    def to_participant(self) -> Dict[str, Any]:
        return {
            'name': self.display_name,
            'color': self.color,
            'id': self.connection_id,
        }
