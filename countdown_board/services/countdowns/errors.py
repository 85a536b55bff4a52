from typing import Optional


class CountdownError(Exception):
    """Base class for board errors."""


class ValidationError(CountdownError):
    """Malformed or out-of-range input; the registry is untouched."""


class DuplicateCoordinateError(CountdownError):
    """An active countdown already occupies the requested cell."""

    def __init__(self, x: int, y: int, existing_id: int, remaining_ms: int):
        super().__init__(f'A countdown already exists at ({x}, {y})')
        self.x = x
        self.y = y
        self.existing_id = existing_id
        self.remaining_ms = remaining_ms

    @property
    def remaining_seconds(self) -> int:
        # Round up so a conflict never reports 0s while the timer still runs
        return -(-self.remaining_ms // 1000)


class NotFoundError(CountdownError):
    def __init__(self, item_id: Optional[int]):
        super().__init__(f'Countdown {item_id} not found')
        self.item_id = item_id


class PersistenceError(CountdownError):
    """Snapshot file could not be read or written."""
