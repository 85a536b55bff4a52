"""Countdown domain services: registry, snapshot store and expiry sweeper.

This package holds the board's shared state and the rules that guard it.
Socket.IO handlers and HTTP routes call into it, keeping transport concerns
separated from the countdown mechanics.
"""

from .board import CountdownBoard, board
from .errors import (
    CountdownError,
    DuplicateCoordinateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    'CountdownBoard',
    'board',
    'CountdownError',
    'DuplicateCoordinateError',
    'NotFoundError',
    'PersistenceError',
    'ValidationError',
]
