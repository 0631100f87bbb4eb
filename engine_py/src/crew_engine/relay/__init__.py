"""
Relay message handling.
"""

from .events import (
    GameMessage, MoveMessage, MovesMessage, PongMessage, RelayMessageType,
    create_move_message, parse_relay_message,
)

__all__ = [
    "GameMessage",
    "MoveMessage",
    "MovesMessage",
    "PongMessage",
    "RelayMessageType",
    "create_move_message",
    "parse_relay_message",
]
