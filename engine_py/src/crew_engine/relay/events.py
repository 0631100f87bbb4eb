"""
Relay message models and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..moves import Move, serialize_move


class RelayMessageType(str, Enum):
    """Messages the relay pushes to every participant of a channel."""
    GAME = "game"
    MOVES = "moves"
    MOVE = "move"
    PONG = "pong"


class BaseRelayMessage(BaseModel):
    """Base relay message model."""
    type: RelayMessageType


class GameMessage(BaseRelayMessage):
    """Full shared channel state, in the relay's hash form."""
    model_config = ConfigDict(populate_by_name=True)

    type: RelayMessageType = RelayMessageType.GAME
    game_state: Dict[str, Any] = Field(..., alias="gameState")


class MovesMessage(BaseRelayMessage):
    """The whole move log, sent on (re)connect."""
    type: RelayMessageType = RelayMessageType.MOVES
    moves: List[str] = Field(default_factory=list)


class MoveMessage(BaseRelayMessage):
    """One move appended to the log; ``move`` is the token without its guid."""
    type: RelayMessageType = RelayMessageType.MOVE
    guid: str = Field(..., min_length=1)
    move: str = Field(..., min_length=1)

    @property
    def token(self) -> str:
        return f"{self.guid}:{self.move}"


class PongMessage(BaseRelayMessage):
    type: RelayMessageType = RelayMessageType.PONG


RelayMessage = Union[GameMessage, MovesMessage, MoveMessage, PongMessage]


def parse_relay_message(data: Dict[str, Any]) -> RelayMessage:
    """
    Parse raw relay data into the appropriate message model.

    Args:
        data: Decoded JSON message from the relay

    Returns:
        Parsed message model

    Raises:
        ValueError: If the message type is unknown or the data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    message_type = data.get("type")

    if not message_type:
        raise ValueError("Missing message type")

    try:
        message_type = RelayMessageType(message_type)
    except ValueError:
        raise ValueError(f"Invalid message type: {message_type}")

    message_map = {
        RelayMessageType.GAME: GameMessage,
        RelayMessageType.MOVES: MovesMessage,
        RelayMessageType.MOVE: MoveMessage,
        RelayMessageType.PONG: PongMessage,
    }

    try:
        return message_map[message_type](**data)
    except ValidationError as e:
        raise ValueError(f"Invalid {message_type.value} message: {e}")


def create_move_message(move: Move) -> Dict[str, Any]:
    """Build the outbound message submitting a move to the relay."""
    token = serialize_move(move)
    return {
        "type": "move",
        "guid": move.guid,
        "move": token[len(move.guid) + 1:],
    }
