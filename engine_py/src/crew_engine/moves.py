"""
Move models and the colon-delimited move token codec.

Tokens look like ``<guid>:<tag>[:<args>...]``::

    abc:p:G5            play G5
    abc:h:G5:top        hint G5 as the top of its suit
    abc:h:cancel        clear the hint
    abc:d:17            draft mission 17
    abc:d:9:3           draft mission 9 with X = 3
    abc:d:pass          pass during the draft
    abc:e:trust         emote
    abc:u               undo
"""

import logging
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .constants import DRAFT_PASS, EMOTES, HINT_TYPES, is_card
from .errors import MALFORMED_MOVE, GameError
from .hints import Hint

logger = logging.getLogger(__name__)

HINT_CANCEL = 'cancel'


class MoveType(str, Enum):
    """Move kinds and their wire tags."""
    PLAY = "p"
    HINT = "h"
    DRAFT = "d"
    EMOTE = "e"
    UNDO = "u"


class BaseMove(BaseModel):
    """Base move model."""
    type: MoveType
    guid: str = Field(..., min_length=1)

    @field_validator('guid')
    @classmethod
    def validate_guid(cls, v):
        if ':' in v:
            raise ValueError('guid cannot contain ":"')
        return v


class PlayMove(BaseMove):
    """Play a card into the active trick."""
    type: Literal[MoveType.PLAY] = MoveType.PLAY
    card: str

    @field_validator('card')
    @classmethod
    def validate_card(cls, v):
        if not is_card(v):
            raise ValueError(f'unknown card: {v}')
        return v


class HintMove(BaseMove):
    """Set or clear the sender's signal; ``card`` None clears it."""
    type: Literal[MoveType.HINT] = MoveType.HINT
    card: Optional[str] = None
    hint_type: Optional[str] = None

    @field_validator('card')
    @classmethod
    def validate_card(cls, v):
        if v is not None and not is_card(v):
            raise ValueError(f'unknown card: {v}')
        return v

    @field_validator('hint_type')
    @classmethod
    def validate_hint_type(cls, v):
        if v is not None and v not in HINT_TYPES:
            raise ValueError(f'unknown hint type: {v}')
        return v

    @property
    def hint(self) -> Optional[Hint]:
        if self.card is None:
            return None
        return Hint(card=self.card, type=self.hint_type or '')


class DraftMove(BaseMove):
    """Take a mission during the draft, or pass."""
    type: Literal[MoveType.DRAFT] = MoveType.DRAFT
    id: str = Field(..., min_length=1)
    x: Optional[int] = Field(default=None, ge=0)

    @property
    def is_pass(self) -> bool:
        return self.id == DRAFT_PASS


class EmoteMove(BaseMove):
    type: Literal[MoveType.EMOTE] = MoveType.EMOTE
    emote: str

    @field_validator('emote')
    @classmethod
    def validate_emote(cls, v):
        if v not in EMOTES:
            raise ValueError(f'unknown emote: {v}')
        return v


class UndoMove(BaseMove):
    type: Literal[MoveType.UNDO] = MoveType.UNDO


Move = Union[PlayMove, HintMove, DraftMove, EmoteMove, UndoMove]


def decode_move(token: str) -> Move:
    """
    Decode a move token.

    Args:
        token: Raw ``<guid>:<tag>...`` string from the move log

    Returns:
        Parsed move model

    Raises:
        GameError: If the token does not follow the move grammar
    """
    parts = token.split(':') if isinstance(token, str) else []
    if len(parts) < 2:
        raise GameError(MALFORMED_MOVE, f"Malformed move token: {token!r}")

    guid, tag, args = parts[0], parts[1], parts[2:]

    try:
        move_type = MoveType(tag)
    except ValueError:
        raise GameError(MALFORMED_MOVE, f"Unknown move tag {tag!r} in {token!r}")

    try:
        if move_type == MoveType.PLAY and len(args) == 1:
            return PlayMove(guid=guid, card=args[0])
        if move_type == MoveType.HINT:
            if args == [HINT_CANCEL]:
                return HintMove(guid=guid)
            if len(args) == 2:
                return HintMove(guid=guid, card=args[0], hint_type=args[1])
        if move_type == MoveType.DRAFT and len(args) in (1, 2):
            x = int(args[1]) if len(args) == 2 and args[1] else None
            return DraftMove(guid=guid, id=args[0], x=x)
        if move_type == MoveType.EMOTE and len(args) == 1:
            return EmoteMove(guid=guid, emote=args[0])
        if move_type == MoveType.UNDO and not args:
            return UndoMove(guid=guid)
    except ValueError as e:
        raise GameError(MALFORMED_MOVE, f"Invalid move {token!r}: {e}")

    raise GameError(MALFORMED_MOVE, f"Wrong arguments for move {token!r}")


def parse_move(token: str) -> Optional[Move]:
    """Lenient decode: malformed tokens are logged and give None."""
    try:
        return decode_move(token)
    except GameError as e:
        logger.debug(f"Dropping move token: {e.message}")
        return None


def serialize_move(move: Move) -> str:
    """Encode a move back into its exact token form."""
    prefix = f"{move.guid}:{move.type.value}"
    if isinstance(move, PlayMove):
        return f"{prefix}:{move.card}"
    if isinstance(move, HintMove):
        if move.card is None:
            return f"{prefix}:{HINT_CANCEL}"
        return f"{prefix}:{move.card}:{move.hint_type}"
    if isinstance(move, DraftMove):
        if move.x is None:
            return f"{prefix}:{move.id}"
        return f"{prefix}:{move.id}:{move.x}"
    if isinstance(move, EmoteMove):
        return f"{prefix}:{move.emote}"
    return prefix
