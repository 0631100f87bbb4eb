"""Game models and data structures"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_PASSES, DEFAULT_TARGET, SEATS, STATUS_STARTED, STATUS_WAITING,
)
from .errors import INVALID_CONFIG, GameError
from .hints import Hint, PendingHints
from .missions import Objective


@dataclass
class Trick:
    cards: List[Tuple[str, str]] = field(default_factory=list)  # (card, seat) in play order
    index: int = 0

    def card_values(self) -> List[str]:
        return [card for card, _ in self.cards]

    def copy(self) -> 'Trick':
        return Trick(cards=list(self.cards), index=self.index)


@dataclass
class Mission:
    """A drafted objective with its runtime status."""
    template: Objective
    status: Optional[str] = None  # pass|fail
    secret_x: Optional[int] = None
    x: Optional[int] = None

    @property
    def id(self) -> str:
        return self.template.id


@dataclass
class Player:
    seat: str
    idx: int  # 1-based seat number
    name: str = ''
    guid: str = ''
    hand: List[str] = field(default_factory=list)
    missions: List[Mission] = field(default_factory=list)
    hint: Optional[Hint] = None
    passes_remaining: int = DEFAULT_PASSES
    tricks: List[Trick] = field(default_factory=list)
    emote: Optional[str] = None


@dataclass
class GameState:
    players: List[Player] = field(default_factory=list)
    active_trick: Trick = field(default_factory=Trick)
    previous_trick: Trick = field(default_factory=lambda: Trick(index=-1))
    captain_seat: str = 'seat1'
    total_tricks: int = 0
    missions: List[Objective] = field(default_factory=list)  # undrafted pool
    num_players: int = 0
    seating: List[str] = field(default_factory=list)  # active seats, turn order
    whose_turn: str = 'seat1'
    turn_idx: int = 0
    undo_used: bool = False
    succeeded: bool = False
    pending_hints: PendingHints = field(default_factory=PendingHints)

    def player_for_seat(self, seat: str) -> Player:
        return self.players[SEATS.index(seat)]

    def active_players(self) -> List[Player]:
        return [player for player in self.players if player.seat in self.seating]

    def next_seat(self) -> str:
        """Seat after ``whose_turn`` in seating order, wrapping around."""
        if self.whose_turn not in self.seating:
            return self.whose_turn
        position = self.seating.index(self.whose_turn)
        return self.seating[(position + 1) % len(self.seating)]

    def set_turn(self, seat: str):
        self.whose_turn = seat
        self.turn_idx = SEATS.index(seat)

    def player_for_guid(self, guid: str) -> Optional[Player]:
        if not guid:
            return None
        for player in self.players:
            if player.guid == guid:
                return player
        return None

    @property
    def active_player(self) -> Player:
        return self.players[self.turn_idx]

    @property
    def captain(self) -> Player:
        return self.player_for_seat(self.captain_seat)

    def completed_tricks(self) -> List[Trick]:
        tricks = [trick for player in self.players for trick in player.tricks]
        return sorted(tricks, key=lambda trick: trick.index)

    def is_complete(self) -> bool:
        return self.total_tricks > 0 and self.active_trick.index >= self.total_tricks


def split_seat_value(value: str) -> Tuple[str, str]:
    """Split a ``"<guid>:<name>"`` seat slot; empty slots give ('', '')."""
    if not value:
        return '', ''
    guid, _, name = value.partition(':')
    return guid, name


class ServerState(BaseModel):
    """Shared channel state kept by the relay for one deal."""

    seed1: int = Field(default=0, ge=0, le=0xFFFFFFFF)
    seed2: int = Field(default=0, ge=0, le=0xFFFFFFFF)
    seed3: int = Field(default=0, ge=0, le=0xFFFFFFFF)
    seed4: int = Field(default=0, ge=0, le=0xFFFFFFFF)
    seat1: str = ''
    seat2: str = ''
    seat3: str = ''
    seat4: str = ''
    seat5: str = ''
    meta: Dict[str, Any] = Field(default_factory=lambda: {'target': DEFAULT_TARGET})
    starting_seats: List[str] = Field(default_factory=list)
    status: Literal['waiting', 'started'] = STATUS_WAITING

    @field_validator('starting_seats')
    @classmethod
    def validate_starting_seats(cls, v):
        unknown = [seat for seat in v if seat not in SEATS]
        if unknown:
            raise ValueError(f'unknown seats: {unknown}')
        if len(set(v)) != len(v):
            raise ValueError('starting seats must be unique')
        return v

    @property
    def seeds(self) -> Tuple[int, int, int, int]:
        return (self.seed1, self.seed2, self.seed3, self.seed4)

    @property
    def target(self) -> Optional[int]:
        return self.meta.get('target')

    @property
    def is_started(self) -> bool:
        return self.status == STATUS_STARTED

    def seat_value(self, seat: str) -> str:
        return getattr(self, seat)

    def seat_assignment(self, seat: str) -> Tuple[str, str]:
        return split_seat_value(self.seat_value(seat))

    def all_guids(self) -> List[str]:
        guids = [self.seat_assignment(seat)[0] for seat in SEATS]
        return [guid for guid in guids if guid]

    def joined(self, guid: str) -> bool:
        return bool(guid) and guid in self.all_guids()

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> 'ServerState':
        """
        Build from the relay's hash form: numeric strings for seeds, a JSON
        string for ``meta`` and a comma-joined ``startingSeats``.

        Raises:
            GameError: If the payload cannot describe a valid deal
        """
        try:
            meta = raw.get('meta') or {}
            if isinstance(meta, str):
                meta = json.loads(meta) if meta else {}
            starting = raw.get('startingSeats', raw.get('starting_seats', ''))
            if isinstance(starting, str):
                starting = [seat for seat in starting.split(',') if seat]
            return cls(
                seed1=int(raw.get('seed1', 0)),
                seed2=int(raw.get('seed2', 0)),
                seed3=int(raw.get('seed3', 0)),
                seed4=int(raw.get('seed4', 0)),
                seat1=raw.get('seat1') or '',
                seat2=raw.get('seat2') or '',
                seat3=raw.get('seat3') or '',
                seat4=raw.get('seat4') or '',
                seat5=raw.get('seat5') or '',
                meta=meta,
                starting_seats=list(starting),
                status=raw.get('status') or STATUS_WAITING,
            )
        except (TypeError, ValueError) as e:
            raise GameError(INVALID_CONFIG, f"Invalid server state: {e}")

    def to_raw(self) -> Dict[str, str]:
        raw = {
            'seed1': str(self.seed1),
            'seed2': str(self.seed2),
            'seed3': str(self.seed3),
            'seed4': str(self.seed4),
            'meta': json.dumps(self.meta),
            'startingSeats': ','.join(self.starting_seats),
            'status': self.status,
        }
        for seat in SEATS:
            raw[seat] = self.seat_value(seat)
        return raw
