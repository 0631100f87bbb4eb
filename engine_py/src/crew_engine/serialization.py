"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from .constants import DEFAULT_TARGET
from .models import GameState, Mission, Player, ServerState, Trick


class MissionLogPlayer(BaseModel):
    seat: str
    name: str = ''


class MissionLog(BaseModel):
    """Finalized snapshot of a deal, keyed by its four seeds."""

    seed1: int = Field(..., ge=0, le=0xFFFFFFFF)
    seed2: int = Field(..., ge=0, le=0xFFFFFFFF)
    seed3: int = Field(..., ge=0, le=0xFFFFFFFF)
    seed4: int = Field(..., ge=0, le=0xFFFFFFFF)
    success: bool = False
    completed: bool = False
    undo_used: bool = False
    meta: Dict[str, Any] = Field(default_factory=dict)
    moves: List[str] = Field(default_factory=list)
    players: Dict[str, MissionLogPlayer] = Field(default_factory=dict)

    @property
    def key(self) -> Tuple[int, int, int, int]:
        return (self.seed1, self.seed2, self.seed3, self.seed4)

    def to_server_state(self) -> ServerState:
        """Rebuild the started deal this log was taken from."""
        seats = {}
        for guid, player in self.players.items():
            seats[player.seat] = f"{guid}:{player.name}"
        starting_seats = sorted(seats)
        return ServerState(
            seed1=self.seed1,
            seed2=self.seed2,
            seed3=self.seed3,
            seed4=self.seed4,
            meta=dict(self.meta),
            starting_seats=starting_seats,
            status='started',
            **seats,
        )


def build_mission_log(
    server_state: ServerState,
    state: GameState,
    moves: Sequence[str],
    default_target: int = DEFAULT_TARGET
) -> MissionLog:
    """
    Snapshot a deal for the match-summary store.

    Args:
        server_state: Deal configuration
        state: Current reconstruction
        moves: Raw move tokens, in log order
        default_target: Target recorded when the deal carries none

    Returns:
        MissionLog ready to upsert by seeds
    """
    meta = dict(server_state.meta)
    meta['target'] = server_state.target or default_target

    players = {}
    for seat in server_state.starting_seats:
        guid, name = server_state.seat_assignment(seat)
        if guid:
            players[guid] = MissionLogPlayer(seat=seat, name=name)

    return MissionLog(
        seed1=server_state.seed1,
        seed2=server_state.seed2,
        seed3=server_state.seed3,
        seed4=server_state.seed4,
        success=state.succeeded,
        completed=state.is_complete(),
        undo_used=state.undo_used,
        meta=meta,
        moves=list(moves),
        players=players,
    )


def _serialize_trick(trick: Trick) -> Dict[str, Any]:
    return {
        "index": trick.index,
        "cards": [{"card": card, "seat": seat} for card, seat in trick.cards],
    }


def _serialize_mission(mission: Mission, show_secret: bool) -> Dict[str, Any]:
    serialized = {
        "id": mission.id,
        "kind": mission.template.kind,
        "status": mission.status,
        "x": mission.x,
    }
    if show_secret:
        serialized["secret_x"] = mission.secret_x
    return serialized


def _serialize_player(player: Player, is_viewer: bool) -> Dict[str, Any]:
    sanitized_player = {
        "seat": player.seat,
        "idx": player.idx,
        "name": player.name,
        "guid": player.guid,
        "hand_count": len(player.hand),
        "hint": {
            "card": player.hint.card,
            "type": player.hint.type,
            "played": player.hint.played,
        } if player.hint else None,
        "passes_remaining": player.passes_remaining,
        "emote": player.emote,
        "tricks": [_serialize_trick(trick) for trick in player.tricks],
        "missions": [_serialize_mission(m, is_viewer) for m in player.missions],
    }

    # Show full hand only to the viewer
    if is_viewer:
        sanitized_player["hand"] = list(player.hand)

    return sanitized_player


def sanitize_state(state: GameState, viewer_guid: Optional[str] = None) -> Dict[str, Any]:
    """
    Sanitize game state for display to one participant.

    Args:
        state: Game state to sanitize
        viewer_guid: Participant viewing the state (to show their cards)

    Returns:
        Sanitized state dictionary safe for JSON transmission
    """
    return {
        "captain_seat": state.captain_seat,
        "whose_turn": state.whose_turn,
        "total_tricks": state.total_tricks,
        "num_players": state.num_players,
        "seating": list(state.seating),
        "undo_used": state.undo_used,
        "succeeded": state.succeeded,
        "complete": state.is_complete(),
        "active_trick": _serialize_trick(state.active_trick),
        "previous_trick": _serialize_trick(state.previous_trick),
        "missions": [template.id for template in state.missions],
        "players": {
            player.seat: _serialize_player(
                player, bool(viewer_guid) and player.guid == viewer_guid
            )
            for player in state.players
        },
    }


def mission_summary(state: GameState) -> List[Dict[str, Any]]:
    """One row per drafted mission, in seat order."""
    return [
        {
            "seat": player.seat,
            "name": player.name,
            "mission": mission.id,
            "kind": mission.template.kind,
            "status": mission.status,
        }
        for player in state.players
        for mission in player.missions
    ]
