"""
Per-channel game session.

A ``GameSession`` ingests the relay's messages for one channel and keeps the
reconstructed ``GameState`` current. Moves are never applied locally before
the relay echoes them back, so every participant's state stays a function of
the shared log.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from .engine import GamePhase, apply_move, empty_players, game_phase, initialize_game_state
from .errors import GameError
from .models import GameState, ServerState
from .moves import Move, UndoMove, parse_move
from .relay.events import (
    GameMessage, MoveMessage, MovesMessage, RelayMessage, create_move_message,
    parse_relay_message,
)
from .rules import RuleConfig, default_rules
from .serialization import MissionLog, build_mission_log, sanitize_state

logger = logging.getLogger(__name__)


class GameSession:
    def __init__(
        self,
        viewer_guid: Optional[str] = None,
        rules: Optional[RuleConfig] = None,
        on_complete: Optional[Callable[[MissionLog], None]] = None
    ):
        self.viewer_guid = viewer_guid
        self.rules = rules or default_rules
        self.on_complete = on_complete

        self.server_state = ServerState()
        self.raw_moves: List[str] = []
        self.moves: List[Move] = []
        self.state = GameState(players=empty_players(self.server_state, self.rules.passes_per_player))

        self._completion_reported = False
        self._lock = threading.Lock()

    @property
    def phase(self) -> GamePhase:
        return game_phase(self.state, self.server_state)

    def handle_message(self, data: Dict[str, Any]) -> Optional[RelayMessage]:
        """
        Handle one decoded relay message.

        Malformed messages are logged and ignored.

        Returns:
            The parsed message, or None if it was rejected
        """
        try:
            message = parse_relay_message(data)
        except ValueError as e:
            logger.warning(f"Ignoring relay message: {e}")
            return None

        with self._lock:
            try:
                if isinstance(message, GameMessage):
                    self._handle_game(message)
                elif isinstance(message, MovesMessage):
                    self._handle_moves(message)
                elif isinstance(message, MoveMessage):
                    self._handle_move(message)
            except GameError as e:
                logger.warning(f"Ignoring {message.type.value} message: {e.message}")
                return None

            self._check_complete()
        return message

    def _handle_game(self, message: GameMessage):
        server_state = ServerState.from_raw(message.game_state)
        needs_initialize = server_state.is_started and not self.server_state.is_started
        self.server_state = server_state

        for player in self.state.players:
            guid, name = server_state.seat_assignment(player.seat)
            player.guid = guid
            player.name = name

        if needs_initialize:
            self._completion_reported = False
            self.rebuild()

    def _handle_moves(self, message: MovesMessage):
        self.raw_moves = list(message.moves)
        self.moves = [move for move in map(parse_move, self.raw_moves) if move is not None]
        if self.server_state.is_started:
            self.rebuild()

    def _handle_move(self, message: MoveMessage):
        move = parse_move(message.token)
        if move is None:
            return

        self.raw_moves.append(message.token)
        self.moves.append(move)

        if isinstance(move, UndoMove) and not self.state.undo_used:
            self.rebuild()
        else:
            apply_move(self.state, move, self.server_state, None, self.viewer_guid, self.rules)

    def rebuild(self):
        """Replay the whole log from the seeds."""
        self.state = initialize_game_state(
            self.server_state, self.moves, self.viewer_guid, self.rules
        )
        logger.info(f"Rebuilt game from {len(self.moves)} moves, phase {self.phase.value}")

    def _check_complete(self):
        if self._completion_reported or not self.state.is_complete():
            return
        self._completion_reported = True
        if self.on_complete:
            self.on_complete(self.mission_log())

    def mission_log(self) -> MissionLog:
        return build_mission_log(
            self.server_state, self.state, self.raw_moves, self.rules.default_target
        )

    def view(self) -> Dict[str, Any]:
        """State as this session's participant may see it."""
        return sanitize_state(self.state, self.viewer_guid)

    def outbound_move(self, move: Move) -> Dict[str, Any]:
        """
        Message submitting a move to the relay.

        The move is applied when the relay echoes it back.
        """
        if self.viewer_guid and move.guid != self.viewer_guid:
            logger.warning(f"Submitting a move for {move.guid} from session of {self.viewer_guid}")
        return create_move_message(move)

