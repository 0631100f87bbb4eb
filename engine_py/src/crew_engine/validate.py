"""
Move validation against the current game state.
"""

from typing import Optional

from .errors import (
    GAME_OVER, INVALID_HINT, NO_PASSES_LEFT, NOT_STARTED, NOT_YOUR_TURN,
    OWNERSHIP_MISMATCH, SUPPRESSED_BY_UNDO, UNDO_ALREADY_USED, UNKNOWN_MISSION,
    UNKNOWN_PLAYER, WRONG_PHASE,
)
from .hints import signal_type
from .models import GameState, Player
from .moves import DraftMove, EmoteMove, HintMove, Move, PlayMove, UndoMove

# Actions a valid move resolves to
ACTION_EMOTE = 'emote'
ACTION_DRAFT_PASS = 'draft_pass'
ACTION_DRAFT_PICK = 'draft_pick'
ACTION_BUFFER_HINT = 'buffer_hint'
ACTION_HINT = 'hint'
ACTION_PLAY = 'play'
ACTION_UNDO = 'undo'


class ValidationResult:
    """Result of move validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        action: Optional[str] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.action = action

    @classmethod
    def success(cls, action: str) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, action=action)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)

    def __repr__(self) -> str:
        if self.valid:
            return f"ValidationResult(valid=True, action={self.action!r})"
        return f"ValidationResult(valid=False, error_code={self.error_code!r})"


def validate_ownership(player: Player, card: str) -> bool:
    """Check if player holds the card."""
    return card in player.hand


def is_draft_phase(state: GameState) -> bool:
    return bool(state.missions)


def validate_draft(state: GameState, move: DraftMove) -> ValidationResult:
    """
    Validate a draft pick or pass.

    Only the player whose turn it is may draft.
    """
    active = state.active_player
    if active.guid != move.guid:
        return ValidationResult.error(
            NOT_YOUR_TURN,
            f"It's not your turn to draft (current turn: {state.whose_turn})"
        )

    if move.is_pass:
        if active.passes_remaining <= 0:
            return ValidationResult.error(
                NO_PASSES_LEFT,
                f"{active.seat} has no passes left"
            )
        return ValidationResult.success(ACTION_DRAFT_PASS)

    if not any(mission.id == move.id for mission in state.missions):
        return ValidationResult.error(
            UNKNOWN_MISSION,
            f"Mission {move.id} is not in the draft pool"
        )
    return ValidationResult.success(ACTION_DRAFT_PICK)


def validate_hint(state: GameState, move: HintMove) -> ValidationResult:
    """
    Validate a hint outside the draft.

    Hints sent while a trick is in progress are buffered until it resolves.
    """
    if state.active_trick.cards:
        return ValidationResult.success(ACTION_BUFFER_HINT)

    player = state.player_for_guid(move.guid)
    if not player:
        return ValidationResult.error(UNKNOWN_PLAYER, f"No player with guid {move.guid}")

    if move.card is not None:
        if not validate_ownership(player, move.card):
            return ValidationResult.error(
                OWNERSHIP_MISMATCH,
                f"{player.seat} does not hold {move.card}"
            )
        if signal_type(move.card, player.hand) is None:
            return ValidationResult.error(
                INVALID_HINT,
                f"{move.card} is neither the only, top nor bottom card of its suit"
            )

    return ValidationResult.success(ACTION_HINT)


def validate_play(
    state: GameState,
    move: PlayMove,
    plays_until_undo: Optional[int] = None
) -> ValidationResult:
    """
    Validate a card play.

    Args:
        state: Current game state
        move: The play
        plays_until_undo: Plays between this move and the undo that follows
            it in the log, when replaying; None for live moves

    Returns:
        ValidationResult with validation outcome
    """
    if state.is_complete():
        return ValidationResult.error(GAME_OVER, "Every trick has been played")

    active = state.active_player
    if active.guid != move.guid:
        return ValidationResult.error(
            NOT_YOUR_TURN,
            f"It's not your turn (current turn: {state.whose_turn})"
        )

    if not validate_ownership(active, move.card):
        return ValidationResult.error(
            OWNERSHIP_MISMATCH,
            f"{active.seat} does not hold {move.card}"
        )

    # A trick opened within num_players plays of an undo is the one undone
    if (
        plays_until_undo is not None and
        not state.active_trick.cards and
        plays_until_undo <= state.num_players
    ):
        return ValidationResult.error(
            SUPPRESSED_BY_UNDO,
            f"Trick opened by {move.card} was undone"
        )

    return ValidationResult.success(ACTION_PLAY)


def validate_move(
    state: GameState,
    move: Move,
    started: bool,
    plays_until_undo: Optional[int] = None
) -> ValidationResult:
    """
    Validate any move against the state it would be applied to.

    Args:
        state: Current game state
        move: Parsed move
        started: Whether the deal has started
        plays_until_undo: Undo suppression counter, only set during replay

    Returns:
        ValidationResult whose ``action`` tells the engine what to do
    """
    if not started:
        return ValidationResult.error(NOT_STARTED, "Game has not started")

    if isinstance(move, EmoteMove):
        if not state.player_for_guid(move.guid):
            return ValidationResult.error(UNKNOWN_PLAYER, f"No player with guid {move.guid}")
        return ValidationResult.success(ACTION_EMOTE)

    if isinstance(move, UndoMove):
        if state.undo_used:
            return ValidationResult.error(UNDO_ALREADY_USED, "Undo was already used this deal")
        return ValidationResult.success(ACTION_UNDO)

    if is_draft_phase(state):
        if isinstance(move, HintMove):
            return ValidationResult.success(ACTION_BUFFER_HINT)
        if not isinstance(move, DraftMove):
            return ValidationResult.error(
                WRONG_PHASE,
                f"Only draft moves are allowed during the draft, got {move.type.name}"
            )
        return validate_draft(state, move)

    if isinstance(move, DraftMove):
        return ValidationResult.error(WRONG_PHASE, "The draft is over")

    if isinstance(move, HintMove):
        return validate_hint(state, move)

    if isinstance(move, PlayMove):
        return validate_play(state, move, plays_until_undo)

    return ValidationResult.error(WRONG_PHASE, f"Unhandled move {move!r}")
