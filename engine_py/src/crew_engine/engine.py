"""
Game engine: rebuilds a deal from its seeds and move log, and applies moves.

The move log is the only source of truth. ``initialize_game_state`` replays
it from scratch; ``apply_move`` advances an existing state by one move and
never raises, dropped moves are logged and reported through the returned
``ValidationResult``.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from .comparator import find_winner
from .constants import (
    PHASE_AWAITING_START, PHASE_GAME_OVER, PHASE_MISSION_DRAFT, PHASE_TRICK_PLAY,
    SEATS,
)
from .hints import Hint, signal_type
from .mission_status import all_missions_passed, update_mission_statuses
from .models import GameState, Mission, Player, ServerState, Trick
from .moves import DraftMove, HintMove, Move, PlayMove, UndoMove, serialize_move
from .missions import allocate_missions
from .rules import RuleConfig, default_rules
from .shuffle import appoint_captain, deal_hands, shuffle_deal, tricks_per_deal
from .validate import (
    ACTION_BUFFER_HINT, ACTION_DRAFT_PASS, ACTION_DRAFT_PICK, ACTION_EMOTE,
    ACTION_HINT, ACTION_PLAY, ACTION_UNDO, ValidationResult, validate_move,
)

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    AWAITING_START = PHASE_AWAITING_START
    MISSION_DRAFT = PHASE_MISSION_DRAFT
    TRICK_PLAY = PHASE_TRICK_PLAY
    GAME_OVER = PHASE_GAME_OVER


def game_phase(state: GameState, server_state: ServerState) -> GamePhase:
    if not server_state.is_started:
        return GamePhase.AWAITING_START
    if state.missions:
        return GamePhase.MISSION_DRAFT
    if state.is_complete():
        return GamePhase.GAME_OVER
    return GamePhase.TRICK_PLAY


def empty_players(server_state: ServerState, passes: int) -> List[Player]:
    players = []
    for i, seat in enumerate(SEATS):
        guid, name = server_state.seat_assignment(seat)
        players.append(Player(seat=seat, idx=i + 1, name=name, guid=guid, passes_remaining=passes))
    return players


def compute_plays_until_undo(moves: Sequence[Move], num_players: int) -> List[int]:
    """
    Count, for every move, the plays between it and the undo after it.

    Walks the log backwards. Only the first undo of the log resets the
    counter; later undos are no-ops and do not truncate anything. Moves with
    no undo after them get a count above ``num_players``.

    Args:
        moves: Parsed move log
        num_players: Active player count

    Returns:
        One count per move, aligned with ``moves``
    """
    first_undo = next(
        (i for i, move in enumerate(moves) if isinstance(move, UndoMove)),
        None
    )

    counts = [0] * len(moves)
    counter = num_players + 1
    for i in range(len(moves) - 1, -1, -1):
        if i == first_undo:
            counter = 0
        if isinstance(moves[i], PlayMove):
            counter += 1
        counts[i] = counter
    return counts


def initialize_game_state(
    server_state: ServerState,
    moves: Sequence[Move] = (),
    viewer_guid: Optional[str] = None,
    rules: Optional[RuleConfig] = None
) -> GameState:
    """
    Rebuild a deal from scratch.

    Args:
        server_state: Seeds, seating and target of the deal
        moves: Parsed move log, in append order
        viewer_guid: Participant this state is built for; their secret X
            values are mirrored to the public field
        rules: Rule configuration (defaults to ``default_rules``)

    Returns:
        The state after replaying every move
    """
    rules = rules or default_rules
    seating = list(server_state.starting_seats)
    state = GameState(players=empty_players(server_state, rules.passes_per_player))
    state.seating = seating
    state.num_players = len(seating)

    if not seating:
        logger.debug("No starting seats, nothing to deal")
        return state

    if not rules.validate_player_count(len(seating)):
        logger.warning(f"Dealing for {len(seating)} players, outside {rules.min_players}-{rules.max_players}")

    shuffled_deck, shuffled_missions = shuffle_deal(server_state.seeds)
    state.total_tricks = tricks_per_deal(len(seating))

    target = server_state.target or rules.default_target
    state.missions = allocate_missions(shuffled_missions, len(seating), target)

    hands, captain = deal_hands(shuffled_deck, seating)
    if captain is None:
        captain = appoint_captain(hands, seating)
    for player in state.players:
        player.hand = hands[player.seat]

    state.captain_seat = captain
    state.set_turn(captain)
    logger.debug(
        f"Dealt {state.total_tricks} tricks to {seating}, captain {captain}, "
        f"missions {[mission.id for mission in state.missions]}"
    )

    plays_until_undo = compute_plays_until_undo(moves, state.num_players)
    for move, count in zip(moves, plays_until_undo):
        apply_move(state, move, server_state, count, viewer_guid, rules)

    return state


def flush_pending_hints(
    state: GameState,
    server_state: ServerState,
    viewer_guid: Optional[str] = None,
    rules: Optional[RuleConfig] = None
):
    """Apply every buffered hint in arrival order."""
    if state.pending_hints:
        logger.debug(f"Applying {len(state.pending_hints)} buffered hints")
    for guid, hint in state.pending_hints.flush():
        if hint is None:
            move = HintMove(guid=guid)
        else:
            move = HintMove(guid=guid, card=hint.card, hint_type=hint.type or None)
        apply_move(state, move, server_state, None, viewer_guid, rules)


def apply_move(
    state: GameState,
    move: Move,
    server_state: ServerState,
    plays_until_undo: Optional[int] = None,
    viewer_guid: Optional[str] = None,
    rules: Optional[RuleConfig] = None
) -> ValidationResult:
    """
    Apply one move in place.

    Args:
        state: State to advance
        move: Parsed move
        server_state: Deal configuration, for the started check
        plays_until_undo: Undo suppression counter during replay
        viewer_guid: Participant the state is built for
        rules: Rule configuration

    Returns:
        ValidationResult; invalid moves leave the state untouched
    """
    result = validate_move(state, move, server_state.is_started, plays_until_undo)
    if not result.valid:
        logger.debug(f"Dropped move {serialize_move(move)}: [{result.error_code}] {result.error_message}")
        return result

    if result.action == ACTION_EMOTE:
        state.player_for_guid(move.guid).emote = move.emote

    elif result.action == ACTION_BUFFER_HINT:
        state.pending_hints.set(move.guid, move.hint)

    elif result.action == ACTION_HINT:
        _apply_hint(state, move)

    elif result.action == ACTION_DRAFT_PASS:
        state.active_player.passes_remaining -= 1
        state.set_turn(state.next_seat())

    elif result.action == ACTION_DRAFT_PICK:
        _apply_draft_pick(state, move, server_state, viewer_guid, rules)

    elif result.action == ACTION_PLAY:
        _apply_play(state, move, server_state, viewer_guid, rules)

    elif result.action == ACTION_UNDO:
        state.undo_used = True
        logger.info(f"Undo requested by {move.guid}")

    return result


def _apply_hint(state: GameState, move: HintMove):
    player = state.player_for_guid(move.guid)
    if move.card is None:
        player.hint = None
        return
    player.hint = Hint(card=move.card, type=signal_type(move.card, player.hand))


def _apply_draft_pick(
    state: GameState,
    move: DraftMove,
    server_state: ServerState,
    viewer_guid: Optional[str],
    rules: Optional[RuleConfig]
):
    active = state.active_player
    idx = next(i for i, template in enumerate(state.missions) if template.id == move.id)
    template = state.missions.pop(idx)

    mission = Mission(template=template)
    if move.x is not None and template.has_secret_x:
        mission.secret_x = move.x
        if template.x_is_public or (viewer_guid and active.guid == viewer_guid):
            mission.x = move.x
    active.missions.append(mission)

    if state.missions:
        state.set_turn(state.next_seat())
        return

    state.set_turn(state.captain_seat)
    logger.debug(f"Draft complete, {state.captain_seat} leads")
    flush_pending_hints(state, server_state, viewer_guid, rules)


def _apply_play(
    state: GameState,
    move: PlayMove,
    server_state: ServerState,
    viewer_guid: Optional[str],
    rules: Optional[RuleConfig]
):
    active = state.active_player
    trick = state.active_trick

    trick.cards.append((move.card, active.seat))
    active.hand.remove(move.card)
    if active.hint and active.hint.card == move.card:
        active.hint.played = True

    if len(trick.cards) < state.num_players:
        state.set_turn(state.next_seat())
        return

    _, winner_seat = find_winner(trick.cards)
    winner = state.player_for_seat(winner_seat)
    winner.tricks.append(trick)
    state.previous_trick = trick.copy()
    state.active_trick = Trick(index=trick.index + 1)
    state.set_turn(winner_seat)

    flush_pending_hints(state, server_state, viewer_guid, rules)
    update_mission_statuses(state, rules)
    state.succeeded = all_missions_passed(state)

    if state.is_complete():
        logger.info(f"Final trick won by {winner_seat}, succeeded={state.succeeded}")
