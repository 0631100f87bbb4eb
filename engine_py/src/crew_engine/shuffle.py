"""
Card shuffling and dealing utilities.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .comparator import sort_hand
from .constants import CAPTAIN_CARD, DECK, SEATS
from .missions import MISSIONS, Objective
from .models import GameState
from .rand import Sfc32, shuffle

logger = logging.getLogger(__name__)


def shuffle_deal(seeds: Sequence[int]) -> Tuple[List[str], List[Objective]]:
    """
    Shuffle the deck and the mission catalog for one deal.

    Both draws come from a single generator: the deck is shuffled first and
    the catalog continues from where the deck left off.

    Args:
        seeds: The four 32-bit seeds of the deal

    Returns:
        Tuple of (shuffled deck, shuffled catalog)
    """
    rng = Sfc32(*seeds)
    shuffled_deck = shuffle(DECK, rng)
    shuffled_missions = shuffle(MISSIONS, rng)
    return shuffled_deck, shuffled_missions


def tricks_per_deal(num_players: int) -> int:
    return len(DECK) // num_players


def deal_hands(
    deck: Sequence[str],
    seating: Sequence[str]
) -> Tuple[Dict[str, List[str]], Optional[str]]:
    """
    Deal contiguous chunks of the shuffled deck to the active seats.

    Seats are walked in seat order (seat1..seat5), not seating order. The
    holder of the captain card becomes captain; in a three player game the
    captain also takes the next undealt card and later seats deal after it.

    Args:
        deck: Shuffled deck
        seating: Active seats

    Returns:
        Tuple of (sorted hand per seat, captain seat or None). Inactive seats
        get empty hands.
    """
    hands: Dict[str, List[str]] = {}
    captain: Optional[str] = None
    per_player = tricks_per_deal(len(seating))

    card_idx = 0
    for seat in SEATS:
        if seat not in seating:
            hands[seat] = []
            continue

        end_idx = card_idx + per_player
        hand = list(deck[card_idx:end_idx])

        if CAPTAIN_CARD in hand:
            captain = seat
            if len(seating) == 3:
                hand.append(deck[end_idx])
                end_idx += 1

        card_idx = end_idx
        hands[seat] = sort_hand(hand)

    return hands, captain


def appoint_captain(hands: Dict[str, List[str]], seating: Sequence[str]) -> str:
    """
    Appoint the first active seat as captain when nobody was dealt the
    captain card, handing it the card.
    """
    captain = seating[0]
    hands[captain].append(CAPTAIN_CARD)
    logger.info(f"No seat was dealt {CAPTAIN_CARD}, appointed {captain} as captain")
    return captain


def validate_deck_integrity(state: GameState) -> bool:
    """
    Validate that all cards are accounted for and no duplicates exist.

    Args:
        state: Game state to validate

    Returns:
        True if hands, the active trick and every won trick together hold
        exactly one copy of each card
    """
    all_cards = []

    for player in state.players:
        all_cards.extend(player.hand)
        for trick in player.tricks:
            all_cards.extend(trick.card_values())

    all_cards.extend(state.active_trick.card_values())

    return (
        len(all_cards) == len(set(all_cards)) and
        set(all_cards) == set(DECK)
    )
