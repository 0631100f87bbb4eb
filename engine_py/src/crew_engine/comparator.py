"""
Card comparison and trick resolution.
"""

from functools import cmp_to_key
from typing import List, Sequence, Tuple

from .constants import card_number, card_suit, is_trump

CardWithSeat = Tuple[str, str]


def sort_hand(hand: Sequence[str]) -> List[str]:
    """
    Sort a hand of cards.

    Card ids sort by suit letter then number; trump ids are lowercase so
    they land after every color.
    """
    return sorted(hand)


def compare_cards(card_a: str, card_b: str) -> int:
    """
    Compare two cards within a trick.

    Returns:
        < 0 if card_a ranks below card_b
        0 if they are the same card
        > 0 if card_a ranks above card_b

    Cards of two different colors compare by number only; callers resolve
    tricks through ``find_winner`` which restricts to the lead suit first.
    """
    if is_trump(card_a) != is_trump(card_b):
        return 1 if is_trump(card_a) else -1
    return card_number(card_a) - card_number(card_b)


def lead_suit(trick_cards: Sequence[CardWithSeat]) -> str:
    return card_suit(trick_cards[0][0])


def find_winner(trick_cards: Sequence[CardWithSeat]) -> CardWithSeat:
    """
    Find the winning play of a trick.

    Args:
        trick_cards: (card, seat) pairs in play order

    Returns:
        The winning (card, seat) pair; the highest trump if any trump was
        played, otherwise the highest card of the lead suit.
    """
    if not trick_cards:
        raise ValueError("Cannot resolve an empty trick")

    candidates = [play for play in trick_cards if is_trump(play[0])]
    if not candidates:
        suit = lead_suit(trick_cards)
        candidates = [play for play in trick_cards if card_suit(play[0]) == suit]

    return max(candidates, key=cmp_to_key(lambda a, b: compare_cards(a[0], b[0])))


def trick_sum(trick_cards: Sequence[CardWithSeat]) -> int:
    return sum(card_number(card) for card, _ in trick_cards)


def trick_contains_trump(trick_cards: Sequence[CardWithSeat]) -> bool:
    return any(is_trump(card) for card, _ in trick_cards)
