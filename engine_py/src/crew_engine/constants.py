"""Game constants and utilities"""

from typing import List, Optional

COLOR_SUITS = ['B', 'P', 'Y', 'G']
TRUMP_SUIT = 's'

COLOR_RANKS = list(range(1, 10))
TRUMP_RANKS = list(range(1, 5))

# The lead trump decides the captain
CAPTAIN_CARD = 's4'

SEATS = ['seat1', 'seat2', 'seat3', 'seat4', 'seat5']

# Server status
STATUS_WAITING = 'waiting'
STATUS_STARTED = 'started'

# Derived game phases
PHASE_AWAITING_START = 'awaiting_start'
PHASE_MISSION_DRAFT = 'mission_draft'
PHASE_TRICK_PLAY = 'trick_play'
PHASE_GAME_OVER = 'game_over'

# Mission status
MISSION_PASS = 'pass'
MISSION_FAIL = 'fail'

# Signals
HINT_TOP = 'top'
HINT_ONLY = 'only'
HINT_BOTTOM = 'bottom'
HINT_TYPES = [HINT_TOP, HINT_ONLY, HINT_BOTTOM]

EMOTES = ['distress', 'winnable', 'trust', 'none']

DRAFT_PASS = 'pass'
DEFAULT_TARGET = 12
DEFAULT_PASSES = 2


def create_deck() -> List[str]:
    deck = []
    for suit in COLOR_SUITS:
        for rank in COLOR_RANKS:
            deck.append(f"{suit}{rank}")
    for rank in TRUMP_RANKS:
        deck.append(f"{TRUMP_SUIT}{rank}")
    return deck


DECK = create_deck()


def is_card(value: Optional[str]) -> bool:
    return value in DECK


def card_suit(card: str) -> str:
    return card[0]


def card_number(card: str) -> int:
    return int(card[1:])


def is_trump(card: str) -> bool:
    return card_suit(card) == TRUMP_SUIT


def suit_size(suit: str) -> int:
    """Number of cards that exist in a suit."""
    return len(TRUMP_RANKS) if suit == TRUMP_SUIT else len(COLOR_RANKS)


def cards_for_number(number: int) -> List[str]:
    """All color cards carrying the given number (trumps excluded)."""
    return [f"{suit}{number}" for suit in COLOR_SUITS]
