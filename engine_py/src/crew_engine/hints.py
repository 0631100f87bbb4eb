"""
Signals: classifying a hinted card and buffering hints that arrive while
they cannot be applied.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import HINT_BOTTOM, HINT_ONLY, HINT_TOP, card_number, card_suit


@dataclass
class Hint:
    card: str
    type: str  # top|only|bottom
    played: bool = False


def signal_type(card: str, hand: Sequence[str]) -> Optional[str]:
    """
    Classify a card against the rest of its suit in a hand.

    Returns:
        'only' when no other card of the suit is held, 'top' when it is the
        highest, 'bottom' when it is the lowest, None when it is neither.
    """
    suit = card_suit(card)
    is_only = True
    is_biggest = True
    is_smallest = True

    for other in hand:
        if other == card or card_suit(other) != suit:
            continue
        is_only = False
        if card_number(other) > card_number(card):
            is_biggest = False
        else:
            is_smallest = False

    if is_only:
        return HINT_ONLY
    if is_biggest:
        return HINT_TOP
    if is_smallest:
        return HINT_BOTTOM
    return None


class PendingHints:
    """Per-sender buffer of hints waiting for the draft or a trick to end."""

    def __init__(self):
        self._pending: Dict[str, Optional[Hint]] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def set(self, guid: str, hint: Optional[Hint]):
        # Last write wins but keeps the sender's first position
        self._pending[guid] = hint

    def flush(self) -> List[Tuple[str, Optional[Hint]]]:
        """Return buffered hints in arrival order and empty the buffer."""
        entries = list(self._pending.items())
        self._pending = {}
        return entries
