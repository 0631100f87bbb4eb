"""
Mission status evaluation.

A mission is pending until the tricks played so far force it one way. Each
objective kind has a ``passed`` handler and a ``failed`` handler; ``failed``
is only consulted once ``passed`` is false. Anything still pending when the
last trick resolves fails.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Type

from .comparator import find_winner, trick_contains_trump, trick_sum
from .constants import (
    COLOR_SUITS, MISSION_FAIL, MISSION_PASS, card_number, card_suit,
    cards_for_number, is_trump, suit_size,
)
from .missions import (
    AllCardsThreshold, AllOfOneColor, AvoidNumbers, AvoidSuits, EqualInTrick,
    ExactTricks, ExactTricksInARow, FinalTrickCapture, FirstAndLastTrick,
    FirstTricks, LastTricks, NeverInARow, NoneOfFirst, NotOpenWith, Objective,
    OneOfEveryColor, OnlyFirstTrick, OnlyLastTrick, ParityTrick,
    RelativeToCaptain, RelativeToOthers, SecretTrickCount, SuitComparison,
    SuitRequirement, TricksInARow, TrickTotal, WinCards, WinNumberCount,
    WinSuitCount, WinWithNumber, WinWithTrump,
)
from .models import GameState, Mission, Player, Trick
from .rules import RuleConfig

logger = logging.getLogger(__name__)


def longest_run(indices: Sequence[int]) -> int:
    """Length of the longest run of consecutive integers in sorted indices."""
    best = 0
    run = 0
    previous = None
    for index in indices:
        run = run + 1 if previous is not None and index == previous + 1 else 1
        best = max(best, run)
        previous = index
    return best


class MissionValidator:
    """Evaluates one player's missions against the tricks played so far."""

    def __init__(self, game_state: GameState, player: Player):
        self.game_state = game_state
        self.player = player
        self.invalid_game_state = False

        self.other_players = [
            p for p in game_state.active_players() if p.seat != player.seat
        ]

        self.played_tricks = game_state.completed_tricks()
        self.won_tricks = sorted(player.tricks, key=lambda trick: trick.index)
        self.lost_tricks = [trick for p in self.other_players for trick in p.tricks]

        self.played_cards = {card for trick in self.played_tricks for card in trick.card_values()}
        self.won_cards = {card for trick in self.won_tricks for card in trick.card_values()}
        self.lost_cards = {card for trick in self.lost_tricks for card in trick.card_values()}

        self.won_indices = [trick.index for trick in self.won_tricks]
        self.lost_indices = sorted(trick.index for trick in self.lost_tricks)

        self.captain: Optional[Player] = None
        if game_state.captain_seat in game_state.seating:
            self.captain = game_state.player_for_seat(game_state.captain_seat)
        else:
            logger.warning(f"Could not find the captain ({game_state.captain_seat}) among active seats")
            self.invalid_game_state = True

        if not 3 <= game_state.num_players <= 5:
            logger.warning(f"Unexpected number of players: {game_state.num_players}")
            self.invalid_game_state = True

    # Status

    def get_status(self, mission: Mission) -> Optional[str]:
        """
        Evaluate a mission.

        Returns:
            'pass', 'fail', or None while the outcome is still open
        """
        if self.invalid_game_state:
            logger.warning("Invalid game state, leaving missions pending")
            return None

        objective = mission.template
        passed = self.passed_handlers.get(type(objective))
        failed = self.failed_handlers.get(type(objective))
        if passed is None or failed is None:
            logger.warning(f"Unhandled mission kind {objective.kind} (mission {objective.id})")
            return None

        if passed(self, objective, mission):
            return MISSION_PASS
        if failed(self, objective, mission) or self.is_game_over():
            return MISSION_FAIL
        return None

    # Game progress

    def is_game_over(self) -> bool:
        return len(self.played_tricks) >= self.game_state.total_tricks

    @property
    def tricks_remaining(self) -> int:
        return self.game_state.total_tricks - len(self.played_tricks)

    @property
    def final_index(self) -> int:
        return self.game_state.total_tricks - 1

    def won_index(self, index: int) -> bool:
        return index in self.won_indices

    def lost_index(self, index: int) -> bool:
        return index in self.lost_indices

    def trailing_streak(self) -> int:
        """Consecutive tricks won up to and including the last one played."""
        streak = 0
        index = len(self.played_tricks) - 1
        while index >= 0 and self.won_index(index):
            streak += 1
            index -= 1
        return streak

    # Card bookkeeping

    def won_card(self, card: str) -> bool:
        return card in self.won_cards

    def lost_card(self, card: str) -> bool:
        return card in self.lost_cards

    def played_card(self, card: str) -> bool:
        return card in self.played_cards

    def num_won_in_suit(self, suit: str) -> int:
        return sum(1 for card in self.won_cards if card_suit(card) == suit)

    def num_lost_in_suit(self, suit: str) -> int:
        return sum(1 for card in self.lost_cards if card_suit(card) == suit)

    def num_played_in_suit(self, suit: str) -> int:
        return sum(1 for card in self.played_cards if card_suit(card) == suit)

    def num_won_for_number(self, number: int) -> int:
        return sum(1 for card in cards_for_number(number) if self.won_card(card))

    def num_lost_for_number(self, number: int) -> int:
        return sum(1 for card in cards_for_number(number) if self.lost_card(card))

    def num_played_for_number(self, number: int) -> int:
        return sum(1 for card in cards_for_number(number) if self.played_card(card))

    def unresolved_in_suit(self, suit: str) -> int:
        return suit_size(suit) - self.num_won_in_suit(suit) - self.num_lost_in_suit(suit)

    def led_with_suit(self, trick: Trick, suit: str) -> bool:
        lead_card, lead_seat = trick.cards[0]
        return lead_seat == self.player.seat and card_suit(lead_card) == suit

    def won_trick_where(self, predicate: Callable[[Trick], bool]) -> bool:
        return any(predicate(trick) for trick in self.won_tricks)

    def trick_all_colors(self, trick: Trick, predicate: Callable[[int], bool]) -> bool:
        return all(not is_trump(card) and predicate(card_number(card)) for card in trick.card_values())

    # Card identity

    def _passed_win_cards(self, objective: WinCards, mission: Mission) -> bool:
        return (
            all(self.won_card(card) for card in objective.win) and
            all(self.lost_card(card) for card in objective.avoid)
        )

    def _failed_win_cards(self, objective: WinCards, mission: Mission) -> bool:
        return (
            any(self.lost_card(card) for card in objective.win) or
            any(self.won_card(card) for card in objective.avoid)
        )

    def _passed_avoid_numbers(self, objective: AvoidNumbers, mission: Mission) -> bool:
        return all(
            self.num_lost_for_number(number) == len(COLOR_SUITS)
            for number in objective.numbers
        )

    def _failed_avoid_numbers(self, objective: AvoidNumbers, mission: Mission) -> bool:
        return any(self.num_won_for_number(number) > 0 for number in objective.numbers)

    def _passed_avoid_suits(self, objective: AvoidSuits, mission: Mission) -> bool:
        return all(self.num_lost_in_suit(suit) == suit_size(suit) for suit in objective.suits)

    def _failed_avoid_suits(self, objective: AvoidSuits, mission: Mission) -> bool:
        return any(self.num_won_in_suit(suit) > 0 for suit in objective.suits)

    def _passed_win_with_number(self, objective: WinWithNumber, mission: Mission) -> bool:
        def qualifies(trick: Trick) -> bool:
            winning_card, _ = find_winner(trick.cards)
            if is_trump(winning_card) or card_number(winning_card) != objective.with_number:
                return False
            if objective.capturing is None:
                return True
            return any(
                card != winning_card and not is_trump(card) and card_number(card) == objective.capturing
                for card in trick.card_values()
            )
        return self.won_trick_where(qualifies)

    def _failed_win_with_number(self, objective: WinWithNumber, mission: Mission) -> bool:
        if objective.capturing is not None and self.num_played_for_number(objective.capturing) == len(COLOR_SUITS):
            return True
        return self.num_played_for_number(objective.with_number) == len(COLOR_SUITS)

    def _passed_win_with_trump(self, objective: WinWithTrump, mission: Mission) -> bool:
        return self.won_trick_where(
            lambda trick: is_trump(find_winner(trick.cards)[0]) and objective.card in trick.card_values()
        )

    def _failed_win_with_trump(self, objective: WinWithTrump, mission: Mission) -> bool:
        return self.played_card(objective.card)

    def _passed_final_trick_capture(self, objective: FinalTrickCapture, mission: Mission) -> bool:
        return any(
            trick.index == self.final_index and objective.card in trick.card_values()
            for trick in self.won_tricks
        )

    def _failed_final_trick_capture(self, objective: FinalTrickCapture, mission: Mission) -> bool:
        return self.played_card(objective.card) or self.lost_index(self.final_index)

    # Counts

    def _passed_win_number_count(self, objective: WinNumberCount, mission: Mission) -> bool:
        num_won = self.num_won_for_number(objective.target)
        if objective.exact:
            return (
                num_won == objective.count and
                self.num_played_for_number(objective.target) == len(COLOR_SUITS)
            )
        return num_won >= objective.count

    def _failed_win_number_count(self, objective: WinNumberCount, mission: Mission) -> bool:
        allowed_to_lose = len(COLOR_SUITS) - objective.count
        if self.num_lost_for_number(objective.target) > allowed_to_lose:
            return True
        return objective.exact and self.num_won_for_number(objective.target) > objective.count

    def _requirement_met(self, requirement: SuitRequirement) -> bool:
        num_won = self.num_won_in_suit(requirement.suit)
        if requirement.exact:
            return (
                num_won == requirement.count and
                self.num_played_in_suit(requirement.suit) == suit_size(requirement.suit)
            )
        return num_won >= requirement.count

    def _requirement_broken(self, requirement: SuitRequirement) -> bool:
        allowed_to_lose = suit_size(requirement.suit) - requirement.count
        if self.num_lost_in_suit(requirement.suit) > allowed_to_lose:
            return True
        return requirement.exact and self.num_won_in_suit(requirement.suit) > requirement.count

    def _passed_win_suit_count(self, objective: WinSuitCount, mission: Mission) -> bool:
        return all(self._requirement_met(req) for req in objective.requirements)

    def _failed_win_suit_count(self, objective: WinSuitCount, mission: Mission) -> bool:
        return any(self._requirement_broken(req) for req in objective.requirements)

    def _passed_all_of_one_color(self, objective: AllOfOneColor, mission: Mission) -> bool:
        return any(self.num_won_in_suit(color) == suit_size(color) for color in COLOR_SUITS)

    def _failed_all_of_one_color(self, objective: AllOfOneColor, mission: Mission) -> bool:
        return all(self.num_lost_in_suit(color) > 0 for color in COLOR_SUITS)

    def _passed_one_of_every_color(self, objective: OneOfEveryColor, mission: Mission) -> bool:
        return all(self.num_won_in_suit(color) > 0 for color in COLOR_SUITS)

    def _failed_one_of_every_color(self, objective: OneOfEveryColor, mission: Mission) -> bool:
        return any(self.num_lost_in_suit(color) == suit_size(color) for color in COLOR_SUITS)

    def _passed_suit_comparison(self, objective: SuitComparison, mission: Mission) -> bool:
        won_a = self.num_won_in_suit(objective.first)
        won_b = self.num_won_in_suit(objective.second)
        if objective.comparator == '>':
            return won_a > won_b + self.unresolved_in_suit(objective.second)
        return (
            self.unresolved_in_suit(objective.first) == 0 and
            self.unresolved_in_suit(objective.second) == 0 and
            won_a == won_b
        )

    def _failed_suit_comparison(self, objective: SuitComparison, mission: Mission) -> bool:
        won_a = self.num_won_in_suit(objective.first)
        won_b = self.num_won_in_suit(objective.second)
        best_a = won_a + self.unresolved_in_suit(objective.first)
        best_b = won_b + self.unresolved_in_suit(objective.second)
        if objective.comparator == '>':
            return best_a <= won_b
        return best_a < won_b or best_b < won_a

    # Single-trick shapes

    def _passed_trick_total(self, objective: TrickTotal, mission: Mission) -> bool:
        column = self.game_state.num_players - 3
        lower = objective.lower[column] if objective.lower else None
        upper = objective.upper[column] if objective.upper else None

        def qualifies(trick: Trick) -> bool:
            total = trick_sum(trick.cards)
            return (
                not trick_contains_trump(trick.cards) and
                (lower is None or lower < total) and
                (upper is None or total < upper)
            )
        return self.won_trick_where(qualifies)

    def _passed_all_cards_threshold(self, objective: AllCardsThreshold, mission: Mission) -> bool:
        if objective.greater:
            return self.won_trick_where(
                lambda trick: self.trick_all_colors(trick, lambda n: n > objective.value)
            )
        return self.won_trick_where(
            lambda trick: self.trick_all_colors(trick, lambda n: n < objective.value)
        )

    def _passed_parity_trick(self, objective: ParityTrick, mission: Mission) -> bool:
        remainder = 1 if objective.parity == 'odd' else 0
        return self.won_trick_where(
            lambda trick: self.trick_all_colors(trick, lambda n: n % 2 == remainder)
        )

    def _passed_equal_in_trick(self, objective: EqualInTrick, mission: Mission) -> bool:
        def qualifies(trick: Trick) -> bool:
            suits = [card_suit(card) for card in trick.card_values()]
            count_a = suits.count(objective.first)
            return count_a > 0 and count_a == suits.count(objective.second)
        return self.won_trick_where(qualifies)

    def _failed_at_game_end(self, objective: Objective, mission: Mission) -> bool:
        return False

    def _passed_not_open_with(self, objective: NotOpenWith, mission: Mission) -> bool:
        def settled(suit: str) -> bool:
            can_still_lead = any(card_suit(card) == suit for card in self.player.hand)
            return (
                (not can_still_lead or self.num_played_in_suit(suit) == suit_size(suit)) and
                not any(self.led_with_suit(trick, suit) for trick in self.played_tricks)
            )
        return all(settled(suit) for suit in objective.suits)

    def _failed_not_open_with(self, objective: NotOpenWith, mission: Mission) -> bool:
        return any(
            self.led_with_suit(trick, suit)
            for suit in objective.suits
            for trick in self.played_tricks
        )

    # Relative trick counts

    def _passed_relative_to_captain(self, objective: RelativeToCaptain, mission: Mission) -> bool:
        won = len(self.won_tricks)
        captain_won = len(self.captain.tricks)
        remaining = self.tricks_remaining
        if objective.comparator == 'more':
            return won > captain_won + remaining
        if objective.comparator == 'fewer':
            return won + remaining < captain_won
        return remaining == 0 and won == captain_won

    def _failed_relative_to_captain(self, objective: RelativeToCaptain, mission: Mission) -> bool:
        won = len(self.won_tricks)
        captain_won = len(self.captain.tricks)
        remaining = self.tricks_remaining
        if objective.comparator == 'more':
            return won + remaining <= captain_won
        if objective.comparator == 'fewer':
            return won >= captain_won + remaining
        return abs(won - captain_won) > remaining

    def _other_counts(self) -> List[int]:
        return [len(p.tricks) for p in self.other_players] or [0]

    def _passed_relative_to_others(self, objective: RelativeToOthers, mission: Mission) -> bool:
        won = len(self.won_tricks)
        others = self._other_counts()
        remaining = self.tricks_remaining
        if objective.comparator == 'more':
            return won > max(others) + remaining
        if objective.comparator == 'fewer':
            return won + remaining < min(others)
        return won > sum(others) + remaining

    def _failed_relative_to_others(self, objective: RelativeToOthers, mission: Mission) -> bool:
        won = len(self.won_tricks)
        others = self._other_counts()
        remaining = self.tricks_remaining
        if objective.comparator == 'more':
            return won + remaining <= max(others)
        if objective.comparator == 'fewer':
            # Every other player still needs to overtake the current count
            needed = sum(max(0, won + 1 - count) for count in others)
            return needed > remaining
        return won + remaining <= sum(others)

    # Trick order

    def _passed_first_tricks(self, objective: FirstTricks, mission: Mission) -> bool:
        return all(self.won_index(index) for index in range(objective.n))

    def _failed_first_tricks(self, objective: FirstTricks, mission: Mission) -> bool:
        return any(self.lost_index(index) for index in range(objective.n))

    def _last_window(self, n: int) -> range:
        total = self.game_state.total_tricks
        return range(total - n, total)

    def _passed_last_tricks(self, objective: LastTricks, mission: Mission) -> bool:
        return all(self.won_index(index) for index in self._last_window(objective.n))

    def _failed_last_tricks(self, objective: LastTricks, mission: Mission) -> bool:
        return any(self.lost_index(index) for index in self._last_window(objective.n))

    def _passed_first_and_last(self, objective: FirstAndLastTrick, mission: Mission) -> bool:
        return self.won_index(0) and self.won_index(self.final_index)

    def _failed_first_and_last(self, objective: FirstAndLastTrick, mission: Mission) -> bool:
        return self.lost_index(0) or self.lost_index(self.final_index)

    def _passed_only_first(self, objective: OnlyFirstTrick, mission: Mission) -> bool:
        return self.is_game_over() and self.won_indices == [0]

    def _failed_only_first(self, objective: OnlyFirstTrick, mission: Mission) -> bool:
        return self.lost_index(0) or any(index > 0 for index in self.won_indices)

    def _passed_only_last(self, objective: OnlyLastTrick, mission: Mission) -> bool:
        return self.won_indices == [self.final_index]

    def _failed_only_last(self, objective: OnlyLastTrick, mission: Mission) -> bool:
        return (
            any(index < self.final_index for index in self.won_indices) or
            self.lost_index(self.final_index)
        )

    def _passed_exact_count(self, n: Optional[int]) -> bool:
        return n is not None and self.is_game_over() and len(self.won_tricks) == n

    def _failed_exact_count(self, n: Optional[int]) -> bool:
        if n is None:
            return False
        won = len(self.won_tricks)
        return won > n or won + self.tricks_remaining < n

    def _passed_exact_tricks(self, objective: ExactTricks, mission: Mission) -> bool:
        return self._passed_exact_count(objective.n)

    def _failed_exact_tricks(self, objective: ExactTricks, mission: Mission) -> bool:
        return self._failed_exact_count(objective.n)

    def _passed_secret_trick_count(self, objective: SecretTrickCount, mission: Mission) -> bool:
        return self._passed_exact_count(mission.secret_x)

    def _failed_secret_trick_count(self, objective: SecretTrickCount, mission: Mission) -> bool:
        return self._failed_exact_count(mission.secret_x)

    def _passed_none_of_first(self, objective: NoneOfFirst, mission: Mission) -> bool:
        return (
            len(self.played_tricks) >= objective.n and
            not any(index < objective.n for index in self.won_indices)
        )

    def _failed_none_of_first(self, objective: NoneOfFirst, mission: Mission) -> bool:
        return any(index < objective.n for index in self.won_indices)

    def _passed_tricks_in_a_row(self, objective: TricksInARow, mission: Mission) -> bool:
        return longest_run(self.won_indices) >= objective.n

    def _failed_tricks_in_a_row(self, objective: TricksInARow, mission: Mission) -> bool:
        return self.trailing_streak() + self.tricks_remaining < objective.n

    def _passed_exact_in_a_row(self, objective: ExactTricksInARow, mission: Mission) -> bool:
        return (
            self.is_game_over() and
            len(self.won_indices) == objective.n and
            longest_run(self.won_indices) == objective.n
        )

    def _failed_exact_in_a_row(self, objective: ExactTricksInARow, mission: Mission) -> bool:
        won = len(self.won_indices)
        if won > objective.n or won + self.tricks_remaining < objective.n:
            return True
        if longest_run(self.won_indices) != won:
            return True
        # The run stopped short and any further win would start a second run
        return 0 < won < objective.n and self.trailing_streak() == 0

    def _passed_never_in_a_row(self, objective: NeverInARow, mission: Mission) -> bool:
        return self.is_game_over() and longest_run(self.won_indices) < objective.n

    def _failed_never_in_a_row(self, objective: NeverInARow, mission: Mission) -> bool:
        return longest_run(self.won_indices) >= objective.n

    passed_handlers: Dict[Type[Objective], Callable] = {
        WinCards: _passed_win_cards,
        AvoidNumbers: _passed_avoid_numbers,
        AvoidSuits: _passed_avoid_suits,
        WinWithNumber: _passed_win_with_number,
        WinWithTrump: _passed_win_with_trump,
        FinalTrickCapture: _passed_final_trick_capture,
        WinNumberCount: _passed_win_number_count,
        WinSuitCount: _passed_win_suit_count,
        AllOfOneColor: _passed_all_of_one_color,
        OneOfEveryColor: _passed_one_of_every_color,
        SuitComparison: _passed_suit_comparison,
        TrickTotal: _passed_trick_total,
        AllCardsThreshold: _passed_all_cards_threshold,
        ParityTrick: _passed_parity_trick,
        EqualInTrick: _passed_equal_in_trick,
        NotOpenWith: _passed_not_open_with,
        RelativeToCaptain: _passed_relative_to_captain,
        RelativeToOthers: _passed_relative_to_others,
        FirstTricks: _passed_first_tricks,
        LastTricks: _passed_last_tricks,
        FirstAndLastTrick: _passed_first_and_last,
        OnlyFirstTrick: _passed_only_first,
        OnlyLastTrick: _passed_only_last,
        ExactTricks: _passed_exact_tricks,
        SecretTrickCount: _passed_secret_trick_count,
        NoneOfFirst: _passed_none_of_first,
        TricksInARow: _passed_tricks_in_a_row,
        ExactTricksInARow: _passed_exact_in_a_row,
        NeverInARow: _passed_never_in_a_row,
    }

    failed_handlers: Dict[Type[Objective], Callable] = {
        WinCards: _failed_win_cards,
        AvoidNumbers: _failed_avoid_numbers,
        AvoidSuits: _failed_avoid_suits,
        WinWithNumber: _failed_win_with_number,
        WinWithTrump: _failed_win_with_trump,
        FinalTrickCapture: _failed_final_trick_capture,
        WinNumberCount: _failed_win_number_count,
        WinSuitCount: _failed_win_suit_count,
        AllOfOneColor: _failed_all_of_one_color,
        OneOfEveryColor: _failed_one_of_every_color,
        SuitComparison: _failed_suit_comparison,
        TrickTotal: _failed_at_game_end,
        AllCardsThreshold: _failed_at_game_end,
        ParityTrick: _failed_at_game_end,
        EqualInTrick: _failed_at_game_end,
        NotOpenWith: _failed_not_open_with,
        RelativeToCaptain: _failed_relative_to_captain,
        RelativeToOthers: _failed_relative_to_others,
        FirstTricks: _failed_first_tricks,
        LastTricks: _failed_last_tricks,
        FirstAndLastTrick: _failed_first_and_last,
        OnlyFirstTrick: _failed_only_first,
        OnlyLastTrick: _failed_only_last,
        ExactTricks: _failed_exact_tricks,
        SecretTrickCount: _failed_secret_trick_count,
        NoneOfFirst: _failed_none_of_first,
        TricksInARow: _failed_tricks_in_a_row,
        ExactTricksInARow: _failed_exact_in_a_row,
        NeverInARow: _failed_never_in_a_row,
    }


def update_mission_statuses(game_state: GameState, rules: Optional[RuleConfig] = None):
    """
    Re-evaluate every pending mission after a trick resolves.

    Settled missions keep their status.
    """
    if rules is not None and not rules.validate_missions:
        return

    for player in game_state.players:
        if not player.missions:
            continue
        validator = MissionValidator(game_state, player)
        for mission in player.missions:
            if mission.status is None:
                mission.status = validator.get_status(mission)


def all_missions_passed(game_state: GameState) -> bool:
    missions = [mission for player in game_state.players for mission in player.missions]
    return bool(missions) and all(mission.status == MISSION_PASS for mission in missions)
