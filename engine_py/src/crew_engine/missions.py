"""
Mission catalog.

Every objective template is one of a fixed set of kinds. A kind is a frozen
dataclass holding only the parameters that kind needs; the validator keeps
one ``passed`` and one ``failed`` handler per kind.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

Points = Tuple[int, int, int]  # cost for 3, 4 and 5 players


@dataclass(frozen=True)
class Objective:
    id: str
    points: Points

    @property
    def kind(self) -> str:
        return type(self).__name__

    def points_for(self, num_players: int) -> int:
        return self.points[num_players - 3]

    @property
    def has_secret_x(self) -> bool:
        return False


# Card identity

@dataclass(frozen=True)
class WinCards(Objective):
    """I will win {win} (and not {avoid})."""
    win: Tuple[str, ...]
    avoid: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AvoidNumbers(Objective):
    numbers: Tuple[int, ...]


@dataclass(frozen=True)
class AvoidSuits(Objective):
    suits: Tuple[str, ...]


@dataclass(frozen=True)
class WinWithNumber(Objective):
    """I will win a trick using a {with_number} (capturing a {capturing})."""
    with_number: int
    capturing: Optional[int] = None


@dataclass(frozen=True)
class WinWithTrump(Objective):
    """I will win {card} with a trump."""
    card: str


@dataclass(frozen=True)
class FinalTrickCapture(Objective):
    card: str


# Counts

@dataclass(frozen=True)
class WinNumberCount(Objective):
    target: int
    count: int
    exact: bool


@dataclass(frozen=True)
class SuitRequirement:
    suit: str
    count: int
    exact: bool


@dataclass(frozen=True)
class WinSuitCount(Objective):
    requirements: Tuple[SuitRequirement, ...]


@dataclass(frozen=True)
class AllOfOneColor(Objective):
    pass


@dataclass(frozen=True)
class OneOfEveryColor(Objective):
    pass


@dataclass(frozen=True)
class SuitComparison(Objective):
    """In total, I will win {first} {comparator} {second}."""
    first: str
    second: str
    comparator: str  # '>' or '='


# Single-trick shapes

@dataclass(frozen=True)
class TrickTotal(Objective):
    """Win a trick without trumps where lower < total < upper."""
    lower: Optional[Points] = None
    upper: Optional[Points] = None


@dataclass(frozen=True)
class AllCardsThreshold(Objective):
    value: int
    greater: bool


@dataclass(frozen=True)
class ParityTrick(Objective):
    parity: str  # 'odd' or 'even'


@dataclass(frozen=True)
class EqualInTrick(Objective):
    first: str
    second: str


@dataclass(frozen=True)
class NotOpenWith(Objective):
    suits: Tuple[str, ...]


# Relative trick counts

@dataclass(frozen=True)
class RelativeToCaptain(Objective):
    comparator: str  # more|fewer|as many


@dataclass(frozen=True)
class RelativeToOthers(Objective):
    comparator: str  # more|fewer|more combined


# Trick order and trick counts

@dataclass(frozen=True)
class FirstTricks(Objective):
    n: int


@dataclass(frozen=True)
class LastTricks(Objective):
    n: int


@dataclass(frozen=True)
class FirstAndLastTrick(Objective):
    pass


@dataclass(frozen=True)
class OnlyFirstTrick(Objective):
    pass


@dataclass(frozen=True)
class OnlyLastTrick(Objective):
    pass


@dataclass(frozen=True)
class ExactTricks(Objective):
    n: int


@dataclass(frozen=True)
class SecretTrickCount(Objective):
    """I will win exactly X tricks, X chosen when drafting."""
    x_is_public: bool

    @property
    def has_secret_x(self) -> bool:
        return True


@dataclass(frozen=True)
class NoneOfFirst(Objective):
    n: int


@dataclass(frozen=True)
class TricksInARow(Objective):
    n: int


@dataclass(frozen=True)
class ExactTricksInARow(Objective):
    n: int


@dataclass(frozen=True)
class NeverInARow(Objective):
    n: int


OBJECTIVE_KINDS = (
    WinCards, AvoidNumbers, AvoidSuits, WinWithNumber, WinWithTrump,
    FinalTrickCapture, WinNumberCount, WinSuitCount, AllOfOneColor,
    OneOfEveryColor, SuitComparison, TrickTotal, AllCardsThreshold,
    ParityTrick, EqualInTrick, NotOpenWith, RelativeToCaptain,
    RelativeToOthers, FirstTricks, LastTricks, FirstAndLastTrick,
    OnlyFirstTrick, OnlyLastTrick, ExactTricks, SecretTrickCount,
    NoneOfFirst, TricksInARow, ExactTricksInARow, NeverInARow,
)


def _suits(*requirements: Tuple[str, int, bool]) -> Tuple[SuitRequirement, ...]:
    return tuple(SuitRequirement(suit, count, exact) for suit, count, exact in requirements)


# Catalog order feeds the seeded shuffle and must not change
MISSIONS: List[Objective] = [
    WinCards('93', (1, 1, 1), ('G6',)),
    WinCards('92', (1, 1, 1), ('P3',)),
    WinCards('91', (1, 1, 1), ('Y1',)),
    WinCards('90', (1, 1, 1), ('B4',)),
    WinCards('89', (3, 4, 5), ('B3', 'P3', 'G3', 'Y3')),
    WinCards('88', (3, 4, 5), ('B9', 'P9', 'G9', 'Y9')),
    WinCards('87', (2, 2, 2), ('P1', 'G7')),
    WinCards('86', (2, 3, 3), ('Y9', 'B7')),
    WinCards('85', (2, 2, 3), ('P8', 'B5')),
    WinCards('84', (2, 2, 3), ('G5', 'B8')),
    WinCards('83', (2, 2, 3), ('B6', 'Y7')),
    WinCards('82', (2, 2, 3), ('P5', 'Y6')),
    WinCards('81', (2, 3, 3), ('P9', 'Y8')),
    WinCards('80', (3, 3, 3), ('s1',), ('s2', 's3', 's4')),
    WinCards('79', (3, 3, 3), ('s2',), ('s1', 's3', 's4')),
    WinCards('78', (1, 1, 1), ('s3',)),
    WinCards('77', (3, 4, 4), ('G3', 'Y4', 'Y5')),
    WinCards('76', (2, 3, 3), ('B1', 'B2', 'B3')),
    AvoidSuits('75', (1, 1, 1), ('s',)),
    AvoidSuits('74', (3, 3, 3), ('Y', 'G')),
    AvoidSuits('73', (3, 3, 3), ('P', 'B')),
    AvoidSuits('72', (2, 2, 2), ('P',)),
    AvoidSuits('71', (2, 2, 2), ('Y',)),
    AvoidSuits('95', (2, 2, 2), ('G',)),
    AvoidNumbers('70', (1, 1, 1), (9,)),
    AvoidNumbers('69', (1, 2, 2), (5,)),
    AvoidNumbers('68', (2, 2, 2), (1,)),
    AvoidNumbers('67', (3, 3, 3), (1, 2, 3)),
    AvoidNumbers('66', (3, 3, 2), (8, 9)),
    WinWithTrump('65', (3, 3, 3), 'G9'),
    WinWithTrump('64', (3, 3, 3), 'P7'),
    WinWithNumber('63', (3, 4, 5), 3),
    WinWithNumber('62', (2, 3, 3), 6),
    WinWithNumber('61', (2, 3, 4), 5),
    WinWithNumber('60', (3, 4, 5), 2),
    WinWithNumber('59', (2, 3, 4), 6, capturing=6),
    WinWithNumber('58', (1, 2, 2), 7, capturing=5),
    WinWithNumber('57', (3, 4, 5), 4, capturing=8),
    TrickTotal('56', (3, 3, 4), lower=(21, 21, 21), upper=(24, 24, 24)),
    TrickTotal('55', (3, 3, 4), upper=(8, 12, 16)),
    TrickTotal('54', (3, 3, 4), lower=(23, 28, 31)),
    AllCardsThreshold('53', (2, 3, 3), 7, greater=False),
    AllCardsThreshold('52', (2, 3, 4), 5, greater=True),
    RelativeToCaptain('51', (2, 2, 3), 'more'),
    RelativeToCaptain('50', (2, 2, 2), 'fewer'),
    RelativeToCaptain('49', (4, 3, 3), 'as many'),
    ParityTrick('48', (2, 5, 6), 'even'),
    ParityTrick('47', (2, 4, 5), 'odd'),
    RelativeToOthers('46', (2, 3, 3), 'more'),
    RelativeToOthers('45', (2, 2, 3), 'fewer'),
    RelativeToOthers('44', (3, 4, 5), 'more combined'),
    FinalTrickCapture('43', (3, 4, 5), 'G2'),
    WinNumberCount('42', (3, 4, 5), 9, 3, exact=False),
    WinNumberCount('41', (3, 4, 5), 5, 3, exact=False),
    WinNumberCount('40', (3, 4, 4), 6, 3, exact=True),
    WinSuitCount('39', (3, 4, 4), _suits(('G', 2, True))),
    WinNumberCount('38', (2, 2, 2), 7, 2, exact=False),
    WinNumberCount('37', (2, 3, 3), 9, 2, exact=True),
    WinSuitCount('36', (3, 4, 4), _suits(('s', 3, True))),
    WinSuitCount('35', (3, 3, 4), _suits(('s', 2, True))),
    WinSuitCount('34', (3, 3, 3), _suits(('s', 1, True))),
    WinSuitCount('33', (3, 3, 4), _suits(('P', 1, True))),
    WinSuitCount('32', (3, 4, 4), _suits(('B', 2, True))),
    WinSuitCount('94', (4, 4, 4), _suits(('P', 1, True), ('G', 1, True))),
    WinSuitCount('31', (2, 3, 3), _suits(('P', 5, False))),
    WinSuitCount('30', (3, 3, 3), _suits(('Y', 7, False))),
    AllOfOneColor('29', (3, 4, 5)),
    OneOfEveryColor('28', (2, 3, 4)),
    EqualInTrick('27', (2, 3, 3), 'P', 'B'),
    EqualInTrick('26', (2, 3, 3), 'G', 'Y'),
    NotOpenWith('25', (4, 3, 3), ('P', 'Y', 'B')),
    NotOpenWith('24', (2, 1, 1), ('P', 'G')),
    SuitComparison('23', (4, 4, 4), 'P', 'Y', '='),
    SuitComparison('22', (1, 1, 1), 'Y', 'B', '>'),
    SuitComparison('21', (1, 1, 1), 'P', 'G', '>'),
    FirstTricks('20', (1, 1, 1), 1),
    FirstTricks('19', (1, 1, 2), 2),
    FirstTricks('18', (2, 3, 4), 3),
    LastTricks('17', (2, 3, 3), 1),
    OnlyLastTrick('16', (4, 4, 4)),
    FirstAndLastTrick('15', (3, 4, 4)),
    OnlyFirstTrick('14', (4, 3, 3)),
    ExactTricks('13', (4, 3, 3), 0),
    ExactTricks('12', (3, 2, 2), 1),
    ExactTricks('11', (2, 2, 2), 2),
    ExactTricks('10', (2, 3, 5), 4),
    SecretTrickCount('9', (4, 3, 3), x_is_public=False),
    SecretTrickCount('8', (3, 2, 2), x_is_public=True),
    NoneOfFirst('7', (1, 2, 2), 3),
    NoneOfFirst('6', (1, 2, 3), 4),
    NoneOfFirst('5', (2, 3, 3), 5),
    TricksInARow('4', (1, 1, 1), 2),
    TricksInARow('3', (2, 3, 4), 3),
    NeverInARow('2', (3, 2, 2), 2),
    ExactTricksInARow('0', (3, 3, 3), 2),
    ExactTricksInARow('1', (3, 3, 4), 3),
]

MISSIONS_BY_ID: Dict[str, Objective] = {mission.id: mission for mission in MISSIONS}


def allocate_missions(
    shuffled: Sequence[Objective],
    num_players: int,
    target: int
) -> List[Objective]:
    """
    Pick missions for a deal, first fit in shuffled order.

    A template is taken whenever it still fits under ``target``; templates
    are never reordered to pack tighter.

    Args:
        shuffled: Catalog in shuffled order
        num_players: Active player count (3-5), selects the cost column
        target: Point budget

    Returns:
        The chosen templates in the order they were taken; empty when there
        is no cost column for ``num_players``
    """
    if not 3 <= num_players <= 5:
        return []

    chosen: List[Objective] = []
    current = 0
    for mission in shuffled:
        if current >= target:
            break
        points = mission.points_for(num_players)
        if current + points <= target:
            chosen.append(mission)
            current += points
    return chosen
