"""
Tests for dealing, captain selection and mission allocation.
"""

from crew_engine.constants import CAPTAIN_CARD, DECK
from crew_engine.engine import initialize_game_state
from crew_engine.models import ServerState
from crew_engine.rules import create_rules
from crew_engine.shuffle import (
    appoint_captain, deal_hands, tricks_per_deal,
    validate_deck_integrity,
)


def make_server_state(seeds=(1, 2, 3, 4), seats=('seat1', 'seat2', 'seat3'), target=12):
    seat_values = {seat: f"g{seat[-1]}:Player{seat[-1]}" for seat in seats}
    return ServerState(
        seed1=seeds[0],
        seed2=seeds[1],
        seed3=seeds[2],
        seed4=seeds[3],
        starting_seats=list(seats),
        status='started',
        meta={'target': target},
        **seat_values,
    )


def hand(state, seat):
    return ' '.join(state.player_for_seat(seat).hand)


def test_three_player_deal():
    """Test the captain gets the extra card in a three player game."""
    state = initialize_game_state(make_server_state())

    assert state.total_tricks == 13
    assert state.captain_seat == 'seat2'
    assert state.whose_turn == 'seat2'
    assert state.turn_idx == 1
    assert hand(state, 'seat1') == "B1 B2 B3 B5 B6 B9 G5 G6 P4 P6 Y6 s1 s3"
    assert hand(state, 'seat2') == "B7 B8 G3 G8 G9 P1 P2 Y2 Y3 Y4 Y7 Y8 Y9 s4"
    assert hand(state, 'seat3') == "B4 G1 G2 G4 G7 P3 P5 P7 P8 P9 Y1 Y5 s2"
    assert hand(state, 'seat4') == ""
    assert validate_deck_integrity(state)


def test_three_player_missions():
    """Test first-fit allocation against a 12 point target."""
    state = initialize_game_state(make_server_state())
    assert [m.id for m in state.missions] == ['53', '54', '75', '94', '76']
    assert sum(m.points_for(3) for m in state.missions) == 12


def test_four_player_deal():
    """Test a four player deal."""
    state = initialize_game_state(make_server_state(seats=('seat1', 'seat2', 'seat3', 'seat4')))

    assert state.total_tricks == 10
    assert state.captain_seat == 'seat3'
    assert [m.id for m in state.missions] == ['53', '54', '75', '94', '4']
    assert hand(state, 'seat1') == "B1 B2 B3 B5 B9 G6 P4 Y6 s1 s3"
    assert hand(state, 'seat2') == "B6 B7 B8 G5 G8 P6 Y2 Y3 Y4 Y9"
    assert hand(state, 'seat3') == "G2 G3 G4 G9 P1 P2 P9 Y7 Y8 s4"
    assert hand(state, 'seat4') == "B4 G1 G7 P3 P5 P7 P8 Y1 Y5 s2"
    assert validate_deck_integrity(state)


def test_five_player_deal():
    """Test a five player deal with a lower target."""
    seats = ('seat1', 'seat2', 'seat3', 'seat4', 'seat5')
    state = initialize_game_state(make_server_state(seeds=(11, 22, 33, 44), seats=seats, target=8))

    assert state.total_tricks == 8
    assert state.captain_seat == 'seat1'
    assert [m.id for m in state.missions] == ['75', '11', '26', '24', '20']
    assert hand(state, 'seat1') == "B1 B2 B8 G2 G4 G9 Y3 s4"
    assert hand(state, 'seat2') == "B3 B9 G3 P4 P8 P9 Y5 s3"
    assert hand(state, 'seat3') == "B5 G7 P1 P3 P7 Y2 Y7 s2"
    assert hand(state, 'seat4') == "B4 B7 G6 P6 Y6 Y8 Y9 s1"
    assert hand(state, 'seat5') == "B6 G1 G5 G8 P2 P5 Y1 Y4"


def test_players_carry_seat_assignments():
    """Test names and guids come from the seat slots."""
    state = initialize_game_state(make_server_state())
    player = state.player_for_seat('seat3')
    assert player.guid == 'g3'
    assert player.name == 'Player3'
    assert player.idx == 3
    assert player.passes_remaining == 2


def test_inactive_seats_are_skipped():
    """Test seats outside the seating get no cards."""
    seats = ('seat1', 'seat3', 'seat5')
    state = initialize_game_state(make_server_state(seats=seats))
    assert hand(state, 'seat2') == ""
    assert hand(state, 'seat4') == ""
    assert sum(len(state.player_for_seat(seat).hand) for seat in seats) == 40
    assert validate_deck_integrity(state)


def test_deal_hands_without_captain_card():
    """Test a three player deal where the captain card stays undealt."""
    # The unshuffled deck ends with the captain card
    hands, captain = deal_hands(DECK, ['seat1', 'seat2', 'seat3'])
    assert captain is None
    assert all(len(hands[seat]) == 13 for seat in ('seat1', 'seat2', 'seat3'))

    appointed = appoint_captain(hands, ['seat2', 'seat1', 'seat3'])
    assert appointed == 'seat2'
    assert hands['seat2'][-1] == CAPTAIN_CARD
    assert len(hands['seat2']) == 14


def test_deal_hands_four_players_unshuffled():
    """Test contiguous chunks go to seats in seat order."""
    hands, captain = deal_hands(DECK, ['seat4', 'seat2', 'seat1', 'seat3'])
    assert hands['seat1'] == DECK[0:10]
    assert hands['seat4'] == sorted(DECK[30:40])
    assert captain == 'seat4'


def test_tricks_per_deal():
    """Test trick counts per player count."""
    assert tricks_per_deal(3) == 13
    assert tricks_per_deal(4) == 10
    assert tricks_per_deal(5) == 8


def test_missing_target_uses_rules_default():
    """Test the rules default applies when the deal has no target."""
    server_state = make_server_state()
    server_state.meta = {}
    state = initialize_game_state(server_state, rules=create_rules(default_target=1))
    assert [m.points_for(3) for m in state.missions] == [1]


def test_no_seating_gives_empty_state():
    """Test an unstarted channel has nothing dealt."""
    state = initialize_game_state(ServerState())
    assert state.num_players == 0
    assert all(not player.hand for player in state.players)
    assert not state.missions
