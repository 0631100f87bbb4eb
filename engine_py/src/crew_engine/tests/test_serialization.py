"""
Tests for state sanitization and mission logs.
"""

from crew_engine.engine import apply_move, initialize_game_state
from crew_engine.missions import MISSIONS_BY_ID
from crew_engine.models import ServerState
from crew_engine.moves import parse_move
from crew_engine.serialization import (
    MissionLog, build_mission_log, mission_summary, sanitize_state,
)

TOKENS = ['g2:d:9:1', 'g3:d:54', 'g1:d:75', 'g2:d:94', 'g3:d:76', 'g2:p:B7']


def make_server_state(meta=None):
    return ServerState(
        seed1=1, seed2=2, seed3=3, seed4=4,
        seat1='g1:Ann', seat2='g2:Bo', seat3='g3:Cy',
        starting_seats=['seat1', 'seat2', 'seat3'],
        status='started',
        meta=meta if meta is not None else {'target': 12},
    )


def build_state(viewer_guid=None):
    server_state = make_server_state()
    # Put a secret-X mission at the front of the pool
    state = initialize_game_state(server_state, viewer_guid=viewer_guid)
    state.missions[0] = MISSIONS_BY_ID['9']
    for token in TOKENS:
        apply_move(state, parse_move(token), server_state, viewer_guid=viewer_guid)
    return state


def test_sanitize_hides_other_hands():
    state = build_state('g1')
    view = sanitize_state(state, 'g1')

    assert view['players']['seat1']['hand'] == state.player_for_seat('seat1').hand
    assert 'hand' not in view['players']['seat2']
    assert view['players']['seat2']['hand_count'] == 13
    assert view['active_trick'] == {'index': 0, 'cards': [{'card': 'B7', 'seat': 'seat2'}]}
    assert view['missions'] == []


def test_sanitize_hides_secret_values():
    """Test secret X is only serialized for its owner."""
    others = sanitize_state(build_state('g1'), 'g1')
    mission = others['players']['seat2']['missions'][0]
    assert mission['id'] == '9'
    assert mission['x'] is None
    assert 'secret_x' not in mission

    own = sanitize_state(build_state('g2'), 'g2')
    mission = own['players']['seat2']['missions'][0]
    assert mission['x'] == 1
    assert mission['secret_x'] == 1


def test_spectator_sees_no_hands():
    view = sanitize_state(build_state())
    assert all('hand' not in player for player in view['players'].values())


def test_mission_summary_rows():
    rows = mission_summary(build_state())
    assert [(row['seat'], row['mission']) for row in rows] == [
        ('seat1', '75'), ('seat2', '9'), ('seat2', '94'), ('seat3', '54'), ('seat3', '76'),
    ]
    assert rows[1]['kind'] == 'SecretTrickCount'
    assert all(row['status'] is None for row in rows)


def test_mission_log_round_trip():
    """Test a stored log rebuilds the same deal."""
    server_state = make_server_state(meta={})
    tokens = ['g2:d:53', 'g3:d:54', 'g1:d:75', 'g2:d:94', 'g3:d:76', 'g2:p:B7', 'g3:p:B4', 'g1:p:B9']
    moves = [parse_move(token) for token in tokens]
    state = initialize_game_state(server_state, moves)

    mission_log = build_mission_log(server_state, state, tokens)
    assert mission_log.meta == {'target': 12}
    assert not mission_log.completed
    assert mission_log.players['g1'].name == 'Ann'

    stored = MissionLog.model_validate_json(mission_log.model_dump_json())
    assert stored == mission_log

    rebuilt_server_state = stored.to_server_state()
    assert rebuilt_server_state.starting_seats == ['seat1', 'seat2', 'seat3']
    assert rebuilt_server_state.seat2 == 'g2:Bo'
    rebuilt = initialize_game_state(rebuilt_server_state, moves)
    assert sanitize_state(rebuilt, 'g1') == sanitize_state(state, 'g1')
