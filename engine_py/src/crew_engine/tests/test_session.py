"""
Tests for the per-channel session driven by relay messages.
"""

from crew_engine.engine import GamePhase
from crew_engine.moves import PlayMove
from crew_engine.session import GameSession

DRAFT = ['g2:d:53', 'g3:d:54', 'g1:d:75', 'g2:d:94', 'g3:d:76']


def game_message(status='started', seeds=(1, 2, 3, 4)):
    return {
        'type': 'game',
        'gameState': {
            'seed1': str(seeds[0]),
            'seed2': str(seeds[1]),
            'seed3': str(seeds[2]),
            'seed4': str(seeds[3]),
            'seat1': 'g1:Ann',
            'seat2': 'g2:Bo',
            'seat3': 'g3:Cy',
            'seat4': '',
            'seat5': '',
            'meta': '{"target": 12}',
            'startingSeats': 'seat1,seat2,seat3',
            'status': status,
        },
    }


def move_message(token):
    guid, move = token.split(':', 1)
    return {'type': 'move', 'guid': guid, 'move': move}


def started_session(**kwargs):
    session = GameSession(viewer_guid='g1', **kwargs)
    session.handle_message(game_message())
    session.handle_message({'type': 'moves', 'moves': list(DRAFT)})
    return session


def test_waiting_then_started():
    """Test the deal is built when the channel starts."""
    session = GameSession(viewer_guid='g1')
    session.handle_message(game_message(status='waiting'))
    assert session.phase == GamePhase.AWAITING_START
    assert session.state.player_for_seat('seat2').name == 'Bo'
    assert not session.state.player_for_seat('seat1').hand

    session.handle_message(game_message())
    assert session.phase == GamePhase.MISSION_DRAFT
    assert len(session.state.missions) == 5
    assert session.state.captain_seat == 'seat2'


def test_moves_message_replays_log():
    session = started_session()
    assert session.phase == GamePhase.TRICK_PLAY
    assert session.raw_moves == DRAFT
    assert session.state.whose_turn == 'seat2'


def test_move_messages_apply_in_order():
    """Test echoed moves advance the state."""
    session = started_session()
    session.handle_message(move_message('g2:p:B7'))
    session.handle_message(move_message('g3:p:B4'))
    assert session.state.active_trick.cards == [('B7', 'seat2'), ('B4', 'seat3')]
    assert session.raw_moves[-1] == 'g3:p:B4'


def test_malformed_messages_are_ignored():
    """Test bad relay data leaves the session untouched."""
    session = started_session()
    assert session.handle_message({'type': 'chat'}) is None
    assert session.handle_message({'moves': []}) is None
    assert session.handle_message({'type': 'move', 'move': 'p:B7'}) is None
    assert session.handle_message({'type': 'game', 'gameState': {'seed1': 'abc'}}) is None
    assert session.handle_message(['type', 'move']) is None

    # Well-formed message carrying a malformed token
    assert session.handle_message(move_message('g2:p:Z9')) is not None
    assert session.raw_moves == DRAFT
    assert session.phase == GamePhase.TRICK_PLAY


def test_undo_rebuilds_once():
    """Test the first undo replays the log and later ones are ignored."""
    session = started_session()
    for token in ('g2:p:B7', 'g3:p:B4', 'g1:p:B9'):
        session.handle_message(move_message(token))
    assert len(session.state.player_for_seat('seat1').tricks) == 1

    session.handle_message(move_message('g1:u'))
    assert session.state.undo_used
    assert not session.state.player_for_seat('seat1').tricks
    assert 'B9' in session.state.player_for_seat('seat1').hand
    assert session.state.whose_turn == 'seat2'

    session.handle_message(move_message('g2:p:B8'))
    session.handle_message(move_message('g2:u'))
    assert session.state.active_trick.cards == [('B8', 'seat2')]


def test_view_shows_only_own_hand():
    session = started_session()
    view = session.view()
    assert view['players']['seat1']['hand'] == session.state.player_for_seat('seat1').hand
    assert 'hand' not in view['players']['seat2']
    assert view['players']['seat2']['hand_count'] == 14


def test_outbound_move():
    session = started_session()
    assert session.outbound_move(PlayMove(guid='g1', card='B9')) == {
        'type': 'move', 'guid': 'g1', 'move': 'p:B9'
    }


def test_completion_reported_once():
    """Test the finished deal is handed to the callback a single time."""
    logs = []
    session = started_session(on_complete=logs.append)

    while not session.state.is_complete():
        player = session.state.active_player
        session.handle_message(move_message(f"{player.guid}:p:{player.hand[0]}"))
    session.handle_message({'type': 'pong'})

    assert len(logs) == 1
    mission_log = logs[0]
    assert mission_log.completed
    assert mission_log.key == (1, 2, 3, 4)
    assert mission_log.success == session.state.succeeded
    assert len(mission_log.moves) == len(DRAFT) + 39
    assert sorted(mission_log.players) == ['g1', 'g2', 'g3']
    assert mission_log.players['g2'].seat == 'seat2'
    assert mission_log.meta['target'] == 12


def play_out(session):
    """Draft the first mission offered and play the lowest card until the deal ends."""
    while not session.state.is_complete():
        player = session.state.active_player
        if session.state.missions:
            token = f"{player.guid}:d:{session.state.missions[0].id}"
        else:
            token = f"{player.guid}:p:{player.hand[0]}"
        session.handle_message(move_message(token))


def test_each_deal_on_a_channel_is_reported():
    """Test a second deal started on the same session is reported too."""
    logs = []
    session = started_session(on_complete=logs.append)
    play_out(session)

    session.handle_message(game_message(status='waiting'))
    session.handle_message({'type': 'moves', 'moves': []})
    session.handle_message(game_message(seeds=(5, 6, 7, 8)))
    assert session.phase == GamePhase.MISSION_DRAFT
    assert len(logs) == 1

    play_out(session)
    assert [mission_log.key for mission_log in logs] == [(1, 2, 3, 4), (5, 6, 7, 8)]
    assert logs[1].completed
