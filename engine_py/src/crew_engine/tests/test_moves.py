"""
Tests for the move token codec.
"""

import pytest

from crew_engine.errors import MALFORMED_MOVE, GameError
from crew_engine.moves import (
    DraftMove, EmoteMove, HintMove, MoveType, PlayMove, UndoMove, decode_move,
    parse_move, serialize_move,
)


def test_parse_play():
    """Test a play token."""
    move = parse_move('abc:p:G5')
    assert isinstance(move, PlayMove)
    assert move.guid == 'abc'
    assert move.card == 'G5'
    assert move.type == MoveType.PLAY


def test_parse_hint_and_cancel():
    """Test hint tokens."""
    move = parse_move('abc:h:s3:only')
    assert isinstance(move, HintMove)
    assert move.hint.card == 's3'
    assert move.hint.type == 'only'
    assert not move.hint.played

    cancel = parse_move('abc:h:cancel')
    assert isinstance(cancel, HintMove)
    assert cancel.hint is None


def test_parse_draft_variants():
    """Test draft picks, picks with X and passes."""
    pick = parse_move('abc:d:17')
    assert isinstance(pick, DraftMove)
    assert pick.id == '17'
    assert pick.x is None
    assert not pick.is_pass

    with_x = parse_move('abc:d:9:3')
    assert with_x.id == '9'
    assert with_x.x == 3

    draft_pass = parse_move('abc:d:pass')
    assert draft_pass.is_pass


def test_parse_emote_and_undo():
    """Test emote and undo tokens."""
    emote = parse_move('abc:e:distress')
    assert isinstance(emote, EmoteMove)
    assert emote.emote == 'distress'
    assert isinstance(parse_move('abc:u'), UndoMove)


@pytest.mark.parametrize('token', [
    'abc',
    'abc:x:B1',
    'abc:p:Z9',
    'abc:p:s5',
    'abc:p',
    ':p:B1',
    'abc:h:B5:middle',
    'abc:h:B5',
    'abc:h:cancel:B5',
    'abc:e:wave',
    'abc:d:9:three',
    'abc:d:9:-1',
    'abc:u:now',
])
def test_malformed_tokens_parse_to_none(token):
    """Test malformed tokens are dropped."""
    assert parse_move(token) is None


def test_decode_raises_game_error():
    """Test the strict decoder reports the error code."""
    with pytest.raises(GameError) as exc_info:
        decode_move('abc:p:Q1')
    assert exc_info.value.code == MALFORMED_MOVE


def test_serialize_gives_exact_tokens():
    """Test serialization reproduces recorded tokens."""
    tokens = [
        'abc:p:G5', 'abc:h:G5:top', 'abc:h:cancel', 'abc:d:17', 'abc:d:9:3',
        'abc:d:pass', 'abc:e:trust', 'abc:u',
    ]
    for token in tokens:
        assert serialize_move(decode_move(token)) == token


def test_serialize_built_moves():
    """Test moves built in code serialize like parsed ones."""
    assert serialize_move(PlayMove(guid='g1', card='s4')) == 'g1:p:s4'
    assert serialize_move(DraftMove(guid='g1', id='8', x=0)) == 'g1:d:8:0'
    assert serialize_move(HintMove(guid='g1')) == 'g1:h:cancel'
