"""
Tests for the crew-replay command line.
"""

import json

from crew_engine.replay import main
from crew_engine.serialization import MissionLog, MissionLogPlayer

DRAFT = ['g2:d:53', 'g3:d:54', 'g1:d:75', 'g2:d:94', 'g3:d:76']


def write_log(tmp_path, moves):
    mission_log = MissionLog(
        seed1=1, seed2=2, seed3=3, seed4=4,
        meta={'target': 12},
        moves=moves,
        players={
            'g1': MissionLogPlayer(seat='seat1', name='Ann'),
            'g2': MissionLogPlayer(seat='seat2', name='Bo'),
            'g3': MissionLogPlayer(seat='seat3', name='Cy'),
        },
    )
    path = tmp_path / 'mission-log.json'
    path.write_text(mission_log.model_dump_json())
    return path


def test_deal_command(capsys):
    assert main(['deal', '1', '2', '3', '4', '--seats', 'seat1', 'seat2', 'seat3']) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == 'captain: seat2  tricks: 13'
    assert lines[1] == 'missions: 53 54 75 94 76'
    assert lines[2] == 'seat1: B1 B2 B3 B5 B6 B9 G5 G6 P4 P6 Y6 s1 s3'
    assert len(lines) == 5


def test_deal_command_target(capsys):
    assert main(['deal', '1', '2', '3', '4', '--seats', 'seat1', 'seat2', 'seat3', '--target', '1']) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[1] == 'missions: 75'


def test_replay_summary(tmp_path, capsys):
    path = write_log(tmp_path, DRAFT + ['g2:p:B7', 'g3:p:B4', 'g1:p:B9', 'bogus'])
    assert main(['replay', str(path)]) == 0

    out = capsys.readouterr().out
    assert out.splitlines()[0] == 'phase: trick_play  succeeded: False  undo used: False'
    assert 'mission 75' in out
    assert out.count('\n') == 6


def test_replay_json_reveals_viewer_hand(tmp_path, capsys):
    path = write_log(tmp_path, DRAFT)
    assert main(['replay', str(path), '--viewer', 'g1', '--json']) == 0

    view = json.loads(capsys.readouterr().out)
    assert view['captain_seat'] == 'seat2'
    assert len(view['players']['seat1']['hand']) == 13
    assert 'hand' not in view['players']['seat2']


def test_replay_missing_file(tmp_path, capsys):
    assert main(['replay', str(tmp_path / 'missing.json')]) == 1
    assert 'Could not read mission log' in capsys.readouterr().err
