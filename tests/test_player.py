import pytest

from wordle_rooms.models.game import RoundInactiveError, Verdict
from wordle_rooms.models.player import PlayerRecord
from wordle_rooms.services.scoring import score

WIN = [Verdict.CORRECT] * 5
MISS = [Verdict.ABSENT] * 5


def test_create_starts_fresh():
    player = PlayerRecord.create('alice', 'sid-1')
    assert player.attempts == 0
    assert player.wins == 0
    assert player.connected
    assert not player.finished and not player.won


def test_winning_guess_finishes_and_counts_a_win():
    player = PlayerRecord.create('alice', 'sid-1')
    player.record_guess('crane', score('crane', 'crane'))
    assert player.won and player.finished
    assert player.wins == 1
    assert player.attempts == 1


def test_six_misses_finish_without_win_and_further_guesses_rejected():
    player = PlayerRecord.create('alice', 'sid-1')
    for attempt in range(6):
        assert not player.finished
        player.record_guess('about', MISS)
        assert player.attempts == attempt + 1
    assert player.finished and not player.won

    with pytest.raises(RoundInactiveError):
        player.record_guess('crane', WIN)
    assert player.attempts == 6
    assert player.wins == 0


def test_guess_after_win_is_rejected():
    player = PlayerRecord.create('alice', 'sid-1')
    player.record_guess('crane', WIN)
    with pytest.raises(RoundInactiveError):
        player.record_guess('crane', WIN)
    assert player.wins == 1


def test_reset_board_keeps_wins():
    player = PlayerRecord.create('alice', 'sid-1')
    player.record_guess('crane', WIN)
    player.reset_board()
    assert player.attempts == 0
    assert player.guesses == [] and player.verdicts == []
    assert not player.finished and not player.won
    assert player.wins == 1


def test_reconnect_keeps_history():
    player = PlayerRecord.create('alice', 'sid-1')
    player.record_guess('about', MISS)
    player.mark_disconnected(123.0)
    assert not player.connected
    assert player.disconnected_at == 123.0

    player.mark_reconnected('sid-2')
    assert player.connected
    assert player.sid == 'sid-2'
    assert player.disconnected_at is None
    assert player.guesses == ['about']
    assert player.attempts == 1


def test_state_pads_board_to_six_rows():
    player = PlayerRecord.create('alice', 'sid-1')
    player.record_guess('trace', score('trace', 'crane'))
    state = player.to_state()
    assert len(state['board']) == 6
    assert state['board'][0] == list('trace')
    assert state['board'][1] == [''] * 5
    assert state['colors'][0] == ['gray', 'green', 'green', 'yellow', 'green']
    assert state['current_row'] == 1


def test_restored_record_starts_disconnected():
    player = PlayerRecord.create('alice', 'sid-1')
    player.record_guess('crane', WIN)
    restored = PlayerRecord.from_snapshot('alice', player.to_snapshot(), timestamp=50.0)
    assert not restored.connected
    assert restored.sid is None
    assert restored.disconnected_at == 50.0
    assert restored.verdicts == [WIN]
    assert restored.won and restored.finished and restored.wins == 1
