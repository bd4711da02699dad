import random

import pytest

from typerace.models import PLAYING, WAITING, Room, finish_notice
from typerace.registry import RoomRegistry
from typerace.services.texts import DEFAULT_TEXTS, TextSupplier

TEXT = 'abcdefghij'


def fresh_participant_state(participant):
    state = participant.to_dict()
    state.pop('id')
    state.pop('username')
    return state


def test_start_stamps_room_and_participants():
    room = Room('r1', TEXT)
    alice = room.add_participant('a', 'alice')
    assert room.game_state == WAITING
    assert room.start(5000) is True
    assert room.game_state == PLAYING
    assert room.start_time == 5000
    assert alice.start_time == 5000


def test_start_while_playing_is_noop():
    room = Room('r1', TEXT)
    room.add_participant('a', 'alice')
    room.start(5000)
    room.record_progress('a', 3, 3, 3, 6000)
    assert room.start(9000) is False
    assert room.start_time == 5000
    assert room.participants['a'].current_position == 3


def test_progress_ignored_while_waiting_or_unknown():
    room = Room('r1', TEXT)
    room.add_participant('a', 'alice')
    assert room.record_progress('a', 3, 3, 3, 6000) is None
    room.start(5000)
    assert room.record_progress('ghost', 3, 3, 3, 6000) is None


def test_progress_updates_metrics():
    room = Room('r1', TEXT)
    room.add_participant('a', 'alice')
    room.start(0)
    result = room.record_progress('a', 5, 4, 5, 6000)
    p = result.participant
    assert p.progress == 50
    assert p.accuracy == 80
    # 4 chars in 6 seconds = 0.8 words / 0.1 min
    assert p.wpm == 8
    assert not result.just_finished
    assert not p.finished


def test_completion_detected_exactly_once():
    room = Room('r1', TEXT)
    room.add_participant('a', 'alice')
    room.start(0)
    first = room.record_progress('a', 10, 10, 10, 12000)
    assert first.just_finished
    assert first.participant.final_wpm == 10
    assert first.participant.final_accuracy == 100
    assert finish_notice(first) == {'wpm': 10, 'accuracy': 100, 'timeElapsed': 12}

    again = room.record_progress('a', 10, 9, 12, 24000)
    assert not again.just_finished
    assert again.participant.finished
    assert again.participant.final_wpm == 10
    assert again.participant.final_accuracy == 100
    # live metrics keep tracking the latest report
    assert again.participant.accuracy == 75


def test_reset_restores_join_state_and_new_text():
    room = Room('r1', TEXT)
    room.add_participant('a', 'alice')
    joined = fresh_participant_state(room.participants['a'])
    room.start(0)
    room.record_progress('a', 10, 10, 10, 1000)
    room.reset('another passage')
    assert room.game_state == WAITING
    assert room.start_time is None
    assert room.text == 'another passage'
    assert fresh_participant_state(room.participants['a']) == joined


def test_reset_from_waiting_keeps_waiting():
    room = Room('r1', TEXT)
    room.add_participant('a', 'alice')
    room.reset('next')
    assert room.game_state == WAITING
    assert room.start_time is None


def test_all_finished_is_derived():
    room = Room('r1', TEXT)
    assert not room.all_finished
    room.add_participant('a', 'alice')
    room.add_participant('b', 'bob')
    room.start(0)
    room.record_progress('a', 10, 10, 10, 1000)
    assert not room.all_finished
    room.record_progress('b', 11, 10, 11, 1000)
    assert room.all_finished
    assert room.game_state == PLAYING


def test_registry_get_or_create_is_idempotent():
    registry = RoomRegistry(TextSupplier([TEXT]), duration=45)
    room = registry.get_or_create('r1')
    assert registry.get_or_create('r1') is room
    assert room.game_state == WAITING
    assert room.text == TEXT
    assert room.start_time is None
    assert room.duration == 45
    assert room.is_empty
    assert 'r1' in registry and len(registry) == 1


def test_registry_remove_and_snapshot():
    registry = RoomRegistry(TextSupplier([TEXT]))
    registry.get_or_create('r1').add_participant('a', 'alice')
    registry.get_or_create('r2')
    summaries = {s['id']: s for s in registry.snapshot()}
    assert summaries['r1']['userCount'] == 1
    assert summaries['r1']['duration'] == 60
    registry.remove('r2')
    assert 'r2' not in registry
    assert registry.get('r2') is None
    registry.remove('r2')


def test_text_supplier_samples_from_corpus():
    supplier = TextSupplier(DEFAULT_TEXTS, rng=random.Random(7))
    picks = {supplier.choose() for _ in range(200)}
    assert picks == set(DEFAULT_TEXTS)


def test_text_supplier_rejects_empty_corpus():
    with pytest.raises(ValueError):
        TextSupplier(['', '   '])


def test_text_supplier_from_file(tmp_path):
    path = tmp_path / 'texts.txt'
    path.write_text('first passage\n\n  second passage  \n', encoding='utf-8')
    supplier = TextSupplier.from_file(str(path))
    assert supplier.texts == ['first passage', 'second passage']


def test_late_joiner_gets_room_start_time():
    room = Room('r1', TEXT)
    room.add_participant('a', 'alice')
    room.start(5000)
    bob = room.add_participant('b', 'bob')
    assert bob.start_time == 5000
    result = room.record_progress('b', 10, 10, 10, 17000)
    assert result.time_elapsed == 12
    assert result.participant.final_wpm == 10


def test_joiner_while_waiting_has_no_start_time():
    room = Room('r1', TEXT)
    assert room.add_participant('a', 'alice').start_time is None
