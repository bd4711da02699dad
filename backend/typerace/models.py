import threading
from typing import Dict, List, NamedTuple, Optional

from typerace.services.metrics import accuracy_pct, progress_pct, round_half_up, speed

WAITING = 'waiting'
PLAYING = 'playing'


class Participant:
    """One connection's entry within a room."""

    def __init__(self, participant_id: str, username):
        self.id = participant_id
        self.username = username
        self.reset_counters()

    def reset_counters(self, start_time: Optional[int] = None) -> None:
        self.progress = 0
        self.wpm = 0
        self.accuracy = 0
        self.current_position = 0
        self.correct_chars = 0
        self.total_chars = 0
        self.finished = False
        self.final_wpm = None
        self.final_accuracy = None
        self.start_time = start_time

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'progress': self.progress,
            'wpm': self.wpm,
            'accuracy': self.accuracy,
            'currentPosition': self.current_position,
            'correctChars': self.correct_chars,
            'totalChars': self.total_chars,
            'finished': self.finished,
            'startTime': self.start_time,
            'finalWpm': self.final_wpm,
            'finalAccuracy': self.final_accuracy,
        }


class ProgressResult(NamedTuple):
    participant: Participant
    # True only for the update that first crossed the end of the passage
    just_finished: bool
    time_elapsed: float


class Room:
    """A race on one passage and the participants typing it.

    Callers hold ``lock`` around every mutation together with the broadcast
    that reports it.
    """

    def __init__(self, room_id: str, text: str, duration: int = 60):
        self.id = room_id
        self.text = text
        self.game_state = WAITING
        self.start_time: Optional[int] = None
        self.duration = duration
        self.participants: Dict[str, Participant] = {}
        self.lock = threading.RLock()

    @property
    def is_empty(self) -> bool:
        return not self.participants

    @property
    def all_finished(self) -> bool:
        return bool(self.participants) and all(p.finished for p in self.participants.values())

    def add_participant(self, participant_id: str, username) -> Participant:
        participant = Participant(participant_id, username)
        if self.game_state == PLAYING:
            # late joiners race against the room clock
            participant.start_time = self.start_time
        self.participants[participant_id] = participant
        return participant

    def remove_participant(self, participant_id: str) -> Optional[Participant]:
        return self.participants.pop(participant_id, None)

    def start(self, now: int) -> bool:
        """Enter ``playing``. Returns False (and changes nothing) if already playing."""
        if self.game_state != WAITING:
            return False
        self.game_state = PLAYING
        self.start_time = now
        for participant in self.participants.values():
            participant.reset_counters(start_time=now)
        return True

    def reset(self, text: str) -> None:
        self.game_state = WAITING
        self.start_time = None
        self.text = text
        for participant in self.participants.values():
            participant.reset_counters()

    def record_progress(self, participant_id: str, current_position, correct_chars,
                        total_chars, now: int) -> Optional[ProgressResult]:
        """Apply a client-reported progress update.

        Counters are trusted as reported. Returns None when the room is not
        playing or the participant is unknown. Raises OverflowError, before
        touching the participant, when the counters are too large to measure.
        """
        participant = self.participants.get(participant_id)
        if participant is None or self.game_state != PLAYING:
            return None

        started = participant.start_time if participant.start_time is not None else now
        time_elapsed = (now - started) / 1000

        progress = progress_pct(current_position, len(self.text))
        wpm = speed(correct_chars, time_elapsed)
        accuracy = accuracy_pct(correct_chars, total_chars)

        participant.current_position = current_position
        participant.correct_chars = correct_chars
        participant.total_chars = total_chars
        participant.progress = progress
        participant.wpm = wpm
        participant.accuracy = accuracy

        just_finished = False
        if current_position >= len(self.text) and not participant.finished:
            participant.finished = True
            participant.final_wpm = participant.wpm
            participant.final_accuracy = participant.accuracy
            just_finished = True

        return ProgressResult(participant, just_finished, time_elapsed)

    def users(self) -> List[dict]:
        return [p.to_dict() for p in self.participants.values()]

    def summary(self):
        return {
            'id': self.id,
            'gameState': self.game_state,
            'userCount': len(self.participants),
            'startTime': self.start_time,
            'duration': self.duration,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'gameState': self.game_state,
            'startTime': self.start_time,
            'duration': self.duration,
            'allFinished': self.all_finished,
            'users': self.users(),
        }


def finish_notice(result: ProgressResult):
    """Payload for the unicast ``typing-finished`` event."""
    return {
        'wpm': result.participant.final_wpm,
        'accuracy': result.participant.final_accuracy,
        'timeElapsed': round_half_up(result.time_elapsed),
    }
