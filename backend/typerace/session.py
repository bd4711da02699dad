import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from typerace.models import Room, finish_notice
from typerace.registry import RoomRegistry


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class SessionContext:
    """The (room, participant) pair a connection joined as."""
    room_id: str
    participant_id: str
    username: object = None


class SessionHandler:
    """Translates protocol events from bound connections into room changes.

    Each mutation and the broadcast reporting it run under the room's lock,
    so every connection sees broadcasts in the order changes were applied.
    """

    def __init__(self, registry: RoomRegistry, broadcaster, clock: Callable[[], int] = now_ms,
                 logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.broadcaster = broadcaster
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self._sessions: Dict[str, SessionContext] = {}

    def context_for(self, sid: str) -> Optional[SessionContext]:
        return self._sessions.get(sid)

    def _resolve(self, ctx: Optional[SessionContext], event: str) -> Optional[Room]:
        if ctx is None:
            self.logger.debug(f"[ignored] event={event} unbound connection")
            return None
        room = self.registry.get(ctx.room_id)
        if room is None or ctx.participant_id not in room.participants:
            self.logger.debug(f"[ignored] event={event} room={ctx.room_id} sid={ctx.participant_id} gone")
            return None
        return room

    def join(self, sid: str, room_id, username) -> Optional[SessionContext]:
        if sid in self._sessions:
            self.logger.debug(f"[ignored] event=join-room sid={sid} already bound to room={self._sessions[sid].room_id}")
            return None
        if not isinstance(room_id, str) or not room_id.strip():
            self.logger.warning(f"[join-rejected] sid={sid} missing roomId")
            return None

        with self.registry.lock:
            room = self.registry.get_or_create(room_id)
            with room.lock:
                room.add_participant(sid, username)
                ctx = SessionContext(room_id, sid, username)
                self._sessions[sid] = ctx
                self.broadcaster.bind(sid, room_id)
                self.broadcaster.to_connection(sid, 'room-joined', {
                    'roomId': room_id,
                    'text': room.text,
                    'gameState': room.game_state,
                    'users': room.users(),
                })
                self.broadcaster.to_room(room_id, 'users-updated', room.users())
        self.logger.info(f"[join] room={room_id} sid={sid} username={username}")
        return ctx

    def start(self, ctx: Optional[SessionContext]) -> None:
        room = self._resolve(ctx, 'start-game')
        if room is None:
            return
        with room.lock:
            if not room.start(self.clock()):
                return
            self.broadcaster.to_room(room.id, 'game-started', {
                'text': room.text,
                'startTime': room.start_time,
            })
        self.logger.info(f"[game-started] room={room.id} users={len(room.participants)}")

    def progress(self, ctx: Optional[SessionContext], data) -> None:
        room = self._resolve(ctx, 'typing-progress')
        if room is None:
            return
        if not isinstance(data, dict):
            self.logger.warning(f"[bad-progress] room={room.id} sid={ctx.participant_id} payload is not an object")
            return
        try:
            current_position = _counter(data, 'currentPosition')
            correct_chars = _counter(data, 'correctChars')
            total_chars = _counter(data, 'totalChars')
        except (TypeError, ValueError) as exc:
            self.logger.warning(f"[bad-progress] room={room.id} sid={ctx.participant_id} {exc}")
            return

        with room.lock:
            try:
                result = room.record_progress(ctx.participant_id, current_position, correct_chars,
                                              total_chars, self.clock())
            except OverflowError as exc:
                self.logger.warning(f"[bad-progress] room={room.id} sid={ctx.participant_id} {exc}")
                return
            if result is None:
                return
            if result.just_finished:
                self.broadcaster.to_connection(ctx.participant_id, 'typing-finished', finish_notice(result))
                self.logger.info(
                    f"[typing-finished] room={room.id} sid={ctx.participant_id} "
                    f"wpm={result.participant.final_wpm} accuracy={result.participant.final_accuracy}"
                )
            self.broadcaster.to_room(room.id, 'users-updated', room.users())

    def reset(self, ctx: Optional[SessionContext]) -> None:
        room = self._resolve(ctx, 'reset-game')
        if room is None:
            return
        with room.lock:
            room.reset(self.registry.texts.choose())
            self.broadcaster.to_room(room.id, 'game-reset', {
                'text': room.text,
                'users': room.users(),
            })
        self.logger.info(f"[game-reset] room={room.id}")

    def disconnect(self, sid: str) -> None:
        ctx = self._sessions.pop(sid, None)
        if ctx is None:
            return
        self.leave(ctx)

    def leave(self, ctx: SessionContext) -> None:
        with self.registry.lock:
            room = self.registry.get(ctx.room_id)
            if room is None:
                return
            with room.lock:
                room.remove_participant(ctx.participant_id)
                self.logger.info(f"[leave] room={room.id} sid={ctx.participant_id}")
                if room.is_empty:
                    self.registry.remove(room.id)
                else:
                    self.broadcaster.to_room(room.id, 'users-updated', room.users())


def _counter(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return value
