"""Memory-resident registry of live sessions.

A session lives here from ``create()`` until it terminates; nothing is
persisted. The store also keeps a reverse index from channel id to room id
so the disconnect path does not need to walk every session.
"""

import uuid
from typing import Dict, Iterator, Optional, Tuple

from .models import Session


class SessionStore:

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._room_by_channel: Dict[str, str] = {}

    def create(self) -> Tuple[str, Session]:
        room_id = uuid.uuid4().hex
        # a live id is never handed out twice
        while room_id in self._sessions:
            room_id = uuid.uuid4().hex
        session = Session(id=room_id)
        self._sessions[room_id] = session
        return room_id, session

    def get(self, room_id) -> Optional[Session]:
        if not isinstance(room_id, str):
            return None
        return self._sessions.get(room_id)

    def delete(self, room_id: str) -> None:
        session = self._sessions.pop(room_id, None)
        if session is None:
            return
        for channel in session.channels:
            if self._room_by_channel.get(channel) == room_id:
                del self._room_by_channel[channel]

    def bind(self, channel: str, room_id: str) -> None:
        self._room_by_channel[channel] = room_id

    def find_by_channel(self, channel: str) -> Optional[Session]:
        room_id = self._room_by_channel.get(channel)
        if room_id is None:
            return None
        return self._sessions.get(room_id)

    def clear(self) -> None:
        self._sessions.clear()
        self._room_by_channel.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

    def __contains__(self, room_id) -> bool:
        return room_id in self._sessions
