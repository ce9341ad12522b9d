import logging
import threading
from typing import Any, Dict, Optional

from ..exceptions import AlreadyInSession, SessionError, SessionFull, SessionNotFound
from ..models import Color, EndReason, Session
from ..store import SessionStore


class Channel:
    """Outbound side of the participant transport."""

    def send(self, channel: str, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    def join(self, channel: str, room_id: str) -> None:
        raise NotImplementedError

    def close(self, room_id: str) -> None:
        raise NotImplementedError


class Coordinator:
    """Applies session lifecycle rules for every inbound intent.

    All public methods run under one lock so intents are handled strictly
    one after another, emissions included.
    """

    def __init__(self, store: SessionStore, transport: Channel, logger: Optional[logging.Logger] = None):
        self.store = store
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

    # -- intents ---
    def create_session(self, channel: str) -> Optional[Session]:
        with self._lock:
            try:
                self._ensure_unbound(channel)
            except SessionError as exc:
                self._reject(channel, 'createSession', None, exc)
                return None
            room_id, session = self.store.create()
            session.first = channel
            self.store.bind(channel, room_id)
            self.transport.join(channel, room_id)
            self.logger.info(f"[session-create] room={room_id} white={channel}")
            self.transport.send(channel, 'sessionCreated', {'roomId': room_id, 'color': Color.WHITE.value})
            return session

    def join_session(self, channel: str, room_id: str) -> Optional[Session]:
        with self._lock:
            try:
                session = self.store.get(room_id)
                if session is None:
                    raise SessionNotFound()
                if session.second is not None:
                    raise SessionFull()
                self._ensure_unbound(channel)
            except SessionError as exc:
                self._reject(channel, 'joinSession', room_id, exc)
                return None
            session.fill_second(channel)
            self.store.bind(channel, room_id)
            self.transport.join(channel, room_id)
            self.logger.info(f"[session-join] room={room_id} black={channel}")
            self.transport.send(channel, 'sessionJoined', {'roomId': room_id, 'color': Color.BLACK.value})
            self.transport.send(session.first, 'participantJoined', {'roomId': room_id})
            return session

    def submit_move(self, channel: str, room_id: str, move: Dict[str, Any]) -> bool:
        with self._lock:
            session = self.store.get(room_id)
            if session is None:
                self._drop(channel, 'submitMove', room_id, 'no such session')
                return False
            if session.second is None:
                self._drop(channel, 'submitMove', room_id, 'session not active')
                return False
            color = session.color_of(channel)
            if color is None:
                self._drop(channel, 'submitMove', room_id, 'not a participant')
                return False
            if color is not session.turn:
                self._drop(channel, 'submitMove', room_id, f'out of turn ({color.value} moved, {session.turn.value} to play)')
                return False
            session.append_move(move)
            self.logger.info(f"[move] room={room_id} color={color.value} ply={len(session.move_log)} {move.get('from')}-{move.get('to')}")
            self.transport.send(
                session.opponent_of(channel),
                'opponentMove',
                {'roomId': room_id, 'move': move, 'moveLog': list(session.move_log)},
            )
            return True

    def resign(self, channel: str, room_id: str) -> bool:
        with self._lock:
            session = self._participant_session(channel, 'resign', room_id)
            if session is None:
                return False
            winner = session.color_of(channel).opponent
            self.logger.info(f"[resign] room={room_id} by={channel} winner={winner.value}")
            self._terminate(session, EndReason.RESIGNATION, winner=winner)
            return True

    def offer_draw(self, channel: str, room_id: str) -> bool:
        with self._lock:
            session = self._participant_session(channel, 'offerDraw', room_id)
            if session is None:
                return False
            opponent = session.opponent_of(channel)
            if opponent is None:
                self._drop(channel, 'offerDraw', room_id, 'no opponent yet')
                return False
            self.logger.info(f"[draw-offer] room={room_id} by={channel}")
            self.transport.send(opponent, 'drawOffered', {'roomId': room_id})
            return True

    def accept_draw(self, channel: str, room_id: str) -> bool:
        with self._lock:
            session = self._participant_session(channel, 'acceptDraw', room_id)
            if session is None:
                return False
            self.logger.info(f"[draw-accept] room={room_id} by={channel}")
            self._terminate(session, EndReason.AGREEMENT)
            return True

    def disconnect(self, channel: str) -> Optional[Session]:
        with self._lock:
            session = self.store.find_by_channel(channel)
            if session is None:
                return None
            self.logger.info(f"[disconnect] room={session.id} channel={channel} ends session")
            self._terminate(session, EndReason.DISCONNECT, skip=channel)
            return session

    # -- helpers ---
    def _ensure_unbound(self, channel: str) -> None:
        if self.store.find_by_channel(channel) is not None:
            raise AlreadyInSession()

    def _participant_session(self, channel: str, event: str, room_id: str) -> Optional[Session]:
        session = self.store.get(room_id)
        if session is None:
            self._drop(channel, event, room_id, 'no such session')
            return None
        if session.color_of(channel) is None:
            self._drop(channel, event, room_id, 'not a participant')
            return None
        return session

    def _terminate(self, session: Session, reason: EndReason, winner: Optional[Color] = None, skip: Optional[str] = None) -> None:
        session.terminate(reason, winner=winner)
        payload = {
            'roomId': session.id,
            'winner': winner.value if winner else None,
            'reason': reason.value,
        }
        for channel in session.channels:
            if channel != skip:
                self.transport.send(channel, 'sessionEnded', payload)
        self.store.delete(session.id)
        self.transport.close(session.id)
        self.logger.info(f"[session-end] room={session.id} reason={reason.value} winner={payload['winner']} moves={len(session.move_log)}")

    def _reject(self, channel: str, event: str, room_id: Optional[str], exc: SessionError) -> None:
        self.logger.info(f"[session-reject] event={event} room={room_id} channel={channel} reason={exc.message}")
        self.transport.send(channel, 'error', {'message': exc.message})

    def _drop(self, channel: str, event: str, room_id: str, why: str) -> None:
        tag = 'move-drop' if event == 'submitMove' else 'intent-drop'
        self.logger.warning(f"[{tag}] event={event} room={room_id} channel={channel} reason={why}")
