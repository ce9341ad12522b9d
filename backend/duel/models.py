"""In-memory records for a two-player session."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

START_FEN = 'start'


class Color(str, Enum):
    WHITE = 'white'
    BLACK = 'black'

    @property
    def opponent(self) -> 'Color':
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class SessionStatus(str, Enum):
    WAITING = 'waiting'  # creator only
    ACTIVE = 'active'
    ENDED = 'ended'


class EndReason(str, Enum):
    RESIGNATION = 'resignation'
    AGREEMENT = 'agreement'
    DISCONNECT = 'opponent disconnected'


@dataclass
class Session:
    id: str
    first: Optional[str] = None
    second: Optional[str] = None
    move_log: List[Dict[str, Any]] = field(default_factory=list)
    fen: str = START_FEN
    winner: Optional[Color] = None
    end_reason: Optional[EndReason] = None
    created_at: float = field(default_factory=time.time)

    @property
    def status(self) -> SessionStatus:
        if self.end_reason is not None:
            return SessionStatus.ENDED
        if self.second is None:
            return SessionStatus.WAITING
        return SessionStatus.ACTIVE

    @property
    def turn(self) -> Color:
        return Color.WHITE if len(self.move_log) % 2 == 0 else Color.BLACK

    @property
    def channels(self) -> List[str]:
        return [sid for sid in (self.first, self.second) if sid is not None]

    def color_of(self, channel: str) -> Optional[Color]:
        if channel is None:
            return None
        if channel == self.first:
            return Color.WHITE
        if channel == self.second:
            return Color.BLACK
        return None

    def channel_for(self, color: Color) -> Optional[str]:
        return self.first if color is Color.WHITE else self.second

    def opponent_of(self, channel: str) -> Optional[str]:
        color = self.color_of(channel)
        if color is None:
            return None
        return self.channel_for(color.opponent)

    def fill_second(self, channel: str) -> bool:
        """Bind ``channel`` to the black slot. Returns False if already taken."""
        if self.second is not None:
            return False
        self.second = channel
        return True

    def append_move(self, move: Dict[str, Any]) -> None:
        self.move_log.append(move)
        self.fen = move.get('after') or self.fen

    def terminate(self, reason: EndReason, winner: Optional[Color] = None) -> None:
        self.end_reason = reason
        self.winner = winner

    def to_dict(self):
        return {
            'roomId': self.id,
            'status': self.status.value,
            'turn': self.turn.value,
            'fen': self.fen,
            'moveLog': list(self.move_log),
            'players': {
                Color.WHITE.value: self.first is not None,
                Color.BLACK.value: self.second is not None,
            },
            'createdAt': self.created_at,
        }
