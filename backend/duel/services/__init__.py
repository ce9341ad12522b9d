"""Session coordination services.

Transport-agnostic logic that Socket.IO handlers call into. Nothing in here
imports Flask-SocketIO; outbound events go through a channel object handed
in by the caller.
"""

from .coordinator import Channel, Coordinator

__all__ = ['Channel', 'Coordinator']
