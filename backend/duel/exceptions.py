class SessionError(Exception):
    """A request the coordinator refuses. ``message`` is shown to the client."""

    message = 'session error'

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class SessionNotFound(SessionError):
    message = 'session not found'


class SessionFull(SessionError):
    message = 'session full'


class AlreadyInSession(SessionError):
    message = 'already in a session'


class InvalidIntent(Exception):
    def __init__(self, event: str, detail: str):
        super().__init__(f"{event}: {detail}")
        self.event = event
        self.detail = detail
