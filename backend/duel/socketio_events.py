from flask import current_app, request
from flask_socketio import close_room, emit, join_room

from duel import socketio
from duel.exceptions import InvalidIntent
from duel.schemas import parse_intent
from duel.services import Channel


class SocketIOChannel(Channel):
    """Delivers coordinator output to Socket.IO clients, addressed by sid."""

    def __init__(self, namespace: str = '/'):
        self.namespace = namespace

    def send(self, channel, event, payload):
        if channel is None:
            return
        socketio.emit(event, payload, to=channel, namespace=self.namespace)

    def join(self, channel, room_id):
        join_room(room_id, sid=channel, namespace=self.namespace)

    def close(self, room_id):
        close_room(room_id, namespace=self.namespace)


def _coordinator():
    return current_app.extensions['duel.coordinator']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _parse(event, data):
    try:
        return parse_intent(event, data)
    except InvalidIntent as exc:
        current_app.logger.warning(f"[intent-invalid] event={event} sid={_get_sid()} detail={exc.detail!r}")
        return None


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] sid={_get_sid()} reason={reason}")
    _coordinator().disconnect(_get_sid())


def handle_create_session(data=None):
    if _parse('createSession', data) is None:
        return
    _coordinator().create_session(_get_sid())


def handle_join_session(data=None):
    intent = _parse('joinSession', data)
    if intent is None:
        return
    _coordinator().join_session(_get_sid(), intent.room_id)


def handle_submit_move(data=None):
    intent = _parse('submitMove', data)
    if intent is None:
        return
    _coordinator().submit_move(_get_sid(), intent.room_id, intent.move.to_payload())


def handle_resign(data=None):
    intent = _parse('resign', data)
    if intent is None:
        return
    _coordinator().resign(_get_sid(), intent.room_id)


def handle_offer_draw(data=None):
    intent = _parse('offerDraw', data)
    if intent is None:
        return
    _coordinator().offer_draw(_get_sid(), intent.room_id)


def handle_accept_draw(data=None):
    intent = _parse('acceptDraw', data)
    if intent is None:
        return
    _coordinator().accept_draw(_get_sid(), intent.room_id)


def handle_error(exc):
    # Handler failures stay local to the offending event
    current_app.logger.exception(f"[handler-error] event={getattr(request, 'event', {}).get('message')} sid={_get_sid()}: {exc}")


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createSession', handle_create_session, namespace=namespace)
    socketio.on_event('joinSession', handle_join_session, namespace=namespace)
    socketio.on_event('submitMove', handle_submit_move, namespace=namespace)
    socketio.on_event('resign', handle_resign, namespace=namespace)
    socketio.on_event('offerDraw', handle_offer_draw, namespace=namespace)
    socketio.on_event('acceptDraw', handle_accept_draw, namespace=namespace)
    socketio.on_error(namespace)(handle_error)
