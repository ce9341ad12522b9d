"""Inbound event payloads.

Every Socket.IO intent is parsed into one of these models before it reaches
the coordinator. Room-scoped intents accept either a bare room id string
(what the browser client sends) or an object with ``roomId``.
"""

from typing import Any, Dict, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidIntent

RoomId = str


class MoveRecord(BaseModel):
    """A move as produced by the client-side rule engine.

    Only ``from``, ``to`` and ``after`` are required; anything else the
    engine attaches (san, piece, flags, ...) is kept and relayed untouched.
    """

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    from_square: str = Field(alias='from')
    to: str
    after: str

    @field_validator('from_square', 'to', 'after')
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('must not be blank')
        return value

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class CreateSessionIntent(BaseModel):
    pass


class RoomIntent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: RoomId = Field(alias='roomId', min_length=1)


class JoinSessionIntent(RoomIntent):
    pass


class SubmitMoveIntent(RoomIntent):
    move: MoveRecord


class ResignIntent(RoomIntent):
    pass


class OfferDrawIntent(RoomIntent):
    pass


class AcceptDrawIntent(RoomIntent):
    pass


INTENTS: Dict[str, Type[BaseModel]] = {
    'createSession': CreateSessionIntent,
    'joinSession': JoinSessionIntent,
    'submitMove': SubmitMoveIntent,
    'resign': ResignIntent,
    'offerDraw': OfferDrawIntent,
    'acceptDraw': AcceptDrawIntent,
}


def parse_intent(event: str, data: Any = None) -> BaseModel:
    """Validate ``data`` against the schema registered for ``event``.

    Raises InvalidIntent for unknown events and malformed payloads.
    """
    model = INTENTS.get(event)
    if model is None:
        raise InvalidIntent(event, 'unknown event')
    if isinstance(data, str) and issubclass(model, RoomIntent):
        data = {'roomId': data}
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidIntent(event, f'expected an object, got {type(data).__name__}')
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidIntent(event, str(exc)) from exc
