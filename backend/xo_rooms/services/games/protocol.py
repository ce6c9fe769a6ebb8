"""Session protocol: client intents in, outbound dispatches out.

Every function here takes the registry and the requesting connection id,
applies the intent to room state and returns the messages to send. None of
them touch the transport, so they can be exercised without a socket.
"""
from typing import Any, List, NamedTuple, Optional, Tuple

from .registry import RoomError, RoomRegistry


class Dispatch(NamedTuple):
    event: str
    payload: Any
    to: str


def room_channel(code: str) -> str:
    return f"room:{code}"


def _game_update(room) -> Dispatch:
    return Dispatch('gameUpdate', room.to_dict(), room_channel(room.code))


def create_room(registry: RoomRegistry, sid: str) -> Tuple[str, List[Dispatch]]:
    code, mark = registry.create_room(sid)
    return code, [Dispatch('roomCreated', {'code': code, 'role': mark}, sid)]


def join_room(registry: RoomRegistry, sid: str, code) -> Tuple[Optional[str], List[Dispatch]]:
    """Seat ``sid`` in an existing room.

    On success returns the normalized code, acknowledgements for both
    players and a game update for the room. On failure returns None and a
    single ``errorMsg`` addressed to the requester.
    """
    try:
        mark = registry.join_room(code, sid)
    except RoomError as exc:
        return None, [Dispatch('errorMsg', exc.message, sid)]

    room = registry.get(code)
    dispatches = [Dispatch('roomJoined', {'code': room.code, 'role': mark}, sid)]
    for other, owner in room.players.items():
        if owner and owner != sid:
            dispatches.append(Dispatch('roomJoined', {'code': room.code, 'role': other}, owner))
    dispatches.append(_game_update(room))
    return room.code, dispatches


def make_move(registry: RoomRegistry, sid: str, data) -> List[Dispatch]:
    if not isinstance(data, dict):
        return []
    room = registry.get(data.get('code'))
    if room is None:
        return []
    role = data.get('role')
    # The claimed mark only counts if this connection holds that seat
    if role is None or room.mark_of(sid) != role:
        return []
    if not room.apply_move(data.get('idx'), role):
        return []
    registry.touch(room)
    return [_game_update(room)]


def reset_game(registry: RoomRegistry, sid: str, code) -> List[Dispatch]:
    room = registry.get(code)
    if room is None or room.mark_of(sid) is None:
        return []
    room.reset()
    registry.touch(room)
    return [_game_update(room)]


def disconnect(registry: RoomRegistry, sid: str) -> List[Dispatch]:
    dispatches = []
    for room, opponent in registry.remove_connection(sid):
        if opponent:
            dispatches.append(Dispatch('playerDisconnected', None, opponent))
            dispatches.append(_game_update(room))
    return dispatches
