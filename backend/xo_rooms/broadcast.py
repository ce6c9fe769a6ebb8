from typing import Iterable

from xo_rooms import socketio
from xo_rooms.services.games.protocol import Dispatch


def deliver(dispatches: Iterable[Dispatch], namespace: str = '/') -> None:
    """Send dispatches over Socket.IO, either to one sid or to a room channel.

    Best effort: no retries and no acknowledgement tracking.
    """
    for dispatch in dispatches:
        if dispatch.payload is None:
            socketio.emit(dispatch.event, to=dispatch.to, namespace=namespace)
        else:
            socketio.emit(dispatch.event, dispatch.payload, to=dispatch.to, namespace=namespace)
