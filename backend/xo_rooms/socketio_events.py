from flask import current_app, request
from flask_socketio import join_room

from xo_rooms import socketio
from xo_rooms.broadcast import deliver
from xo_rooms.services.games import protocol
from xo_rooms.services.games.registry import RoomRegistry


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _registry() -> RoomRegistry:
    return current_app.extensions['rooms']


def _namespace() -> str:
    return current_app.config.get('SOCKETIO_NAMESPACE', '/')


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    registry = _registry()
    with registry.lock:
        dispatches = protocol.disconnect(registry, sid)
        deliver(dispatches, _namespace())
    current_app.logger.info(f"[disconnect] sid={sid} notified={sum(d.event == 'playerDisconnected' for d in dispatches)}")


def handle_create_room(data=None):
    sid = _get_sid()
    registry = _registry()
    with registry.lock:
        code, dispatches = protocol.create_room(registry, sid)
        join_room(protocol.room_channel(code))
        deliver(dispatches, _namespace())
    current_app.logger.info(f"[room-create] code={code} sid={sid}")


def handle_join_room(code=None):
    sid = _get_sid()
    registry = _registry()
    with registry.lock:
        joined, dispatches = protocol.join_room(registry, sid, code)
        if joined:
            join_room(protocol.room_channel(joined))
        deliver(dispatches, _namespace())
    if joined:
        current_app.logger.info(f"[room-join] code={joined} sid={sid}")
    else:
        current_app.logger.info(f"[room-join-fail] code={code!r} sid={sid} error={dispatches[0].payload}")


def handle_make_move(data=None):
    sid = _get_sid()
    registry = _registry()
    with registry.lock:
        dispatches = protocol.make_move(registry, sid, data)
        deliver(dispatches, _namespace())
    if dispatches:
        state = dispatches[0].payload
        current_app.logger.info(
            f"[move] code={state['code']} idx={data.get('idx')} mark={data.get('role')} status={state['status']}"
        )
    else:
        current_app.logger.debug(f"[move-reject] sid={sid} data={data!r}")


def handle_reset_game(code=None):
    sid = _get_sid()
    registry = _registry()
    with registry.lock:
        dispatches = protocol.reset_game(registry, sid, code)
        deliver(dispatches, _namespace())
    if dispatches:
        current_app.logger.info(f"[reset] code={dispatches[0].payload['code']} sid={sid}")


def handle_error(exc):
    # Drop the offending message; other rooms keep going
    current_app.logger.exception(f"[handler-error] sid={_get_sid()} error={exc!r}")


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('makeMove', handle_make_move, namespace=namespace)
    socketio.on_event('resetGame', handle_reset_game, namespace=namespace)
    socketio.on_error_default(handle_error)
