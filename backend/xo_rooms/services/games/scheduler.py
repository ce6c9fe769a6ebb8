from typing import List

from xo_rooms import socketio
from .protocol import room_channel
from .registry import Room


def sweep_idle_rooms(app) -> List[Room]:
    """Evict rooms idle for longer than ROOM_IDLE_TIMEOUT_SEC.

    Members of an evicted room get ``roomExpired`` and the room channel is
    closed. No-ops when the timeout is 0.
    """
    max_idle = int(app.config.get('ROOM_IDLE_TIMEOUT_SEC', 0))
    if max_idle <= 0:
        return []
    namespace = app.config.get('SOCKETIO_NAMESPACE', '/')
    registry = app.extensions['rooms']
    with registry.lock:
        evicted = registry.evict_idle(max_idle)
        for room in evicted:
            app.logger.info(f"[room-evict] code={room.code} idle>={max_idle}s")
            channel = room_channel(room.code)
            socketio.emit('roomExpired', {'code': room.code}, to=channel, namespace=namespace)
            socketio.close_room(channel, namespace=namespace)
    return evicted


def start_idle_sweeper(app) -> None:
    """Run sweep_idle_rooms periodically in a Socket.IO background task.

    - No-ops in TESTING mode or when the idle timeout is disabled
    - Sweeps every ROOM_SWEEP_INTERVAL_SEC seconds
    """
    if app.config.get('TESTING') or int(app.config.get('ROOM_IDLE_TIMEOUT_SEC', 0)) <= 0:
        return
    interval = max(1, int(app.config.get('ROOM_SWEEP_INTERVAL_SEC', 60)))

    def _worker():
        while True:
            socketio.sleep(interval)
            try:
                sweep_idle_rooms(app)
            except Exception:
                app.logger.exception("[sweep-error] idle room sweep failed")

    app.logger.info(f"[sweeper-start] timeout={app.config['ROOM_IDLE_TIMEOUT_SEC']}s interval={interval}s")
    socketio.start_background_task(_worker)
