import random
import string
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from .board import DRAW, EMPTY, MARKS, O, X, empty_board, evaluate, other_mark

WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'

# First mover of every round
FIRST_MARK = X


class RoomError(Exception):
    """Base error for room lookups and seating; the message is user-visible."""

    message = 'Room error'

    def __init__(self, code: Optional[str] = None):
        super().__init__(self.message)
        self.code = code


class RoomNotFound(RoomError):
    message = 'Room not found'


class RoomFull(RoomError):
    message = 'Room full'


class AlreadyInRoom(RoomError):
    message = 'Already in room'


def generate_room_code(length=6):
    """Generate a short, human-shareable room code."""
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


class Room:
    def __init__(self, code: str, now: float = 0.0):
        self.code = code
        self.board: List[str] = empty_board()
        self.turn = FIRST_MARK
        self.players: Dict[str, Optional[str]] = {X: None, O: None}
        self.status = WAITING
        self.winner: Optional[str] = None
        self.win_counts: Dict[str, int] = {X: 0, O: 0}
        self.last_active = now

    def mark_of(self, connection: str) -> Optional[str]:
        for mark in MARKS:
            if self.players[mark] == connection:
                return mark
        return None

    def is_full(self) -> bool:
        return all(self.players[mark] for mark in MARKS)

    def is_empty(self) -> bool:
        return not any(self.players[mark] for mark in MARKS)

    def apply_move(self, index, mark: str) -> bool:
        """Place ``mark`` at ``index`` if the move is legal right now.

        Returns False, leaving the room untouched, when the game is not in
        progress, it is not ``mark``'s turn, the index is out of range or
        the cell is taken.
        """
        if self.status != PLAYING or self.turn != mark:
            return False
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if not 0 <= index < len(self.board) or self.board[index] != EMPTY:
            return False

        self.board[index] = mark
        self.turn = other_mark(mark)
        result = evaluate(self.board)
        if result:
            self.status = FINISHED
            self.winner = result
            if result != DRAW:
                self.win_counts[result] += 1
        return True

    def reset(self) -> None:
        """Start a new round; cumulative win counts are kept."""
        self.board = empty_board()
        self.turn = FIRST_MARK
        self.winner = None
        self.status = PLAYING if self.is_full() else WAITING

    def to_dict(self):
        return {
            'code': self.code,
            'board': list(self.board),
            'turn': self.turn,
            'status': self.status,
            'winner': self.winner,
            'winCounts': dict(self.win_counts),
            'players': {mark: self.players[mark] is not None for mark in MARKS},
        }


class RoomRegistry:
    """Process-wide table of live rooms keyed by code.

    Callers mutating rooms from concurrent handlers must hold ``lock``
    across the whole read, validate, write and broadcast sequence.
    """

    def __init__(self, code_length: int = 6,
                 code_factory: Optional[Callable[[int], str]] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.code_length = code_length
        self._code_factory = code_factory or generate_room_code
        self._clock = clock
        self._rooms: Dict[str, Room] = {}
        self.lock = threading.RLock()

    def __contains__(self, code) -> bool:
        return self.get(code) is not None

    def __len__(self) -> int:
        return len(self._rooms)

    def codes(self) -> List[str]:
        return list(self._rooms)

    def get(self, code) -> Optional[Room]:
        if not isinstance(code, str):
            return None
        return self._rooms.get(code.strip().upper())

    def touch(self, room: Room) -> None:
        room.last_active = self._clock()

    def _new_code(self) -> str:
        while True:
            code = self._code_factory(self.code_length).upper()
            if code not in self._rooms:
                return code

    def create_room(self, connection: str) -> Tuple[str, str]:
        code = self._new_code()
        room = Room(code, now=self._clock())
        room.players[X] = connection
        self._rooms[code] = room
        return code, X

    def join_room(self, code, connection: str) -> str:
        room = self.get(code)
        if room is None:
            raise RoomNotFound(code)
        if room.mark_of(connection):
            raise AlreadyInRoom(room.code)
        if room.is_full():
            raise RoomFull(room.code)

        mark = X if room.players[X] is None else O
        room.players[mark] = connection
        room.status = PLAYING
        self.touch(room)
        return mark

    def remove_connection(self, connection: str) -> List[Tuple[Room, Optional[str]]]:
        """Release every seat held by ``connection``.

        Returns ``(room, opponent)`` pairs for each room the connection sat
        in; ``opponent`` is None when nobody is left to notify. Rooms left
        with no owners are deleted.
        """
        affected = []
        for code in list(self._rooms):
            room = self._rooms[code]
            mark = room.mark_of(connection)
            if mark is None:
                continue
            room.players[mark] = None
            opponent = room.players[other_mark(mark)]
            if room.is_empty():
                del self._rooms[code]
            else:
                # The abandoned round cannot continue with one player
                room.reset()
            affected.append((room, opponent))
        return affected

    def evict_idle(self, max_idle: float) -> List[Room]:
        now = self._clock()
        evicted = []
        for code in list(self._rooms):
            room = self._rooms[code]
            if now - room.last_active >= max_idle:
                del self._rooms[code]
                evicted.append(room)
        return evicted
