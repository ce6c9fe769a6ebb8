from typing import List, Optional

X = 'X'
O = 'O'
DRAW = 'draw'
EMPTY = ''
MARKS = (X, O)
BOARD_SIZE = 9

# Rows, columns, diagonals. Order matters: the first complete line wins.
WIN_LINES = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def empty_board() -> List[str]:
    return [EMPTY] * BOARD_SIZE


def other_mark(mark: str) -> str:
    return O if mark == X else X


def evaluate(board: List[str]) -> Optional[str]:
    """Return the winning mark, ``'draw'`` for a full board, or None."""
    for a, b, c in WIN_LINES:
        if board[a] and board[a] == board[b] == board[c]:
            return board[a]
    if all(board):
        return DRAW
    return None
