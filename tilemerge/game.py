import random
from collections import namedtuple

import numpy as np

BOARD_SIZE = 4
SPAWN_TWO_PROBABILITY = 0.9
DIRECTIONS = ('up', 'down', 'left', 'right')

MoveResult = namedtuple('MoveResult', 'grid score_delta changed')


def get_empty_board():
    return np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=int)


def to_grid(data):
    """Converts a row-major nested list into a validated board.

    Raises ValueError unless the data is a BOARD_SIZE x BOARD_SIZE matrix of
    integers that are each 0 or a power of two no smaller than 2.
    """
    try:
        board = np.array(data)
    except ValueError as e:
        raise ValueError(f"Board is not a rectangular matrix: {e}") from e

    if board.shape != (BOARD_SIZE, BOARD_SIZE):
        raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}, got shape {board.shape}")
    if board.dtype.kind not in 'iu':
        raise ValueError("Board cells must be integers")

    tiles = board[board != 0]
    if np.any(tiles < 2) or np.any(tiles & (tiles - 1)):
        raise ValueError("Board cells must be 0 or a power of two")
    return board.astype(int)


def validate_direction(direction):
    if not isinstance(direction, str) or direction not in DIRECTIONS:
        raise ValueError(f"Invalid direction: {direction!r}. Must be 'up', 'down', 'left', or 'right'")
    return direction


def transpose(board):
    return np.asarray(board).T.copy()


def reverse_rows(board):
    return np.asarray(board)[:, ::-1].copy()


def _identity(board):
    return np.array(board, dtype=int)


def _transpose_then_reverse(board):
    return reverse_rows(transpose(board))


def _reverse_then_transpose(board):
    return transpose(reverse_rows(board))


# (forward, inverse) pairs mapping each direction onto a slide to the left
_TRANSFORMS = {
    'up': (transpose, transpose),
    'down': (_transpose_then_reverse, _reverse_then_transpose),
    'left': (_identity, _identity),
    'right': (reverse_rows, reverse_rows),
}


def get_transforms(direction):
    """Returns the (forward, inverse) board transforms for a direction."""
    return _TRANSFORMS[validate_direction(direction)]


def compact_row(row):
    row = np.asarray(row, dtype=int)
    tiles = row[row != 0]
    return np.concatenate([tiles, np.zeros(len(row) - len(tiles), dtype=int)])


def compact(board):
    return np.array([compact_row(row) for row in board], dtype=int)


def merge_row(row):
    """Merges equal neighbours of a compacted row from left to right.

    A doubled tile is never the left half of another pair in the same pass.
    The result is not recompacted.
    """
    new_row = np.array(row, dtype=int)
    score_gained = 0

    for i in range(len(new_row) - 1):
        if new_row[i] != 0 and new_row[i] == new_row[i + 1]:
            new_row[i] *= 2
            new_row[i + 1] = 0
            score_gained += int(new_row[i])

    return new_row, score_gained


def merge(board):
    rows = []
    total_score_gained = 0

    for row in board:
        new_row, score = merge_row(row)
        rows.append(new_row)
        total_score_gained += score

    return np.array(rows, dtype=int), total_score_gained


def move_board(board, direction):
    forward, inverse = get_transforms(direction)

    rotated_board = compact(forward(board))
    merged_board, total_score_gained = merge(rotated_board)
    new_board = inverse(compact(merged_board))

    return new_board, total_score_gained


def apply_move(board, direction):
    new_board, score_delta = move_board(board, direction)
    changed = not np.array_equal(board, new_board)
    return MoveResult(new_board, score_delta, changed)


def add_random_tile(board, rng=random):
    """Places a 2 (90%) or a 4 (10%) in a uniformly chosen empty cell.

    `rng` is anything with a `random()` method returning floats in [0, 1).
    A full board comes back unchanged.
    """
    new_board = np.array(board, dtype=int)
    empty_cells = list(zip(*np.where(new_board == 0)))

    if not empty_cells:
        return new_board

    i, j = empty_cells[int(rng.random() * len(empty_cells))]
    new_board[i, j] = 2 if rng.random() < SPAWN_TWO_PROBABILITY else 4
    return new_board


def is_game_over(board):
    """Checks if the game is over (no empty cells and no possible merges)."""
    board = np.asarray(board)
    if 0 in board:
        return False

    for i in range(BOARD_SIZE):
        for j in range(BOARD_SIZE):
            current = board[i, j]
            if j < BOARD_SIZE - 1 and current == board[i, j + 1]:
                return False
            if i < BOARD_SIZE - 1 and current == board[i + 1, j]:
                return False

    return True
