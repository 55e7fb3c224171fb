import logging
import random
import threading
from collections import namedtuple

from tilemerge import game

logger = logging.getLogger(__name__)

ACTIVE = 'active'
OVER = 'over'
STATES = (ACTIVE, OVER)


class Session(namedtuple('Session', 'grid score state')):
    """Board, cumulative score and ACTIVE/OVER state of one game.

    Sessions are values: request_move returns a new Session rather than
    changing the one it was given.
    """
    __slots__ = ()

    @property
    def is_over(self):
        return self.state == OVER

    def to_dict(self):
        return {'grid': self.grid.tolist(), 'score': int(self.score), 'state': self.state}

    @classmethod
    def from_dict(cls, data):
        try:
            grid, score, state = data['grid'], data['score'], data['state']
        except (KeyError, TypeError) as e:
            raise ValueError(f"Session must have 'grid', 'score' and 'state' fields: {e}") from e

        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            raise ValueError(f"Score must be a non-negative integer, got {score!r}")
        if state not in STATES:
            raise ValueError(f"State must be one of {STATES}, got {state!r}")

        board = game.to_grid(grid)
        # A locked board can never leave ACTIVE through a move.
        if state == ACTIVE and game.is_game_over(board):
            logger.debug("Loaded an active session with a locked board, marking it over")
            state = OVER
        return cls(board, score, state)


def init(rng=random):
    board = game.add_random_tile(game.get_empty_board(), rng)
    board = game.add_random_tile(board, rng)
    return Session(board, 0, ACTIVE)


def request_move(session, direction, rng=random):
    """Applies one move and returns the resulting session.

    Returns `session` itself when the game is over or the move changes
    nothing. Otherwise the merged board, the new score, the spawned tile and
    the terminal check all land in a single new Session.
    """
    game.validate_direction(direction)

    if session.state == OVER:
        logger.debug("Ignoring move %s: game is over", direction)
        return session

    result = game.apply_move(session.grid, direction)
    if not result.changed:
        logger.debug("Ignoring move %s: board unchanged", direction)
        return session

    board = game.add_random_tile(result.grid, rng)
    score = session.score + result.score_delta
    state = OVER if game.is_game_over(board) else ACTIVE

    if state == OVER:
        logger.info("Game over with score %d", score)
    return Session(board, score, state)


class GameController:
    """Holds the live session for a host that dispatches moves as events.

    Moves are serialized, so a move (commit, spawn, terminal check) always
    finishes before the next one starts. `on_game_over` is called with the
    final score once, when the session becomes OVER.
    """

    def __init__(self, rng=random, on_game_over=None):
        self._rng = rng
        self._on_game_over = on_game_over
        self._lock = threading.Lock()
        self._session = init(rng)

    @property
    def session(self):
        return self._session

    def reset(self):
        with self._lock:
            self._session = init(self._rng)
            return self._session

    def move(self, direction):
        with self._lock:
            previous = self._session
            current = request_move(previous, direction, self._rng)
            self._session = current

        changed = current is not previous
        if changed and current.is_over and self._on_game_over is not None:
            self._on_game_over(current.score)
        return current, changed
