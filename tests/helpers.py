import numpy as np

# Full board with no equal neighbours in any row or column.
LOCKED = np.array([[2 ** (r + c + 1) for c in range(4)] for r in range(4)])

# One move left from here merges the 2s, leaving (0, 3) as the only empty
# cell; a 2 spawned there locks the board.
ALMOST_LOCKED = np.array([
    [2, 2, 8, 16],
    [8, 16, 32, 4],
    [16, 32, 64, 8],
    [32, 64, 128, 16],
])


class SequenceRandom:
    """Returns a fixed sequence of floats from random(), cycling when exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value
