import pytest


class ScriptedRandom:
    """Random engine replaying fixed draws, to force specific swap attempts."""

    def __init__(self, indices=(), units=(), seed=0):
        self.indices = list(indices)
        self.units = list(units)
        self.seed = seed
        self.unit_draws = 0

    def next_edge_index(self, m):
        idx = self.indices.pop(0)
        assert 0 <= idx < m
        return idx

    def next_unit(self):
        self.unit_draws += 1
        return self.units.pop(0)


@pytest.fixture
def scripted():
    return ScriptedRandom
