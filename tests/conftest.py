import matplotlib

matplotlib.use("Agg")

import pytest

from qpass.qrng import NumpySource


class ScriptedSource:
    """Returns a fixed sequence of integers, checking each is in range."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def uniform_int(self, n):
        value = self.values.pop(0)
        assert 0 <= value < n, f"scripted value {value} out of range for n={n}"
        self.calls.append(n)
        return value


@pytest.fixture
def scripted():
    return ScriptedSource


@pytest.fixture
def seeded():
    return NumpySource(seed=20240611)
