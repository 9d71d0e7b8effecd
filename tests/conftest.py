# tests/conftest.py
import os
import sys

# Headless matplotlib so plotting tests never need a display
os.environ.setdefault("MPLBACKEND", "Agg")

# Ensure project root is importable (so NN.* imports work when running from repo root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import numpy as np
import pytest

@pytest.fixture
def rng():
    return np.random.default_rng(1234)

@pytest.fixture
def matrix_factory(rng):
    from NN.matrix import Matrix
    def make(rows=2, cols=3, values=None, randomize=True):
        if values is not None:
            return Matrix.from_list(values)
        m = Matrix(rows, cols)
        if randomize:
            m.randomize(rng)
        return m
    return make

@pytest.fixture
def network_factory(rng):
    from NN.neuralnet import NeuralNetwork
    def make(topology=(2, 4, 1), **kwargs):
        kwargs.setdefault("rng", rng)
        return NeuralNetwork(topology, **kwargs)
    return make

@pytest.fixture
def xor_data():
    inputs = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
    targets = [[0.0], [1.0], [1.0], [0.0]]
    return inputs, targets
