# NN/__init__.py
from .activation import Activation
from .errors import CheckpointError, DimensionMismatch, InvalidTopology
from .matrix import Matrix
from .neuralnet import NeuralNetwork

__all__ = [
    "Activation",
    "CheckpointError",
    "DimensionMismatch",
    "InvalidTopology",
    "Matrix",
    "NeuralNetwork",
]
