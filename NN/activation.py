# NN/activation.py
from __future__ import annotations
from enum import Enum
from typing import Callable, Union
import math


def _sigmoid(x: float) -> float:
    # math.exp raises OverflowError where IEEE arithmetic would give 1/inf == 0
    if x < -700.0:
        return 0.0
    return 1.0 / (1.0 + math.exp(-x))


def _sigmoid_grad(y: float) -> float:
    return y * (1.0 - y)


def _tanh_grad(y: float) -> float:
    return 1.0 - y * y


def _relu(x: float) -> float:
    return x if x > 0 else 0.0


def _relu_grad(y: float) -> float:
    return 1.0 if y > 0 else 0.0


class Activation(Enum):
    """
    Activation/derivative pairs. The derivative takes the *activated* output y,
    not the pre-activation x.
    """
    SIGMOID = ("sigmoid", _sigmoid, _sigmoid_grad)
    TANH = ("tanh", math.tanh, _tanh_grad)
    RELU = ("relu", _relu, _relu_grad)

    def __init__(self, label: str, function: Callable[[float], float], derivative: Callable[[float], float]):
        self.label = label
        self.function = function
        self.derivative = derivative

    @classmethod
    def from_name(cls, name: Union[str, "Activation"]) -> "Activation":
        if isinstance(name, Activation):
            return name
        key = str(name).strip().lower()
        for member in cls:
            if member.label == key:
                return member
        choices = ", ".join(m.label for m in cls)
        raise ValueError(f"Unknown activation {name!r} (expected one of: {choices})")
