# NN/neuralnet.py
from __future__ import annotations
from typing import Any, Dict, Optional, Sequence, Union
import math
import threading
import numpy as np

from .activation import Activation
from .errors import CheckpointError, DimensionMismatch, InvalidTopology
from .matrix import Matrix

STATE_FORMAT = "neural-lib/ffnn"
STATE_VERSION = 1


def _check_topology(layer_sizes: Sequence[int]) -> tuple[int, ...]:
    sizes = list(layer_sizes)
    if len(sizes) < 2:
        raise InvalidTopology(f"topology needs at least 2 layers, got {len(sizes)}")
    for i, w in enumerate(sizes):
        if isinstance(w, bool) or not isinstance(w, (int, np.integer)) or w <= 0:
            raise InvalidTopology(f"layer {i} width must be a positive integer, got {w!r}")
    return tuple(int(w) for w in sizes)


def _check_learning_rate(lr: float) -> float:
    lr = float(lr)
    if not math.isfinite(lr):
        raise ValueError(f"learning_rate must be finite, got {lr}")
    return lr


class NeuralNetwork:
    """
    Fully connected feed-forward network trained by online backpropagation.

    topology like (in, h1, ..., out). Weight i has shape (topology[i+1], topology[i]),
    bias i has shape (topology[i+1], 1). Both are uniform in [-1, 1) at construction.
    """

    def __init__(
        self,
        topology: Sequence[int],
        learning_rate: float = 0.1,
        activation: Union[Activation, str] = Activation.SIGMOID,
        rng: Optional[np.random.Generator] = None,
    ):
        self._topology = _check_topology(topology)
        self._learning_rate = _check_learning_rate(learning_rate)
        self._activation = Activation.from_name(activation)
        self._lock = threading.Lock()

        rng = rng or np.random.default_rng()
        self._weights: list[Matrix] = []
        self._biases: list[Matrix] = []
        for inp, out in zip(self._topology, self._topology[1:]):
            w = Matrix(out, inp)
            w.randomize(rng)
            self._weights.append(w)

            b = Matrix(out, 1)
            b.randomize(rng)
            self._biases.append(b)

    # ---------- Properties ----------
    @property
    def topology(self) -> tuple[int, ...]:
        return self._topology

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @learning_rate.setter
    def learning_rate(self, lr: float) -> None:
        lr = _check_learning_rate(lr)
        with self._lock:
            self._learning_rate = lr

    @property
    def activation(self) -> Activation:
        return self._activation

    @activation.setter
    def activation(self, value: Union[Activation, str]) -> None:
        activation = Activation.from_name(value)
        with self._lock:
            self._activation = activation

    @property
    def weights(self) -> list[Matrix]:
        """Copies; mutating them does not touch the network."""
        with self._lock:
            return [w.copy() for w in self._weights]

    @property
    def biases(self) -> list[Matrix]:
        with self._lock:
            return [b.copy() for b in self._biases]

    def __str__(self):
        desc = [f"NeuralNetwork({self._activation.label}, lr={self._learning_rate}):"]
        for w in self._weights:
            desc.append(f"  Dense({w.cols} → {w.rows})")
        return "\n".join(desc)

    # ---------- Forward ----------
    def _input_column(self, inputs: Sequence[float]) -> Matrix:
        values = list(inputs)
        if len(values) != self._topology[0]:
            raise DimensionMismatch(f"expected {self._topology[0]} inputs, got {len(values)}")
        return Matrix.from_array(values)

    def _forward(self, x: Matrix) -> list[Matrix]:
        f = self._activation.function
        layers = [x]
        current = x
        for w, b in zip(self._weights, self._biases):
            current = w.matmul(current)
            current.add(b)
            current.map(f)
            layers.append(current)
        return layers

    def feed_forward(self, inputs: Sequence[float]) -> list[float]:
        x = self._input_column(inputs)
        with self._lock:
            out = self._forward(x)[-1]
        return out.to_array()

    def activations(self, inputs: Sequence[float]) -> list[Matrix]:
        """
        Per-layer post-activation columns matching self.topology:
        [input, layer1_act, ..., output_act]
        """
        x = self._input_column(inputs)
        with self._lock:
            return self._forward(x)

    def predict_index(self, inputs: Sequence[float]) -> int:
        """Index of the strongest output (first one on ties)."""
        return int(np.argmax(self.feed_forward(inputs)))

    # ---------- Backprop ----------
    def train(self, inputs: Sequence[float], targets: Sequence[float]) -> None:
        """One stochastic gradient step on a single (inputs, targets) example."""
        x = self._input_column(inputs)
        target_values = list(targets)
        if len(target_values) != self._topology[-1]:
            raise DimensionMismatch(f"expected {self._topology[-1]} targets, got {len(target_values)}")
        target = Matrix.from_array(target_values)

        with self._lock:
            layers = self._forward(x)
            error = target.subtract(layers[-1])
            grad_fn = self._activation.derivative

            for i in reversed(range(len(self._weights))):
                gradient = layers[i + 1].mapped(grad_fn)
                gradient.multiply(error)
                gradient.multiply(self._learning_rate)

                delta_w = gradient.matmul(layers[i].transpose())

                # propagate through the weights that produced this layer, before the update
                error = self._weights[i].transpose().matmul(error)

                self._weights[i].add(delta_w)
                self._biases[i].add(gradient)

    # ---------- Checkpointing ----------
    def get_state(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "format": STATE_FORMAT,
                "version": STATE_VERSION,
                "topology": list(self._topology),
                "learning_rate": self._learning_rate,
                "activation": self._activation.label,
                "weights": [w.to_list() for w in self._weights],
                "biases": [b.to_list() for b in self._biases],
            }

    def set_state(self, state: Dict[str, Any]) -> None:
        """Restore parameters from get_state() output. Validates everything before writing."""
        topology, lr, activation, weights, biases = _parse_state(state)
        if topology != self._topology:
            raise CheckpointError(f"topology mismatch: checkpoint {topology}, network {self._topology}")

        with self._lock:
            self._learning_rate = lr
            self._activation = activation
            self._weights = weights
            self._biases = biases

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "NeuralNetwork":
        topology, lr, activation, weights, biases = _parse_state(state)
        # parameters come from the checkpoint; skip the random init
        net = cls.__new__(cls)
        net._topology = topology
        net._learning_rate = lr
        net._activation = activation
        net._lock = threading.Lock()
        net._weights = weights
        net._biases = biases
        return net


def _parse_state(state: Any) -> tuple[tuple[int, ...], float, Activation, list[Matrix], list[Matrix]]:
    """Validate a get_state() dict and build its matrices. Raises CheckpointError on any defect."""
    if not isinstance(state, dict):
        raise CheckpointError(f"network state must be an object, got {type(state).__name__}")
    if state.get("format") != STATE_FORMAT:
        raise CheckpointError(f"not a network checkpoint (format={state.get('format')!r})")
    if state.get("version") != STATE_VERSION:
        raise CheckpointError(f"unsupported checkpoint version {state.get('version')!r}")
    try:
        topology = _check_topology(state["topology"])
        lr = _check_learning_rate(state["learning_rate"])
        activation = Activation.from_name(state["activation"])
        weights = [Matrix.from_list(w) for w in state["weights"]]
        biases = [Matrix.from_list(b) for b in state["biases"]]
    except (KeyError, TypeError, ValueError) as e:
        raise CheckpointError(f"malformed checkpoint: {e}") from e

    n_layers = len(topology) - 1
    if len(weights) != n_layers or len(biases) != n_layers:
        raise CheckpointError("checkpoint layer count does not match topology")
    for i, (inp, out) in enumerate(zip(topology, topology[1:])):
        w, b = weights[i], biases[i]
        if w.shape != (out, inp) or b.shape != (out, 1):
            raise CheckpointError(
                f"layer {i}: expected weight {(out, inp)} / bias {(out, 1)}, got {w.shape} / {b.shape}"
            )
    return topology, lr, activation, weights, biases
