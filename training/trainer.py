from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Dict, Any, Sequence
import time

from NN.neuralnet import NeuralNetwork
from .metrics import mse

EpochFn = Callable[[int, Dict[str, Any]], None]

@dataclass
class TrainHooks:
    on_epoch_end: Optional[EpochFn] = None

class Trainer:
    """
    Thin, testable loop coordinator. The network only knows single-example steps;
    epochs, ordering and reporting cadence live here.
    """
    def __init__(
        self,
        net: NeuralNetwork,
        hooks: Optional[TrainHooks] = None,
        log_interval: Optional[int] = None,
    ):
        if log_interval is not None and log_interval < 1:
            raise ValueError(f"log_interval must be >= 1, got {log_interval}")
        self.net = net
        self.hooks = hooks or TrainHooks()
        self.log_interval = log_interval

    @staticmethod
    def _check_dataset(inputs: Sequence[Sequence[float]], targets: Sequence[Sequence[float]]) -> None:
        if len(inputs) == 0:
            raise ValueError("dataset is empty")
        if len(inputs) != len(targets):
            raise ValueError(f"{len(inputs)} inputs but {len(targets)} targets")

    def train(
        self,
        inputs: Sequence[Sequence[float]],
        targets: Sequence[Sequence[float]],
        epochs: int,
    ) -> Dict[str, Any]:
        """
        Run `epochs` passes over the dataset, one net.train call per example in fixed
        order. Reports every `log_interval` epochs and after the last one.
        """
        self._check_dataset(inputs, targets)
        if epochs < 1:
            raise ValueError(f"epochs must be >= 1, got {epochs}")

        start = time.perf_counter()
        stats: Dict[str, Any] = {}
        for epoch in range(1, epochs + 1):
            for x, y in zip(inputs, targets):
                self.net.train(x, y)

            due = self.log_interval is not None and epoch % self.log_interval == 0
            if due or epoch == epochs:
                stats = {
                    "epoch": epoch,
                    "epochs": epochs,
                    "step": epoch * len(inputs),
                    "mse": self.evaluate(inputs, targets)["mse"],
                    "elapsed": time.perf_counter() - start,
                }
                if self.hooks.on_epoch_end:
                    self.hooks.on_epoch_end(epoch, stats)
        return stats

    def evaluate(self, inputs: Sequence[Sequence[float]], targets: Sequence[Sequence[float]]) -> Dict[str, Any]:
        self._check_dataset(inputs, targets)
        outputs = [self.net.feed_forward(x) for x in inputs]
        return {"mse": mse(outputs, targets), "outputs": outputs}
