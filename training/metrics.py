from __future__ import annotations
from typing import Optional, Sequence
import numpy as np

class EMA:
    """Exponential moving average."""
    def __init__(self, alpha: float):
        self.alpha = alpha
        self.value: Optional[float] = None
    def update(self, x: float) -> float:
        self.value = x if self.value is None else (self.alpha * x + (1 - self.alpha) * self.value)
        return self.value

def mse(outputs: Sequence[Sequence[float]], targets: Sequence[Sequence[float]]) -> float:
    """Mean squared error over every output component of every example."""
    out = np.asarray(outputs, dtype=np.float64)
    tgt = np.asarray(targets, dtype=np.float64)
    if out.shape != tgt.shape:
        raise ValueError(f"outputs {out.shape} and targets {tgt.shape} differ in shape")
    if out.size == 0:
        return 0.0
    return float(np.mean((tgt - out) ** 2))
