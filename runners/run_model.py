# runners/run_model.py
from __future__ import annotations
from typing import Optional, Sequence

from config import AppConfig
from core.checkpointing import load_network


def main(inputs: Sequence[float], cfg: Optional[AppConfig] = None, path: Optional[str] = None) -> list[float]:
    """Load a saved network and evaluate it on one input vector."""
    cfg = cfg or AppConfig()
    net = load_network(path or cfg.model_path)

    out = net.feed_forward(inputs)
    print(f"[model] arch={net.topology}  activation={net.activation.label}")
    print(f"[model] input={list(inputs)}")
    print(f"[model] output=[{', '.join(f'{v:.4f}' for v in out)}]  argmax={net.predict_index(inputs)}")
    return out
