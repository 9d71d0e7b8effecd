# config.py
import os
from dataclasses import dataclass, replace
from typing import Optional, Literal, Tuple

@dataclass(frozen=True, slots=True)
class AppConfig:
    # shared / global
    seed: Optional[int] = None

    # network
    topology: Tuple[int, ...] = (2, 4, 1)
    learning_rate: float = 0.1
    activation: Literal["sigmoid", "tanh", "relu"] = "sigmoid"

    # training loop
    epochs: int = 50_000
    log_interval: int = 10_000           # epochs between MSE reports

    # outputs
    run_dir: str = "runs/xor"
    model_tag: str = "xor_model"

    @property
    def model_path(self) -> str:
        return os.path.join(self.run_dir, f"{self.model_tag}.json")

    @property
    def log_path(self) -> str:
        return os.path.join(self.run_dir, "logs.csv")

    def with_(self, **kwargs) -> "AppConfig":
        """Convenience: clone with updated values"""
        return replace(self, **kwargs)
