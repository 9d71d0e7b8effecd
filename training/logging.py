from __future__ import annotations
import csv, os
from typing import Dict, Any, Protocol, Callable

from .metrics import EMA

ALL_KEYS = [
    "step",
    "epoch",
    "train/mse", "train/mse_ema", "train/elapsed",
]

class Logger(Protocol):
    def log(self, step: int, scalars: Dict[str, Any]) -> None: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...


class CSVLogger:
    """Append-only CSV logger with header auto-discovery or predefined schema."""
    def __init__(self, path: str, fieldnames: list[str] | None = None):
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.path = path
        self._fieldnames = fieldnames
        self._file = open(path, "a", newline="")
        self._writer = None

    def log(self, step: int, scalars: Dict[str, Any]) -> None:
        scalars = {"step": step, **scalars}
        if self._writer is None:
            if self._fieldnames is None:
                self._fieldnames = list(scalars.keys())
            self._writer = csv.DictWriter(
                self._file,
                fieldnames=self._fieldnames,
                extrasaction="ignore",   # unknown keys are dropped, not fatal
            )
            if self._file.tell() == 0:
                self._writer.writeheader()
        self._writer.writerow(scalars)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> "CSVLogger":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def make_epoch_logger(
    logger: Logger,
    ema: EMA | None = None,
    echo: bool = True,
) -> Callable[[int, Dict[str, Any]], None]:
    """
    Returns a function(epoch: int, stats: Dict[str, Any]) -> None suitable for
    TrainHooks.on_epoch_end. Writes one CSV row per report and optionally echoes
    a progress line to stdout.
    """
    ema = ema or EMA(0.3)

    def _on_epoch_end(epoch: int, stats: Dict[str, Any]) -> None:
        mse = float(stats["mse"])
        elapsed = float(stats.get("elapsed", 0.0))
        scalars = {
            "epoch": epoch,
            "train/mse": mse,
            "train/mse_ema": ema.update(mse),
            "train/elapsed": elapsed,
        }
        logger.log(int(stats.get("step", epoch)), scalars)
        logger.flush()

        if echo:
            total = stats.get("epochs", "?")
            print(f"[train] epoch {epoch}/{total}  mse={mse:.6f}  elapsed={elapsed:.2f}s")

    return _on_epoch_end
