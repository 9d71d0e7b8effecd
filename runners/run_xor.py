# runners/run_xor.py
from __future__ import annotations
from typing import Optional
import numpy as np

from config import AppConfig
from NN.neuralnet import NeuralNetwork
from core.checkpointing import save_network, load_network
from training.trainer import Trainer, TrainHooks
from training.logging import ALL_KEYS, CSVLogger, make_epoch_logger
from training.metrics import EMA

XOR_INPUTS = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
XOR_TARGETS = [[0.0], [1.0], [1.0], [0.0]]


def main(cfg: Optional[AppConfig] = None) -> NeuralNetwork:
    """Train XOR, save the model, reload it and print the reloaded model's predictions."""
    cfg = cfg or AppConfig()
    rng = np.random.default_rng(cfg.seed)

    net = NeuralNetwork(cfg.topology, learning_rate=cfg.learning_rate, activation=cfg.activation, rng=rng)

    print("=== neural-lib XOR ===")
    print(f"topology: {net.topology}  activation: {net.activation.label}  lr: {net.learning_rate}")
    print(f"epochs: {cfg.epochs}  log every: {cfg.log_interval}  seed: {cfg.seed}")
    print(f"logs: {cfg.log_path}  model: {cfg.model_path}")

    with CSVLogger(cfg.log_path, fieldnames=ALL_KEYS) as logger:
        hooks = TrainHooks(on_epoch_end=make_epoch_logger(logger, EMA(0.3)))
        trainer = Trainer(net, hooks, log_interval=cfg.log_interval)
        trainer.train(XOR_INPUTS, XOR_TARGETS, cfg.epochs)

    save_network(net, cfg.model_path)
    loaded = load_network(cfg.model_path)

    print("\n[xor] predictions from loaded model:")
    for x in XOR_INPUTS:
        out = loaded.feed_forward(x)
        print(f"[xor] input: [{x[0]:.0f}, {x[1]:.0f}] -> output: {out[0]:.4f}")
    return loaded
