# main.py
import argparse

from config import AppConfig
from runners.run_xor import main as xor
from runners.run_model import main as model

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Train and run small feed-forward networks.")
    p.add_argument("mode", choices=["xor", "model"])
    p.add_argument("inputs", nargs="*", type=float, help="input vector for 'model' mode")
    p.add_argument("--epochs", type=int, default=None)
    p.add_argument("--lr", type=float, default=None)
    p.add_argument("--activation", choices=["sigmoid", "tanh", "relu"], default=None)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--run-dir", default=None)
    p.add_argument("--model", default=None, help="explicit model file for 'model' mode")
    return p.parse_args(argv)

def build_config(args) -> AppConfig:
    cfg = AppConfig()
    overrides = {
        "epochs": args.epochs,
        "learning_rate": args.lr,
        "activation": args.activation,
        "seed": args.seed,
        "run_dir": args.run_dir,
    }
    return cfg.with_(**{k: v for k, v in overrides.items() if v is not None})

def main(argv=None):
    args = parse_args(argv)
    cfg = build_config(args)
    if args.mode == "xor":
        xor(cfg)
    elif args.mode == "model":
        if not args.inputs:
            raise SystemExit("model mode needs an input vector, e.g. `main.py model 1 0`")
        model(args.inputs, cfg, path=args.model)

if __name__ == "__main__":
    main()
