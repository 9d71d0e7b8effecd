# tools/plot_training.py
import math
import csv
import sys
from collections import deque
from pathlib import Path

# Use a non-interactive backend that writes to files
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

# --- Paths (resolve relative to repo root = parent of this script dir) ---
SCRIPT_DIR = Path(__file__).resolve().parent
REPO_ROOT = SCRIPT_DIR.parent
LOG_PATH = (REPO_ROOT / "runs" / "xor" / "logs.csv")  # <- canonical location

def to_float(v):
    try:
        return float(v)
    except (TypeError, ValueError):
        return math.nan

def rolling_mean(xs, window):
    out, q, s = [], deque(), 0.0
    for x in xs:
        x = float(x)
        q.append(x); s += x
        if len(q) > window:
            s -= q.popleft()
        out.append(s / len(q))
    return out

def read_log(log_path: Path) -> dict:
    if not log_path.exists():
        raise FileNotFoundError(f"Could not find logs.csv at {log_path}. "
                                f"Make sure you ran training and that your run writes to this path.")

    cols = {"epoch": [], "mse": [], "mse_ema": [], "elapsed": []}
    with log_path.open(newline="") as f:
        r = csv.DictReader(f)
        fieldnames = r.fieldnames or []
        def get(row, k): return to_float(row[k]) if k in fieldnames and row.get(k) not in (None, "") else math.nan

        for row in r:
            cols["epoch"].append(get(row, "epoch"))
            cols["mse"].append(get(row, "train/mse"))
            cols["mse_ema"].append(get(row, "train/mse_ema"))
            cols["elapsed"].append(get(row, "train/elapsed"))

    if not cols["epoch"]:
        raise RuntimeError(f"{log_path} has a header but no rows. Run training first, "
                           f"or lower log_interval so it logs sooner.")

    # Backfill EMA if missing
    if all(math.isnan(x) for x in cols["mse_ema"]):
        cols["mse_ema"] = rolling_mean([0.0 if math.isnan(x) else x for x in cols["mse"]], window=5)
    return cols

def savefig_named(fig, out_dir: Path, name: str) -> Path:
    path = out_dir / name
    fig.savefig(path, dpi=200, bbox_inches="tight")
    print(f"saved: {path}")
    return path

def plot_log(log_path: Path, out_dir: Path | None = None) -> list[Path]:
    cols = read_log(log_path)
    out_dir = out_dir or (log_path.parent / "plots")
    out_dir.mkdir(parents=True, exist_ok=True)
    saved = []

    fig = plt.figure(figsize=(10, 6))
    plt.plot(cols["epoch"], cols["mse"], linewidth=1, alpha=0.6, label="raw")
    plt.plot(cols["epoch"], cols["mse_ema"], linewidth=2, label="EMA")
    plt.yscale("log")
    plt.title("Training MSE"); plt.xlabel("epoch"); plt.ylabel("mse"); plt.legend()
    saved.append(savefig_named(fig, out_dir, "train_mse.png")); plt.close(fig)

    fig = plt.figure(figsize=(10, 5))
    plt.plot(cols["epoch"], cols["elapsed"], linewidth=2)
    plt.title("Wall Time"); plt.xlabel("epoch"); plt.ylabel("seconds")
    saved.append(savefig_named(fig, out_dir, "train_elapsed.png")); plt.close(fig)

    print(f"\nAll plots saved under: {out_dir.resolve()}")
    return saved

if __name__ == "__main__":
    plot_log(Path(sys.argv[1]) if len(sys.argv) > 1 else LOG_PATH)
