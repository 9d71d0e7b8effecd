from __future__ import annotations
import json, os
from typing import Protocol, Dict, Any

from NN.errors import CheckpointError
from NN.neuralnet import NeuralNetwork

__all__ = ["Checkpointable", "CheckpointManager", "CheckpointError", "save_network", "load_network"]


class Checkpointable(Protocol):
    """Objects that can round-trip their state as pure-Python/JSON-serializable dicts."""
    def get_state(self) -> Dict[str, Any]: ...
    def set_state(self, state: Dict[str, Any]) -> None: ...

class CheckpointManager:
    """Saves/loads a named bundle of components. Each component must be Checkpointable."""
    def __init__(self, root_dir: str):
        self.root_dir = root_dir

    def path_for(self, tag: str) -> str:
        return os.path.join(self.root_dir, f"{tag}.ckpt.json")

    def save(self, tag: str, components: Dict[str, Checkpointable]) -> str:
        path = self.path_for(tag)
        bundle = {name: comp.get_state() for name, comp in components.items()}
        os.makedirs(self.root_dir, exist_ok=True)
        with open(path, "w") as f:
            json.dump(bundle, f)
        return path

    def load(self, tag: str, components: Dict[str, Checkpointable]) -> None:
        with open(self.path_for(tag), "r") as f:
            bundle = json.load(f)
        if not isinstance(bundle, dict):
            raise CheckpointError(f"checkpoint '{tag}' is not a bundle object")
        missing = [name for name in components if name not in bundle]
        if missing:
            raise CheckpointError(f"checkpoint '{tag}' has no component(s): {', '.join(missing)}")
        for name, comp in components.items():
            comp.set_state(bundle[name])


def save_network(net: NeuralNetwork, path: str) -> None:
    """Write one network as a flat JSON document (floats keep their exact repr)."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump(net.get_state(), f)
    print(f"[checkpoint] saved network {net.topology} to: {path}")


def load_network(path: str) -> NeuralNetwork:
    with open(path, "r") as f:
        try:
            state = json.load(f)
        except json.JSONDecodeError as e:
            raise CheckpointError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(state, dict):
        raise CheckpointError(f"{path} does not hold a network state object")
    net = NeuralNetwork.from_state(state)
    print(f"[checkpoint] loaded network {net.topology} from: {path}")
    return net
