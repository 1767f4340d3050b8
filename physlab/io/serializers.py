"""Save and load parameter sets (JSON) and state snapshots (.npz + JSON)."""

import dataclasses
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Type, TypeVar, Union

import numpy as np

logger = logging.getLogger(__name__)

P = TypeVar("P")


def _to_json(obj: Any) -> Any:
    """Recursively convert numpy values, enums and dataclasses for JSON."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _to_json(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, dict):
        return {k: _to_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_json(x) for x in obj]
    return obj


def save_config(config: Dict[str, Any], path: Union[str, Path]) -> None:
    """Write a dict to JSON; numpy arrays become lists."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(_to_json(config), f, indent=2, ensure_ascii=False)


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_params(params: Any, path: Union[str, Path]) -> None:
    """Write a parameter dataclass to JSON (enums stored by value)."""
    if not dataclasses.is_dataclass(params) or isinstance(params, type):
        raise TypeError(f"Expected a dataclass instance, got {type(params).__name__}")
    save_config(_to_json(params), path)
    logger.info("Saved %s to %s", type(params).__name__, path)


def params_from_dict(cls: Type[P], data: Dict[str, Any]) -> P:
    """
    Build a parameter dataclass from a dict. Missing keys keep their
    defaults; unknown keys raise ValueError.
    """
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} field(s): {', '.join(unknown)}")
    return cls(**data)


def load_params(cls: Type[P], path: Union[str, Path]) -> P:
    """Read a parameter dataclass written by save_params()."""
    params = params_from_dict(cls, load_config(path))
    logger.info("Loaded %s from %s", cls.__name__, path)
    return params


def save_snapshot(state_dict: Dict[str, Any], path: Union[str, Path]) -> None:
    """
    Save a loop snapshot: arrays to .npz, everything else to a .meta.json
    file next to it.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    arrays = {k: v for k, v in state_dict.items() if isinstance(v, np.ndarray)}
    meta = {k: v for k, v in state_dict.items() if not isinstance(v, np.ndarray)}
    np.savez(path.with_suffix(".npz"), **arrays)
    save_config(meta, path.with_suffix(".meta.json"))
    logger.info("Saved snapshot to %s", path.with_suffix(".npz"))


def load_snapshot(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a snapshot written by save_snapshot()."""
    path = Path(path)
    with np.load(path.with_suffix(".npz")) as npz:
        data: Dict[str, Any] = {k: npz[k] for k in npz.files}
    meta_path = path.with_suffix(".meta.json")
    if meta_path.exists():
        data.update(load_config(meta_path))
    return data
