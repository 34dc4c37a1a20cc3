"""Simulation settings: defaults, JSON round trips and canonical form."""
from __future__ import annotations

from pathlib import Path
import json
from typing import Any, Dict

import numpy as np
import pandas as pd

_DEFAULT_CONFIG: Dict[str, Any] = {
    "seed_base": 314159,
    "nsim": 1000,
    "max_workers": 8,
    "resample": {
        "method": "sbb",
        "block_length": None,
    },
    "inflation": {
        "method": "weighted_mean",
    },
    "trend": None,
    "final_date": None,
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return json.loads(json.dumps(_DEFAULT_CONFIG))


def merge_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Defaults updated with ``overrides``; nested sections merge key by key."""
    cfg = default_config()
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(cfg.get(key), dict):
            cfg[key].update(value)
        else:
            cfg[key] = value
    return cfg


def load_config(path: str | Path) -> Dict[str, Any]:
    """Read a JSON settings file and fill in missing keys from the defaults."""
    with open(path, "r", encoding="utf-8") as f:
        return merge_config(json.load(f))


def save_config(cfg: Dict[str, Any], path: str | Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(canonicalize(cfg), f, indent=2)


def canonicalize(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-ready copy of ``cfg`` in which equal settings compare and hash equally.

    Keys are sorted, tuples and numpy arrays become lists, numpy scalars
    become Python numbers and sets become sorted lists. Month strings such as
    ``final_date`` are normalized to ``YYYY-MM``.
    """

    def _canonical(value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): _canonical(value[k]) for k in sorted(value, key=str)}
        if isinstance(value, np.ndarray):
            return _canonical(value.tolist())
        if isinstance(value, np.generic):
            return value.item()
        if isinstance(value, (set, frozenset)):
            return sorted(_canonical(v) for v in value)
        if isinstance(value, (list, tuple)):
            return [_canonical(v) for v in value]
        return value

    canonical = _canonical(cfg)
    final_date = canonical.get("final_date")
    if final_date is not None:
        try:
            canonical["final_date"] = str(pd.Period(final_date, freq="M"))
        except (TypeError, ValueError):
            # Left as given; validate_config reports it.
            canonical["final_date"] = final_date
    return canonical
