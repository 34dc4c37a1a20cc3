"""Run hashing utilities."""
from __future__ import annotations

import hashlib
import json
from typing import Dict

import numpy as np
import pandas as pd

from . import config as cfg_mod


def library_versions() -> Dict[str, str]:
    """Versions of the numeric libraries that affect simulation output."""
    return {"numpy": np.__version__, "pandas": pd.__version__}


def run_hash(cfg: Dict, versions: Dict | None = None) -> str:
    """SHA-256 key of a result set: canonical settings plus library versions.

    Settings that only differ in key order, tuple vs list or numpy vs Python
    numbers share a hash.
    """
    payload = {
        "config": cfg_mod.canonicalize(cfg),
        "versions": library_versions() if versions is None else dict(versions),
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()
