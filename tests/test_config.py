from __future__ import annotations

import numpy as np
import pandas as pd

from inflation_eval.config import canonicalize, default_config, load_config, merge_config, save_config
from inflation_eval.hashing import run_hash
from inflation_eval.validate import validate_config


def test_default_config_is_a_copy():
    cfg = default_config()
    cfg["resample"]["method"] = "scramble"
    assert default_config()["resample"]["method"] == "sbb"


def test_merge_keeps_nested_defaults():
    cfg = merge_config({"resample": {"block_length": 24}, "nsim": 10})
    assert cfg["resample"] == {"method": "sbb", "block_length": 24}
    assert cfg["nsim"] == 10
    assert cfg["inflation"]["method"] == "weighted_mean"


def test_save_and_load_roundtrip(tmp_path):
    cfg = merge_config({"trend": (1.0, 1.01), "final_date": "2019-12"})
    path = tmp_path / "sim.json"
    save_config(cfg, path)
    loaded = load_config(path)
    assert loaded == canonicalize(cfg)
    assert loaded["trend"] == [1.0, 1.01]


def test_run_hash_ignores_key_order():
    versions = {"numpy": "1", "pandas": "2"}
    a = {"nsim": 5, "resample": {"method": "sbb", "block_length": None}}
    b = {"resample": {"block_length": None, "method": "sbb"}, "nsim": 5}
    assert run_hash(a, versions) == run_hash(b, versions)
    assert run_hash(a, versions) != run_hash({**a, "nsim": 6}, versions)


def test_validate_default_config_is_clean():
    assert validate_config(default_config()) == []


def test_validate_flags_bad_settings():
    cfg = merge_config(
        {
            "nsim": 0,
            "resample": {"method": "gsbb_mod", "block_length": 12},
            "inflation": {"method": "median"},
            "trend": [1.0, -1.0],
            "final_date": "not-a-date",
        }
    )
    warnings = validate_config(cfg)
    assert len(warnings) == 5
    assert any("ignores the block length" in w for w in warnings)

    cfg = merge_config({"resample": {"method": "sbb", "block_length": 0}})
    assert validate_config(cfg) == ["Block length must be at least 1."]


def test_validate_reports_malformed_types_without_raising():
    assert validate_config(merge_config({"nsim": None})) == [
        "Number of simulations must be a number, got None."
    ]
    assert validate_config(merge_config({"nsim": "many"})) == [
        "Number of simulations must be a number, got 'many'."
    ]
    assert validate_config(merge_config({"max_workers": "eight"})) == [
        "Worker count must be a number, got 'eight'."
    ]
    assert validate_config(merge_config({"seed_base": "abc"})) == [
        "Seed base must be an integer, got 'abc'."
    ]
    assert validate_config(merge_config({"resample": {"block_length": "x"}})) == [
        "Block length must be a number, got 'x'."
    ]
    assert validate_config(merge_config({"trend": [1.0, "up"]})) == ["Trend factors must be numbers."]
    assert validate_config(merge_config({"trend": 3})) == ["Trend must be a list of factors."]


def test_canonicalize_normalizes_numpy_sets_and_months():
    cfg = merge_config(
        {
            "nsim": np.int64(10),
            "trend": np.array([1.0, 1.01]),
            "tags": {"b", "a"},
            "final_date": pd.Timestamp("2019-12-15"),
        }
    )
    canonical = canonicalize(cfg)
    assert canonical["nsim"] == 10 and type(canonical["nsim"]) is int
    assert canonical["trend"] == [1.0, 1.01]
    assert canonical["tags"] == ["a", "b"]
    assert canonical["final_date"] == "2019-12"


def test_run_hash_matches_equivalent_settings():
    versions = {"numpy": "1", "pandas": "2"}
    plain = merge_config({"trend": [1.0, 1.01], "final_date": "2019-12"})
    numpy_based = merge_config({"trend": np.array([1.0, 1.01]), "final_date": "2019-12-01"})
    assert run_hash(plain, versions) == run_hash(numpy_based, versions)
