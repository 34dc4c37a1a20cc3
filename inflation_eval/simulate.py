"""Monte Carlo evaluation of inflation measures over resampled CPI data."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from numpy.random import SeedSequence

from . import config as cfg_mod
from . import hashing
from .country import CountryStructure
from .estimators import InflationFunction, get_inflation_function
from .metrics import eval_metrics
from .resample import ResampleFunction, get_resample_function
from .trends import apply_trend
from .validate import validate_config

logger = logging.getLogger(__name__)


def spawn_seeds(seed_base: int, n: int) -> List[int]:
    """One independent seed per draw, spawned from ``seed_base``."""
    children = SeedSequence(int(seed_base)).spawn(int(n))
    return [int(child.generate_state(1, dtype=np.uint64)[0]) for child in children]


def _simulate_single_run(
    seed: int,
    cs: CountryStructure,
    inflfn: InflationFunction,
    resamplefn: ResampleFunction,
    trend: Optional[np.ndarray],
) -> np.ndarray:
    rng = np.random.default_rng(seed)
    draw = resamplefn(cs, rng)
    if trend is not None:
        draw = apply_trend(draw, trend)
    return inflfn(draw)


def _run_draws(
    cs: CountryStructure,
    inflfn: InflationFunction,
    resamplefn: ResampleFunction,
    seeds: Sequence[int],
    trend: Optional[np.ndarray],
    max_workers: int,
) -> np.ndarray:
    def _task(seed: int) -> np.ndarray:
        return _simulate_single_run(seed, cs, inflfn, resamplefn, trend)

    if not seeds:
        return np.empty((param_trajectory(cs, inflfn, resamplefn, trend).shape[0], 0))

    workers = max(1, min(len(seeds), int(max_workers)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        trajectories = list(executor.map(_task, seeds))
    return np.column_stack(trajectories)


def gen_simulations(
    cs: CountryStructure,
    inflfn: InflationFunction,
    resamplefn: ResampleFunction,
    nsim: int,
    seed_base: int = 314159,
    trend=None,
    max_workers: int = 8,
) -> np.ndarray:
    """Inflation trajectories of ``nsim`` resampled structures, one per column.

    Every draw gets its own generator, so results depend on ``seed_base``
    only, never on ``max_workers`` or scheduling.
    """
    seeds = spawn_seeds(seed_base, nsim)
    trend = None if trend is None else np.asarray(trend, dtype=float)
    logger.info(f"Running {nsim} draws of {resamplefn.name} with {inflfn.name}")
    return _run_draws(cs, inflfn, resamplefn, seeds, trend, max_workers)


def param_trajectory(
    cs: CountryStructure,
    inflfn: InflationFunction,
    resamplefn: ResampleFunction,
    trend=None,
) -> np.ndarray:
    """Inflation trajectory of the parametric structure of ``resamplefn``."""
    param = resamplefn.parametric(cs)
    if trend is not None:
        param = apply_trend(param, trend)
    return inflfn(param)


def simulate_trajectories(cs: CountryStructure, cfg: Dict) -> pd.DataFrame:
    """Simulate the trajectories described by ``cfg`` as a long frame.

    Columns: ``date``, ``run_id``, ``seed_used`` and ``value``. Draws have
    ``run_id`` 1 to ``nsim``; the parametric trajectory comes first with
    ``run_id`` 0 and ``seed_used`` 0.
    """
    cfg = cfg_mod.canonicalize(cfg_mod.merge_config(cfg))
    for warning in validate_config(cfg):
        logger.warning(warning)

    if cfg.get("final_date"):
        cs = cs.slice(cfg["final_date"])
    resamplefn = get_resample_function(cfg["resample"]["method"], cfg["resample"].get("block_length"))
    inflfn = get_inflation_function(cfg["inflation"]["method"])
    trend = None if cfg.get("trend") is None else np.asarray(cfg["trend"], dtype=float)

    nsim = int(cfg["nsim"])
    seeds = spawn_seeds(cfg["seed_base"], nsim)
    logger.info(f"Simulating {nsim} trajectories of {resamplefn.name} with {inflfn.name}")
    trajectories = _run_draws(cs, inflfn, resamplefn, seeds, trend, cfg["max_workers"])
    param = param_trajectory(cs, inflfn, resamplefn, trend)
    dates = resamplefn.parametric(cs).infl_dates

    periods = len(dates)
    df = pd.DataFrame(
        {
            "date": np.tile(dates.values, nsim + 1),
            "run_id": np.repeat(np.arange(nsim + 1), periods),
            "seed_used": np.repeat(np.array([0] + seeds, dtype=np.uint64), periods),
            "value": np.concatenate([param, trajectories.T.reshape(-1)]),
        }
    )
    logger.info(f"Simulation finished: {nsim} trajectories of {periods} periods")
    return df


def evaluate(cs: CountryStructure, cfg: Dict) -> Dict:
    """Simulated trajectories, their error metrics and run metadata."""
    cfg = cfg_mod.canonicalize(cfg_mod.merge_config(cfg))
    df_paths = simulate_trajectories(cs, cfg)
    is_param = df_paths["run_id"] == 0
    tray_param = df_paths[is_param].sort_values("date")["value"].to_numpy()
    tray_infl = (
        df_paths[~is_param].pivot(index="date", columns="run_id", values="value").sort_index().to_numpy()
    )
    versions = hashing.library_versions()
    return {
        "paths": df_paths,
        "metrics": eval_metrics(tray_infl, tray_param),
        "meta": {
            "run_hash": hashing.run_hash(cfg, versions),
            "versions": versions,
            "warnings": validate_config(cfg),
        },
    }
