"""Error metrics of simulated inflation trajectories against the parametric one."""
from __future__ import annotations

from typing import Dict, Iterable

import numpy as np


def _percentiles(series: Iterable[float]) -> Dict[str, float]:
    values = list(series)
    if not values:
        return {"p10": 0.0, "p50": 0.0, "p90": 0.0}
    percentiles = np.nanpercentile(values, [10, 50, 90])
    return {
        "p10": float(percentiles[0]),
        "p50": float(percentiles[1]),
        "p90": float(percentiles[2]),
    }


def _huber(err: np.ndarray, delta: float) -> np.ndarray:
    abs_err = np.abs(err)
    return np.where(abs_err <= delta, 0.5 * err**2, delta * (abs_err - 0.5 * delta))


def _correlations(tray_infl: np.ndarray, tray_param: np.ndarray) -> np.ndarray:
    x = tray_infl - tray_infl.mean(axis=0)
    y = (tray_param - tray_param.mean())[:, np.newaxis]
    with np.errstate(invalid="ignore", divide="ignore"):
        return (x * y).sum(axis=0) / np.sqrt((x**2).sum(axis=0) * (y**2).sum())


def eval_metrics(tray_infl: np.ndarray, tray_param: np.ndarray, huber_delta: float = 1.0) -> Dict:
    """Summarize how far simulated trajectories fall from the parametric trajectory.

    Parameters
    ----------
    tray_infl: np.ndarray
        Simulated trajectories, one column per draw.
    tray_param: np.ndarray
        Parametric trajectory with as many rows as ``tray_infl``.
    huber_delta: float
        Threshold between the quadratic and linear parts of the Huber loss.
    """
    tray_infl = np.asarray(tray_infl, dtype=float)
    tray_param = np.asarray(tray_param, dtype=float)
    if tray_infl.ndim == 1:
        tray_infl = tray_infl[:, np.newaxis]
    if tray_infl.shape[0] != tray_param.shape[0]:
        raise ValueError(
            f"Trajectories have {tray_infl.shape[0]} periods, parametric has {tray_param.shape[0]}"
        )

    err = tray_infl - tray_param[:, np.newaxis]
    sq_err = err**2
    mse_dist = sq_err.mean(axis=0)
    nsim = tray_infl.shape[1]

    return {
        "mse": float(sq_err.mean()),
        "mse_std_error": float(mse_dist.std(ddof=1) / np.sqrt(nsim)) if nsim > 1 else 0.0,
        "mse_distribution": _percentiles(mse_dist),
        "rmse": float(np.sqrt(mse_dist).mean()),
        "me": float(err.mean()),
        "mae": float(np.abs(err).mean()),
        "huber": float(_huber(err, huber_delta).mean()),
        "corr": float(np.mean(_correlations(tray_infl, tray_param))),
        "nsim": nsim,
        "periods": int(tray_infl.shape[0]),
    }
