"""
Aggregate trial results into distribution summaries.

Instead of: "net worth in 2040 = $850k" (one number, no context)
The caller gets: "2040 net worth: p10=$410k, median=$790k, p90=$1.4M"

Percentiles use numpy's default linear interpolation.
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np
import pandas as pd

from core.results import PercentileBands
from core.utils import round_cents

BAND_PERCENTILES: Tuple[int, ...] = (10, 25, 50, 75, 90)


def percentile_bands(net_worth: np.ndarray, dates: pd.DatetimeIndex) -> Tuple[PercentileBands, ...]:
    """
    One PercentileBands point per month.

    net_worth : (n_trials, n_months)
    """
    if net_worth.shape[1] == 0:
        return ()
    q = round_cents(np.percentile(net_worth, BAND_PERCENTILES, axis=0))
    return tuple(
        PercentileBands(
            timestamp=d,
            p10=float(q[0, t]),
            p25=float(q[1, t]),
            p50=float(q[2, t]),
            p75=float(q[3, t]),
            p90=float(q[4, t]),
        )
        for t, d in enumerate(dates)
    )


def final_net_worth_stats(final: np.ndarray) -> Dict[str, float]:
    if len(final) == 0:
        return {"median": 0.0, "p10": 0.0, "p90": 0.0}
    p10, p50, p90 = np.percentile(final, [10, 50, 90])
    return {
        "median": round_cents(p50),
        "p10": round_cents(p10),
        "p90": round_cents(p90),
    }


def summarize_trials(
    trial_metrics: pd.DataFrame,
    *,
    percentiles: Tuple[float, ...] = (0.05, 0.10, 0.25, 0.50, 0.75, 0.90, 0.95),
) -> pd.DataFrame:
    """
    One row per metric (final net worth, minimum net worth, months
    underwater) with mean, spread and percentiles across trials.
    """
    metrics_to_summarize = {
        "Final Net Worth": "final_net_worth",
        "Minimum Net Worth": "min_net_worth",
        "Months Underwater": "months_underwater",
    }

    rows = []
    for label, col in metrics_to_summarize.items():
        if col not in trial_metrics.columns:
            continue
        values = trial_metrics[col].dropna().to_numpy(dtype=float)
        if len(values) == 0:
            continue

        row = {
            "Metric": label,
            "Mean": float(np.mean(values)),
            "Std Dev": float(np.std(values)),
            "Min": float(np.min(values)),
        }
        for p in percentiles:
            row[f"P{int(p * 100):02d}"] = float(np.percentile(values, p * 100))
        row["Max"] = float(np.max(values))
        rows.append(row)

    return pd.DataFrame(rows)
