from __future__ import annotations

import dataclasses
import hashlib
import json
from datetime import date
from typing import Any

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta


def month_floor(d: Any) -> pd.Timestamp:
    """First day of the month containing d."""
    return pd.Timestamp(d).to_period("M").to_timestamp(how="start")


def month_starts(start_date: Any, n_months: int) -> pd.DatetimeIndex:
    """
    Month-start dates for projection steps, beginning with the month that
    contains start_date (a mid-month start still owns that month).
    """
    return pd.date_range(month_floor(start_date), periods=n_months, freq="MS")


def months_spanned(start_date: Any, end_date: Any) -> int:
    """Number of calendar months touched by [start_date, end_date], inclusive."""
    s = pd.Timestamp(start_date)
    e = pd.Timestamp(end_date)
    return (e.year - s.year) * 12 + (e.month - s.month) + 1


def months_until(as_of: date, target: date) -> int:
    """Whole months from as_of to target, rounding a partial month up, never below 1."""
    delta = relativedelta(target, as_of)
    months = delta.years * 12 + delta.months
    if delta.days > 0:
        months += 1
    return max(months, 1)


def add_months(d: date, n: int) -> date:
    return d + relativedelta(months=n)


def round_cents(x, decimals: int = 2):
    """Half away from zero rounding (vectorized)."""
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    out = np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m)
    return float(out) if out.ndim == 0 else out


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    if denominator == 0:
        return default
    return numerator / denominator


def stable_hash(obj: Any) -> str:
    """SHA-256 of a dataclass tree serialized as canonical JSON."""
    payload = dataclasses.asdict(obj) if dataclasses.is_dataclass(obj) else obj
    text = json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
