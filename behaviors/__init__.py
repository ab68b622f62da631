"""
Return models — convert account assumptions into monthly return forecasts.
"""

from .base import ReturnForecast, ReturnModel
from .constant import ExpectedReturnModel
from .scenario import SampledReturnModel

__all__ = [
    "ReturnForecast",
    "ReturnModel",
    "ExpectedReturnModel",
    "SampledReturnModel",
]
