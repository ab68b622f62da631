import pytest

from core.frequency import FREQUENCY_MULTIPLIERS, from_annual, to_annual, to_monthly
from core.schema import Frequency


@pytest.mark.parametrize(
    "frequency, expected",
    [
        (Frequency.ANNUAL, 1200.0),
        (Frequency.MONTHLY, 14400.0),
        (Frequency.BIWEEKLY, 31200.0),
        (Frequency.WEEKLY, 62400.0),
        (Frequency.ONE_TIME, 0.0),
    ],
)
def test_to_annual_uses_frequency_multiplier(frequency, expected):
    assert to_annual(1200, frequency) == expected
    assert to_annual(1200, frequency) == 1200 * FREQUENCY_MULTIPLIERS[frequency]


def test_to_monthly_biweekly():
    assert round(to_monthly(2000, Frequency.BIWEEKLY), 2) == 4333.33


def test_string_frequency_is_accepted():
    assert to_annual(100, "WEEKLY") == 5200.0


def test_unknown_frequency_raises():
    with pytest.raises(ValueError):
        to_annual(100, "QUARTERLY")


def test_one_time_has_no_recurring_rate():
    assert to_monthly(5_000, Frequency.ONE_TIME) == 0.0


def test_from_annual_is_per_period():
    assert from_annual(5200, Frequency.WEEKLY) == 100.0
    with pytest.raises(ValueError):
        from_annual(1000, Frequency.ONE_TIME)
