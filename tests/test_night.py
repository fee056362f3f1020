"""Tests for sleeplog.models.night."""

import pytest

from sleeplog.exceptions import InvalidNightError, ValidationError
from sleeplog.models.night import Night, NightBoundary, month_prefix, night_in_range


def test_from_string():
    night = Night.from_string("2022-11-24")
    assert (night.year, night.month, night.day, night.date) == (2022, 11, 24, "2022-11-24")


@pytest.mark.parametrize(
    "value",
    [
        "", "2022-11", "2022/11/24", "2022-11-24-01", "abcd-ef-gh", "2022-13-01", "2022-02-30", "2022--24",
        "2022-1-5", "22-11-24", "2022-011-05",
    ],
)
def test_from_string_rejects_malformed_nights(value):
    with pytest.raises(InvalidNightError):
        Night.from_string(value)


def test_invalid_night_is_a_validation_error():
    assert issubclass(InvalidNightError, ValidationError)


def test_month_prefix_is_zero_padded():
    assert month_prefix(1, 2022) == "2022-01-"
    assert month_prefix(11, 2022) == "2022-11-"
    assert not "2022-11-24".startswith(month_prefix(1, 2022))


def test_night_in_range():
    night = Night.from_string("2022-11-24")
    assert night_in_range(night, NightBoundary(2022, 11, 24), NightBoundary(2022, 11, 24))
    assert not night_in_range(night, NightBoundary(2022, 11, 25), NightBoundary(2022, 12, 1))
    assert night_in_range(night, NightBoundary(2022, 11, 25), NightBoundary(2022, 12))
    assert night_in_range(night, NightBoundary(2021, 12), NightBoundary(2023, 1))
    assert not night_in_range(night, NightBoundary(2022, 12), NightBoundary(2023, 1))
