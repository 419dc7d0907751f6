import pytest

from models.frequency import Frequency, FrequencyKind
from utils.errors import MalformedCustomPeriod


def test_all_zero_custom_period_is_rejected():
    with pytest.raises(MalformedCustomPeriod):
        Frequency.custom(years=0, months=0, days=0)


def test_negative_custom_offset_is_rejected():
    with pytest.raises(MalformedCustomPeriod):
        Frequency.custom(months=1, days=-1)


def test_malformed_custom_period_is_a_value_error():
    with pytest.raises(ValueError):
        Frequency.from_label("Other")


def test_offsets_only_on_custom():
    with pytest.raises(ValueError):
        Frequency(FrequencyKind.MONTHLY, days=3)


def test_from_label():
    assert Frequency.from_label("Every week") == Frequency.weekly()
    assert Frequency.from_label("One-time") == Frequency.one_time()
    assert Frequency.from_label("Other", months=2) == Frequency.custom(months=2)
    with pytest.raises(ValueError):
        Frequency.from_label("Every fortnight")


def test_is_recurring():
    assert not Frequency.one_time().is_recurring
    assert Frequency.daily().is_recurring
    assert Frequency.custom(days=10).is_recurring


def test_describe():
    assert Frequency.monthly().describe() == "Every month"
    assert Frequency.custom(months=1, days=15).describe() == "Every 1 month, 15 days"
    assert Frequency.custom(years=2, days=1).describe() == "Every 2 years, 1 day"


def test_dict_form():
    data = Frequency.custom(years=1, months=0, days=3).to_dict()
    assert data == {"kind": "custom", "years": 1, "months": 0, "days": 3}
    assert Frequency.from_dict(data) == Frequency.custom(years=1, days=3)
    assert Frequency.from_dict({"kind": "yearly"}) == Frequency.yearly()
