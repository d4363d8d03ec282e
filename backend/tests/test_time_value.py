"""
Unit tests for work time arithmetic
"""

from sprintboard.engine.time_value import TimeValue, ZERO, add, normalize, total


class TestNormalize:
    """Tests for normalize()."""

    def test_hours_overflow_into_days(self):
        """9 hours is one 8-hour day and one hour."""
        assert normalize({"days": 0, "hours": 9, "minutes": 0}) == TimeValue(1, 1, 0)

    def test_minutes_overflow_into_hours(self):
        assert normalize({"minutes": 135}) == TimeValue(0, 2, 15)

    def test_negative_total_clamps_to_zero(self):
        """No negative time is representable."""
        assert normalize({"days": 0, "hours": 0, "minutes": -30}) == ZERO

    def test_negative_part_with_positive_total(self):
        """Negative fields are fine as long as the total stays positive."""
        assert normalize({"days": 1, "hours": -1, "minutes": 0}) == TimeValue(0, 7, 0)

    def test_missing_keys_count_as_zero(self):
        assert normalize({"hours": 3}) == TimeValue(0, 3, 0)

    def test_result_is_canonical(self):
        value = normalize({"days": 2, "hours": 17, "minutes": 61})
        assert 0 <= value.hours < 8
        assert 0 <= value.minutes < 60
        assert value.total_minutes == 2 * 480 + 17 * 60 + 61


class TestTotal:
    """Tests for total()."""

    def test_sum_is_normalized(self):
        """1 day + 10 hours = 2 days 2 hours."""
        values = [{"days": 1, "hours": 0, "minutes": 0}, {"days": 0, "hours": 10, "minutes": 0}]
        assert total(values) == TimeValue(2, 2, 0)

    def test_empty_collection_is_zero(self):
        assert total([]) == ZERO

    def test_missing_element_yields_zero(self):
        """An incomplete input gives zero, not a partial sum."""
        assert total([{"hours": 4}, None]) == ZERO

    def test_accepts_time_values(self):
        assert total([TimeValue(0, 4, 30), TimeValue(0, 4, 30)]) == TimeValue(1, 1, 0)


class TestAdd:
    """Tests for add()."""

    def test_missing_side_counts_as_zero(self):
        assert add(None, {"hours": 5}) == TimeValue(0, 5, 0)

    def test_adds_and_normalizes(self):
        assert add({"hours": 5}, {"hours": 5}) == TimeValue(1, 2, 0)

    def test_as_dict(self):
        assert add({"minutes": 70}, None).as_dict() == {"days": 0, "hours": 1, "minutes": 10}
