"""
Unit tests for work item code generation
"""

from sprintboard.engine.codes import code_number, next_code, project_prefix


class TestNextCode:
    """Tests for next_code()."""

    def test_first_code(self):
        assert next_code("ABC", []) == "ABC-0001"

    def test_uses_max_not_count(self):
        assert next_code("PRJ", ["PRJ-0001", "PRJ-0003"]) == "PRJ-0004"

    def test_order_does_not_matter(self):
        assert next_code("PRJ", ["PRJ-0010", "PRJ-0002"]) == "PRJ-0011"

    def test_bug_marker(self):
        assert next_code("ABC", ["ABC-B0009"], "B") == "ABC-B0010"

    def test_task_marker(self):
        assert next_code("ABC", [], "T") == "ABC-T0001"

    def test_non_numeric_codes_are_ignored(self):
        assert next_code("ABC", ["ABC-LEGACY", "ABC-0002"]) == "ABC-0003"

    def test_grows_past_four_digits(self):
        assert next_code("ABC", ["ABC-9999"]) == "ABC-10000"


class TestHelpers:
    """Tests for code helpers."""

    def test_code_number(self):
        assert code_number("ABC-B0042") == 42
        assert code_number("ABC-XYZW") is None

    def test_project_prefix(self):
        assert project_prefix("ABC-0004") == "ABC"
        assert project_prefix("ABC-B0004") == "ABC"
