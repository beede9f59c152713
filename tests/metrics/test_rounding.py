"""Tests for half-up percentage rounding."""

import pytest

from gitlog_author.metrics import round_half_up
from gitlog_author.metrics.stats import rank_directories


class TestRoundHalfUp:
    """Ties round away from zero, unlike the built-in round."""

    @pytest.mark.parametrize(
        "value,digits,expected",
        [
            (12.5, 0, 13),
            (87.5, 0, 88),
            (0.5, 0, 1),
            (2.5, 0, 3),
            (33.333, 0, 33),
            (0.125, 2, 0.13),
            (12.25, 1, 12.3),
            (66.666, 1, 66.7),
            (0.0, 1, 0.0),
        ],
    )
    def test_values(self, value, digits, expected):
        assert round_half_up(value, digits) == expected

    def test_whole_number_result_is_int(self):
        assert isinstance(round_half_up(12.5), int)
        assert isinstance(round_half_up(12.5, 1), float)

    def test_directory_percentages_round_up(self):
        # 1 / 16 is exactly 6.25%
        ranked = rank_directories({"src": 16, "docs": 1})
        assert [(d.directory, d.percentage) for d in ranked] == [("src", 100.0), ("docs", 6.3)]
