"""Tests for period labels."""

from datetime import date

import pytest

from calendar_ledger.models.period import parse_period_label


class TestParsePeriodLabel:
    """Tests for parse_period_label."""

    @pytest.mark.parametrize(
        "label,start,end",
        [
            ("2025-08", date(2025, 8, 1), date(2025, 8, 31)),
            ("2024-02", date(2024, 2, 1), date(2024, 2, 29)),
            ("August 2025", date(2025, 8, 1), date(2025, 8, 31)),
            ("december 2025", date(2025, 12, 1), date(2025, 12, 31)),
            ("2025-W32", date(2025, 8, 4), date(2025, 8, 10)),
            ("2026-w01", date(2025, 12, 29), date(2026, 1, 4)),
            ("2025", date(2025, 1, 1), date(2025, 12, 31)),
            (" 2025-08 ", date(2025, 8, 1), date(2025, 8, 31)),
        ],
    )
    def test_supported_labels(self, label, start, end):
        period = parse_period_label(label)
        assert (period.start, period.end) == (start, end)
        assert period.label == label

    @pytest.mark.parametrize(
        "label",
        ["Sheet1", "", "2025-13", "Augst 2025", "2025-W54", "08-2025"],
    )
    def test_unrecognized_labels(self, label):
        with pytest.raises(ValueError):
            parse_period_label(label)
