"""Tests for the plaintext log reader, month statistics and chart output."""
import argparse
from datetime import date
from decimal import Decimal

import pytest

from exp_tracker.database import ExpenseRecord
from exp_tracker.report import LogFormatError, MonthStats, VisualizationService, parse_log
from exp_tracker.report.cli import main, parse_month, parse_year
from exp_tracker.report.log_parser import parse_data_line

SAMPLE_LOG = """\
1
food 10 2.5
rent 500

2
food 4

5
transport 3
food 1
"""


class TestParseLog:

    def test_reads_blocks(self):
        stats = parse_log(SAMPLE_LOG.splitlines(), 2023, 3)

        assert stats.days[1] == {"food": [10.0, 2.5], "rent": [500.0]}
        assert stats.days[2] == {"food": [4.0]}
        assert stats.days[5] == {"transport": [3.0], "food": [1.0]}
        assert stats.days[3] == {}

    def test_every_day_of_month_has_bucket(self):
        stats = parse_log([], 2024, 2)
        assert sorted(stats.days) == list(range(1, 30))

    def test_extra_blank_lines_are_fine(self):
        stats = parse_log(["", "", "3", "food 1", "", "", "4", "food 2", ""], 2023, 1)
        assert stats.day_totals()[3] == 1.0
        assert stats.day_totals()[4] == 2.0

    def test_bad_day(self):
        with pytest.raises(LogFormatError) as exc_info:
            parse_log(["first", "food 1"], 2023, 1)
        assert exc_info.value.line_no == 1
        assert "failed to parse day" in str(exc_info.value)

    def test_day_outside_month(self):
        with pytest.raises(LogFormatError) as exc_info:
            parse_log(["31", "food 1"], 2023, 4)
        assert "day 31 is not in 2023-04" in str(exc_info.value)

    def test_duplicate_day(self):
        with pytest.raises(LogFormatError) as exc_info:
            parse_log(["1", "food 1", "", "1", "rent 2"], 2023, 1)
        assert exc_info.value.line_no == 4
        assert "duplicate entries (day: 1)" in str(exc_info.value)

    def test_duplicate_category_in_day(self):
        with pytest.raises(LogFormatError) as exc_info:
            parse_log(["1", "food 1", "food 2"], 2023, 1)
        assert exc_info.value.line_no == 3
        assert "duplicate category (day: 1, category: food)" in str(exc_info.value)

    def test_same_category_on_different_days(self):
        stats = parse_log(["1", "food 1", "", "2", "food 2"], 2023, 1)
        assert stats.category_totals() == {"food": 3.0}

    def test_bad_value(self):
        with pytest.raises(LogFormatError) as exc_info:
            parse_log(["1", "food 1 two"], 2023, 1)
        assert exc_info.value.line_no == 2
        assert "failed to parse value" in str(exc_info.value)

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "NaN", "infinity"])
    def test_non_finite_value(self, raw):
        with pytest.raises(LogFormatError) as exc_info:
            parse_log(["1", f"food 1 {raw}"], 2023, 1)
        assert exc_info.value.line_no == 2
        assert "not a finite number" in str(exc_info.value)


def test_parse_data_line():
    assert parse_data_line("food  1 2.5\t3") == ("food", [1.0, 2.5, 3.0])


class TestMonthStats:

    def test_categories_ordered_by_days_present(self):
        stats = parse_log(SAMPLE_LOG.splitlines(), 2023, 3)
        assert stats.ordered_categories() == ["food", "rent", "transport"]

    def test_ties_keep_first_seen_order(self):
        stats = parse_log(["1", "b 1", "a 1"], 2023, 3)
        assert stats.ordered_categories() == ["b", "a"]

    def test_past_month_averages_over_whole_month(self):
        stats = parse_log(["1", "food 31"], 2023, 3)

        assert stats.elapsed_days(date(2026, 10, 17)) == 31
        assert stats.daily_average(date(2026, 10, 17)) == pytest.approx(1.0)

    def test_running_month_averages_over_elapsed_days(self):
        stats = parse_log(["1", "food 20"], 2026, 10)

        assert stats.elapsed_days(date(2026, 10, 10)) == 10
        assert stats.daily_average(date(2026, 10, 10)) == pytest.approx(2.0)

    def test_average_breakdown_splits_by_share(self):
        stats = parse_log(["1", "food 30", "rent 90"], 2023, 4)

        breakdown = stats.average_breakdown(date(2026, 1, 1))

        assert [name for name, _ in breakdown] == ["food", "rent"]
        assert sum(value for _, value in breakdown) == pytest.approx(4.0)
        assert breakdown[1][1] == pytest.approx(3.0)

    def test_from_expenses(self):
        records = [
            ExpenseRecord(date(2026, 9, 1), "food", Decimal("1.5")),
            ExpenseRecord(date(2026, 9, 1), "food", Decimal("2")),
        ]
        stats = MonthStats.from_expenses(2026, 9, records)

        assert stats.day_value(1, "food") == pytest.approx(3.5)

    def test_add_rejects_day_outside_month(self):
        with pytest.raises(ValueError):
            MonthStats(2023, 2).add(29, "food", [1.0])


class TestChart:

    def test_renders_png(self):
        stats = parse_log(SAMPLE_LOG.splitlines(), 2023, 3)

        chart = VisualizationService.stacked_bar_chart(stats, today=date(2026, 10, 17))

        assert chart is not None
        assert chart.getvalue()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_more_categories_than_colors(self):
        lines = ["1"] + [f"c{i} 1" for i in range(10)]
        stats = parse_log(lines, 2023, 3)

        assert VisualizationService.stacked_bar_chart(stats, today=date(2026, 10, 17)) is not None

    def test_empty_month_has_no_chart(self):
        assert VisualizationService.stacked_bar_chart(MonthStats(2023, 3)) is None

    def test_zero_spending_has_no_chart(self):
        stats = parse_log(["1", "food 0"], 2023, 3)
        assert VisualizationService.stacked_bar_chart(stats) is None


class TestParseMonth:

    @pytest.mark.parametrize("raw, expected", [
        ("1", 1), ("12", 12), ("jan", 1), ("January", 1), ("SEP", 9), ("september", 9),
    ])
    def test_accepted(self, raw, expected):
        assert parse_month(raw) == expected

    @pytest.mark.parametrize("raw", ["0", "13", "", "foo", "-1"])
    def test_rejected(self, raw):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_month(raw)


class TestParseYear:

    @pytest.mark.parametrize("raw, expected", [("1", 1), ("2023", 2023), ("9999", 9999)])
    def test_accepted(self, raw, expected):
        assert parse_year(raw) == expected

    @pytest.mark.parametrize("raw", ["0", "10000", "-1", "", "MMXXIII"])
    def test_rejected(self, raw):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_year(raw)


class TestCli:

    def test_writes_chart(self, tmp_path):
        data = tmp_path / "march.log"
        data.write_text(SAMPLE_LOG, encoding="utf-8")
        out = tmp_path / "out.png"

        code = main(["-m", "mar", "-y", "2023", "-o", str(out), str(data)], today=date(2026, 10, 17))

        assert code == 0
        assert out.read_bytes()[:4] == b"\x89PNG"

    def test_missing_file(self, tmp_path):
        code = main(["-m", "3", "-y", "2023", "-o", str(tmp_path / "out.png"), str(tmp_path / "none.log")])
        assert code == 1

    def test_malformed_log(self, tmp_path, caplog):
        data = tmp_path / "bad.log"
        data.write_text("1\nfood x\n", encoding="utf-8")
        out = tmp_path / "out.png"

        code = main(["-m", "3", "-y", "2023", "-o", str(out), str(data)])

        assert code == 1
        assert not out.exists()
        assert "line 2" in caplog.text

    def test_empty_month(self, tmp_path):
        data = tmp_path / "empty.log"
        data.write_text("\n", encoding="utf-8")

        assert main(["-m", "3", "-y", "2023", "-o", str(tmp_path / "out.png"), str(data)]) == 1

    def test_bad_month_is_usage_error(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["-m", "smarch", "-y", "2023", str(tmp_path / "x.log")])
        assert exc_info.value.code == 2

    @pytest.mark.parametrize("year", ["10000", "0", "-5", "twenty"])
    def test_bad_year_is_usage_error(self, tmp_path, year):
        with pytest.raises(SystemExit) as exc_info:
            main(["-m", "3", "-y", year, str(tmp_path / "x.log")])
        assert exc_info.value.code == 2

    def test_undecodable_log(self, tmp_path, caplog):
        data = tmp_path / "latin.log"
        data.write_bytes(b"1\nfood\xff 1\n")
        out = tmp_path / "out.png"

        code = main(["-m", "3", "-y", "2023", "-o", str(out), str(data)])

        assert code == 1
        assert not out.exists()
        assert "failed to decode" in caplog.text

    @pytest.mark.parametrize("raw", ["nan", "inf"])
    def test_non_finite_value_exits_cleanly(self, tmp_path, raw):
        data = tmp_path / "weird.log"
        data.write_text(f"1\nfood {raw}\n", encoding="utf-8")
        out = tmp_path / "out.png"

        assert main(["-m", "3", "-y", "2023", "-o", str(out), str(data)]) == 1
        assert not out.exists()
