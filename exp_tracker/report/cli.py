"""``exp-report``: render a month of the plaintext expense log as a chart."""

import argparse
import calendar
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from exp_tracker.logs import setup_logging

from .chart import VisualizationService
from .log_parser import LogFormatError, parse_log

logger = logging.getLogger(__name__)


def parse_month(raw: str) -> int:
	"""Accept 'jan', 'January' (any case) or 1-12."""
	value = raw.strip().lower()
	if value.isdigit() and 1 <= int(value) <= 12:
		return int(value)
	for number in range(1, 13):
		if value in (calendar.month_name[number].lower(), calendar.month_abbr[number].lower()):
			return number
	raise argparse.ArgumentTypeError(f"failed to parse month: {raw!r}")


def parse_year(raw: str) -> int:
	try:
		year = int(raw)
	except ValueError:
		raise argparse.ArgumentTypeError(f"failed to parse year: {raw!r}") from None
	if not 1 <= year <= 9999:
		raise argparse.ArgumentTypeError(f"year out of range: {year}")
	return year


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="exp-report",
		description="Render daily spending of one month as a stacked bar chart.",
	)
	parser.add_argument("-m", "--month", type=parse_month, required=True, help="Month name or number")
	parser.add_argument("-y", "--year", type=parse_year, required=True, help="Year, 1-9999")
	parser.add_argument("-o", "--output", type=Path, default=Path("pic.png"), help="PNG file to write (default: pic.png)")
	parser.add_argument("data_file", type=Path, help="Plaintext expense log")
	return parser


def main(argv: Optional[List[str]] = None, today: Optional[date] = None) -> int:
	args = build_parser().parse_args(argv)
	setup_logging()

	try:
		with args.data_file.open("r", encoding="utf-8") as data:
			stats = parse_log(data, args.year, args.month)
	except OSError as exc:
		logger.error("failed to open data file %s: %s", args.data_file, exc)
		return 1
	except LogFormatError as exc:
		logger.error("failed to parse %s: %s", args.data_file, exc)
		return 1
	except UnicodeDecodeError as exc:
		logger.error("failed to decode %s as UTF-8: %s", args.data_file, exc)
		return 1

	chart = VisualizationService.stacked_bar_chart(stats, today=today)
	if chart is None:
		logger.error("no expenses recorded for %s-%02d", args.year, args.month)
		return 1

	args.output.write_bytes(chart.getvalue())
	logger.info("chart written to %s", args.output)
	return 0


__all__ = ["build_parser", "main", "parse_month", "parse_year"]
