"""Reader for the plaintext monthly expense log.

The log is a sequence of blocks separated by blank lines. A block starts
with the day of month, followed by one line per category::

	3
	food 12.5 3.20
	transport 2

	4
	food 7
"""

import math
from typing import Iterable, List, Tuple

from .stats import MonthStats


class LogFormatError(ValueError):
	"""Raised for malformed log content; carries the 1-based line number."""

	def __init__(self, line_no: int, message: str):
		super().__init__(f"line {line_no}: {message}")
		self.line_no = line_no


def parse_data_line(line: str) -> Tuple[str, List[float]]:
	"""Split ``'<category> <v1> <v2> ...'`` into the category and its values."""
	category, *raw_values = line.split()
	values = []
	for raw in raw_values:
		try:
			value = float(raw)
		except ValueError as exc:
			raise ValueError(f"failed to parse value: {raw!r}") from exc
		if not math.isfinite(value):
			raise ValueError(f"value is not a finite number: {raw!r}")
		values.append(value)
	return category, values


def parse_log(lines: Iterable[str], year: int, month: int) -> MonthStats:
	stats = MonthStats(year, month)
	day = None
	seen_in_day = set()

	for line_no, raw in enumerate(lines, start=1):
		line = raw.strip()
		if not line:
			day = None
			continue

		if day is None:
			try:
				day = int(line)
			except ValueError as exc:
				raise LogFormatError(line_no, f"failed to parse day: {line!r}") from exc
			if day not in stats.days:
				raise LogFormatError(line_no, f"day {day} is not in {year}-{month:02d}")
			if stats.days[day]:
				raise LogFormatError(line_no, f"duplicate entries (day: {day})")
			seen_in_day = set()
			continue

		try:
			category, values = parse_data_line(line)
		except ValueError as exc:
			raise LogFormatError(line_no, str(exc)) from exc
		if category in seen_in_day:
			raise LogFormatError(line_no, f"duplicate category (day: {day}, category: {category})")
		seen_in_day.add(category)
		stats.add(day, category, values)

	return stats


__all__ = ["LogFormatError", "parse_data_line", "parse_log"]
