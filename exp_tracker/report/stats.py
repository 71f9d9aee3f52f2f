"""Per-day, per-category spending totals for one calendar month."""

import calendar
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from exp_tracker.database import ExpenseRecord


class MonthStats:
	"""Spending values bucketed by day of month and category.

	Every day of the month has a bucket, so days without spending still show
	up (as zero) on the chart.
	"""

	def __init__(self, year: int, month: int):
		self.year = year
		self.month = month
		self.days_in_month = calendar.monthrange(year, month)[1]
		self.days: Dict[int, Dict[str, List[float]]] = {day: {} for day in range(1, self.days_in_month + 1)}
		self._first_seen: Dict[str, int] = {}

	@classmethod
	def from_expenses(cls, year: int, month: int, records: Iterable[ExpenseRecord]) -> "MonthStats":
		stats = cls(year, month)
		for record in records:
			stats.add(record.date.day, record.category, [float(record.amount)])
		return stats

	def add(self, day: int, category: str, values: List[float]) -> None:
		"""Append ``values`` to the category bucket of ``day``."""
		if day not in self.days:
			raise ValueError(f"day {day} is not in {self.year}-{self.month:02d}")
		self._first_seen.setdefault(category, len(self._first_seen))
		self.days[day].setdefault(category, []).extend(values)

	def ordered_categories(self) -> List[str]:
		"""Categories by number of days they appear on, most frequent first."""
		frequency: Dict[str, int] = {}
		for day_stats in self.days.values():
			for category in day_stats:
				frequency[category] = frequency.get(category, 0) + 1
		return sorted(frequency, key=lambda c: (-frequency[c], self._first_seen[c]))

	def day_value(self, day: int, category: str) -> float:
		return sum(self.days[day].get(category, ()))

	def day_totals(self) -> Dict[int, float]:
		return {day: sum(sum(values) for values in day_stats.values()) for day, day_stats in self.days.items()}

	def category_totals(self) -> Dict[str, float]:
		totals: Dict[str, float] = {}
		for day_stats in self.days.values():
			for category, values in day_stats.items():
				totals[category] = totals.get(category, 0.0) + sum(values)
		return totals

	def total(self) -> float:
		return sum(self.category_totals().values())

	def is_empty(self) -> bool:
		return not any(self.days.values())

	def elapsed_days(self, today: Optional[date] = None) -> int:
		"""Days to average over: today's day for the running month, else the whole month."""
		today = today or date.today()
		if (today.year, today.month) == (self.year, self.month):
			return today.day
		return self.days_in_month

	def daily_average(self, today: Optional[date] = None) -> float:
		return self.total() / self.elapsed_days(today)

	def average_breakdown(self, today: Optional[date] = None) -> List[Tuple[str, float]]:
		"""Daily average split by category share, in :meth:`ordered_categories` order."""
		total = self.total()
		if not total:
			return []
		avg = self.daily_average(today)
		totals = self.category_totals()
		return [(category, avg * totals[category] / total) for category in self.ordered_categories()]


__all__ = ["MonthStats"]
