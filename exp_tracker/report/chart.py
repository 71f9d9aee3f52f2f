"""Stacked-bar spending charts."""

import io
from datetime import date
from typing import Optional

import matplotlib

matplotlib.use('Agg')  # Non-interactive backend for servers
import matplotlib.pyplot as plt
import numpy as np

from exp_tracker.constants import category_color

from .stats import MonthStats

# 640x480 px at the default dpi
_FIGSIZE = (6.4, 4.8)
_DPI = 100


def _save(fig) -> io.BytesIO:
	"""Save figure to a BytesIO buffer and close it."""
	buf = io.BytesIO()
	fig.savefig(buf, format='png', dpi=_DPI, facecolor='white', edgecolor='none')
	buf.seek(0)
	plt.close(fig)
	return buf


class VisualizationService:
	"""Creates charts for monthly summaries."""

	@staticmethod
	def stacked_bar_chart(stats: MonthStats, today: Optional[date] = None) -> Optional[io.BytesIO]:
		"""Per-day stacked bars next to one bar for the average day.

		Returns None when the month has no spending.
		"""
		if stats.is_empty() or not stats.total():
			return None

		categories = stats.ordered_categories()
		days = np.arange(1, stats.days_in_month + 1)
		y_max = max(max(stats.day_totals().values()), stats.daily_average(today), 0.0) or 1.0

		fig, (ax_main, ax_avg) = plt.subplots(
			1, 2, figsize=_FIGSIZE,
			gridspec_kw={'width_ratios': [6, 1]},
		)

		# --- Left: one stacked bar per day ---
		bottoms = np.zeros(len(days))
		for rank, category in enumerate(categories):
			values = np.array([stats.day_value(int(day), category) for day in days])
			ax_main.bar(
				days, values, bottom=bottoms, width=1.0, align='edge',
				color=category_color(rank), linewidth=0, label=category,
			)
			bottoms += values

		ax_main.set_title('main', fontsize=16)
		ax_main.set_xlim(1, stats.days_in_month + 1)
		ax_main.set_ylim(0, y_max)
		ax_main.set_xticks([])
		ax_main.grid(axis='y', color='#DDDDDD', linewidth=0.8)
		ax_main.set_axisbelow(True)
		ax_main.legend(
			loc='upper right', fontsize=9,
			facecolor='#E6E6FF', edgecolor='blue', framealpha=1.0,
		)

		# --- Right: the average day split by category share ---
		level = 0.0
		for rank, (category, value) in enumerate(stats.average_breakdown(today)):
			ax_avg.bar(0, value, bottom=level, width=1.0, align='edge', color=category_color(rank), linewidth=0)
			level += value

		ax_avg.set_title('avg', fontsize=16)
		ax_avg.set_xlim(0, 1)
		ax_avg.set_ylim(0, y_max)
		ax_avg.set_xticks([])
		ax_avg.grid(axis='y', color='#DDDDDD', linewidth=0.8)
		ax_avg.set_axisbelow(True)

		fig.suptitle(date(stats.year, stats.month, 1).strftime('%B %Y'), fontsize=11)
		plt.tight_layout()
		return _save(fig)


__all__ = ["VisualizationService"]
