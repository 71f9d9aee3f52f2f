"""Carries out the effects returned by the conversation state machine."""

import logging
from datetime import date
from typing import Callable, Iterable, List

from telegram import Bot, InputFile

from exp_tracker import constants
from exp_tracker.database import ExpenseStorage
from exp_tracker.report import MonthStats, VisualizationService

from .machine import DeleteMessage, Effect, PersistCategory, PersistExpense, SendMessage, SendReport

logger = logging.getLogger(__name__)


class EffectExecutor:
	"""Runs effects in two phases: :meth:`persist` first, :meth:`notify` after the state commit."""

	def __init__(
		self,
		bot: Bot,
		storage: ExpenseStorage,
		viz: VisualizationService,
		today: Callable[[], date] = date.today,
	):
		self.bot = bot
		self.storage = storage
		self.viz = viz
		self.today = today

	def persist(self, effects: Iterable[Effect]) -> List[Effect]:
		"""Write persistence effects to storage and return what is left to send.

		Storage errors propagate, so a failed write never reaches the state commit.
		"""
		notices: List[Effect] = []
		for effect in effects:
			if isinstance(effect, PersistCategory):
				inserted = self.storage.add_category(effect.user_id, effect.category_name)
				notices.append(effect.on_added if inserted else effect.on_existing)
			elif isinstance(effect, PersistExpense):
				self.storage.add_expense(effect.user_id, effect.category_name, effect.amount, effect.date)
			else:
				notices.append(effect)
		return notices

	async def notify(self, notices: Iterable[Effect]) -> None:
		for effect in notices:
			if isinstance(effect, SendMessage):
				await self.bot.send_message(chat_id=effect.chat_id, text=effect.text, reply_markup=effect.reply_markup)
			elif isinstance(effect, DeleteMessage):
				await self.bot.delete_message(chat_id=effect.chat_id, message_id=effect.message_id)
			elif isinstance(effect, SendReport):
				await self._send_report(effect)
			else:
				raise TypeError(f"unexpected effect at notify stage: {effect!r}")

	async def _send_report(self, effect: SendReport) -> None:
		records = self.storage.get_month_expenses(effect.user_id, effect.year, effect.month)
		stats = MonthStats.from_expenses(effect.year, effect.month, records)
		period = date(effect.year, effect.month, 1).strftime('%b %Y')
		chart = self.viz.stacked_bar_chart(stats, today=self.today())
		if chart is None:
			await self.bot.send_message(chat_id=effect.chat_id, text=constants.NO_EXPENSES.format(period=period))
			return
		await self.bot.send_photo(
			chat_id=effect.chat_id,
			photo=InputFile(chart, filename=f"report_{effect.year}_{effect.month:02d}.png"),
			caption=period,
		)


__all__ = ["EffectExecutor"]
