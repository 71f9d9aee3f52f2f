"""Keyboard factory helpers."""

import calendar
from typing import List

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from .commands import DATE_KINDS, AddCategory, ConfirmCategoryName, PickExpenseDate, RejectCategoryName, ShowReport


class KeyboardFactory:
	"""Builds inline keyboards whose buttons carry command tokens."""

	@staticmethod
	def choose_category() -> InlineKeyboardMarkup:
		keyboard = [[InlineKeyboardButton("add category", callback_data=AddCategory().to_token())]]
		return InlineKeyboardMarkup(keyboard)

	@staticmethod
	def confirm_category(message_id: int) -> InlineKeyboardMarkup:
		keyboard = [
			[
				InlineKeyboardButton("confirm", callback_data=ConfirmCategoryName(message_id).to_token()),
				InlineKeyboardButton("reject", callback_data=RejectCategoryName(message_id).to_token()),
			],
		]
		return InlineKeyboardMarkup(keyboard)

	@staticmethod
	def expense_date(message_id: int) -> InlineKeyboardMarkup:
		keyboard = [
			[InlineKeyboardButton(kind, callback_data=PickExpenseDate.token_for(message_id, kind))]
			for kind in DATE_KINDS
		]
		return InlineKeyboardMarkup(keyboard)

	@staticmethod
	def report_months(year: int) -> InlineKeyboardMarkup:
		keyboard: List[List[InlineKeyboardButton]] = []
		for first in range(1, 13, 4):
			row = [
				InlineKeyboardButton(calendar.month_abbr[month], callback_data=ShowReport(year, month).to_token())
				for month in range(first, first + 4)
			]
			keyboard.append(row)
		return InlineKeyboardMarkup(keyboard)


__all__ = ["KeyboardFactory"]
