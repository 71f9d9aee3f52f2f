"""Conversation state machine.

:func:`transition` decides, for a user's current state and one inbound event,
the next state and the effects to perform. It does no I/O: effects are plain
values carried out by :class:`~exp_tracker.bot.executor.EffectExecutor`.

Flow::

	Idle --AddCategory--> AwaitingCategoryName
	     --text--> AwaitingCategoryNameConfirmation --confirm--> AwaitingExpenseDate
	     --date--> AwaitingExpenseAmount --amount--> Idle
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple, Union

from telegram import InlineKeyboardMarkup

from exp_tracker import constants

from .commands import (
	AddCategory,
	Command,
	ConfirmCategoryName,
	PickExpenseDate,
	RejectCategoryName,
	ShowReport,
)
from .keyboards import KeyboardFactory
from .parsers import ExpenseParser
from .state import (
	AwaitingCategoryName,
	AwaitingCategoryNameConfirmation,
	AwaitingExpenseAmount,
	AwaitingExpenseDate,
	ConversationState,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextMessage:
	user_id: int
	chat_id: int
	message_id: int
	text: str


@dataclass(frozen=True)
class CallbackEvent:
	"""A pressed inline button; ``message_id`` is the message that showed it."""

	user_id: int
	chat_id: int
	message_id: int
	command: Command


Event = Union[TextMessage, CallbackEvent]


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SendMessage:
	chat_id: int
	text: str
	reply_markup: Optional[InlineKeyboardMarkup] = None


@dataclass(frozen=True)
class DeleteMessage:
	chat_id: int
	message_id: int


@dataclass(frozen=True)
class PersistCategory:
	"""Insert-or-ignore a category, then send whichever notice matches."""

	user_id: int
	category_name: str
	on_added: SendMessage
	on_existing: SendMessage


@dataclass(frozen=True)
class PersistExpense:
	user_id: int
	category_name: str
	amount: Decimal
	date: date


@dataclass(frozen=True)
class SendReport:
	user_id: int
	chat_id: int
	year: int
	month: int


Effect = Union[SendMessage, DeleteMessage, PersistCategory, PersistExpense, SendReport]


@dataclass(frozen=True)
class Transition:
	"""Next state (None means idle) and the effects that produce it."""

	state: Optional[ConversationState]
	effects: Tuple[Effect, ...] = ()


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------

def _command_name(text: str) -> Optional[str]:
	"""Return '/cmd' for '/cmd' or '/cmd@bot args', None for plain text."""
	if not text.startswith('/'):
		return None
	head = text.split(None, 1)[0]
	return head.split('@', 1)[0]


def _choose_category(chat_id: int) -> SendMessage:
	return SendMessage(chat_id, constants.CHOOSE_CATEGORY, KeyboardFactory.choose_category())


def _on_text(state: Optional[ConversationState], event: TextMessage, today: date) -> Transition:
	command = _command_name(event.text)

	if command == constants.ADD_EXPENSE_COMMAND:
		return Transition(state, (_choose_category(event.chat_id),))

	if command == constants.REPORT_COMMAND:
		prompt = SendMessage(event.chat_id, str(today.year), KeyboardFactory.report_months(today.year))
		return Transition(state, (prompt,))

	if command is None and isinstance(state, AwaitingCategoryName):
		name = event.text.strip()
		if not name:
			return Transition(state, (SendMessage(event.chat_id, constants.PROVIDE_CATEGORY_NAME),))
		prompt = SendMessage(
			event.chat_id,
			constants.CATEGORY_CONFIRMATION.format(name=name),
			KeyboardFactory.confirm_category(event.message_id),
		)
		return Transition(AwaitingCategoryNameConfirmation(event.message_id, name), (prompt,))

	if command is None and isinstance(state, AwaitingExpenseAmount):
		try:
			amount = ExpenseParser.parse_amount(event.text)
		except ValueError:
			return Transition(state, (SendMessage(event.chat_id, constants.INVALID_EXPENSE_AMOUNT),))
		effects = (
			PersistExpense(event.user_id, state.category_name, amount, state.date),
			SendMessage(event.chat_id, constants.EXPENSE_ADDED),
		)
		return Transition(None, effects)

	# keep the chat clean of anything we do not expect
	return Transition(state, (DeleteMessage(event.chat_id, event.message_id),))


def _on_callback(state: Optional[ConversationState], event: CallbackEvent) -> Transition:
	command = event.command

	if isinstance(command, AddCategory):
		prompt = SendMessage(event.chat_id, constants.PROVIDE_CATEGORY_NAME)
		return Transition(AwaitingCategoryName(), (prompt,))

	if isinstance(command, ShowReport):
		return Transition(state, (SendReport(event.user_id, event.chat_id, command.year, command.month),))

	if isinstance(command, ConfirmCategoryName) and isinstance(state, AwaitingCategoryNameConfirmation):
		if command.message_id != state.message_id:
			logger.debug("stale confirm: got %s, expected %s", command.message_id, state.message_id)
			return Transition(state)
		name = state.category_name
		date_prompt = constants.PROVIDE_EXPENSE_DATE
		keyboard = KeyboardFactory.expense_date(event.message_id)
		persist = PersistCategory(
			event.user_id,
			name,
			on_added=SendMessage(
				event.chat_id,
				f"{constants.CATEGORY_ADDED.format(name=name)}\n\n{date_prompt}",
				keyboard,
			),
			on_existing=SendMessage(
				event.chat_id,
				f"{constants.CATEGORY_EXISTS.format(name=name)}\n\n{date_prompt}",
				keyboard,
			),
		)
		return Transition(AwaitingExpenseDate(event.message_id, name), (persist,))

	if isinstance(command, RejectCategoryName) and isinstance(state, AwaitingCategoryNameConfirmation):
		if command.message_id != state.message_id:
			logger.debug("stale reject: got %s, expected %s", command.message_id, state.message_id)
			return Transition(state)
		return Transition(None, (_choose_category(event.chat_id),))

	if isinstance(command, PickExpenseDate) and isinstance(state, AwaitingExpenseDate):
		if command.message_id != state.message_id:
			logger.debug("stale date pick: got %s, expected %s", command.message_id, state.message_id)
			return Transition(state)
		prompt = SendMessage(event.chat_id, constants.PROVIDE_EXPENSE_AMOUNT)
		return Transition(AwaitingExpenseAmount(state.category_name, command.date), (prompt,))

	return Transition(state)


def transition(state: Optional[ConversationState], event: Event, today: date) -> Transition:
	"""Compute the next state and effects for ``event``.

	Args:
		state: The user's current state, None when idle.
		event: Inbound text message or decoded callback.
		today: Date used for the /report year picker.

	Returns:
		A :class:`Transition`; ``state`` is the input object itself when
		nothing changes.
	"""
	if isinstance(event, TextMessage):
		return _on_text(state, event, today)
	return _on_callback(state, event)


__all__ = [
	"CallbackEvent",
	"DeleteMessage",
	"Effect",
	"Event",
	"PersistCategory",
	"PersistExpense",
	"SendMessage",
	"SendReport",
	"TextMessage",
	"Transition",
	"transition",
]
