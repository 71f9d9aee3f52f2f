"""Per-user conversation state and the store that owns it."""

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwaitingCategoryName:
	"""Next text message is the name of a new category."""


@dataclass(frozen=True)
class AwaitingCategoryNameConfirmation:
	"""Category name echoed back; waiting for confirm/reject on that prompt."""

	message_id: int
	category_name: str


@dataclass(frozen=True)
class AwaitingExpenseDate:
	"""Category confirmed; waiting for a date button on that prompt."""

	message_id: int
	category_name: str


@dataclass(frozen=True)
class AwaitingExpenseAmount:
	"""Date chosen; next text message is the expense amount."""

	category_name: str
	date: date


ConversationState = Union[
	AwaitingCategoryName,
	AwaitingCategoryNameConfirmation,
	AwaitingExpenseDate,
	AwaitingExpenseAmount,
]


class ConversationStates:
	"""Lock-guarded mapping of user id to that user's current conversation state.

	A missing entry means the user is idle. States are immutable, so values
	returned by :meth:`get` can be held without copying.
	"""

	def __init__(self):
		self._states: Dict[int, ConversationState] = {}
		self._lock = threading.Lock()

	def get(self, user_id: int) -> Optional[ConversationState]:
		with self._lock:
			return self._states.get(user_id)

	def set(self, user_id: int, state: ConversationState) -> None:
		logger.debug("set conversation state: user_id=%s state=%r", user_id, state)
		with self._lock:
			self._states[user_id] = state

	def clear(self, user_id: int) -> None:
		logger.debug("clear conversation state: user_id=%s", user_id)
		with self._lock:
			self._states.pop(user_id, None)

	def replace(
		self,
		user_id: int,
		expected: Optional[ConversationState],
		new: Optional[ConversationState],
	) -> bool:
		"""Swap ``expected`` for ``new`` atomically; ``new=None`` clears.

		Returns False and leaves the store untouched if the current state is
		no longer ``expected``.
		"""
		with self._lock:
			current = self._states.get(user_id)
			if current != expected:
				return False
			if new is None:
				self._states.pop(user_id, None)
			else:
				self._states[user_id] = new
		logger.debug("replace conversation state: user_id=%s %r -> %r", user_id, expected, new)
		return True

	def __len__(self) -> int:
		with self._lock:
			return len(self._states)


__all__ = [
	"AwaitingCategoryName",
	"AwaitingCategoryNameConfirmation",
	"AwaitingExpenseAmount",
	"AwaitingExpenseDate",
	"ConversationState",
	"ConversationStates",
]
