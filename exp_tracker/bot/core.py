"""Long-polling update dispatcher for the expense bot."""

import asyncio
import logging
import math
import os
from datetime import date
from typing import Callable, Optional

from dotenv import load_dotenv
from telegram import Bot, CallbackQuery, Update
from telegram.error import TelegramError

from exp_tracker.database import ExpenseStorage
from exp_tracker.logs import setup_logging
from exp_tracker.report import VisualizationService

from .commands import CommandParseError, parse_command
from .config import BotConfig
from .executor import EffectExecutor
from .machine import CallbackEvent, Event, TextMessage, transition
from .state import ConversationStates

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = [Update.MESSAGE, Update.CALLBACK_QUERY]


def next_tick(previous: float, now: float, interval: float) -> float:
	"""First deadline after ``now`` on the ``previous + k * interval`` grid.

	Ticks missed while an iteration ran long are skipped rather than fired
	back to back.
	"""
	ticks = max(1, math.floor((now - previous) / interval) + 1)
	return previous + ticks * interval


class ExpenseBot:
	"""Pulls updates in order and feeds them through the conversation state machine."""

	def __init__(
		self,
		config: BotConfig,
		bot: Optional[Bot] = None,
		storage: Optional[ExpenseStorage] = None,
		states: Optional[ConversationStates] = None,
		viz: Optional[VisualizationService] = None,
		today: Callable[[], date] = date.today,
	):
		self.config = config
		self.bot = bot if bot is not None else Bot(config.token)
		self.storage = storage if storage is not None else ExpenseStorage(config.db_path)
		self.states = states if states is not None else ConversationStates()
		self.today = today
		self.executor = EffectExecutor(self.bot, self.storage, viz if viz is not None else VisualizationService(), today)
		# id of the next update to request
		self.offset = 0

	def run(self) -> None:
		logger.info("Starting bot...")
		try:
			asyncio.run(self.run_polling())
		except KeyboardInterrupt:
			logger.info("Bot stopped")

	async def run_polling(self) -> None:
		loop = asyncio.get_running_loop()
		interval = self.config.poll_interval
		deadline = loop.time()
		async with self.bot:
			while True:
				delay = deadline - loop.time()
				if delay > 0:
					await asyncio.sleep(delay)
				await self.poll_once()
				deadline = next_tick(deadline, loop.time(), interval)

	async def poll_once(self) -> int:
		"""Fetch one batch and handle it; returns the number of updates seen."""
		try:
			updates = await self.bot.get_updates(
				offset=self.offset,
				limit=self.config.batch_size,
				allowed_updates=ALLOWED_UPDATES,
			)
		except TelegramError as exc:
			logger.error("failed to get updates: %s", exc)
			return 0

		for update in updates:
			await self.process_update(update)
		return len(updates)

	async def process_update(self, update: Update) -> None:
		"""Handle one update; failures are logged and the cursor moves on regardless."""
		logger.debug("handling update %s", update.update_id)
		try:
			await self.handle_update(update)
		except CommandParseError as exc:
			logger.warning("ignoring callback in update %s: %s", update.update_id, exc)
		except TelegramError as exc:
			logger.error("telegram request failed for update %s: %s", update.update_id, exc, exc_info=exc)
		except Exception:  # noqa: BLE001
			logger.exception("failed to handle update %s", update.update_id)
		finally:
			if update.update_id >= self.offset:
				self.offset = update.update_id + 1

	async def handle_update(self, update: Update) -> None:
		user = update.effective_user
		chat = update.effective_chat
		if user is None or chat is None:
			logger.debug("update %s has no user or chat", update.update_id)
			return

		self.storage.ensure_user_exists(user.id)

		if update.callback_query is not None:
			await self._handle_callback(update.callback_query, user.id, chat.id)
			return

		message = update.message
		if message is None:
			return
		if message.text is None:
			logger.warning("empty message received (update %s)", update.update_id)
			return
		await self._dispatch(TextMessage(user.id, chat.id, message.message_id, message.text))

	async def _handle_callback(self, query: CallbackQuery, user_id: int, chat_id: int) -> None:
		try:
			if query.data is None or query.message is None:
				return
			command = parse_command(query.data, self.today())
			await self._dispatch(CallbackEvent(user_id, chat_id, query.message.message_id, command))
		finally:
			await self._answer(query)

	async def _answer(self, query: CallbackQuery) -> None:
		try:
			await self.bot.answer_callback_query(query.id)
		except TelegramError as exc:
			logger.debug("answer_callback_query failed: %s", exc)

	async def _dispatch(self, event: Event) -> None:
		"""Persist, then commit the new state, then notify the user."""
		state = self.states.get(event.user_id)
		result = transition(state, event, self.today())

		notices = self.executor.persist(result.effects)

		if result.state is not state and not self.states.replace(event.user_id, state, result.state):
			logger.warning("conversation of user %s changed while handling; dropping replies", event.user_id)
			return

		await self.executor.notify(notices)


def main() -> None:
	load_dotenv()
	setup_logging(log_file=os.getenv("LOG_FILE", "logs/bot.log"))
	config = BotConfig.from_env()
	bot = ExpenseBot(config)
	bot.run()


if __name__ == '__main__':
	main()
