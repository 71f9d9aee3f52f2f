"""Telegram bot package wrappers."""

from .config import BotConfig
from .core import ExpenseBot
from .executor import EffectExecutor
from .keyboards import KeyboardFactory
from .parsers import ExpenseParser
from .state import ConversationStates

__all__ = [
	"BotConfig",
	"ConversationStates",
	"EffectExecutor",
	"ExpenseBot",
	"ExpenseParser",
	"KeyboardFactory",
]
