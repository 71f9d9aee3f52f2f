"""Bot configuration dataclass."""

import os
from dataclasses import dataclass


@dataclass
class BotConfig:
	token: str
	db_path: str = "expenses.db"
	poll_interval: float = 0.2
	batch_size: int = 1

	def __post_init__(self):
		if self.poll_interval <= 0:
			raise ValueError(f"poll interval must be positive, got {self.poll_interval}")
		if self.batch_size < 1:
			raise ValueError(f"batch size must be at least 1, got {self.batch_size}")

	@classmethod
	def from_env(cls) -> "BotConfig":
		token = os.getenv("TELEGRAM_BOT_TOKEN")
		if not token:
			raise ValueError(
				"TELEGRAM_BOT_TOKEN not set.\nGet it from @BotFather and export TELEGRAM_BOT_TOKEN='your-token'",
			)
		return cls(
			token=token,
			db_path=os.getenv("DB_PATH", cls.db_path),
			poll_interval=_env_int("POLL_INTERVAL_MS", 200) / 1000,
			batch_size=_env_int("POLL_BATCH_SIZE", 1),
		)


def _env_int(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None:
		return default
	try:
		return int(raw)
	except ValueError:
		raise ValueError(f"{name} must be an integer, got {raw!r}") from None


__all__ = ["BotConfig"]
