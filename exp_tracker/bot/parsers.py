"""Parsing helpers for expense amounts."""

import re
from decimal import Decimal, InvalidOperation

# 0, or no leading zero; optional '.'/',' with one or two fraction digits
AMOUNT_PATTERN = re.compile(r"(0|[1-9][0-9]*)([.,][0-9]{1,2})?")


class ExpenseParser:
	"""Parses free-form user input for expense amounts."""

	@staticmethod
	def is_valid_amount(text: str) -> bool:
		return AMOUNT_PATTERN.fullmatch(text.strip()) is not None

	@staticmethod
	def parse_amount(text: str) -> Decimal:
		cleaned = text.strip()
		if AMOUNT_PATTERN.fullmatch(cleaned) is None:
			raise ValueError(f"Invalid amount: {text!r}")
		try:
			return Decimal(cleaned.replace(',', '.'))
		except InvalidOperation as exc:
			raise ValueError(f"Invalid amount: {text!r}") from exc


__all__ = ["AMOUNT_PATTERN", "ExpenseParser"]
