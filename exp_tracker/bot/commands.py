"""Callback tokens carried by inline buttons and their typed commands.

Tokens are colon separated and start with a discriminator::

	add_category
	ccn:<message_id>              confirm category name
	rcn:<message_id>              reject category name
	ped:<message_id>:<kind>       pick expense date (today | yesterday)
	rpt:<year>:<month>            monthly report
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Union

_POSITIVE_INT = re.compile(r"[0-9]+")

ADD_CATEGORY = "add_category"
CONFIRM_CATEGORY_NAME = "ccn"
REJECT_CATEGORY_NAME = "rcn"
PICK_EXPENSE_DATE = "ped"
SHOW_REPORT = "rpt"

# relative date kind -> days before today, in button order
DATE_KINDS = {"today": 0, "yesterday": 1}


class ParseErrorReason(Enum):
	INVALID_MESSAGE_ID = "invalid message id"
	UNKNOWN_DATE_KIND = "unknown date kind"
	INVALID_REPORT_PERIOD = "invalid report period"
	UNRECOGNIZED_COMMAND = "unrecognized command"


class CommandParseError(ValueError):
	"""Raised when a callback token cannot be decoded."""

	def __init__(self, reason: ParseErrorReason, token: str):
		super().__init__(f"{reason.value}: {token!r}")
		self.reason = reason
		self.token = token


@dataclass(frozen=True)
class AddCategory:
	def to_token(self) -> str:
		return ADD_CATEGORY


@dataclass(frozen=True)
class ConfirmCategoryName:
	message_id: int

	def to_token(self) -> str:
		return f"{CONFIRM_CATEGORY_NAME}:{self.message_id}"


@dataclass(frozen=True)
class RejectCategoryName:
	message_id: int

	def to_token(self) -> str:
		return f"{REJECT_CATEGORY_NAME}:{self.message_id}"


@dataclass(frozen=True)
class PickExpenseDate:
	message_id: int
	date: date

	@staticmethod
	def token_for(message_id: int, kind: str) -> str:
		"""Buttons carry the relative kind, resolved to a date when pressed."""
		return f"{PICK_EXPENSE_DATE}:{message_id}:{kind}"


@dataclass(frozen=True)
class ShowReport:
	year: int
	month: int

	def to_token(self) -> str:
		return f"{SHOW_REPORT}:{self.year}:{self.month}"


Command = Union[AddCategory, ConfirmCategoryName, RejectCategoryName, PickExpenseDate, ShowReport]


def _parse_message_id(raw: str, token: str) -> int:
	if not _POSITIVE_INT.fullmatch(raw) or int(raw) <= 0:
		raise CommandParseError(ParseErrorReason.INVALID_MESSAGE_ID, token)
	return int(raw)


def _resolve_date_kind(kind: str, today: date, token: str) -> date:
	if kind not in DATE_KINDS:
		raise CommandParseError(ParseErrorReason.UNKNOWN_DATE_KIND, token)
	return today - timedelta(days=DATE_KINDS[kind])


def _parse_report_period(data: str, token: str) -> ShowReport:
	year_raw, _, month_raw = data.partition(":")
	if not (_POSITIVE_INT.fullmatch(year_raw) and _POSITIVE_INT.fullmatch(month_raw)):
		raise CommandParseError(ParseErrorReason.INVALID_REPORT_PERIOD, token)
	year, month = int(year_raw), int(month_raw)
	if not (1 <= year <= 9999 and 1 <= month <= 12):
		raise CommandParseError(ParseErrorReason.INVALID_REPORT_PERIOD, token)
	return ShowReport(year=year, month=month)


def parse_command(token: str, today: date) -> Command:
	"""Decode a callback token.

	``today`` anchors the relative date kinds so the result depends only on
	the arguments.

	Raises:
		CommandParseError: with the reason the token was rejected.
	"""
	if token == ADD_CATEGORY:
		return AddCategory()

	discriminator, sep, data = token.partition(":")
	if not sep:
		raise CommandParseError(ParseErrorReason.UNRECOGNIZED_COMMAND, token)

	if discriminator == CONFIRM_CATEGORY_NAME:
		return ConfirmCategoryName(message_id=_parse_message_id(data, token))

	if discriminator == REJECT_CATEGORY_NAME:
		return RejectCategoryName(message_id=_parse_message_id(data, token))

	if discriminator == PICK_EXPENSE_DATE:
		raw_id, _, kind = data.partition(":")
		message_id = _parse_message_id(raw_id, token)
		return PickExpenseDate(message_id=message_id, date=_resolve_date_kind(kind, today, token))

	if discriminator == SHOW_REPORT:
		return _parse_report_period(data, token)

	raise CommandParseError(ParseErrorReason.UNRECOGNIZED_COMMAND, token)


__all__ = [
	"AddCategory",
	"Command",
	"CommandParseError",
	"ConfirmCategoryName",
	"DATE_KINDS",
	"ParseErrorReason",
	"PickExpenseDate",
	"RejectCategoryName",
	"ShowReport",
	"parse_command",
]
