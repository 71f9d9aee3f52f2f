"""Database backend for the expense bot."""

from .sqlite import ExpenseRecord, ExpenseStorage

__all__ = ["ExpenseRecord", "ExpenseStorage"]
