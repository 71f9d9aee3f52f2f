"""SQLite persistence for users, their categories and expenses."""

import calendar
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpenseRecord:
	date: date
	category: str
	amount: Decimal


class ExpenseStorage:
	"""Manages all database operations for expense tracking."""

	def __init__(self, db_path: str = "expenses.db"):
		"""Open (creating if needed) the database at ``db_path``."""
		self.db_path = str(Path(db_path).expanduser())
		Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
		self._init_db()

	def _init_db(self) -> None:
		"""Create all necessary tables if they don't exist."""
		with self._connect() as conn:
			conn.executescript('''
				CREATE TABLE IF NOT EXISTS users (
					id INTEGER PRIMARY KEY
				);

				CREATE TABLE IF NOT EXISTS categories (
					id INTEGER PRIMARY KEY AUTOINCREMENT,
					user_id INTEGER NOT NULL REFERENCES users(id),
					category TEXT NOT NULL,
					UNIQUE(user_id, category)
				);

				CREATE TABLE IF NOT EXISTS expenses (
					id INTEGER PRIMARY KEY AUTOINCREMENT,
					user_id INTEGER NOT NULL REFERENCES users(id),
					category_id INTEGER NOT NULL REFERENCES categories(id),
					amount TEXT NOT NULL,
					date TEXT NOT NULL
				);

				CREATE INDEX IF NOT EXISTS idx_expenses_user_date
					ON expenses(user_id, date);
			''')
			conn.commit()

	@contextmanager
	def _connect(self):
		"""Context manager for database connections. Ensures connections are always closed."""
		conn = sqlite3.connect(self.db_path)
		try:
			yield conn
		finally:
			conn.close()

	def ensure_user_exists(self, user_id: int) -> None:
		with self._connect() as conn:
			conn.execute('INSERT OR IGNORE INTO users (id) VALUES (?)', (user_id,))
			conn.commit()

	def add_category(self, user_id: int, name: str) -> bool:
		"""Insert a category for the user; False if it was already there."""
		with self._connect() as conn:
			cursor = conn.execute(
				'INSERT OR IGNORE INTO categories (user_id, category) VALUES (?, ?)',
				(user_id, name),
			)
			conn.commit()
			inserted = cursor.rowcount > 0
		logger.debug("add_category user_id=%s name=%r inserted=%s", user_id, name, inserted)
		return inserted

	def add_expense(self, user_id: int, category_name: str, amount: Decimal, expense_date: date) -> bool:
		"""Record an expense against one of the user's categories.

		Returns False (nothing written) when the user has no such category.
		"""
		with self._connect() as conn:
			cursor = conn.execute('''
				INSERT INTO expenses (user_id, category_id, amount, date)
				SELECT ?, id, ?, ? FROM categories WHERE user_id = ? AND category = ?
			''', (user_id, str(amount), expense_date.isoformat(), user_id, category_name))
			conn.commit()
			inserted = cursor.rowcount > 0
		if not inserted:
			logger.warning("expense not recorded: user_id=%s has no category %r", user_id, category_name)
		return inserted

	def get_categories(self, user_id: int) -> List[str]:
		with self._connect() as conn:
			rows = conn.execute(
				'SELECT category FROM categories WHERE user_id = ? ORDER BY id',
				(user_id,),
			).fetchall()
		return [row[0] for row in rows]

	def get_month_expenses(self, user_id: int, year: int, month: int) -> List[ExpenseRecord]:
		"""All expenses of ``user_id`` dated within the given month, oldest first."""
		first = date(year, month, 1)
		last = date(year, month, calendar.monthrange(year, month)[1])
		with self._connect() as conn:
			rows = conn.execute('''
				SELECT e.date, c.category, e.amount
				FROM expenses e JOIN categories c ON c.id = e.category_id
				WHERE e.user_id = ? AND e.date BETWEEN ? AND ?
				ORDER BY e.date, e.id
			''', (user_id, first.isoformat(), last.isoformat())).fetchall()
		return [
			ExpenseRecord(date=date.fromisoformat(row[0]), category=row[1], amount=Decimal(row[2]))
			for row in rows
		]


__all__ = ["ExpenseRecord", "ExpenseStorage"]
