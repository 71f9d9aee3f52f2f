"""Expense tracking bot and monthly spending charts."""

__version__ = "0.3.0"
