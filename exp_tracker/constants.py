"""User-facing texts and chart settings shared across the bot and the CLI."""

from typing import List, Tuple

# Bot replies
CHOOSE_CATEGORY = "choose category"
PROVIDE_CATEGORY_NAME = "please, provide category name"
CATEGORY_CONFIRMATION = "[category confirmation]: {name}"
CATEGORY_ADDED = "category '{name}' added"
CATEGORY_EXISTS = "category '{name}' has already been added"
PROVIDE_EXPENSE_DATE = "please, provide expense date"
PROVIDE_EXPENSE_AMOUNT = "please, provide expense amount"
INVALID_EXPENSE_AMOUNT = "invalid expense amount. try again"
EXPENSE_ADDED = "expense added"
NO_EXPENSES = "no expenses for {period}"

# Slash commands
ADD_EXPENSE_COMMAND = "/add_expense"
REPORT_COMMAND = "/report"

# Chart palette, in category rank order
CHART_COLORS: List[Tuple[int, int, int]] = [
    (255, 0, 0),
    (0, 0, 255),
    (255, 255, 0),
    (144, 238, 144),
    (128, 0, 128),
    (255, 165, 0),
    (255, 20, 147),
]


def rgb_to_hex(color: Tuple[int, int, int]) -> str:
    """Convert an (r, g, b) tuple to a matplotlib-friendly hex string."""
    return "#{:02X}{:02X}{:02X}".format(*color)


def category_color(rank: int) -> str:
    """Color for the category at ``rank``; the palette repeats past its end."""
    return rgb_to_hex(CHART_COLORS[rank % len(CHART_COLORS)])
