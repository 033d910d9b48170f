"""
Month-key ("YYYY-MM") helpers shared by bill generation, reads and summaries.

A bill's period is the calendar month its due date falls into.
"""
from datetime import date, datetime, timedelta
from typing import Tuple, Union


def parse_month_key(key: str) -> Tuple[int, int]:
    """Split "2024-03" into (2024, 3). Raises ValueError on anything else."""
    parsed = datetime.strptime(key.strip(), "%Y-%m")
    return parsed.year, parsed.month


def month_key(d: Union[date, datetime]) -> str:
    return f"{d.year}-{d.month:02d}"


def previous_month(key: str) -> str:
    year, month = parse_month_key(key)
    if month == 1:
        return f"{year - 1}-12"
    return f"{year}-{month - 1:02d}"


def next_month(key: str) -> str:
    year, month = parse_month_key(key)
    if month == 12:
        return f"{year + 1}-01"
    return f"{year}-{month + 1:02d}"


def monthly_description(key: str) -> str:
    """Description given to the generated bill of a month."""
    return f"Monthly Bill - {key}"


def in_month(d: Union[date, datetime, None], key: str) -> bool:
    if d is None:
        return False
    return month_key(d) == key


def due_date_for_month(key: str, days_before_month_end: int = 5) -> date:
    """
    Due date of the monthly bill: first day of the following month minus
    days_before_month_end. "2024-03" -> 2024-03-27 with the default.
    """
    year, month = parse_month_key(next_month(key))
    return date(year, month, 1) - timedelta(days=days_before_month_end)


def month_name(key: str) -> str:
    """"2024-03" -> "March 2024"."""
    year, month = parse_month_key(key)
    return date(year, month, 1).strftime("%B %Y")
