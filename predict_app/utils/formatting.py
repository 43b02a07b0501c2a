"""
Display formatting for amounts, probabilities and dates.

All helpers are pure and locale-independent so projections render the same
everywhere.
"""

from datetime import datetime
from typing import Optional

CURRENCY_PREFIX = "KSh"


def format_amount(value: Optional[float], round_whole: bool = False) -> str:
    """
    Group thousands; keep up to two decimals unless the value is whole.

    Args:
        value: Amount to format, None counts as zero
        round_whole: Round to the nearest whole unit first

    Returns:
        Formatted amount such as "1,234" or "1,234.5"
    """
    if value is None:
        value = 0.0
    if round_whole:
        value = round(value)
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_currency(value: Optional[float], round_whole: bool = False) -> str:
    """Amount with the KSh prefix, e.g. "KSh 50,000"."""
    return f"{CURRENCY_PREFIX} {format_amount(value, round_whole=round_whole)}"


def format_percent(probability: float) -> str:
    """Probability in [0, 1] as a percentage with one decimal, e.g. "60.0%"."""
    return f"{probability * 100:.1f}%"


def format_date(raw: str) -> str:
    """
    Calendar date of an ISO date or datetime string.

    Unparseable input is returned unchanged so the user still sees something.
    """
    if not raw:
        return ""
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return raw


def mask_phone(phone: str) -> str:
    """Hide the middle digits of a phone number for log output."""
    if len(phone) <= 4:
        return "*" * len(phone)
    return phone[:2] + "*" * (len(phone) - 4) + phone[-2:]
