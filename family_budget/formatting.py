"""Formatting utilities for currency and text display."""

from __future__ import annotations

from typing import Tuple, Union


def escape_dollar_for_markdown(amount: float) -> str:
    """Format a dollar amount and escape the dollar sign for markdown rendering.

    Streamlit treats ``$`` as a LaTeX delimiter, so amounts rendered through
    ``st.markdown`` need the sign escaped.

    Example:
        >>> escape_dollar_for_markdown(1234.56)
        '\\\\$1,234.56'
    """
    return format_currency(amount).replace("$", "\\$")


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with proper formatting.

    Negative amounts keep the minus in front of the dollar sign.

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-20)
        '-$20.00'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    prefix = "-" if amount < 0 and round(abs(amount), 2) > 0 else ""
    return f"{prefix}${formatted}" if include_sign else f"{prefix}{formatted}"


def format_balance(amount: float, tolerance: float = 0.001) -> Tuple[str, str]:
    """Format a weekly balance together with its display colour.

    Returns:
        ``(text, colour)`` where colour is ``'green'`` for a surplus or
        break-even week and ``'red'`` for a deficit.
    """
    if amount < -tolerance:
        return format_currency(amount), 'red'
    return format_currency(max(amount, 0.0)), 'green'


def format_remaining(difference: float, tolerance: float = 0.001) -> str:
    """Describe an expense's unallocated remainder.

    A positive difference means the weeks do not yet cover the monthly
    amount and is shown as ``-$x``; over-allocation is shown as ``+$x``.
    """
    if abs(difference) < tolerance:
        return '$0.00'
    if difference > 0:
        return '-' + format_currency(difference)
    return '+' + format_currency(abs(difference))
