"""Display formatting for amounts and notes."""

import html
import math
import re


def format_currency(amount: float) -> str:
    """
    US dollar formatting with thousands separators.

    >>> format_currency(1234.5)
    '$1,234.50'
    >>> format_currency(-40)
    '-$40.00'
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_amount(amount: float) -> str:
    """
    Plain number text as a JavaScript runtime would print it:
    whole numbers without a trailing ".0", everything else as the
    shortest round-tripping decimal.
    """
    if math.isfinite(amount) and float(amount).is_integer() and abs(amount) < 1e21:
        return str(int(amount))
    return repr(float(amount))


_MARKDOWN_SPECIALS = re.compile(r"([\\`*_\[\]{}()#+\-!|~])")


def escape_markdown(text: str) -> str:
    """
    Make free text safe to drop into st.markdown with HTML enabled.

    >>> escape_markdown("<b>*Lunch*</b>")
    '&lt;b&gt;\\\\*Lunch\\\\*&lt;/b&gt;'
    """
    return _MARKDOWN_SPECIALS.sub(r"\\\1", html.escape(text, quote=False))
