"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount into a Decimal.

    Accepts ``1234.5``, ``1,234.50``, ``$99`` and ``₹ 500``. Postings are
    always non-negative, so a leading minus sign or accounting parentheses
    are rejected rather than flipped.

    Raises:
        ValueError: If the string is empty, negative or not a finite number
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    if text.startswith("-") or (text.startswith("(") and text.endswith(")")):
        raise ValueError(f"Amount cannot be negative: '{amount_str}'")

    text = _CURRENCY_SYMBOLS.sub("", text).replace(",", "").strip()
    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number: '{amount_str}'")
    return amount
