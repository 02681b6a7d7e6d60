"""Canonical phone normalization.

Every read and write path that compares client phones goes through
``normalize_phone``. Upstream automations send the same number as
``=+57 300-123 4567``, ``+573001234567`` or ``573001234567``; all of them
must collapse to one key or the same client ends up with several
conversations.
"""

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: str | None) -> str:
    """Map a raw phone string to its comparison key.

    Strips leading ``=`` characters left by templating expressions and
    surrounding whitespace, then keeps digits only (formatting punctuation
    and the international ``+`` are dropped). Empty or missing input yields
    an empty string.

    Examples:
        >>> normalize_phone("=+57 300-123 4567")
        '573001234567'
        >>> normalize_phone("(555) 010-0000")
        '5550100000'
        >>> normalize_phone(None)
        ''
    """
    if not raw:
        return ""

    value = str(raw).strip().lstrip("=").strip()
    return _NON_DIGITS.sub("", value)
