"""Column constraints keyed by reserved column names."""

from __future__ import annotations

from simple_sql.errors import InvalidConstraintError

# Column name that marks a dotted-quad address column (case-sensitive)
IPV4_COLUMN = "IPv4"


def validate_ipv4(token: str) -> bool:
    """Check that a token looks like a dotted-quad address.

    Each of the four segments must be 1-3 ASCII digits. Octet values are not
    range-checked, so ``999.999.999.999`` is accepted.
    """
    dots = 0
    run = 0
    for ch in token:
        if ch == ".":
            if run == 0 or run > 3:
                return False
            dots += 1
            run = 0
        elif ch in "0123456789":
            run += 1
        else:
            return False
    return dots == 3 and 1 <= run <= 3


def check_value(column_name: str, value: str) -> None:
    """Raise InvalidConstraintError if value violates the column's constraint."""
    if column_name == IPV4_COLUMN and not validate_ipv4(value):
        raise InvalidConstraintError(column_name, value)
