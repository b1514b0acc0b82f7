"""Phone number shape accepted on shipping addresses."""

import re

# 7 to 15 characters of digits, "+", "-", spaces and parentheses
PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]{7,15}$")


def is_valid_phone(number) -> bool:
    return isinstance(number, str) and bool(PHONE_PATTERN.match(number))
