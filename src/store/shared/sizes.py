"""Garment sizes offered by the catalog and carried on cart and order lines."""

from enum import Enum


class Size(Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


ALLOWED_SIZES = frozenset(s.value for s in Size)


def is_valid_size(size) -> bool:
    """A missing size is valid; a given one must be in the fixed size set."""
    return size is None or size in ALLOWED_SIZES
