from enum import Enum
from typing import Iterable, Optional


class Category(str, Enum):
    food = "food"
    transportation = "transportation"
    entertainment = "entertainment"
    utilities = "utilities"
    shopping = "shopping"
    healthcare = "healthcare"
    education = "education"
    other = "other"


FALLBACK_CATEGORY = Category.other.value


def normalize_category(
    value: Optional[str], allowed: Optional[Iterable[str]] = None
) -> str:
    """Map a raw category value onto the configured category set.

    Anything blank or outside ``allowed`` collapses into the fallback bucket.
    """
    if allowed is None:
        allowed = [c.value for c in Category]
    if isinstance(value, Enum):
        value = value.value
    name = (value or "").strip().lower()
    if name and name in set(allowed):
        return name
    return FALLBACK_CATEGORY
