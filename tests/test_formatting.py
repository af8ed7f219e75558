from decimal import Decimal

import pytest

from categories import FALLBACK_CATEGORY, Category, normalize_category
from config import _parse_categories
from formatting import format_amount, parse_amount, to_cents


def test_to_cents_rounds_half_up() -> None:
    assert to_cents(Decimal("12.345")) == 1_235
    assert to_cents(500) == 50_000
    assert to_cents("0.1") == 10
    with pytest.raises(ValueError):
        to_cents("abc")


def test_parse_amount_accepts_common_notations() -> None:
    assert parse_amount("1.234,56") == 123_456
    assert parse_amount("$ 20") == 2_000
    assert parse_amount("7,5") == 750
    with pytest.raises(ValueError):
        parse_amount("-3")
    assert parse_amount("-3", allow_negative=True) == -300


def test_format_amount_has_two_places() -> None:
    assert format_amount(2_000) == "20.00"
    assert format_amount(5) == "0.05"
    assert format_amount(123_456) == "1234.56"


def test_normalize_category_respects_allowed_set() -> None:
    assert normalize_category("Food") == "food"
    assert normalize_category(Category.utilities) == "utilities"
    assert normalize_category(None) == FALLBACK_CATEGORY
    assert normalize_category("pets") == FALLBACK_CATEGORY
    assert normalize_category("pets", allowed=["pets", "other"]) == "pets"
    assert normalize_category("food", allowed=["pets", "other"]) == FALLBACK_CATEGORY


def test_configured_categories_always_include_fallback() -> None:
    assert _parse_categories("Food, travel ,food,,") == ("food", "travel", "other")
    assert _parse_categories("") == ("other",)
