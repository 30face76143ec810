import pytest

from storefront import (
    cart_totals,
    filter_products,
    low_stock,
    matches_price_range,
    next_order_number,
)

PRODUCTS = [
    {"name": "Wireless Headphones", "name_ar": "سماعات لاسلكية", "description": "Noise cancelling", "price": 199.99, "category_id": "c1", "stock": 15},
    {"name": "Yoga Mat", "description": "Non-slip mat", "price": 29.99, "category_id": "c2", "stock": 3},
    {"name": "Sofa Set", "description": "Living room sofa", "price": 1299.99, "category_id": "c3", "stock": 9},
    {"name": "Coffee Maker", "description": "Brews espresso", "price": 50, "category_id": "c1", "stock": 10},
]


@pytest.mark.parametrize("lines", [
    [(10.0, 1)],
    [(19.99, 2), (5.5, 3)],
    [(25.0, 2)],
    [(199.99, 1), (0.01, 4)],
])
def test_cart_total_formula(lines):
    totals = cart_totals(lines)
    subtotal = sum(p * q for p, q in lines)
    expected = subtotal + subtotal * 0.08 + (0 if subtotal > 50 else 9.99)
    assert totals["subtotal"] == pytest.approx(subtotal, abs=0.005)
    assert totals["total"] == pytest.approx(expected, abs=0.01)


def test_shipping_is_charged_at_exactly_fifty():
    assert cart_totals([(25.0, 2)])["shipping"] == 9.99
    assert cart_totals([(50.01, 1)])["shipping"] == 0


def test_cart_totals_counts_units():
    totals = cart_totals([(10, 2), (3, 5)])
    assert totals["item_count"] == 7
    assert totals["tax"] == pytest.approx(2.8)


def test_price_buckets():
    assert matches_price_range(49.99, "under50")
    assert not matches_price_range(50, "under50")
    assert matches_price_range(50, "50to200")
    assert matches_price_range(200, "50to200")
    assert not matches_price_range(200, "over200")
    assert matches_price_range(200.01, "over200")
    assert matches_price_range(1, "all")
    assert matches_price_range(1, None)


def test_unknown_price_bucket_is_rejected():
    with pytest.raises(ValueError):
        matches_price_range(10, "cheap")


def test_filter_by_category_only_returns_that_category():
    result = filter_products(PRODUCTS, category_id="c1")
    assert {p["name"] for p in result} == {"Wireless Headphones", "Coffee Maker"}
    assert all(p["category_id"] == "c1" for p in result)


def test_filter_all_category_is_unfiltered():
    assert filter_products(PRODUCTS, category_id="All") == PRODUCTS
    assert filter_products(PRODUCTS) == PRODUCTS


def test_search_is_case_insensitive_and_covers_description_and_arabic():
    assert [p["name"] for p in filter_products(PRODUCTS, search="YOGA")] == ["Yoga Mat"]
    assert [p["name"] for p in filter_products(PRODUCTS, search="espresso")] == ["Coffee Maker"]
    assert [p["name"] for p in filter_products(PRODUCTS, search="سماعات")] == ["Wireless Headphones"]


def test_predicates_are_anded():
    result = filter_products(PRODUCTS, search="e", category_id="c1", price_range="50to200")
    assert {p["name"] for p in result} == {"Wireless Headphones", "Coffee Maker"}
    assert filter_products(PRODUCTS, category_id="c1", price_range="over200") == []


def test_low_stock():
    assert [p["name"] for p in low_stock(PRODUCTS, 10)] == ["Yoga Mat", "Sofa Set"]


def test_order_numbers_are_zero_padded():
    assert next_order_number(0) == "ORD-001"
    assert next_order_number(41) == "ORD-042"
    assert next_order_number(1234) == "ORD-1235"


def test_empty_cart_has_no_shipping():
    assert cart_totals([]) == {"subtotal": 0.0, "tax": 0.0, "shipping": 0.0, "total": 0.0, "item_count": 0}
