"""
Storefront rules that do not touch the database: cart totals, catalog
filtering, low-stock detection and order numbering.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from config import FREE_SHIPPING_THRESHOLD, LOW_STOCK_THRESHOLD, SHIPPING_FEE, TAX_RATE
from schemas import PriceRange

ALL_CATEGORIES = "All"


def _cents(value: float) -> float:
    return round(value, 2)


def cart_totals(lines: Iterable[Tuple[float, int]]) -> Dict[str, Any]:
    """Totals for (unit_price, quantity) pairs.

    Tax is a flat rate on the subtotal. Shipping is free strictly above the
    threshold, and nothing ships for an empty cart.
    """
    subtotal = 0.0
    item_count = 0
    for price, quantity in lines:
        subtotal += float(price) * int(quantity)
        item_count += int(quantity)

    tax = subtotal * TAX_RATE
    if item_count == 0 or subtotal > FREE_SHIPPING_THRESHOLD:
        shipping = 0.0
    else:
        shipping = SHIPPING_FEE

    return {
        "subtotal": _cents(subtotal),
        "tax": _cents(tax),
        "shipping": _cents(shipping),
        "total": _cents(subtotal + tax + shipping),
        "item_count": item_count,
    }


def matches_price_range(price: float, price_range: Optional[str]) -> bool:
    if price_range is None:
        return True
    bucket = PriceRange(price_range)
    if bucket is PriceRange.ALL:
        return True
    if bucket is PriceRange.UNDER_50:
        return price < 50
    if bucket is PriceRange.FROM_50_TO_200:
        return 50 <= price <= 200
    return price > 200


def matches_search(product: Dict[str, Any], search: Optional[str]) -> bool:
    if not search:
        return True
    needle = search.lower()
    for field in ("name", "name_en", "name_ar", "description"):
        value = product.get(field)
        if value and needle in value.lower():
            return True
    return False


def matches_category(product: Dict[str, Any], category_id: Optional[str]) -> bool:
    if not category_id or category_id == ALL_CATEGORIES:
        return True
    return product.get("category_id") == category_id


def filter_products(
    products: Iterable[Dict[str, Any]],
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    price_range: Optional[str] = None,
) -> List[Dict[str, Any]]:
    return [
        p for p in products
        if matches_search(p, search)
        and matches_category(p, category_id)
        and matches_price_range(float(p.get("price", 0)), price_range)
    ]


def low_stock(products: Iterable[Dict[str, Any]], threshold: int = LOW_STOCK_THRESHOLD) -> List[Dict[str, Any]]:
    return [p for p in products if int(p.get("stock", 0)) < threshold]


def next_order_number(existing_count: int) -> str:
    return f"ORD-{existing_count + 1:03d}"
