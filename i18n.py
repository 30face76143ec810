"""
Arabic/English string tables and formatting.

Lookups fall back to English and then to the key itself, so a missing
translation never breaks a response.
"""

import math
from typing import Any, Dict, Optional

from config import DEFAULT_LANGUAGE, SAR_RATE

LANGUAGES = ("ar", "en")
RTL_LANGUAGES = {"ar"}

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "ar": {
        # Navigation
        "nav.dashboard": "لوحة التحكم",
        "nav.products": "المنتجات",
        "nav.categories": "الفئات",
        "nav.orders": "الطلبات",
        "nav.users": "المستخدمين",
        "nav.shop": "المتجر",
        "nav.cart": "السلة",
        "nav.myOrders": "طلباتي",
        "nav.account": "حسابي",
        "nav.adminPanel": "لوحة الإدارة",
        "nav.store": "متجر إلكتروني",

        # Cart
        "cart.title": "سلة التسوق",
        "cart.empty": "سلة التسوق فارغة",
        "cart.emptyDesc": "ابدأ التسوق لإضافة منتجات إلى سلتك",
        "cart.continueShopping": "متابعة التسوق",
        "cart.checkout": "إتمام الطلب",
        "cart.total": "المجموع",
        "cart.subtotal": "المجموع الفرعي",
        "cart.tax": "الضريبة",
        "cart.shipping": "الشحن",
        "cart.free": "مجاني",

        # Filters
        "filters.all": "الكل",
        "filters.category": "الفئة",
        "filters.price": "السعر",
        "filters.sort": "ترتيب حسب",
        "filters.newest": "الأحدث",
        "filters.priceHighLow": "السعر: عالي إلى منخفض",
        "filters.priceLowHigh": "السعر: منخفض إلى عالي",
        "filters.results": "نتيجة",
        "filters.label": "الفلاتر:",

        # Price ranges
        "price.all": "الكل",
        "price.under50": "< 200 ريال",
        "price.50to200": "200-800 ريال",
        "price.over200": "> 800 ريال",

        # Shop
        "shop.noProductsTitle": "لم يتم العثور على منتجات",
        "shop.noProductsDesc": "جرب تعديل الفلاتر أو مصطلحات البحث",
        "shop.resetFilters": "إعادة تعيين الفلاتر",

        # Orders
        "orders.title": "الطلبات",
        "orders.subtitle": "تتبع وأدر طلبات العملاء",
        "orders.status.pending": "قيد الانتظار",
        "orders.status.processing": "معالجة",
        "orders.status.shipped": "تم الشحن",
        "orders.status.delivered": "تم التسليم",
        "orders.status.cancelled": "ملغي",
        "orders.itemSingular": "عنصر",
        "orders.itemPlural": "عناصر",

        # Dashboard
        "dashboard.totalRevenue": "إجمالي الإيرادات",
        "dashboard.totalOrders": "إجمالي الطلبات",
        "dashboard.products": "المنتجات",
        "dashboard.lowStock": "مخزون منخفض",
        "dashboard.inStock": "متوفر",

        # Toasts
        "toast.loginRequired": "يجب تسجيل الدخول أولاً",
        "toast.addedToCart": "تم إضافة المنتج إلى السلة",
        "toast.removedFromCart": "تم إزالة المنتج من السلة",
        "toast.quantityUpdated": "تم تحديث الكمية",
        "toast.cartCleared": "تم إفراغ السلة",
        "toast.error": "حدث خطأ، يرجى المحاولة مرة أخرى",

        # Common
        "common.loading": "جاري التحميل...",
        "common.error": "خطأ",
        "common.success": "نجح",
        "common.cancel": "إلغاء",
        "common.save": "حفظ",
        "common.delete": "حذف",

        # Currency
        "currency.sar": "ريال",
    },
    "en": {
        "nav.dashboard": "Dashboard",
        "nav.products": "Products",
        "nav.categories": "Categories",
        "nav.orders": "Orders",
        "nav.users": "Users",
        "nav.shop": "Shop",
        "nav.cart": "Cart",
        "nav.myOrders": "My Orders",
        "nav.account": "Account",
        "nav.adminPanel": "Admin Panel",
        "nav.store": "Store",

        "cart.title": "Shopping Cart",
        "cart.empty": "Your cart is empty",
        "cart.emptyDesc": "Start shopping to add items to your cart",
        "cart.continueShopping": "Continue Shopping",
        "cart.checkout": "Checkout",
        "cart.total": "Total",
        "cart.subtotal": "Subtotal",
        "cart.tax": "Tax",
        "cart.shipping": "Shipping",
        "cart.free": "Free",

        "filters.all": "All",
        "filters.category": "Category",
        "filters.price": "Price",
        "filters.sort": "Sort by",
        "filters.newest": "Newest",
        "filters.priceHighLow": "Price: High to Low",
        "filters.priceLowHigh": "Price: Low to High",
        "filters.results": "results",
        "filters.label": "Filters:",

        "price.all": "All",
        "price.under50": "< 200 SAR",
        "price.50to200": "200-800 SAR",
        "price.over200": "> 800 SAR",

        "shop.noProductsTitle": "No products found",
        "shop.noProductsDesc": "Try adjusting filters or search terms",
        "shop.resetFilters": "Reset Filters",

        "orders.title": "Orders",
        "orders.subtitle": "Track and manage customer orders",
        "orders.status.pending": "Pending",
        "orders.status.processing": "Processing",
        "orders.status.shipped": "Shipped",
        "orders.status.delivered": "Delivered",
        "orders.status.cancelled": "Cancelled",
        "orders.itemSingular": "item",
        "orders.itemPlural": "items",

        "dashboard.totalRevenue": "Total Revenue",
        "dashboard.totalOrders": "Total Orders",
        "dashboard.products": "Products",
        "dashboard.lowStock": "Low Stock",
        "dashboard.inStock": "In Stock",

        "toast.loginRequired": "Please sign in first",
        "toast.addedToCart": "Product added to cart",
        "toast.removedFromCart": "Product removed from cart",
        "toast.quantityUpdated": "Quantity updated",
        "toast.cartCleared": "Cart cleared",
        "toast.error": "An error occurred, please try again",

        "common.loading": "Loading...",
        "common.error": "Error",
        "common.success": "Success",
        "common.cancel": "Cancel",
        "common.save": "Save",
        "common.delete": "Delete",

        "currency.sar": "SAR",
    },
}

_ARABIC_DIGITS = str.maketrans("0123456789,.", "٠١٢٣٤٥٦٧٨٩٬٫")


def normalize_language(lang: Optional[str]) -> str:
    if lang:
        code = lang.strip().lower()[:2]
        if code in LANGUAGES:
            return code
    return DEFAULT_LANGUAGE


def resolve_language(lang: Optional[str] = None, accept_language: Optional[str] = None) -> str:
    """Pick the response language: explicit parameter, then the first
    supported Accept-Language tag, then the store default."""
    if lang and lang.strip().lower()[:2] in LANGUAGES:
        return lang.strip().lower()[:2]
    if accept_language:
        for part in accept_language.split(","):
            tag = part.split(";")[0].strip().lower()[:2]
            if tag in LANGUAGES:
                return tag
    return DEFAULT_LANGUAGE


def is_rtl(lang: str) -> bool:
    return lang in RTL_LANGUAGES


def translate(key: str, lang: str = DEFAULT_LANGUAGE) -> str:
    table = TRANSLATIONS.get(normalize_language(lang), {})
    if key in table:
        return table[key]
    return TRANSLATIONS["en"].get(key, key)


def format_number(number: float, lang: str = DEFAULT_LANGUAGE) -> str:
    if float(number).is_integer():
        text = f"{int(number):,}"
    else:
        text = f"{number:,.2f}"
    if normalize_language(lang) == "ar":
        return text.translate(_ARABIC_DIGITS)
    return text


def format_price(usd: float, lang: str = DEFAULT_LANGUAGE) -> str:
    """Price in whole riyals, the way the storefront displays it."""
    sar = math.floor(usd * SAR_RATE + 0.5)
    return f"{format_number(sar, lang)} {translate('currency.sar', lang)}"


def localize_category(category: Optional[Dict[str, Any]], lang: str) -> Optional[Dict[str, Any]]:
    if not category:
        return category
    localized = dict(category)
    name = category.get("name_ar") if lang == "ar" else category.get("name_en")
    if name:
        localized["name"] = name
    return localized


def localize_product(product: Dict[str, Any], lang: str) -> Dict[str, Any]:
    localized = dict(product)
    suffix = "ar" if lang == "ar" else "en"
    name = product.get(f"name_{suffix}")
    description = product.get(f"description_{suffix}")
    if name:
        localized["name"] = name
    if description:
        localized["description"] = description
    if product.get("category"):
        localized["category"] = localize_category(product["category"], lang)
    return localized


def catalog(lang: str) -> Dict[str, Any]:
    code = normalize_language(lang)
    strings = dict(TRANSLATIONS["en"])
    strings.update(TRANSLATIONS[code])
    return {"lang": code, "rtl": is_rtl(code), "strings": strings}
