# storefront/catalog/formatting.py

"""Display strings for prices and stock."""


def format_price(price: float) -> str:
    """Format as US dollars, e.g. ``$1,234.50``."""
    sign = "-" if price < 0 else ""
    return f"{sign}${abs(price):,.2f}"


def format_price_range(low: float, high: float) -> str:
    return f"{format_price(low)} - {format_price(high)}"


def get_stock_status_text(
    stock_status: str, stock_count: int | None = None,
) -> str:
    """Human label for a stock status."""
    if stock_status == "in-stock":
        return "In Stock"
    if stock_status == "low-stock":
        return f"Only {stock_count} left" if stock_count else "Low Stock"
    if stock_status == "out-of-stock":
        return "Out of Stock"
    return "Unknown"


def format_category_name(category: str) -> str:
    """Capitalise each word, e.g. ``men's clothing`` -> ``Men's Clothing``."""
    return " ".join(word[:1].upper() + word[1:] for word in category.split(" "))


def truncate_text(text: str, max_length: int) -> str:
    """Cut *text* to *max_length* characters, ending in ``...``."""
    if len(text) <= max_length:
        return text
    return text[: max(max_length - 3, 0)] + "..."


def generate_stars(rating: float) -> str:
    """Five-character star bar with one filled star per whole point."""
    full = int(min(max(rating, 0.0), 5.0))
    return "★" * full + "☆" * (5 - full)
