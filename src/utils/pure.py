from typing import Dict, Iterable, List, Literal, Optional, Sequence

from db.models import Order, Product
from utils.config import CURRENCY

ALL_CATEGORIES = "All Categories"
ANY_SIZE = "Any Size"

SIZE_OPTIONS: List[str] = [ANY_SIZE, "S", "M", "L", "XL"]
SORT_OPTIONS: Dict[str, str] = {
    "relevance": "Relevance",
    "price-asc": "Price: Low to High",
    "price-desc": "Price: High to Low",
}
DEFAULT_CATEGORIES: List[str] = ["Hoodies", "Shirts", "Track Pants", "Trouser"]


def filter_products(
    products: Sequence[Product],
    query: str = "",
    category: str = ALL_CATEGORIES,
    size: str = ANY_SIZE,
    sort: str = "relevance",
) -> List[Product]:
    """
    Narrow the catalog down to what the shopper asked for.

    Category, size and name filters are applied in that order, then the
    sort. Filters keep catalog order; both price sorts are stable, any other
    sort mode leaves the filtered order alone.
    """
    items = list(products)

    if category != ALL_CATEGORIES:
        items = [p for p in items if p.category == category]

    if size != ANY_SIZE:
        items = [p for p in items if size in (p.sizes or [])]

    if query.strip():
        q = query.lower()
        items = [p for p in items if q in p.name.lower()]

    if sort == "price-asc":
        items.sort(key=lambda p: p.price)
    elif sort == "price-desc":
        items.sort(key=lambda p: p.price, reverse=True)

    return items


def category_options(products: Iterable[Product]) -> List[str]:
    """Sentinel first, then each category once, in catalog order."""
    seen: List[str] = []
    for p in products:
        if p.category and p.category not in seen:
            seen.append(p.category)
    return [ALL_CATEGORIES, *(seen or DEFAULT_CATEGORIES)]


def dashboard_stats(orders: Sequence[Order], products: Sequence[Product]) -> Dict:
    return {
        "total_revenue": sum(o.total for o in orders),
        "total_orders": len(orders),
        "total_products": len(products),
        "total_customers": len({o.email for o in orders}),
    }


def format_price(amount: float) -> str:
    return f"{CURRENCY} {amount:,.2f}"


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of strings.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = list(map(str, headers))
    # pipes inside cells would break the table
    rows = [[str(cell).replace("|", "\\|") for cell in row] for row in rows]

    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {
        "l": ":---",
        "c": ":---:",
        "r": "---:",
    }

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(align_map[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(row) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])
