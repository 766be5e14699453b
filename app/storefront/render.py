"""
Storefront rendering.

Turns a catalog snapshot plus the active category tab and search term into
the two HTML fragments shown by the storefront: the public product grid and
the admin list. Everything here is pure, so the same input always yields the
same markup.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from pathlib import Path
from typing import Any, Iterable, List, Mapping
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape

ALL_CATEGORIES = "all"
DEFAULT_CONDITION = "New"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/150"
CURRENCY = "Ksh"
WHATSAPP_NUMBER = "254740475314"
INTEREST_MESSAGE = "Hi Wesley, I'm interested in {name}"
EMPTY_MESSAGE = "No products found."

# Characters encodeURIComponent leaves as they are
URI_COMPONENT_SAFE = "-_.!~*'()"

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

Product = Mapping[str, Any]


@dataclass
class RenderedCatalog:
    """Output of one render pass."""
    products: List[Product] = field(default_factory=list)
    public_html: str = ""
    admin_html: str = ""


def matches(product: Product, category: str, search_term: str) -> bool:
    """True if the product passes both the category tab and the name search."""
    if category != ALL_CATEGORIES and product.get("category") != category:
        return False
    name = product.get("name") or ""
    return (search_term or "").lower() in name.lower()


def filter_catalog(
    catalog: Iterable[Product],
    category: str = ALL_CATEGORIES,
    search_term: str = ""
) -> List[Product]:
    """Return the visible subset of the catalog, keeping catalog order."""
    return [p for p in (catalog or []) if matches(p, category, search_term)]


def resolve_image_url(image_url: str, image_root: str) -> str:
    """Make a stored image path directly loadable by prefixing the image root."""
    if not image_url:
        return PLACEHOLDER_IMAGE
    if image_url.startswith("http"):
        return image_url
    if not image_url.startswith("/"):
        image_url = "/" + image_url
    return image_root.rstrip("/") + image_url


def format_price(price) -> str:
    """
    Group thousands with commas and keep at most three decimals.

    Values that are not numbers are returned as they are.
    """
    if price is None:
        return ""
    try:
        value = Decimal(str(price).strip())
        if not value.is_finite():
            return str(price)
        # Halves round away from zero, like toLocaleString
        value = value.quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return str(price)
    formatted = f"{value:,.3f}"
    return formatted.rstrip("0").rstrip(".")


def whatsapp_link(name: str) -> str:
    message = quote(INTEREST_MESSAGE.format(name=name or ""), safe=URI_COMPONENT_SAFE)
    return f"https://wa.me/{WHATSAPP_NUMBER}?text={message}"


def card_context(product: Product, image_root: str) -> dict:
    return {
        "id": product.get("id"),
        "name": product.get("name") or "",
        "category": product.get("category") or "",
        "condition": product.get("p_condition") or DEFAULT_CONDITION,
        "image": resolve_image_url(product.get("image_url"), image_root),
        "price": format_price(product.get("price")),
        "link": whatsapp_link(product.get("name")),
    }


def render_views(
    catalog: Iterable[Product],
    category: str = ALL_CATEGORIES,
    search_term: str = "",
    image_root: str = ""
) -> RenderedCatalog:
    """
    Render the public grid and the admin list for the current filters.

    An empty result renders the "no products found" placeholder in the
    public grid and nothing in the admin list.
    """
    visible = filter_catalog(catalog, category, search_term)
    cards = [card_context(p, image_root) for p in visible]

    public_html = env.get_template("storefront/public_grid.html").render(
        cards=cards,
        currency=CURRENCY,
        placeholder=PLACEHOLDER_IMAGE,
        empty_message=EMPTY_MESSAGE,
    )
    admin_html = env.get_template("storefront/admin_list.html").render(cards=cards)

    return RenderedCatalog(products=visible, public_html=public_html, admin_html=admin_html)
