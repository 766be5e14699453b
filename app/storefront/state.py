from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.storefront.render import ALL_CATEGORIES

SHOP = "shop"
ADMIN = "admin"
SECTIONS = (SHOP, ADMIN)

SUBMIT_LABEL = "Post to Showroom"
BUSY_LABEL = "Processing..."


@dataclass
class FormState:
    """Add-listing form: the submit control and the values typed so far."""
    fields: Dict[str, str] = field(default_factory=dict)
    submit_enabled: bool = True
    submit_label: str = SUBMIT_LABEL

    def set_busy(self) -> None:
        self.submit_enabled = False
        self.submit_label = BUSY_LABEL

    def restore(self) -> None:
        self.submit_enabled = True
        self.submit_label = SUBMIT_LABEL

    def clear(self) -> None:
        self.fields = {}


@dataclass
class ViewState:
    """
    Which section is visible and whether admin navigation is revealed.

    Exactly one of "shop" and "admin" is shown at a time.
    """
    section: str = SHOP
    admin_nav_visible: bool = False

    def show(self, section: str) -> None:
        if section not in SECTIONS:
            raise ValueError(f"Unknown section: {section}")
        self.section = section


@dataclass
class AppState:
    """
    In-memory state of one storefront client.

    Only changed through the actions below so renders stay reproducible.
    """
    catalog: List[Dict[str, Any]] = field(default_factory=list)
    active_category: str = ALL_CATEGORIES
    search_term: str = ""
    view: ViewState = field(default_factory=ViewState)
    form: FormState = field(default_factory=FormState)
    last_error: Optional[str] = None

    def replace_catalog(self, products: List[Dict[str, Any]]) -> None:
        self.catalog = list(products)
        self.last_error = None

    def clear_catalog(self, error: str) -> None:
        self.catalog = []
        self.last_error = error

    def set_filter(self, category: str) -> None:
        self.active_category = category or ALL_CATEGORIES

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""

    def is_active_tab(self, category: str) -> bool:
        return self.active_category == category


def check_admin_passcode(entered: Optional[str], passcode: str) -> Optional[bool]:
    """
    Compare a prompt answer with the admin passcode.

    This only toggles the admin UI and is not access control.

    Returns:
        None if the prompt was cancelled, otherwise whether it matched
    """
    if entered is None:
        return None
    return entered == passcode
