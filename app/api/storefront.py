import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_optional_db, StorageError
from app.schemas.product import ProductResponse, StorefrontView
from app.services.product_service import ProductService
from app.storefront.render import ALL_CATEGORIES, TEMPLATES_DIR, render_views
from app.storefront.sync import image_root_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storefront", tags=["Storefront"])

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def load_catalog(db: Optional[Session]) -> Tuple[List[dict], Optional[str]]:
    """
    Read the catalog for rendering.

    A failed read yields an empty catalog plus the error text, so the
    storefront never shows stale rows.
    """
    if db is None:
        return [], "Database not connected"
    try:
        products = ProductService(db).list_all()
    except StorageError as e:
        logger.error(f"{e.message}: {e.details}", exc_info=e)
        return [], e.details or e.message
    return [ProductResponse.model_validate(p).model_dump() for p in products], None


@router.get(
    "/view",
    response_model=StorefrontView,
    summary="Rendered storefront",
    description="Public grid and admin list rendered for a category tab and search term."
)
def storefront_view(
    request: Request,
    cat: str = Query(ALL_CATEGORIES, description="Category tab, 'all' for every category"),
    q: str = Query("", description="Case-insensitive name search"),
    db: Optional[Session] = Depends(get_optional_db)
):
    catalog, error = load_catalog(db)
    rendered = render_views(catalog, cat, q, image_root_for(str(request.base_url)))
    return StorefrontView(
        count=len(rendered.products),
        public_html=rendered.public_html,
        admin_html=rendered.admin_html,
        error=error
    )


def shell(
    request: Request,
    full_path: str,
    cat: str = Query(ALL_CATEGORIES),
    q: str = Query(""),
    db: Optional[Session] = Depends(get_optional_db)
):
    """Application shell served for every path not handled elsewhere."""
    catalog, error = load_catalog(db)
    rendered = render_views(catalog, cat, q, image_root_for(str(request.base_url)))
    categories = sorted({p["category"] for p in catalog if p.get("category")})

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "rendered": rendered,
            "categories": categories,
            "active_category": cat,
            "search_term": q,
            "error": error,
            "passcode": get_settings().ADMIN_PASSCODE,
            "all_categories": ALL_CATEGORIES,
        }
    )
