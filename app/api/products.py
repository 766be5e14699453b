from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db, get_optional_db
from app.services.image_store import ImageStore, get_image_store
from app.services.product_service import ProductService
from app.schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductCreated,
    MessageResponse,
    ErrorResponse
)

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=List[ProductResponse],
    responses={500: {"model": ErrorResponse}},
    summary="List all products",
    description="Get every product, most recent first."
)
def list_products(db: Session = Depends(get_db)):
    """Get the full catalog ordered by ID descending."""
    service = ProductService(db)
    return service.list_all()


@router.post(
    "",
    response_model=ProductCreated,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Create a new product",
    description="Create a listing from a multipart form with a required image file."
)
def create_product(
    image: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    condition: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    desc: Optional[str] = Form(None),
    db: Optional[Session] = Depends(get_optional_db),
    images: ImageStore = Depends(get_image_store)
):
    """
    Create a new product.

    - **image**: Product image file (required)
    - **name**, **category**, **condition**, **price**, **desc**: listing fields

    The image is stored as `/uploads/prod_<timestamp><ext>`. A missing image
    is rejected even when the database is not connected.
    """
    service = ProductService(db, images)
    product_data = ProductCreate(
        name=name,
        category=category,
        condition=condition,
        price=price,
        desc=desc
    )

    has_image = image is not None and bool(image.filename)
    product = service.create(
        product_data,
        image.file if has_image else None,
        image.filename if has_image else None
    )

    return ProductCreated(id=product.id)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Delete a product",
    description="Delete a product by ID. Succeeds even if the ID does not exist."
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Delete a product."""
    service = ProductService(db)
    service.delete(product_id)
    return MessageResponse(message="Deleted")
