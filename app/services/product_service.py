from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, BinaryIO
import logging

from app.database import StorageError, not_connected_error
from app.models.product import Product
from app.schemas.product import ProductCreate
from app.services.image_store import ImageStore

logger = logging.getLogger(__name__)


class ImageRequiredError(Exception):
    """Exception raised when a listing is submitted without an image file."""
    pass


class ProductService:
    """
    Service class for catalog operations.

    This service handles:
    - Listing every product, newest first
    - Creating a product together with its uploaded image
    - Deleting products by ID

    Store failures are rolled back and re-raised as StorageError so the
    API layer can report them with the underlying message.
    """

    def __init__(self, db: Session, images: Optional[ImageStore] = None):
        self.db = db
        self.images = images

    def list_all(self) -> List[Product]:
        """
        Get every product ordered by ID descending.

        Raises:
            StorageError: If the query fails
        """
        try:
            return self.db.query(Product).order_by(Product.id.desc()).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Database error", str(e)) from e

    def create(
        self,
        product_data: ProductCreate,
        image: Optional[BinaryIO],
        image_name: Optional[str] = None
    ) -> Product:
        """
        Create a new product.

        The image is written first; if the insert then fails the file stays
        on disk.

        Args:
            product_data: Form fields of the listing
            image: Uploaded image stream (required)
            image_name: Original file name of the upload

        Returns:
            Created product instance

        Raises:
            ImageRequiredError: If no image was uploaded
            StorageError: If the database is not connected or the insert fails
        """
        if image is None:
            raise ImageRequiredError("Image file is required")
        if self.db is None:
            raise not_connected_error()

        image_url = self.images.save(image, image_name)

        product = Product(
            name=product_data.name,
            category=product_data.category,
            p_condition=product_data.condition,
            price=product_data.price,
            description=product_data.desc,
            image_url=image_url,
        )
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to save to database", str(e)) from e

        logger.info(f"Created product #{product.id} ({product.name})")
        return product

    def delete(self, product_id: int) -> None:
        """
        Delete a product by ID.

        Deleting an ID that does not exist is not an error. The image file
        of the product is kept.

        Raises:
            StorageError: If the delete statement fails
        """
        try:
            deleted = (
                self.db.query(Product)
                .filter(Product.id == product_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to delete item", str(e)) from e

        logger.info(f"Deleted product #{product_id} (rows affected: {deleted})")
