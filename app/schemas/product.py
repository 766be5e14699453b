from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: Optional[str] = Field(None, description="Product name")
    category: Optional[str] = Field(None, description="Category label")
    price: Optional[str] = Field(None, description="Price as entered")


class ProductCreate(ProductBase):
    """Fields submitted with the multipart create form."""
    condition: Optional[str] = Field(None, description="Item condition")
    desc: Optional[str] = Field(None, description="Free-text description")


class ProductResponse(ProductBase):
    """Schema for product response including all stored columns."""
    id: int
    p_condition: Optional[str] = None
    description: Optional[str] = None
    image_url: str

    model_config = ConfigDict(from_attributes=True)


class ProductCreated(BaseModel):
    message: str = "Success"
    id: int


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error payload returned with 4xx/5xx responses."""
    error: str
    details: Optional[str] = None


class StorefrontView(BaseModel):
    """Rendered storefront fragments for one filter/search combination."""
    count: int
    public_html: str
    admin_html: str
    error: Optional[str] = None
