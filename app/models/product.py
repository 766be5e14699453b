from sqlalchemy import Column, Integer, String, Text

from app.database import Base


class Product(Base):
    """
    Product listing shown in the storefront.

    Attributes:
        id: Unique identifier assigned by the store
        name: Product name
        category: Category label used by the storefront tabs
        p_condition: Item condition ("New", "Used", ...)
        price: Price as entered, kept as text
        description: Free-text description
        image_url: Public path of the uploaded image, or an absolute URL
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(255))
    category = Column(String(100))
    p_condition = Column(String(50))
    price = Column(String(50))
    description = Column(Text)
    image_url = Column(String(512), nullable=False)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
