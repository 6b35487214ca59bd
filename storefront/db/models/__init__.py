"""Model module imports for SQLAlchemy relationship registration."""

from storefront.db.models.category import Base
from storefront.db.models.category import Category
from storefront.db.models.product import Product
from storefront.db.models.review import Review
from storefront.db.models.user import User

__all__ = [
    "Base",
    "Category",
    "Product",
    "Review",
    "User",
]
