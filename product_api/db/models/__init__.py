from product_api.db.models.product import Product
from product_api.db.models.user import User

__all__ = ["Product", "User"]
