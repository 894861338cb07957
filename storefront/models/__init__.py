"""Models package - exports all SQLAlchemy models."""
from storefront.models.admin_user import AdminUser

# Catalog
from storefront.models.category import Category
from storefront.models.product import Product

# Orders
from storefront.models.order import Order, OrderStatus, allowed_transitions
from storefront.models.order_line import OrderLine

__all__ = [
    'AdminUser',
    'Category', 'Product',
    'Order', 'OrderStatus', 'allowed_transitions', 'OrderLine',
]
