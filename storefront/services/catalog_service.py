"""
Catalog read path.

lookup_product() is the reader used inside the checkout transaction: it always
goes to the database through the session it is given and never touches the cache.
The listing helpers back the public storefront endpoints and are memoized.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from storefront.exceptions import BusinessLogicError, NotFoundError, ProductNotFoundError
from storefront.models import Category, Product

logger = logging.getLogger(__name__)

CATALOG_CACHE_SCOPE = 'catalog'


def lookup_product(session: Session, product_id: int, for_update: bool = False) -> Product:
    """
    Fetch a product within the caller's transaction.

    Args:
        session: Session that owns the current unit of work
        product_id: Product identifier
        for_update: Lock the row (SELECT ... FOR UPDATE) until the transaction ends

    Raises:
        ProductNotFoundError: If the product does not exist
    """
    query = session.query(Product).filter(Product.id == product_id)
    if for_update:
        query = query.with_for_update()
    # populate_existing: never hand back an identity-map copy older than the row
    product = query.populate_existing().first()
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


def resolve_products(session: Session, product_ids: Iterable[int]) -> Dict[int, Product]:
    """Batch-load products by id; ids that no longer exist are simply absent."""
    ids = {pid for pid in product_ids if pid is not None}
    if not ids:
        return {}
    products = session.query(Product).filter(Product.id.in_(ids)).all()
    return {p.id: p for p in products}


def get_product(session: Session, product_id: int) -> Product:
    """Fetch a product for display, raising a 404 when missing."""
    product = session.query(Product).options(
        joinedload(Product.category)
    ).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError('Product not found')
    return product


def list_products(session: Session, category_id: Optional[int] = None) -> List[dict]:
    """Serialized product listing, optionally filtered by category."""
    def load():
        query = session.query(Product).options(joinedload(Product.category))
        if category_id:
            query = query.filter(Product.category_id == category_id)
        return [p.to_dict() for p in query.order_by(Product.id).all()]

    key = f'products:{category_id or "all"}'
    return _memoize('products', key, load, ttl_key='CACHE_PRODUCTS_TTL')


def list_categories(session: Session) -> List[dict]:
    """Serialized category listing."""
    def load():
        return [c.to_dict() for c in session.query(Category).order_by(Category.name).all()]

    return _memoize('categories', 'all', load, ttl_key='CACHE_CATEGORIES_TTL')


def restock_product(session: Session, product_id: int, quantity: int) -> Product:
    """
    Add units to a product's stock and commit.

    This is the only path that increases stock; checkout only decrements it.
    """
    if quantity <= 0:
        raise BusinessLogicError('Restock quantity must be greater than 0')

    product = lookup_product(session, product_id, for_update=True)
    try:
        product.stock = Product.stock + quantity
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(product)
    logger.info(f"[CATALOG] Restocked product {product.id} (+{quantity}) -> {product.stock}")
    invalidate_catalog_cache()
    return product


def create_category(session: Session, name: str) -> Category:
    """Create a category (slug derived from the name), or return the existing one."""
    slug = Category.slugify(name)
    category = session.query(Category).filter_by(slug=slug).first()
    if category:
        return category
    category = Category(name=name, slug=slug)
    session.add(category)
    session.flush()
    return category


def seed_catalog(session: Session) -> int:
    """
    Load the demo catalog when the product table is empty.

    Returns:
        Number of products created (0 if the catalog already had data)
    """
    if session.query(Product).count() > 0:
        return 0

    electronics = create_category(session, 'Electronics')
    fashion = create_category(session, 'Fashion')
    create_category(session, 'Home & Living')
    photography = create_category(session, 'Photography')
    furniture = create_category(session, 'Furniture')

    products = [
        dict(name='Wireless Headphones', description='Premium noise-cancelling headphones',
             price=Decimal('25000'), category=electronics, stock=50, delivery_charges=Decimal('200')),
        dict(name='Smart Watch', description='Fitness tracker and smartwatch',
             price=Decimal('15000'), category=electronics, stock=30),
        dict(name='Professional Camera Lens',
             description='Capture stunning visuals with this 50mm f/1.8 prime lens.',
             price=Decimal('899.99'), category=photography, stock=5),
        dict(name='Designer Sunglasses', description='UV400 protection with durable frames.',
             price=Decimal('199.00'), category=fashion, stock=100),
        dict(name='Smart Fitness Tracker', description='Heart rate monitoring, sleep tracking and GPS.',
             price=Decimal('99.95'), category=electronics, stock=75),
        dict(name='Ergonomic Office Chair', description='Adjustable lumbar support and breathable mesh back.',
             price=Decimal('249.00'), category=furniture, stock=15,
             delivery_charges=Decimal('500'), increase_delivery_with_qty=True),
    ]
    try:
        for data in products:
            session.add(Product(**data))
        session.commit()
    except Exception:
        session.rollback()
        raise

    invalidate_catalog_cache()
    return len(products)


def invalidate_catalog_cache() -> None:
    """Drop cached listings after stock or catalog changes."""
    try:
        from storefront.services.cache_service import get_cache
        cache = get_cache()
        cache.invalidate_module(CATALOG_CACHE_SCOPE, 'products')
        cache.invalidate_module(CATALOG_CACHE_SCOPE, 'categories')
    except Exception as e:
        logger.warning(f"[CATALOG] Cache invalidation skipped: {e}")


def _memoize(module: str, key: str, loader, ttl_key: str):
    from flask import current_app
    from storefront.services.cache_service import get_cache
    try:
        cache = get_cache()
    except RuntimeError:
        return loader()
    return cache.memoize(CATALOG_CACHE_SCOPE, module, key, loader, ttl=current_app.config.get(ttl_key))
