"""Stock reservation inside a checkout transaction."""
import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from storefront.exceptions import BusinessLogicError, InsufficientStockError, ProductNotFoundError
from storefront.models import Product

logger = logging.getLogger(__name__)


def reserve_stock(session: Session, product: Product, quantity: int) -> int:
    """
    Validate availability and decrement stock for one line item.

    The decrement is a single conditional UPDATE (stock >= quantity), so two
    transactions racing for the last units cannot both succeed even when they
    read the same stock level beforehand. The change stays inside the caller's
    transaction: visible to later reservations on the same session, invisible
    to other sessions until commit.

    Args:
        session: Session that owns the current unit of work
        product: Product returned by the catalog lookup in the same transaction
        quantity: Units requested (positive integer)

    Returns:
        Remaining stock after the reservation

    Raises:
        ProductNotFoundError: Product row no longer exists
        InsufficientStockError: Not enough units; message reports what is available
    """
    if quantity <= 0:
        raise BusinessLogicError('Quantity must be greater than 0')

    result = session.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        current = session.query(Product.stock).filter(Product.id == product.id).scalar()
        if current is None:
            raise ProductNotFoundError(product.id)
        logger.info(
            f"[STOCK] Shortfall for product {product.id}: requested {quantity}, available {current}"
        )
        raise InsufficientStockError(product.name, quantity, current)

    session.expire(product, ['stock'])
    remaining = product.stock
    logger.debug(f"[STOCK] Reserved {quantity} of product {product.id}, remaining {remaining}")
    return remaining
