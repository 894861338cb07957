"""
Delivery charge and order total calculation.

Pure functions: no session, no side effects. The same rules are used to quote a
cart before checkout and to compute the authoritative delivery charge inside
the checkout transaction.
"""
from decimal import Decimal
from typing import Iterable, List, Dict, Any, Tuple, Union

from sqlalchemy.orm import Session

Number = Union[Decimal, int, float, str, None]

ZERO = Decimal('0.00')


def _to_decimal(value: Number) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_delivery(delivery_charges: Number, increase_with_qty: bool, quantity: int) -> Decimal:
    """
    Delivery contribution of one line item.

    - No charge configured -> 0
    - Charge scales with quantity -> charge * quantity
    - Otherwise the charge applies once, whatever the quantity
    """
    charge = _to_decimal(delivery_charges)
    if not charge:
        return ZERO
    if increase_with_qty:
        return (charge * quantity).quantize(Decimal('0.01'))
    return charge.quantize(Decimal('0.01'))


def delivery_for_product(product, quantity: int) -> Decimal:
    """compute_delivery() using a Product's policy fields."""
    return compute_delivery(product.delivery_charges, product.increase_delivery_with_qty, quantity)


def compute_order_delivery(lines: Iterable[Tuple[Any, int]]) -> Decimal:
    """
    Sum delivery over (product, quantity) pairs.

    Every line contributes independently, duplicates of the same product included.
    """
    total = ZERO
    for product, quantity in lines:
        total += delivery_for_product(product, quantity)
    return total


def compute_subtotal(lines: Iterable[Tuple[Number, int]]) -> Decimal:
    """Sum of unit price * quantity over (price, quantity) pairs."""
    total = ZERO
    for price, quantity in lines:
        total += _to_decimal(price) * quantity
    return total.quantize(Decimal('0.01'))


def quote_cart(session: Session, items: List[Dict[str, int]]) -> Dict[str, Any]:
    """
    Price a cart without reserving anything (checkout preview).

    Args:
        items: [{'product_id': int, 'quantity': int}, ...] already validated

    Raises:
        ProductNotFoundError: If an item references an unknown product
    """
    from storefront.services.catalog_service import lookup_product

    lines = []
    priced = []
    delivery_total = ZERO
    for item in items:
        product = lookup_product(session, item['product_id'])
        quantity = item['quantity']
        delivery = delivery_for_product(product, quantity)
        delivery_total += delivery
        priced.append((product.price, quantity))
        lines.append({
            'product': product.id,
            'name': product.name,
            'quantity': quantity,
            'price': float(product.price),
            'deliveryCharges': float(delivery),
            'available': product.stock,
        })

    subtotal = compute_subtotal(priced)
    return {
        'items': lines,
        'subtotal': float(subtotal),
        'deliveryCharges': float(delivery_total),
        'totalAmount': float(subtotal + delivery_total),
    }
