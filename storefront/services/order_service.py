"""
Order placement service with transactional logic.

Checkout runs as one unit of work on the session it is given:
lookup -> reserve stock -> accumulate delivery, for every line item in the
submitted order, then the order row is written and everything is committed.
Any failure rolls the whole session back, so no stock decrement survives an
aborted order.
"""
import enum
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from werkzeug.datastructures import MultiDict

from storefront.exceptions import (
    BusinessLogicError, NotFoundError, ValidationError,
    OrderPlacementError, TransactionConflictError
)
from storefront.models import Order, OrderLine, OrderStatus, allowed_transitions
from storefront.services.catalog_service import lookup_product, resolve_products, invalidate_catalog_cache
from storefront.services.delivery_service import ZERO, compute_subtotal, delivery_for_product
from storefront.services.stock_service import reserve_stock

logger = logging.getLogger(__name__)

PRICING_MODES = ('client', 'server')

# Column limits: BigInteger ids, Integer quantities, Numeric(10,2) prices, Numeric(12,2) totals
MAX_PRODUCT_ID = 2 ** 63 - 1
MAX_QUANTITY = 2 ** 31 - 1
MAX_PRICE = Decimal('99999999.99')
MAX_TOTAL = Decimal('9999999999.99')

SHIPPING_FIELDS = ('customerName', 'phone', 'email', 'address', 'city', 'province', 'postalCode')

# SQLSTATE codes for serialization failure and deadlock
CONFLICT_SQLSTATES = {'40001', '40P01'}


class TransactionState(enum.Enum):
    IDLE = 'Idle'
    ACTIVE = 'Active'
    COMMITTED = 'Committed'
    ABORTED = 'Aborted'


# =====================================================
# PAYLOAD VALIDATION
# =====================================================

def parse_checkout_payload(payload: Any, pricing_mode: str = 'client') -> Dict[str, Any]:
    """
    Validate a checkout submission and normalize it into an order draft.

    Raises:
        ValidationError: Missing contact/shipping fields or malformed items
    """
    if not isinstance(payload, dict):
        raise ValidationError('Invalid order payload')

    from storefront.forms.checkout_forms import CheckoutForm

    formdata = MultiDict({
        field: str(payload[field]).strip()
        for field in SHIPPING_FIELDS
        if payload.get(field) is not None
    })
    form = CheckoutForm(formdata=formdata)
    if not form.validate():
        raise ValidationError(form.first_error(), payload={'errors': form.errors})

    require_prices = pricing_mode == 'client'
    items = _parse_items(payload.get('items'), require_prices=require_prices)
    total_amount = _parse_amount(payload.get('totalAmount'), 'totalAmount', required=require_prices, limit=MAX_TOTAL)

    return {
        'customer_name': form.customerName.data,
        'phone': form.phone.data,
        'email': form.email.data or None,
        'address': form.address.data,
        'city': form.city.data,
        'province': form.province.data,
        'postal_code': form.postalCode.data or None,
        'items': items,
        'total_amount': total_amount,
    }


def parse_cart_items(raw_items: Any) -> List[Dict[str, Any]]:
    """Validate a bare item list (used by the quote endpoint)."""
    return _parse_items(raw_items, require_prices=False)


def _parse_items(raw_items: Any, require_prices: bool) -> List[Dict[str, Any]]:
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError('Order must contain at least one item')

    items = []
    for index, raw in enumerate(raw_items, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f'Item {index} is invalid')

        product_id = _parse_positive_int(
            raw.get('product', raw.get('productId')), f'Item {index} product', MAX_PRODUCT_ID
        )
        quantity = _parse_positive_int(raw.get('quantity'), f'Item {index} quantity', MAX_QUANTITY)
        price = _parse_amount(raw.get('price'), f'Item {index} price', required=require_prices, limit=MAX_PRICE)

        items.append({'product_id': product_id, 'quantity': quantity, 'price': price})
    return items


def _parse_positive_int(value: Any, label: str, maximum: int) -> int:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f'{label} is required')
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f'{label} must be a whole number')
        value = int(value)
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f'{label} must be a whole number')
    if number <= 0:
        raise ValidationError(f'{label} must be greater than 0')
    if number > maximum:
        raise ValidationError(f'{label} must not exceed {maximum}')
    return number


def _parse_amount(value: Any, label: str, required: bool, limit: Decimal) -> Optional[Decimal]:
    if value is None or value == '':
        if required:
            raise ValidationError(f'{label} is required')
        return None
    if isinstance(value, bool):
        raise ValidationError(f'{label} must be a number')
    try:
        amount = Decimal(str(value))
        if not amount.is_finite() or amount < 0:
            raise ValidationError(f'{label} must be a non-negative number')
        if amount > limit:
            raise ValidationError(f'{label} must not exceed {limit}')
        return amount.quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{label} must be a number')


# =====================================================
# ORDER RECORDER
# =====================================================

def record_order(session: Session, draft: Dict[str, Any], delivery_charges: Decimal, subtotal: Decimal) -> Order:
    """
    Build and persist the order inside the caller's transaction.

    Line items keep the unit prices carried by the draft; nothing is re-read
    from the catalog here. total_amount = subtotal + delivery_charges.
    """
    order = Order(
        customer_name=draft['customer_name'],
        phone=draft['phone'],
        email=draft.get('email'),
        address=draft['address'],
        city=draft['city'],
        province=draft['province'],
        postal_code=draft.get('postal_code'),
        total_amount=(subtotal + delivery_charges).quantize(Decimal('0.01')),
        delivery_charges=delivery_charges.quantize(Decimal('0.01')),
        status=OrderStatus.PENDING
    )
    for position, item in enumerate(draft['items']):
        order.lines.append(OrderLine(
            position=position,
            product_id=item['product_id'],
            quantity=item['quantity'],
            price=item['price']
        ))

    session.add(order)
    session.flush()
    return order


# =====================================================
# TRANSACTION COORDINATOR
# =====================================================

class OrderTransaction:
    """
    Single-use unit of work for one order submission.

    States: Idle -> Active -> Committed | Aborted. A new submission needs a new
    instance; no retries are attempted.
    """

    def __init__(self, session: Session, pricing_mode: str = 'client'):
        if pricing_mode not in PRICING_MODES:
            raise ValueError(f'Unknown pricing mode: {pricing_mode}')
        self.session = session
        self.pricing_mode = pricing_mode
        self.state = TransactionState.IDLE
        self.order: Optional[Order] = None

    def execute(self, draft: Dict[str, Any]) -> Order:
        """Reserve every line item and record the order, all or nothing."""
        if self.state is not TransactionState.IDLE:
            raise BusinessLogicError('This order transaction has already been used')
        self.state = TransactionState.ACTIVE

        try:
            delivery_charges = ZERO
            for item in draft['items']:
                product = lookup_product(self.session, item['product_id'], for_update=True)
                reserve_stock(self.session, product, item['quantity'])
                delivery_charges += delivery_for_product(product, item['quantity'])
                if self.pricing_mode == 'server':
                    item['price'] = product.price

            subtotal = self._subtotal(draft)
            order = record_order(self.session, draft, delivery_charges, subtotal)
            self.session.commit()

        except OrderPlacementError as e:
            self._abort()
            logger.info(f"[ORDER] Checkout aborted: {e.message}")
            raise
        except DBAPIError as e:
            self._abort()
            if _is_conflict(e):
                logger.warning(f"[ORDER] Checkout aborted by concurrent update: {e}")
                raise TransactionConflictError() from e
            logger.error(f"[ORDER] Storage error during checkout: {e}", exc_info=True)
            raise OrderPlacementError(f'Could not place order: {e.orig}') from e
        except SQLAlchemyError as e:
            self._abort()
            logger.error(f"[ORDER] Storage error during checkout: {e}", exc_info=True)
            raise OrderPlacementError(f'Could not place order: {e}') from e
        except Exception:
            self._abort()
            raise

        self.state = TransactionState.COMMITTED
        self.order = order
        logger.info(
            f"[ORDER] Order {order.id} committed: {len(draft['items'])} item(s), "
            f"total {order.total_amount}, delivery {order.delivery_charges}"
        )
        invalidate_catalog_cache()
        return order

    def _subtotal(self, draft: Dict[str, Any]) -> Decimal:
        if self.pricing_mode == 'server':
            subtotal = compute_subtotal((item['price'], item['quantity']) for item in draft['items'])
            claimed = draft.get('total_amount')
            if claimed is not None and claimed != subtotal:
                logger.warning(f"[ORDER] Client subtotal {claimed} differs from catalog subtotal {subtotal}")
            return subtotal
        return draft['total_amount']

    def _abort(self):
        self.session.rollback()
        self.state = TransactionState.ABORTED


def _is_conflict(error: DBAPIError) -> bool:
    orig = getattr(error, 'orig', None)
    sqlstate = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
    if sqlstate in CONFLICT_SQLSTATES:
        return True
    return 'database is locked' in str(orig or error).lower()


def get_pricing_mode() -> str:
    """Configured pricing mode, falling back to the client-trusted default."""
    from flask import current_app, has_app_context
    if has_app_context():
        return current_app.config.get('ORDER_PRICING_MODE', 'client')
    return 'client'


def place_order(session: Session, payload: Any, pricing_mode: Optional[str] = None) -> Order:
    """
    Validate a checkout payload and run it through a fresh OrderTransaction.

    Raises:
        ValidationError: Before any stock is touched
        OrderPlacementError: Product missing, stock shortfall, conflict or storage error
    """
    mode = pricing_mode or get_pricing_mode()
    draft = parse_checkout_payload(payload, pricing_mode=mode)
    return OrderTransaction(session, pricing_mode=mode).execute(draft)


# =====================================================
# ADMIN OPERATIONS
# =====================================================

def serialize_orders(session: Session, orders: List[Order]) -> List[Dict[str, Any]]:
    """Serialize orders, resolving line products that still exist."""
    product_ids = {line.product_id for order in orders for line in order.lines}
    products = resolve_products(session, product_ids)
    return [order.to_dict(products) for order in orders]


def list_orders(session: Session, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """All orders newest first, optionally filtered by status."""
    query = session.query(Order).options(selectinload(Order.lines))
    if status:
        status_enum = _parse_status(status)
        query = query.filter(Order.status == status_enum)
    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return serialize_orders(session, orders)


def get_order(session: Session, order_id: int) -> Order:
    order = session.query(Order).options(selectinload(Order.lines)).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError(f'Order #{order_id} not found')
    return order


def update_order_status(session: Session, order_id: int, status: Any) -> Order:
    """
    Move an order to a new status.

    Fulfilment only moves forward (Pending -> Processing -> Shipped -> Delivered)
    and Cancelled is reachable from any non-terminal status. Setting the current
    status again is a no-op. Stock is never returned by a status change.
    """
    new_status = _parse_status(status)
    order = get_order(session, order_id)

    if new_status == order.status:
        return order
    if new_status not in allowed_transitions(order.status):
        raise BusinessLogicError(
            f'Cannot change order #{order.id} from {order.status.value} to {new_status.value}'
        )

    previous = order.status
    try:
        order.status = new_status
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise

    logger.info(f"[ORDER] Order {order.id} status {previous.value} -> {new_status.value}")
    return order


def delete_order(session: Session, order_id: int) -> None:
    """Delete an order and its lines (stock is not returned)."""
    order = get_order(session, order_id)
    try:
        session.delete(order)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    logger.info(f"[ORDER] Order {order_id} deleted")


def _parse_status(value: Any) -> OrderStatus:
    status = OrderStatus.from_value(value) if isinstance(value, str) else None
    if status is None:
        allowed = ', '.join(s.value for s in OrderStatus)
        raise ValidationError(f'Invalid status. Allowed values: {allowed}')
    return status
