"""
Orders Blueprint - checkout and back-office order management.

Routes:
- POST   /api/orders        - Checkout (public)
- POST   /api/orders/quote  - Delivery/total preview (public)
- GET    /api/orders        - Order list, newest first (admin)
- GET    /api/orders/<id>   - Order detail (admin)
- PUT    /api/orders/<id>   - Status update (admin)
- DELETE /api/orders/<id>   - Delete order (admin)
"""
from flask import Blueprint, request, jsonify, current_app, Response
from typing import Tuple

from storefront.database import get_session
from storefront.decorators.admin_security import admin_required
from storefront.exceptions import (
    OrderPlacementError, InsufficientStockError, ProductNotFoundError, TransactionConflictError
)
from storefront.services import order_service
from storefront.services.delivery_service import quote_cart
from storefront.blueprints.metrics import orders_placed_total

orders_bp = Blueprint('orders', __name__, url_prefix='/api/orders')


def _outcome_label(error: OrderPlacementError) -> str:
    if isinstance(error, InsufficientStockError):
        return 'insufficient_stock'
    if isinstance(error, ProductNotFoundError):
        return 'product_not_found'
    if isinstance(error, TransactionConflictError):
        return 'conflict'
    return 'storage_error'


@orders_bp.route('', methods=['POST'])
def create_order() -> Tuple[Response, int]:
    """Place an order: reserve stock and record it in one transaction."""
    session_db = get_session()
    payload = request.get_json(silent=True)

    try:
        order = order_service.place_order(session_db, payload)
    except OrderPlacementError as e:
        orders_placed_total.labels(outcome=_outcome_label(e)).inc()
        current_app.logger.warning(f"Checkout failed: {e.message}")
        raise

    orders_placed_total.labels(outcome='committed').inc()
    return jsonify(order_service.serialize_orders(session_db, [order])[0]), 201


@orders_bp.route('/quote', methods=['POST'])
def quote() -> Response:
    """Price a cart (subtotal, delivery, total) without reserving stock."""
    session_db = get_session()
    payload = request.get_json(silent=True) or {}
    items = order_service.parse_cart_items(payload.get('items'))
    return jsonify(quote_cart(session_db, items))


@orders_bp.route('', methods=['GET'])
@admin_required
def list_orders() -> Response:
    """All orders newest first; ?status= filters by status."""
    session_db = get_session()
    status = request.args.get('status', '').strip() or None
    return jsonify(order_service.list_orders(session_db, status=status))


@orders_bp.route('/<int:order_id>', methods=['GET'])
@admin_required
def order_detail(order_id: int) -> Response:
    session_db = get_session()
    order = order_service.get_order(session_db, order_id)
    return jsonify(order_service.serialize_orders(session_db, [order])[0])


@orders_bp.route('/<int:order_id>', methods=['PUT'])
@admin_required
def update_status(order_id: int) -> Response:
    """Change an order's status."""
    session_db = get_session()
    payload = request.get_json(silent=True) or {}
    order = order_service.update_order_status(session_db, order_id, payload.get('status'))
    return jsonify(order_service.serialize_orders(session_db, [order])[0])


@orders_bp.route('/<int:order_id>', methods=['DELETE'])
@admin_required
def delete_order(order_id: int) -> Response:
    session_db = get_session()
    order_service.delete_order(session_db, order_id)
    return jsonify({'message': 'Order deleted'})
