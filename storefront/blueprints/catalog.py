"""Catalog blueprint - public read-only product and category listings."""
from flask import Blueprint, request, jsonify, Response

from storefront.database import get_session
from storefront.exceptions import ValidationError
from storefront.services import catalog_service

catalog_bp = Blueprint('catalog', __name__, url_prefix='/api')


@catalog_bp.route('/products')
def list_products() -> Response:
    """Product list, optionally filtered with ?category=<id>."""
    category = request.args.get('category', '').strip()
    category_id = None
    if category:
        if not category.isdigit():
            raise ValidationError('category must be a numeric id')
        category_id = int(category)

    return jsonify(catalog_service.list_products(get_session(), category_id=category_id))


@catalog_bp.route('/products/<int:product_id>')
def product_detail(product_id: int) -> Response:
    product = catalog_service.get_product(get_session(), product_id)
    return jsonify(product.to_dict())


@catalog_bp.route('/categories')
def list_categories() -> Response:
    return jsonify(catalog_service.list_categories(get_session()))
