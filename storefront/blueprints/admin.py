"""
Admin Blueprint - back-office authentication.

Routes:
- /api/admin/login - Exchange email/password for a bearer token
- /api/admin/me    - Current admin (token check for the dashboard)
"""

from flask import Blueprint, request, jsonify, g, Response

from storefront.database import get_session
from storefront.decorators.admin_security import admin_required
from storefront.services import auth_service


admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')


@admin_bp.route('/login', methods=['POST'])
def login() -> Response:
    """Admin login - returns a signed token and the admin identity."""
    payload = request.get_json(silent=True) or {}
    admin_user = auth_service.authenticate_admin(
        get_session(),
        payload.get('email', ''),
        payload.get('password', '')
    )
    token = auth_service.issue_admin_token(admin_user)
    return jsonify({'token': token, 'admin': admin_user.to_dict()})


@admin_bp.route('/me')
@admin_required
def me() -> Response:
    return jsonify({'admin': g.admin_user.to_dict()})
