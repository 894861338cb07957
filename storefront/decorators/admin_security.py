"""
Admin security decorators.
Provides bearer-token authentication for the back-office API routes.
"""

from functools import wraps
from flask import request, g

from storefront.exceptions import UnauthorizedError


def admin_required(f):
    """
    Decorator: Require a valid admin bearer token.

    Expects "Authorization: Bearer <token>" as issued by /api/admin/login.
    Raises UnauthorizedError (rendered as a 401 JSON body) otherwise.
    On success the admin is available as g.admin_user.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        header = request.headers.get('Authorization', '')
        scheme, _, token = header.partition(' ')
        if scheme.lower() != 'bearer' or not token.strip():
            raise UnauthorizedError('Authentication required')

        from storefront.database import get_session
        from storefront.models import AdminUser
        from storefront.services.auth_service import decode_admin_token

        admin_user_id = decode_admin_token(token.strip())
        admin_user = get_session().query(AdminUser).filter_by(id=admin_user_id).first()

        if not admin_user:
            # Admin user no longer exists in database
            raise UnauthorizedError('Invalid admin session')

        # Store admin user in g for use in route
        g.admin_user = admin_user

        return f(*args, **kwargs)

    return decorated_function
