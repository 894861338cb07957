"""
Admin authentication service.

Verifies admin credentials and issues/decodes the signed bearer token used by
the back-office endpoints.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from sqlalchemy.orm import Session

from storefront.exceptions import BusinessLogicError, UnauthorizedError
from storefront.models import AdminUser

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = 'HS256'


def authenticate_admin(session: Session, email: str, password: str) -> AdminUser:
    """
    Check an admin's email/password.

    Raises:
        BusinessLogicError: Same message for unknown email and wrong password
    """
    if not email or not password:
        raise BusinessLogicError('Email and password are required')
    if not isinstance(email, str) or not isinstance(password, str):
        raise BusinessLogicError('Invalid credentials')
    email = email.strip().lower()
    if not email:
        raise BusinessLogicError('Email and password are required')

    admin_user = session.query(AdminUser).filter_by(email=email).first()
    if not admin_user or not admin_user.check_password(password):
        logger.warning(f"Failed admin login for {email}")
        raise BusinessLogicError('Invalid credentials')

    admin_user.last_login = datetime.now(timezone.utc)
    session.commit()
    logger.info(f"Admin login: {email}")
    return admin_user


def issue_admin_token(admin_user: AdminUser) -> str:
    """Sign a bearer token for the admin, valid for ADMIN_TOKEN_TTL seconds."""
    ttl = current_app.config.get('ADMIN_TOKEN_TTL', 3600)
    payload = {
        'sub': str(admin_user.id),
        'email': admin_user.email,
        'exp': datetime.now(timezone.utc) + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, _secret(), algorithm=TOKEN_ALGORITHM)


def decode_admin_token(token: str) -> int:
    """
    Validate a bearer token and return the admin id it was issued for.

    Raises:
        UnauthorizedError: Expired, tampered or malformed token
    """
    try:
        payload = jwt.decode(token, _secret(), algorithms=[TOKEN_ALGORITHM])
        return int(payload['sub'])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError('Session expired, please log in again')
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError('Invalid token')


def create_admin(session: Session, email: str, password: str) -> AdminUser:
    """Create an admin account."""
    email = (email or '').strip().lower()
    if session.query(AdminUser).filter_by(email=email).first():
        raise BusinessLogicError(f'An admin with email {email} already exists')

    admin = AdminUser(email=email)
    admin.set_password(password)
    try:
        session.add(admin)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return admin


def _secret() -> str:
    return current_app.config.get('JWT_SECRET') or current_app.config['SECRET_KEY']
