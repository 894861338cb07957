"""AdminUser model - storefront back-office administrators."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from werkzeug.security import generate_password_hash, check_password_hash
from storefront.database import Base, BigIntegerPK


class AdminUser(Base):
    """AdminUser model - may list orders and change their status."""

    __tablename__ = 'admin_users'

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    def set_password(self, password):
        """Set password hash."""
        self.password_hash = generate_password_hash(password, method='scrypt')

    def check_password(self, password):
        """Check password against hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def update_last_login(self):
        """Update last_login timestamp to current time."""
        self.last_login = func.now()

    def to_dict(self):
        return {'id': self.id, 'email': self.email}

    def __repr__(self):
        return f"<AdminUser(id={self.id}, email='{self.email}')>"
