"""Category model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from storefront.database import Base, BigIntegerPK


class Category(Base):
    """Product Category."""

    __tablename__ = 'category'

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @staticmethod
    def slugify(name):
        return '-'.join(name.strip().lower().replace('&', ' ').split())

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'slug': self.slug}

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
