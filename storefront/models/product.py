"""Product model."""
from sqlalchemy import Column, BigInteger, String, Text, Boolean, Integer, Numeric, DateTime, ForeignKey, CheckConstraint, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.database import Base, BigIntegerPK


class Product(Base):
    """Catalog product with its stock level and delivery policy."""

    __tablename__ = 'product'
    __table_args__ = (
        CheckConstraint('stock >= 0', name='ck_product_stock_non_negative'),
        CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
        CheckConstraint('delivery_charges >= 0', name='ck_product_delivery_non_negative'),
    )

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default='', server_default='')
    sku = Column(String, nullable=True)
    category_id = Column(BigInteger, ForeignKey('category.id', ondelete='SET NULL'), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0, server_default='0')
    delivery_charges = Column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    increase_delivery_with_qty = Column(Boolean, nullable=False, default=False, server_default=false())
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    category = relationship('Category', foreign_keys=[category_id])

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"

    @property
    def in_stock(self):
        return (self.stock or 0) > 0

    def to_summary(self):
        """Short representation embedded in order lines."""
        return {
            'id': self.id,
            'name': self.name,
            'price': float(self.price),
            'image': self.image,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'sku': self.sku,
            'price': float(self.price),
            'stock': self.stock,
            'deliveryCharges': float(self.delivery_charges or 0),
            'increaseDeliveryWithQty': bool(self.increase_delivery_with_qty),
            'image': self.image,
            'category': self.category.to_dict() if self.category else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
