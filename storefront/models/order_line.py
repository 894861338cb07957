"""Order Line model."""
from sqlalchemy import Column, BigInteger, Integer, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from storefront.database import Base, BigIntegerPK


class OrderLine(Base):
    """Order Line - immutable snapshot of one purchased product.

    product_id is intentionally a plain column: products may be deleted after
    the order is placed, and the reference is then resolved to None at read time.
    """

    __tablename__ = 'order_line'
    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_order_line_quantity_positive'),
        CheckConstraint('price >= 0', name='ck_order_line_price_non_negative'),
    )

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey('customer_order.id', ondelete='CASCADE'), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(BigInteger, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # Unit price at time of purchase

    # Relationships
    order = relationship('Order', back_populates='lines')

    @property
    def line_total(self):
        return self.price * self.quantity

    def to_dict(self, product=None):
        return {
            'product': product.to_summary() if product is not None else None,
            'productId': self.product_id,
            'quantity': self.quantity,
            'price': float(self.price),
        }

    def __repr__(self):
        return f"<OrderLine(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"
