"""Order model."""
from sqlalchemy import Column, String, Numeric, DateTime, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.database import Base, BigIntegerPK
import enum


class OrderStatus(enum.Enum):
    """Order status enum."""
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def from_value(cls, value):
        """Return the member whose value matches, or None."""
        for member in cls:
            if member.value == value:
                return member
        return None

    @property
    def is_terminal(self):
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


# Fulfilment progresses forward only; Cancelled is reachable from any non-terminal state
FULFILMENT_SEQUENCE = [
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


def allowed_transitions(status):
    """Statuses an order in `status` may move to."""
    if status.is_terminal:
        return set()
    index = FULFILMENT_SEQUENCE.index(status)
    return set(FULFILMENT_SEQUENCE[index + 1:]) | {OrderStatus.CANCELLED}


class Order(Base):
    """Customer order created atomically at checkout."""

    __tablename__ = 'customer_order'
    __table_args__ = (
        CheckConstraint('delivery_charges >= 0', name='ck_order_delivery_non_negative'),
    )

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)

    # Customer contact
    customer_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)

    # Shipping address
    address = Column(String(500), nullable=False)
    city = Column(String(120), nullable=False)
    province = Column(String(120), nullable=False)
    postal_code = Column(String(20), nullable=True)

    total_amount = Column(Numeric(12, 2), nullable=False)
    delivery_charges = Column(Numeric(12, 2), nullable=False, default=0, server_default='0')
    status = Column(
        Enum(OrderStatus, name='order_status', values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OrderStatus.PENDING
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    lines = relationship(
        'OrderLine',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='OrderLine.position'
    )

    @property
    def subtotal(self):
        return self.total_amount - self.delivery_charges

    def to_dict(self, products=None):
        """Serialize the order; `products` maps product ids to resolved Product rows."""
        products = products or {}
        return {
            'id': self.id,
            'customerName': self.customer_name,
            'phone': self.phone,
            'email': self.email,
            'address': self.address,
            'city': self.city,
            'province': self.province,
            'postalCode': self.postal_code,
            'items': [line.to_dict(products.get(line.product_id)) for line in self.lines],
            'totalAmount': float(self.total_amount),
            'deliveryCharges': float(self.delivery_charges),
            'status': self.status.value,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Order(id={self.id}, total={self.total_amount}, status={self.status.value})>"
