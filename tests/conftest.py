import os
import tempfile
import uuid
from decimal import Decimal

import pytest

# Point the test configuration at a throwaway SQLite file unless one is provided
_db_dir = tempfile.mkdtemp(prefix='storefront-tests-')
os.environ.setdefault('TEST_DATABASE_URL', f"sqlite:///{os.path.join(_db_dir, 'storefront.db')}")

from storefront import create_app
from storefront import database
from storefront.database import Base
from storefront.models import AdminUser, Category, Product
from storefront.services.auth_service import issue_admin_token


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestConfig')
    ctx = app.app_context()
    ctx.push()
    database.create_all()
    yield app
    database.get_session().remove()
    database.drop_all()
    ctx.pop()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session; every table is emptied after the test."""
    session = database.get_session()
    yield session
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.remove()


@pytest.fixture(scope='function')
def make_product(session):
    """Factory for committed products."""
    def _make_product(name=None, price='100.00', stock=10, delivery_charges='0',
                      increase_delivery_with_qty=False, category=None):
        product = Product(
            name=name or f'Product {str(uuid.uuid4())[:8]}',
            description='Test product',
            price=Decimal(str(price)),
            stock=stock,
            delivery_charges=Decimal(str(delivery_charges)),
            increase_delivery_with_qty=increase_delivery_with_qty,
            category_id=category.id if category else None
        )
        session.add(product)
        session.commit()
        return product
    return _make_product


@pytest.fixture(scope='function')
def category(session):
    category = Category(name='Electronics', slug='electronics')
    session.add(category)
    session.commit()
    return category


@pytest.fixture(scope='function')
def product_a(make_product):
    """Stock 10, price 100, flat delivery 50."""
    return make_product(name='Product A', price='100.00', stock=10, delivery_charges='50')


@pytest.fixture(scope='function')
def product_b(make_product):
    """Stock 1, price 200, no delivery."""
    return make_product(name='Product B', price='200.00', stock=1)


@pytest.fixture(scope='function')
def checkout_payload():
    """Builds a checkout payload around a list of (product, quantity) pairs."""
    def _payload(lines, total_amount=None, **overrides):
        items = [
            {'product': product.id, 'quantity': quantity, 'price': float(product.price)}
            for product, quantity in lines
        ]
        if total_amount is None:
            total_amount = sum(item['price'] * item['quantity'] for item in items)
        payload = {
            'customerName': 'Ayesha Khan',
            'phone': '0300-1234567',
            'email': 'ayesha@example.com',
            'address': '12 Mall Road',
            'city': 'Lahore',
            'province': 'Punjab',
            'postalCode': '54000',
            'items': items,
            'totalAmount': total_amount,
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture(scope='function')
def admin_user(session):
    """Create test admin."""
    suffix = str(uuid.uuid4())[:8]
    admin = AdminUser(email=f'admin-{suffix}@test.com')
    admin.set_password('password123')
    session.add(admin)
    session.commit()
    return admin


@pytest.fixture(scope='function')
def admin_headers(app, admin_user):
    """Authorization header carrying a valid admin token."""
    token = issue_admin_token(admin_user)
    return {'Authorization': f'Bearer {token}'}
