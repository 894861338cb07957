"""
Tests for the flask CLI commands.
"""

from storefront.models import AdminUser, Product


class TestCliCommands:

    def test_restock(self, app, session, product_b):
        product_id = product_b.id

        result = app.test_cli_runner().invoke(args=['restock', '--product-id', str(product_id), '--quantity', '9'])

        assert result.exit_code == 0
        assert 'stock is now 10' in result.output

    def test_restock_unknown_product(self, app, session):
        result = app.test_cli_runner().invoke(args=['restock', '--product-id', '999999', '--quantity', '1'])

        assert 'Product not found: 999999' in result.output

    def test_seed_catalog_with_admin(self, app, session):
        result = app.test_cli_runner().invoke(args=[
            'seed-catalog', '--admin-email', 'Owner@Shop.com', '--admin-password', 'secret123'
        ])

        assert result.exit_code == 0
        assert session.query(Product).count() == 6
        assert session.query(AdminUser).filter_by(email='owner@shop.com').count() == 1

    def test_create_admin_rejects_bad_email(self, app, session):
        result = app.test_cli_runner().invoke(args=['create-admin', '--email', 'nope', '--password', 'secret123'])

        assert 'Invalid email' in result.output
        assert session.query(AdminUser).count() == 0
