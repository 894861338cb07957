"""
Flask CLI commands for storefront management.

Commands:
- flask init-db: Create database tables
- flask create-admin: Create a new admin user
- flask seed-catalog: Load the demo catalog into an empty database
- flask restock: Add units to a product's stock
"""

import click
import re
from storefront.database import get_session, create_all
from storefront.exceptions import StorefrontError


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables."""
        create_all()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('create-admin')
    @click.option('--email', prompt=True, help='Admin email address')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Admin password')
    def create_admin(email, password):
        """Create a new admin user for the back-office."""
        from storefront.services.auth_service import create_admin as create_admin_user

        # Validate email format
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, email):
            click.echo(click.style('Invalid email. Use the format user@example.com', fg='red'))
            return

        if len(password) < 6:
            click.echo(click.style('Password must be at least 6 characters long.', fg='red'))
            return

        try:
            admin = create_admin_user(get_session(), email, password)
        except StorefrontError as e:
            click.echo(click.style(e.message, fg='red'))
            return

        click.echo(click.style('\nAdmin created.', fg='green', bold=True))
        click.echo(f'   Email: {admin.email}')
        click.echo(f'   ID: {admin.id}')

    @app.cli.command('seed-catalog')
    @click.option('--admin-email', default=None, help='Also create this admin if missing')
    @click.option('--admin-password', default=None, help='Password for --admin-email')
    def seed_catalog(admin_email, admin_password):
        """Load demo categories and products when the catalog is empty."""
        from storefront.models import AdminUser
        from storefront.services.auth_service import create_admin as create_admin_user
        from storefront.services.catalog_service import seed_catalog as seed

        session = get_session()
        created = seed(session)
        if created:
            click.echo(click.style(f'Seeded {created} products.', fg='green'))
        else:
            click.echo('Catalog already has products, nothing to do.')

        if admin_email:
            if not admin_password:
                click.echo(click.style('--admin-password is required with --admin-email', fg='red'))
                return
            if session.query(AdminUser).filter_by(email=admin_email.strip().lower()).first():
                click.echo(f'Admin {admin_email} already exists.')
                return
            admin = create_admin_user(session, admin_email, admin_password)
            click.echo(click.style(f'Admin created: {admin.email}', fg='green'))

    @app.cli.command('restock')
    @click.option('--product-id', type=int, required=True, help='Product to restock')
    @click.option('--quantity', type=int, required=True, help='Units to add')
    def restock(product_id, quantity):
        """Add units to a product's stock."""
        from storefront.services.catalog_service import restock_product

        try:
            product = restock_product(get_session(), product_id, quantity)
        except StorefrontError as e:
            click.echo(click.style(e.message, fg='red'))
            return

        click.echo(click.style(f'{product.name}: stock is now {product.stock}', fg='green'))
