"""
Unit tests for the catalog read path and restocking.
"""

import pytest

from storefront.exceptions import BusinessLogicError, NotFoundError, ProductNotFoundError
from storefront.models import Category, Product
from storefront.services import catalog_service
from storefront.services.stock_service import reserve_stock


class TestLookupProduct:

    def test_lookup_returns_product(self, session, product_a):
        product = catalog_service.lookup_product(session, product_a.id)
        assert product.name == 'Product A'
        assert product.stock == 10

    def test_lookup_missing_product(self, session):
        with pytest.raises(ProductNotFoundError) as exc:
            catalog_service.lookup_product(session, 424242)
        assert '424242' in exc.value.message

    def test_repeated_lookups_are_consistent(self, session, product_a):
        first = catalog_service.lookup_product(session, product_a.id)
        second = catalog_service.lookup_product(session, product_a.id)
        assert (first.price, first.stock) == (second.price, second.stock)

    def test_lookup_sees_committed_changes(self, session, product_a):
        catalog_service.lookup_product(session, product_a.id)

        reserve_stock(session, product_a, 4)
        session.commit()

        assert catalog_service.lookup_product(session, product_a.id).stock == 6


class TestResolveProducts:

    def test_missing_ids_are_absent(self, session, product_a, product_b):
        resolved = catalog_service.resolve_products(session, [product_a.id, product_b.id, 999999, None])
        assert set(resolved) == {product_a.id, product_b.id}

    def test_empty_input(self, session):
        assert catalog_service.resolve_products(session, []) == {}


class TestListings:

    def test_list_products_filtered_by_category(self, session, make_product, category):
        in_category = make_product(name='Headphones', category=category)
        make_product(name='Chair')

        everything = catalog_service.list_products(session)
        filtered = catalog_service.list_products(session, category_id=category.id)

        assert len(everything) == 2
        assert [p['id'] for p in filtered] == [in_category.id]

    def test_get_product_missing(self, session):
        with pytest.raises(NotFoundError):
            catalog_service.get_product(session, 31337)

    def test_list_categories_sorted_by_name(self, session):
        catalog_service.create_category(session, 'Home & Living')
        catalog_service.create_category(session, 'Fashion')
        session.commit()

        names = [c['name'] for c in catalog_service.list_categories(session)]
        assert names == ['Fashion', 'Home & Living']

    def test_create_category_is_idempotent_by_slug(self, session):
        first = catalog_service.create_category(session, 'Home & Living')
        second = catalog_service.create_category(session, 'home & living')
        assert first.id == second.id
        assert first.slug == 'home-living'


class TestRestock:

    def test_restock_adds_units(self, session, product_b):
        product = catalog_service.restock_product(session, product_b.id, 4)
        assert product.stock == 5

    def test_restock_requires_positive_quantity(self, session, product_b):
        with pytest.raises(BusinessLogicError):
            catalog_service.restock_product(session, product_b.id, 0)

    def test_restock_unknown_product(self, session):
        with pytest.raises(ProductNotFoundError):
            catalog_service.restock_product(session, 999999, 3)


class TestSeedCatalog:

    def test_seed_populates_empty_catalog_once(self, session):
        created = catalog_service.seed_catalog(session)

        assert created == 6
        assert session.query(Product).count() == 6
        assert session.query(Category).count() == 5
        assert catalog_service.seed_catalog(session) == 0
