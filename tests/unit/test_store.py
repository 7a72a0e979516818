"""
Unit tests for the state slices and Store.

Slices run against real services over the in-memory Supabase mock, except
where a MagicMock service is needed to force a failure.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from store import (
    Store,
    AuthSlice,
    ProductsSlice,
    ShipmentsSlice,
    SettingsSlice,
)
from store.base import error_message
from services.auth_service import AuthService
from services.product_service import ProductService
from services.shipment_service import ShipmentService
from services.settings_service import SettingsService
from models.address import Address
from models.product import ProductCreate, ProductUpdate, ProductFilters, ProductCondition
from models.settings import GlobalSettingsUpdate
from models.shipment import (
    ShipmentCreate,
    ShipmentStatus,
    ShipmentItemCreate,
    ShipmentPlanCreate,
    ShipmentPlanItem,
)
from models.user import AmazonCredentialsUpdate
from exceptions import DatabaseError

from tests.factories import AddressFactory, ProductFactory, ShipmentFactory


# ===================
# FIXTURES
# ===================

@pytest.fixture
def products_slice(mock_db):
    return ProductsSlice(ProductService())


@pytest.fixture
def shipments_slice(mock_db):
    return ShipmentsSlice(ShipmentService())


@pytest.fixture
def settings_slice(mock_db):
    return SettingsSlice(SettingsService())


def new_shipment(shipment_id: str = "FBA15NEW001") -> ShipmentCreate:
    return ShipmentCreate(
        user_id="user-1",
        shipment_id=shipment_id,
        shipment_name="Restock",
        destination_fulfillment_center_id="PHX7",
        ship_from_address=Address(**AddressFactory.create()),
    )


# ===================
# LIFECYCLE
# ===================

class TestSliceLifecycle:
    """Tests for the pending / fulfilled / rejected lifecycle."""

    def test_fulfilled_clears_loading(self, products_slice, mock_supabase):
        mock_supabase.set_table_data("products", ProductFactory.create_batch(2))

        result = products_slice.fetch_products("user-1")

        assert len(result) == 2
        assert products_slice.state.is_loading is False
        assert products_slice.state.error is None

    def test_loading_set_while_pending(self):
        service = MagicMock(spec=ProductService)
        slice_ = ProductsSlice(service)
        seen = {}

        def get_all(*args):
            seen["is_loading"] = slice_.state.is_loading
            return []

        service.get_all.side_effect = get_all

        slice_.fetch_products("user-1")

        assert seen["is_loading"] is True
        assert slice_.state.is_loading is False

    def test_rejected_sets_error_and_returns_none(self):
        service = MagicMock(spec=ProductService)
        service.get_all.side_effect = DatabaseError("select", "connection refused")
        slice_ = ProductsSlice(service)

        result = slice_.fetch_products("user-1")

        assert result is None
        assert slice_.state.is_loading is False
        assert slice_.state.error == "Database select failed: connection refused"

    def test_rejected_leaves_data_untouched(self, products_slice, mock_supabase):
        mock_supabase.set_table_data("products", ProductFactory.create_batch(2))
        products_slice.fetch_products("user-1")
        mock_supabase.fail_table("products")

        products_slice.fetch_products("user-1")

        assert len(products_slice.state.products) == 2
        assert products_slice.state.error is not None

    def test_pending_clears_previous_error(self):
        service = MagicMock(spec=ProductService)
        service.get_all.side_effect = [Exception("boom"), []]
        slice_ = ProductsSlice(service)

        slice_.fetch_products("user-1")
        assert slice_.state.error == "boom"

        slice_.fetch_products("user-1")
        assert slice_.state.error is None

    def test_empty_exception_message_uses_default(self):
        service = MagicMock(spec=ProductService)
        service.get_all.side_effect = Exception()
        slice_ = ProductsSlice(service)

        slice_.fetch_products("user-1")

        assert slice_.state.error == "Failed to fetch products"

    def test_error_message_prefers_exception_text(self):
        assert error_message(ValueError("bad"), "default") == "bad"
        assert error_message(ValueError(), "default") == "default"

    def test_clear_error(self):
        slice_ = ProductsSlice(MagicMock(spec=ProductService))
        slice_.state.error = "stale"

        slice_.clear_error()

        assert slice_.state.error is None


# ===================
# AUTH
# ===================

class TestAuthSlice:
    """Tests for AuthSlice."""

    def _user(self):
        return SimpleNamespace(
            id="user-1",
            email="seller@example.com",
            user_metadata={},
            created_at="2026-01-01T00:00:00+00:00",
            updated_at=None,
        )

    def test_login_sets_user(self, mock_db, mock_supabase):
        mock_supabase.auth.sign_in_with_password.return_value = SimpleNamespace(user=self._user())
        slice_ = AuthSlice(AuthService())

        slice_.login_user("seller@example.com", "secret")

        assert slice_.state.is_authenticated is True
        assert slice_.state.user.id == "user-1"

    def test_failed_login_keeps_signed_out(self, mock_db, mock_supabase):
        mock_supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
        slice_ = AuthSlice(AuthService())

        assert slice_.login_user("seller@example.com", "wrong") is None
        assert slice_.state.is_authenticated is False
        assert slice_.state.error == "Invalid login credentials"

    def test_logout_clears_user(self, mock_db, mock_supabase):
        mock_supabase.auth.sign_in_with_password.return_value = SimpleNamespace(user=self._user())
        slice_ = AuthSlice(AuthService())
        slice_.login_user("seller@example.com", "secret")

        slice_.logout_user()

        assert slice_.state.user is None
        assert slice_.state.is_authenticated is False

    def test_fetch_current_user_without_session(self, mock_db, mock_supabase):
        mock_supabase.auth.get_user.return_value = None
        slice_ = AuthSlice(AuthService())

        assert slice_.fetch_current_user() is None
        assert slice_.state.is_authenticated is False
        assert slice_.state.error is None


# ===================
# PRODUCTS
# ===================

class TestProductsSlice:
    """Tests for ProductsSlice."""

    def test_fetch_uses_state_search_and_filters(self, products_slice, mock_supabase):
        # Arrange
        mock_supabase.set_table_data("products", [
            ProductFactory.create(product_name="Red Mug", condition="NEW"),
            ProductFactory.create(product_name="Red Mug Used", condition="USED_GOOD"),
            ProductFactory.create(product_name="Blue Plate", condition="NEW"),
        ])
        products_slice.set_search_query("mug")
        products_slice.set_filters(ProductFilters(condition=ProductCondition.NEW))

        # Act
        products_slice.fetch_products("user-1")

        # Assert
        assert [p.product_name for p in products_slice.state.products] == ["Red Mug"]

    def test_create_appends_backend_record(self, products_slice, mock_supabase):
        products_slice.create_product(
            ProductCreate(user_id="user-1", asin="B0NEW00001", marketplace_id="ATVPDKIKX0DER")
        )

        [product] = products_slice.state.products
        assert product.id.startswith("products-")

    def test_update_replaces_in_list_and_selection(self, products_slice, mock_supabase):
        # Arrange
        mock_supabase.set_table_data("products", [ProductFactory.create(id="prod-1", price=5.0)])
        products_slice.fetch_products("user-1")
        products_slice.select_product(products_slice.state.products[0])

        # Act
        products_slice.update_product("prod-1", ProductUpdate(price=7.0))

        # Assert
        assert products_slice.state.products[0].price == 7.0
        assert products_slice.state.selected_product.price == 7.0

    def test_delete_selected_product_clears_selection(self, products_slice, mock_supabase):
        # Arrange
        mock_supabase.set_table_data("products", [
            ProductFactory.create(id="prod-1"),
            ProductFactory.create(id="prod-2"),
        ])
        products_slice.fetch_products("user-1")
        products_slice.select_product(products_slice.state.products[0])

        # Act
        products_slice.delete_product("prod-1")

        # Assert
        assert [p.id for p in products_slice.state.products] == ["prod-2"]
        assert products_slice.state.selected_product is None

    def test_delete_other_product_keeps_selection(self, products_slice, mock_supabase):
        mock_supabase.set_table_data("products", [
            ProductFactory.create(id="prod-1"),
            ProductFactory.create(id="prod-2"),
        ])
        products_slice.fetch_products("user-1")
        products_slice.select_product(products_slice.state.products[0])

        products_slice.delete_product("prod-2")

        assert products_slice.state.selected_product.id == "prod-1"

    def test_fetch_by_asin_selects_product(self, products_slice, mock_supabase):
        mock_supabase.set_table_data("products", [ProductFactory.create(id="prod-1", asin="B0FIND0001")])

        products_slice.fetch_product_by_asin("user-1", "B0FIND0001")

        assert products_slice.state.selected_product.id == "prod-1"

    def test_fetch_missing_asin_sets_error(self, products_slice, mock_supabase):
        mock_supabase.set_table_data("products", [])

        assert products_slice.fetch_product_by_asin("user-1", "B0MISSING1") is None
        assert products_slice.state.error == "Product not found"


# ===================
# SHIPMENTS
# ===================

class TestShipmentsSlice:
    """Tests for ShipmentsSlice."""

    def test_created_shipment_goes_to_head(self, shipments_slice, mock_supabase):
        # Arrange
        mock_supabase.set_table_data("shipments", ShipmentFactory.create_batch(2))
        shipments_slice.fetch_shipments("user-1")

        # Act
        created = shipments_slice.create_shipment(new_shipment())

        # Assert
        assert len(shipments_slice.state.shipments) == 3
        assert shipments_slice.state.shipments[0] is created
        assert created.id.startswith("shipments-")

    def test_update_status_refreshes_selection(self, shipments_slice, mock_supabase):
        mock_supabase.set_table_data("shipments", [ShipmentFactory.create(id="ship-1")])
        shipments_slice.fetch_shipment_by_id("ship-1")

        shipments_slice.update_shipment_status("ship-1", ShipmentStatus.SHIPPED)

        assert shipments_slice.state.selected_shipment.shipment_status == ShipmentStatus.SHIPPED

    def test_add_items_appends_under_shipment_key(self, shipments_slice, mock_supabase):
        shipments_slice.add_shipment_items("ship-1", [ShipmentItemCreate(seller_sku="SKU-1", quantity_shipped=3)])
        shipments_slice.add_shipment_items("ship-1", [ShipmentItemCreate(seller_sku="SKU-2", quantity_shipped=1)])

        items = shipments_slice.state.shipment_items["ship-1"]
        assert [i.seller_sku for i in items] == ["SKU-1", "SKU-2"]

    def test_create_plan_becomes_current(self, shipments_slice, mock_supabase):
        plan = shipments_slice.create_shipment_plan(ShipmentPlanCreate(
            user_id="user-1",
            items=[ShipmentPlanItem(seller_sku="SKU-1", asin="B000000001", quantity=6)],
        ))

        assert shipments_slice.state.current_plan is plan
        assert shipments_slice.state.shipment_plans[0] is plan


# ===================
# SETTINGS
# ===================

class TestSettingsSlice:
    """Tests for SettingsSlice."""

    def test_fetch_absent_settings_is_not_an_error(self, settings_slice, mock_supabase):
        result = settings_slice.fetch_global_settings("user-1")

        assert result is None
        assert settings_slice.state.global_settings is None
        assert settings_slice.state.error is None
        assert settings_slice.state.is_loading is False

    def test_update_then_local_merge(self, settings_slice, mock_supabase):
        settings_slice.update_global_settings("user-1", GlobalSettingsUpdate(timezone="UTC", language="en"))

        settings_slice.update_local_settings(GlobalSettingsUpdate(language="de"))

        assert settings_slice.state.global_settings.language == "de"
        assert settings_slice.state.global_settings.timezone == "UTC"

    def test_local_merge_without_loaded_settings_is_noop(self, settings_slice):
        settings_slice.update_local_settings(GlobalSettingsUpdate(language="de"))

        assert settings_slice.state.global_settings is None

    def test_save_credentials(self, settings_slice, mock_supabase):
        settings_slice.save_amazon_credentials("user-1", AmazonCredentialsUpdate(
            seller_id="A2SELLER123",
            refresh_token="Atzr|token",
            marketplace_id="ATVPDKIKX0DER",
        ))

        assert settings_slice.state.amazon_credentials.seller_id == "A2SELLER123"

    def test_partial_first_credentials_save_is_rejected(self, settings_slice, mock_supabase):
        # Act
        result = settings_slice.save_amazon_credentials(
            "user-1", AmazonCredentialsUpdate(refresh_token="Atzr|x")
        )

        # Assert
        assert result is None
        assert "seller_id, marketplace_id" in settings_slice.state.error
        assert mock_supabase.rows("amazon_credentials") == []

        # A complete save afterwards works and can be read back
        settings_slice.save_amazon_credentials("user-1", AmazonCredentialsUpdate(
            seller_id="A2SELLER123",
            refresh_token="Atzr|x",
            marketplace_id="ATVPDKIKX0DER",
        ))
        fetched = settings_slice.fetch_amazon_credentials("user-1")

        assert settings_slice.state.error is None
        assert fetched.refresh_token == "Atzr|x"


# ===================
# STORE
# ===================

class TestStore:
    """Tests for the Store aggregate."""

    def test_get_state_has_every_slice(self, mock_db):
        store = Store()

        state = store.get_state()

        assert set(state) == {"auth", "products", "shipments", "settings"}
        assert state["products"].products == []

    def test_get_state_is_a_snapshot(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("products", [ProductFactory.create()])
        store = Store(products=ProductsSlice(ProductService()))

        snapshot = store.get_state()
        store.products.fetch_products("user-1")

        assert snapshot["products"].products == []
        assert len(store.get_state()["products"].products) == 1

    def test_slice_failure_does_not_touch_other_slices(self, mock_db, mock_supabase):
        mock_supabase.fail_table("products")
        store = Store(
            products=ProductsSlice(ProductService()),
            shipments=ShipmentsSlice(ShipmentService()),
        )

        store.products.fetch_products("user-1")

        assert store.products.state.error is not None
        assert store.shipments.state.error is None
