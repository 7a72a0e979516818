"""
Products slice: the user's products, bundles and current selection.
"""

from typing import Optional

from pydantic import Field

from models.product import (
    Product,
    ProductCreate,
    ProductUpdate,
    ProductFilters,
    Bundle,
    BundleCreate,
)
from services.product_service import ProductService, get_product_service
from store.base import Slice, SliceState, slice_operation


class ProductsState(SliceState):
    products: list[Product] = Field(default_factory=list)
    bundles: list[Bundle] = Field(default_factory=list)
    selected_product: Optional[Product] = None
    search_query: str = ""
    filters: ProductFilters = Field(default_factory=ProductFilters)


class ProductsSlice(Slice):
    """Product and bundle CRUD reduced into local state."""

    name = "products"

    def __init__(self, service: Optional[ProductService] = None):
        super().__init__(ProductsState())
        self._service = service

    @property
    def service(self) -> ProductService:
        if self._service is None:
            self._service = get_product_service()
        return self._service

    def _replace_product(self, product: Product) -> None:
        for index, existing in enumerate(self.state.products):
            if existing.id == product.id:
                self.state.products[index] = product
                break

    # ===================
    # OPERATIONS
    # ===================

    @slice_operation("products/fetchProducts", "Failed to fetch products")
    def fetch_products(
        self,
        user_id: str,
        search_query: Optional[str] = None,
        filters: Optional[ProductFilters] = None
    ) -> list[Product]:
        """Load products; search/filters default to the ones held in state."""
        if search_query is None:
            search_query = self.state.search_query
        if filters is None:
            filters = self.state.filters

        products = self.service.get_all(user_id, search_query or None, filters)
        self.state.products = products
        return products

    @slice_operation("products/fetchProductByAsin", "Failed to fetch product")
    def fetch_product_by_asin(self, user_id: str, asin: str) -> Product:
        product = self.service.get_by_asin(user_id, asin)
        self.state.selected_product = product
        self._replace_product(product)
        return product

    @slice_operation("products/createProduct", "Failed to create product")
    def create_product(self, data: ProductCreate) -> Product:
        product = self.service.create(data)
        self.state.products.append(product)
        return product

    @slice_operation("products/updateProduct", "Failed to update product")
    def update_product(self, product_id: str, updates: ProductUpdate) -> Product:
        product = self.service.update(product_id, updates)
        self._replace_product(product)
        if self.state.selected_product and self.state.selected_product.id == product.id:
            self.state.selected_product = product
        return product

    @slice_operation("products/deleteProduct", "Failed to delete product")
    def delete_product(self, product_id: str) -> str:
        deleted_id = self.service.delete(product_id)
        self.state.products = [p for p in self.state.products if p.id != deleted_id]
        if self.state.selected_product and self.state.selected_product.id == deleted_id:
            self.state.selected_product = None
        return deleted_id

    @slice_operation("products/fetchBundles", "Failed to fetch bundles")
    def fetch_bundles(self, user_id: str) -> list[Bundle]:
        bundles = self.service.get_bundles(user_id)
        self.state.bundles = bundles
        return bundles

    @slice_operation("products/createBundle", "Failed to create bundle")
    def create_bundle(self, data: BundleCreate) -> Bundle:
        bundle = self.service.create_bundle(data)
        self.state.bundles.append(bundle)
        return bundle

    # ===================
    # LOCAL REDUCERS
    # ===================

    def set_search_query(self, query: str) -> None:
        self.state.search_query = query

    def set_filters(self, filters: ProductFilters) -> None:
        self.state.filters = filters

    def select_product(self, product: Optional[Product]) -> None:
        self.state.selected_product = product
