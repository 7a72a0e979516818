"""
Product service for catalog operations.

Products and bundles are owned by a user; every query is scoped by user_id.
"""

from typing import Optional
import structlog

from config import get_supabase_client, is_no_rows_error
from models.base import to_insert_payload, to_update_payload
from models.product import (
    ProductCreate,
    ProductUpdate,
    Product,
    ProductFilters,
    BundleCreate,
    Bundle,
)
from exceptions import (
    ProductNotFoundError,
    MissingOwnerError,
    DatabaseError
)

logger = structlog.get_logger(__name__)

SEARCH_COLUMNS = ("asin", "seller_sku", "product_name")


def ilike_clause(column: str, search_query: str) -> str:
    """
    Build one `or_` clause matching search_query anywhere in column.

    The value is double-quoted so commas, dots and parentheses in the
    search text are not read as PostgREST filter syntax.
    """
    escaped = search_query.replace("\\", "\\\\").replace('"', '\\"')
    return f'{column}.ilike."%{escaped}%"'


class ProductService:
    """
    Product business logic.

    Handles CRUD operations for products and bundles.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "products"
        self.bundles_table = "bundles"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        user_id: str,
        search_query: Optional[str] = None,
        filters: Optional[ProductFilters] = None
    ) -> list[Product]:
        """
        Get a user's products with optional search and filters.

        Args:
            user_id: Owning user UUID
            search_query: Case-insensitive match on ASIN, seller SKU or name
            filters: Marketplace / condition filters

        Returns:
            List of products
        """
        filters = filters or ProductFilters()
        logger.info(
            "getting_products",
            user_id=user_id,
            search_query=search_query,
            marketplace_id=filters.marketplace_id,
            condition=filters.condition
        )

        try:
            query = self.db.table(self.table).select("*").eq("user_id", user_id)

            if search_query:
                query = query.or_(
                    ",".join(ilike_clause(column, search_query) for column in SEARCH_COLUMNS)
                )
            if filters.marketplace_id:
                query = query.eq("marketplace_id", filters.marketplace_id)
            if filters.condition:
                query = query.eq("condition", filters.condition.value)

            result = query.execute()

            products = [Product(**row) for row in result.data]

            logger.info("products_retrieved", count=len(products))

            return products

        except Exception as e:
            logger.error("get_products_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, product_id: str) -> Product:
        """
        Get a single product by ID.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.debug("getting_product", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", product_id)
                .single()
                .execute()
            )
            return Product(**result.data)

        except Exception as e:
            if is_no_rows_error(e):
                raise ProductNotFoundError(product_id)
            logger.error("get_product_failed", product_id=product_id, error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_asin(self, user_id: str, asin: str) -> Product:
        """
        Get a user's product by ASIN.

        Args:
            user_id: Owning user UUID
            asin: Amazon ASIN

        Returns:
            Product

        Raises:
            ProductNotFoundError: If the user has no product with this ASIN
        """
        logger.debug("getting_product_by_asin", user_id=user_id, asin=asin)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .eq("asin", asin)
                .single()
                .execute()
            )
            return Product(**result.data)

        except Exception as e:
            if is_no_rows_error(e):
                raise ProductNotFoundError(asin)
            logger.error(
                "get_product_by_asin_failed",
                user_id=user_id,
                asin=asin,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            data: Product creation data (user_id required)

        Returns:
            Created product with backend-assigned id and timestamps

        Raises:
            MissingOwnerError: If user_id was never filled in
        """
        if not data.user_id:
            raise MissingOwnerError("Product")

        logger.info("creating_product", user_id=data.user_id, asin=data.asin)

        try:
            result = (
                self.db.table(self.table)
                .insert(to_insert_payload(data))
                .execute()
            )

            product = Product(**result.data[0])

            logger.info("product_created", product_id=product.id, asin=product.asin)

            return product

        except Exception as e:
            logger.error("create_product_failed", asin=data.asin, error=str(e))
            raise DatabaseError("insert", str(e))

    def update(self, product_id: str, data: ProductUpdate) -> Product:
        """
        Update an existing product.

        Only fields explicitly set on data are sent.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        update_data = to_update_payload(data)
        logger.info(
            "updating_product",
            product_id=product_id,
            fields=list(update_data.keys())
        )

        if not update_data:
            # Nothing to update, return existing
            return self.get_by_id(product_id)

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_product_failed", product_id=product_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise ProductNotFoundError(product_id)

        logger.info("product_updated", product_id=product_id)
        return Product(**result.data[0])

    def delete(self, product_id: str) -> str:
        """
        Delete a product.

        Returns:
            The deleted product's id
        """
        logger.info("deleting_product", product_id=product_id)

        try:
            self.db.table(self.table).delete().eq("id", product_id).execute()
        except Exception as e:
            logger.error("delete_product_failed", product_id=product_id, error=str(e))
            raise DatabaseError("delete", str(e))

        logger.info("product_deleted", product_id=product_id)
        return product_id

    # ===================
    # BUNDLES
    # ===================

    def get_bundles(self, user_id: str) -> list[Bundle]:
        """Get all bundles owned by a user."""
        logger.info("getting_bundles", user_id=user_id)

        try:
            result = (
                self.db.table(self.bundles_table)
                .select("*")
                .eq("user_id", user_id)
                .execute()
            )
            return [Bundle(**row) for row in result.data]

        except Exception as e:
            logger.error("get_bundles_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

    def create_bundle(self, data: BundleCreate) -> Bundle:
        """Create a new bundle."""
        logger.info(
            "creating_bundle",
            user_id=data.user_id,
            asin=data.asin,
            components=len(data.components)
        )

        try:
            result = (
                self.db.table(self.bundles_table)
                .insert(to_insert_payload(data))
                .execute()
            )
            bundle = Bundle(**result.data[0])

            logger.info("bundle_created", bundle_id=bundle.id)
            return bundle

        except Exception as e:
            logger.error("create_bundle_failed", asin=data.asin, error=str(e))
            raise DatabaseError("insert", str(e))


# Singleton instance for convenience
_product_service: Optional[ProductService] = None


def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
