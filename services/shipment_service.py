"""
Shipment service for inbound shipments, their items and shipment plans.
"""

from typing import Optional
from datetime import datetime, timezone
import structlog

from config import get_supabase_client, is_no_rows_error
from models.base import to_insert_payload
from models.shipment import (
    ShipmentCreate,
    Shipment,
    ShipmentFilters,
    ShipmentStatus,
    ShipmentItemCreate,
    ShipmentItem,
    ShipmentPlanCreate,
    ShipmentPlan,
)
from exceptions import (
    ShipmentNotFoundError,
    DatabaseError,
)

logger = structlog.get_logger(__name__)


class ShipmentService:
    """
    Shipment business logic.

    Handles CRUD operations for shipments, shipment items and plans.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "shipments"
        self.items_table = "shipment_items"
        self.plans_table = "shipment_plans"

    # ===================
    # SHIPMENTS
    # ===================

    def get_all(
        self,
        user_id: str,
        filters: Optional[ShipmentFilters] = None
    ) -> list[Shipment]:
        """
        Get a user's shipments, newest first.

        Args:
            user_id: Owning user UUID
            filters: Status / fulfillment center filters

        Returns:
            List of shipments
        """
        filters = filters or ShipmentFilters()
        logger.info(
            "getting_shipments",
            user_id=user_id,
            status=filters.status,
            fulfillment_center_id=filters.fulfillment_center_id
        )

        try:
            query = (
                self.db.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
            )

            if filters.status:
                query = query.eq("shipment_status", filters.status.value)
            if filters.fulfillment_center_id:
                query = query.eq(
                    "destination_fulfillment_center_id",
                    filters.fulfillment_center_id
                )

            result = query.execute()

            shipments = [Shipment(**row) for row in result.data]

            logger.info("shipments_retrieved", count=len(shipments))

            return shipments

        except Exception as e:
            logger.error("get_shipments_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, shipment_id: str) -> Shipment:
        """
        Get a single shipment by ID.

        Raises:
            ShipmentNotFoundError: If shipment doesn't exist
        """
        logger.debug("getting_shipment", shipment_id=shipment_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", shipment_id)
                .single()
                .execute()
            )
            return Shipment(**result.data)

        except Exception as e:
            if is_no_rows_error(e):
                raise ShipmentNotFoundError(shipment_id)
            logger.error("get_shipment_failed", shipment_id=shipment_id, error=str(e))
            raise DatabaseError("select", str(e))

    def create(self, data: ShipmentCreate) -> Shipment:
        """
        Create a new shipment.

        Returns:
            Created shipment with backend-assigned id and timestamps
        """
        logger.info(
            "creating_shipment",
            user_id=data.user_id,
            shipment_id=data.shipment_id
        )

        try:
            result = (
                self.db.table(self.table)
                .insert(to_insert_payload(data))
                .execute()
            )

            shipment = Shipment(**result.data[0])

            logger.info("shipment_created", id=shipment.id, shipment_id=shipment.shipment_id)

            return shipment

        except Exception as e:
            logger.error("create_shipment_failed", shipment_id=data.shipment_id, error=str(e))
            raise DatabaseError("insert", str(e))

    def update_status(self, shipment_id: str, status: ShipmentStatus) -> Shipment:
        """
        Set a shipment's status.

        Raises:
            ShipmentNotFoundError: If shipment doesn't exist
        """
        logger.info("updating_shipment_status", shipment_id=shipment_id, status=status.value)

        try:
            result = (
                self.db.table(self.table)
                .update({
                    "shipment_status": status.value,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })
                .eq("id", shipment_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_shipment_status_failed", shipment_id=shipment_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise ShipmentNotFoundError(shipment_id)

        logger.info("shipment_status_updated", shipment_id=shipment_id, status=status.value)
        return Shipment(**result.data[0])

    # ===================
    # SHIPMENT ITEMS
    # ===================

    def get_items(self, shipment_id: str) -> list[ShipmentItem]:
        """Get the items of a shipment."""
        logger.debug("getting_shipment_items", shipment_id=shipment_id)

        try:
            result = (
                self.db.table(self.items_table)
                .select("*")
                .eq("shipment_id", shipment_id)
                .execute()
            )
            return [ShipmentItem(**row) for row in result.data]

        except Exception as e:
            logger.error("get_shipment_items_failed", shipment_id=shipment_id, error=str(e))
            raise DatabaseError("select", str(e))

    def add_items(
        self,
        shipment_id: str,
        items: list[ShipmentItemCreate]
    ) -> list[ShipmentItem]:
        """
        Add items to a shipment.

        Each item is attached to shipment_id regardless of what it carried.

        Returns:
            The inserted items
        """
        logger.info("adding_shipment_items", shipment_id=shipment_id, count=len(items))

        if not items:
            return []

        rows = [
            {**to_insert_payload(item), "shipment_id": shipment_id}
            for item in items
        ]

        try:
            result = self.db.table(self.items_table).insert(rows).execute()
            added = [ShipmentItem(**row) for row in result.data]

            logger.info("shipment_items_added", shipment_id=shipment_id, count=len(added))
            return added

        except Exception as e:
            logger.error("add_shipment_items_failed", shipment_id=shipment_id, error=str(e))
            raise DatabaseError("insert", str(e))

    # ===================
    # SHIPMENT PLANS
    # ===================

    def get_plans(self, user_id: str) -> list[ShipmentPlan]:
        """Get a user's shipment plans, newest first."""
        logger.info("getting_shipment_plans", user_id=user_id)

        try:
            result = (
                self.db.table(self.plans_table)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            return [ShipmentPlan(**row) for row in result.data]

        except Exception as e:
            logger.error("get_shipment_plans_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

    def create_plan(self, data: ShipmentPlanCreate) -> ShipmentPlan:
        """Create a new shipment plan."""
        logger.info("creating_shipment_plan", user_id=data.user_id, items=len(data.items))

        try:
            result = (
                self.db.table(self.plans_table)
                .insert(to_insert_payload(data))
                .execute()
            )
            plan = ShipmentPlan(**result.data[0])

            logger.info("shipment_plan_created", plan_id=plan.id)
            return plan

        except Exception as e:
            logger.error("create_shipment_plan_failed", user_id=data.user_id, error=str(e))
            raise DatabaseError("insert", str(e))


# Singleton instance for convenience
_shipment_service: Optional[ShipmentService] = None


def get_shipment_service() -> ShipmentService:
    """Get or create ShipmentService instance."""
    global _shipment_service
    if _shipment_service is None:
        _shipment_service = ShipmentService()
    return _shipment_service
