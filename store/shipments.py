"""
Shipments slice: inbound shipments, their items and shipment plans.

New shipments and plans go to the head of their lists, matching the
newest-first order they are fetched in.
"""

from typing import Optional

from pydantic import Field

from models.shipment import (
    Shipment,
    ShipmentCreate,
    ShipmentFilters,
    ShipmentStatus,
    ShipmentItem,
    ShipmentItemCreate,
    ShipmentPlan,
    ShipmentPlanCreate,
)
from services.shipment_service import ShipmentService, get_shipment_service
from store.base import Slice, SliceState, slice_operation


class ShipmentsState(SliceState):
    shipments: list[Shipment] = Field(default_factory=list)
    # keyed by shipment id
    shipment_items: dict[str, list[ShipmentItem]] = Field(default_factory=dict)
    shipment_plans: list[ShipmentPlan] = Field(default_factory=list)
    selected_shipment: Optional[Shipment] = None
    current_plan: Optional[ShipmentPlan] = None
    filters: ShipmentFilters = Field(default_factory=ShipmentFilters)


class ShipmentsSlice(Slice):
    """Shipment and plan CRUD reduced into local state."""

    name = "shipments"

    def __init__(self, service: Optional[ShipmentService] = None):
        super().__init__(ShipmentsState())
        self._service = service

    @property
    def service(self) -> ShipmentService:
        if self._service is None:
            self._service = get_shipment_service()
        return self._service

    def _replace_shipment(self, shipment: Shipment) -> None:
        for index, existing in enumerate(self.state.shipments):
            if existing.id == shipment.id:
                self.state.shipments[index] = shipment
                break

    # ===================
    # SHIPMENTS
    # ===================

    @slice_operation("shipments/fetchShipments", "Failed to fetch shipments")
    def fetch_shipments(
        self,
        user_id: str,
        filters: Optional[ShipmentFilters] = None
    ) -> list[Shipment]:
        """Load shipments; filters default to the ones held in state."""
        shipments = self.service.get_all(user_id, filters or self.state.filters)
        self.state.shipments = shipments
        return shipments

    @slice_operation("shipments/fetchShipmentById", "Failed to fetch shipment")
    def fetch_shipment_by_id(self, shipment_id: str) -> Shipment:
        shipment = self.service.get_by_id(shipment_id)
        self.state.selected_shipment = shipment
        self._replace_shipment(shipment)
        return shipment

    @slice_operation("shipments/createShipment", "Failed to create shipment")
    def create_shipment(self, data: ShipmentCreate) -> Shipment:
        shipment = self.service.create(data)
        self.state.shipments.insert(0, shipment)
        return shipment

    @slice_operation("shipments/updateShipmentStatus", "Failed to update shipment status")
    def update_shipment_status(self, shipment_id: str, status: ShipmentStatus) -> Shipment:
        shipment = self.service.update_status(shipment_id, status)
        self._replace_shipment(shipment)
        if self.state.selected_shipment and self.state.selected_shipment.id == shipment.id:
            self.state.selected_shipment = shipment
        return shipment

    # ===================
    # SHIPMENT ITEMS
    # ===================

    @slice_operation("shipments/fetchShipmentItems", "Failed to fetch shipment items")
    def fetch_shipment_items(self, shipment_id: str) -> list[ShipmentItem]:
        items = self.service.get_items(shipment_id)
        self.state.shipment_items[shipment_id] = items
        return items

    @slice_operation("shipments/addShipmentItems", "Failed to add shipment items")
    def add_shipment_items(
        self,
        shipment_id: str,
        items: list[ShipmentItemCreate]
    ) -> list[ShipmentItem]:
        added = self.service.add_items(shipment_id, items)
        self.state.shipment_items[shipment_id] = [
            *self.state.shipment_items.get(shipment_id, []),
            *added,
        ]
        return added

    # ===================
    # SHIPMENT PLANS
    # ===================

    @slice_operation("shipments/createShipmentPlan", "Failed to create shipment plan")
    def create_shipment_plan(self, data: ShipmentPlanCreate) -> ShipmentPlan:
        plan = self.service.create_plan(data)
        self.state.shipment_plans.insert(0, plan)
        self.state.current_plan = plan
        return plan

    @slice_operation("shipments/fetchShipmentPlans", "Failed to fetch shipment plans")
    def fetch_shipment_plans(self, user_id: str) -> list[ShipmentPlan]:
        plans = self.service.get_plans(user_id)
        self.state.shipment_plans = plans
        return plans

    # ===================
    # LOCAL REDUCERS
    # ===================

    def set_filters(self, filters: ShipmentFilters) -> None:
        self.state.filters = filters

    def select_shipment(self, shipment: Optional[Shipment]) -> None:
        self.state.selected_shipment = shipment

    def set_current_plan(self, plan: Optional[ShipmentPlan]) -> None:
        self.state.current_plan = plan
