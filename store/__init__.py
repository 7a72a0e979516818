"""
Application state.

Four independent slices aggregated by Store. Slices never read each
other's state.
"""

from typing import Optional

from store.base import Slice, SliceState, slice_operation
from store.auth import AuthSlice, AuthState
from store.products import ProductsSlice, ProductsState
from store.shipments import ShipmentsSlice, ShipmentsState
from store.settings import SettingsSlice, SettingsState


class Store:
    """Top-level aggregation of the state slices."""

    def __init__(
        self,
        auth: Optional[AuthSlice] = None,
        products: Optional[ProductsSlice] = None,
        shipments: Optional[ShipmentsSlice] = None,
        settings: Optional[SettingsSlice] = None
    ):
        self.auth = auth or AuthSlice()
        self.products = products or ProductsSlice()
        self.shipments = shipments or ShipmentsSlice()
        self.settings = settings or SettingsSlice()

    @property
    def slices(self) -> dict[str, Slice]:
        return {
            s.name: s
            for s in (self.auth, self.products, self.shipments, self.settings)
        }

    def get_state(self) -> dict[str, SliceState]:
        """Snapshot of every slice's state, keyed by slice name."""
        return {name: s.snapshot() for name, s in self.slices.items()}


__all__ = [
    "Store",
    "Slice",
    "SliceState",
    "slice_operation",
    "AuthSlice",
    "AuthState",
    "ProductsSlice",
    "ProductsState",
    "ShipmentsSlice",
    "ShipmentsState",
    "SettingsSlice",
    "SettingsState",
]
