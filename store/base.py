"""
Shared machinery for state slices.

A slice owns a pydantic state model. Each backend operation runs
through the same lifecycle:

    pending    is_loading=True, error cleared
    fulfilled  payload reduced into state, is_loading=False
    rejected   error message stored, is_loading=False

A rejected operation returns None; the failure is only visible through
state.error.
"""

from functools import wraps
from typing import Any, Callable, Optional
import structlog

from pydantic import BaseModel

logger = structlog.get_logger(__name__)


class SliceState(BaseModel):
    """Fields every slice state carries."""
    is_loading: bool = False
    error: Optional[str] = None


def error_message(error: Exception, default: str) -> str:
    """Human-readable message for state.error."""
    return str(error) or default


def slice_operation(action: str, default_error: str) -> Callable:
    """
    Wrap a slice method in the pending/fulfilled/rejected lifecycle.

    The wrapped method performs the backend call and reduces its result
    into self.state; it returns the payload handed back to the caller.

    Args:
        action: Action name, e.g. "products/fetchProducts"
        default_error: Message used when the exception has none
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self: "Slice", *args, **kwargs) -> Any:
            self._pending(action)
            try:
                payload = func(self, *args, **kwargs)
            except Exception as e:
                self._rejected(action, e, default_error)
                return None
            self._fulfilled(action)
            return payload

        return wrapper

    return decorator


class Slice:
    """Base class for state slices."""

    name: str = ""

    def __init__(self, state: SliceState):
        self.state = state

    def _pending(self, action: str) -> None:
        logger.debug("slice_action", action=f"{action}/pending")
        self.state.is_loading = True
        self.state.error = None

    def _fulfilled(self, action: str) -> None:
        logger.debug("slice_action", action=f"{action}/fulfilled")
        self.state.is_loading = False

    def _rejected(self, action: str, error: Exception, default_error: str) -> None:
        message = error_message(error, default_error)
        logger.error(
            "slice_action_rejected",
            action=f"{action}/rejected",
            error=message,
            error_type=type(error).__name__
        )
        self.state.is_loading = False
        self.state.error = message

    def clear_error(self) -> None:
        self.state.error = None

    def snapshot(self) -> SliceState:
        """Deep copy of the current state."""
        return self.state.model_copy(deep=True)
