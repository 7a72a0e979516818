"""
FBA Warehouse application entry point.

Configures logging and wires the store and the SP-API client together.
The UI layer imports from here.
"""

import logging
from typing import Optional

import structlog

from config import get_settings, check_connection
from integrations.amazon_sp_api import AmazonSpApiClient, get_sp_api_client
from store import Store


def configure_logging() -> None:
    """Configure structured logging (JSON in production, console otherwise)."""
    settings = get_settings()

    logging.basicConfig(format="%(message)s", level=settings.log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer() if settings.is_production
                else structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger(__name__)


def create_store() -> Store:
    """
    Build the application store.

    Logs database health on the way, like a server would on startup.
    """
    settings = get_settings()
    logger.info(
        "application_starting",
        environment=settings.environment,
        debug=settings.debug
    )

    db_status = check_connection()
    if db_status["status"] == "healthy":
        logger.info(
            "database_connected",
            products=db_status["products_count"],
            shipments=db_status["shipments_count"]
        )
    else:
        logger.error("database_connection_failed", error=db_status.get("error"))

    return Store()


def connect_sp_api(
    store: Store,
    user_id: str,
    client: Optional[AmazonSpApiClient] = None
) -> Optional[AmazonSpApiClient]:
    """
    Load the user's Amazon credentials into the SP-API client.

    Returns:
        The client, or None if the user has no credentials saved
    """
    credentials = store.settings.fetch_amazon_credentials(user_id)
    if credentials is None:
        logger.warning("sp_api_not_connected", user_id=user_id, error=store.settings.state.error)
        return None

    client = client or get_sp_api_client()
    client.set_credentials(credentials)
    return client
