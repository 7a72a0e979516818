"""
Amazon Selling Partner API client.

Talks to the SP-API through the proxy at {SP_API_BASE_URL}/api/amazon.
Every call goes through _send(), which:
    - waits until the minimum delay since the previous call start has passed
    - attaches the held access token as x-amz-access-token
    - on a 401, refreshes the token once and replays the request

Failures other than the single retried 401 propagate as requests
exceptions, unchanged.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
import threading
import time

import requests
import structlog

from config import get_settings
from exceptions import MissingRefreshTokenError
from models.product import ProductCondition, ProductCreate
from models.shipment import ShipmentPlan
from models.user import AmazonCredentials

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_HEADER = "x-amz-access-token"
DEFAULT_RATE_LIMIT_SECONDS = 0.5
DEFAULT_SHIP_TO_COUNTRY_CODE = "US"


@dataclass(frozen=True)
class SpApiRequest:
    """
    One outgoing call, as replayed after a token refresh.

    retries_left counts the remaining 401 replays.
    """

    method: str
    path: str
    params: Optional[dict] = None
    json: Optional[Any] = None
    retries_left: int = 1

    def replay(self) -> "SpApiRequest":
        """Same request with one fewer retry available."""
        return replace(self, retries_left=self.retries_left - 1)


class RateLimiter:
    """
    Fixed minimum delay between the start of consecutive calls.

    Global across endpoints. Callers wait in turn on the lock, so starts
    are spaced out but their order among waiters is not guaranteed.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_RATE_LIMIT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request_time: Optional[float] = None
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Block until a new call may start, then record its start."""
        with self._lock:
            if self._last_request_time is not None:
                elapsed = self._clock() - self._last_request_time
                if elapsed < self.min_interval:
                    delay = self.min_interval - elapsed
                    logger.debug("sp_api_rate_limited", delay_ms=round(delay * 1000))
                    self._sleep(delay)
            self._last_request_time = self._clock()


class SpApiSession:
    """
    Holder of the active credential set.

    The only place credentials are read or mutated; all mutation happens
    under lock.
    """

    def __init__(self, credentials: Optional[AmazonCredentials] = None):
        self._credentials = credentials
        self.lock = threading.RLock()

    @property
    def credentials(self) -> Optional[AmazonCredentials]:
        return self._credentials

    @property
    def access_token(self) -> Optional[str]:
        return self._credentials.access_token if self._credentials else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._credentials.refresh_token if self._credentials else None

    def set_credentials(self, credentials: Optional[AmazonCredentials]) -> None:
        with self.lock:
            self._credentials = credentials

    def apply_token(self, access_token: str, expires_in: float) -> None:
        """Store a freshly issued access token and its expiry."""
        with self.lock:
            if self._credentials is None:
                return
            self._credentials.access_token = access_token
            self._credentials.access_token_expiry = (
                datetime.now(timezone.utc) + timedelta(seconds=expires_in)
            )


class AmazonSpApiClient:
    """
    SP-API client.

    Methods map 1:1 to proxy endpoints and return the parsed JSON body
    unmodified. Parameter dicts use the SP-API's own (camelCase) keys.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[SpApiSession] = None,
        rate_limiter: Optional[RateLimiter] = None,
        http: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        ship_to_country_code: str = DEFAULT_SHIP_TO_COUNTRY_CODE
    ):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api/amazon"
        self.session = session or SpApiSession()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.timeout = timeout
        self.ship_to_country_code = ship_to_country_code

        if http is None:
            http = requests.Session()
            http.headers.update({"Content-Type": "application/json"})
        self.http = http

    def set_credentials(self, credentials: Optional[AmazonCredentials]) -> None:
        """Replace the held credential set. No validation."""
        self.session.set_credentials(credentials)
        logger.info(
            "sp_api_credentials_set",
            seller_id=credentials.seller_id if credentials else None
        )

    # ===================
    # TRANSPORT
    # ===================

    def _send(self, request: SpApiRequest) -> Any:
        self.rate_limiter.wait()

        access_token = self.session.access_token
        headers = {}
        if access_token:
            headers[ACCESS_TOKEN_HEADER] = access_token

        logger.debug(
            "sp_api_request",
            method=request.method,
            path=request.path,
            retries_left=request.retries_left
        )

        response = self.http.request(
            request.method,
            f"{self.api_url}{request.path}",
            params=request.params,
            json=request.json,
            headers=headers,
            timeout=self.timeout
        )

        if response.status_code == 401 and request.retries_left > 0:
            logger.info("sp_api_unauthorized_refreshing", path=request.path)
            self._refresh_after_unauthorized(access_token)
            return self._send(request.replay())

        if not response.ok:
            logger.warning(
                "sp_api_request_failed",
                method=request.method,
                path=request.path,
                status_code=response.status_code
            )
        response.raise_for_status()

        if not response.content:
            return None
        return response.json()

    def _get(self, path: str, params: Optional[dict] = None) -> Any:
        return self._send(SpApiRequest("GET", path, params=params))

    def _post(self, path: str, body: Any) -> Any:
        return self._send(SpApiRequest("POST", path, json=body))

    def _put(self, path: str, body: Any) -> Any:
        return self._send(SpApiRequest("PUT", path, json=body))

    # ===================
    # TOKEN REFRESH
    # ===================

    def _refresh_after_unauthorized(self, rejected_token: Optional[str]) -> None:
        """
        Refresh unless another caller already replaced the rejected token.
        """
        with self.session.lock:
            current = self.session.access_token
            if current and current != rejected_token:
                logger.debug("sp_api_token_already_refreshed")
                return
            self.refresh_access_token()

    def refresh_access_token(self) -> None:
        """
        Exchange the held refresh token for a new access token.

        Raises:
            MissingRefreshTokenError: If no refresh token is held (no call is made)
            requests.RequestException: If the refresh endpoint fails
        """
        with self.session.lock:
            refresh_token = self.session.refresh_token
            if not refresh_token:
                logger.error("sp_api_refresh_without_token")
                raise MissingRefreshTokenError()

            try:
                response = self.http.post(
                    f"{self.api_url}/auth/refresh",
                    json={"refreshToken": refresh_token},
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
            except requests.RequestException as e:
                logger.error("sp_api_token_refresh_failed", error=str(e))
                raise

            self.session.apply_token(data["access_token"], data["expires_in"])
            logger.info("sp_api_token_refreshed", expires_in=data["expires_in"])

    # ===================
    # SELLERS
    # ===================

    def get_marketplace_participations(self) -> Any:
        return self._get("/sellers/v1/marketplaceParticipations")

    # ===================
    # CATALOG
    # ===================

    def search_catalog_items(self, params: dict) -> Any:
        """
        Search the catalog.

        params: marketplaceIds (required), keywords, includedData,
        pageSize, pageToken
        """
        return self._get("/catalog/2022-04-01/items", params=params)

    def get_catalog_item(self, asin: str, marketplace_ids: list[str]) -> Any:
        return self._get(
            f"/catalog/2022-04-01/items/{asin}",
            params={"marketplaceIds": ",".join(marketplace_ids)}
        )

    # ===================
    # LISTINGS
    # ===================

    def get_listings_item(self, seller_id: str, sku: str, marketplace_ids: list[str]) -> Any:
        return self._get(
            f"/listings/2021-08-01/items/{seller_id}/{sku}",
            params={"marketplaceIds": ",".join(marketplace_ids)}
        )

    # ===================
    # FBA INBOUND
    # ===================

    def get_inbound_guidance(self, params: dict) -> Any:
        """params: marketplaceId, sellerSKUList and/or asinList"""
        return self._get("/fba/inbound/v0/itemsGuidance", params=params)

    def create_inbound_shipment_plan(self, params: dict) -> Any:
        """
        Create an inbound shipment plan.

        params: shipFromAddress, labelPrepPreference,
        inboundShipmentPlanRequestItems, optional shipToCountryCode /
        shipToCountrySubdivisionCode
        """
        return self._post("/fba/inbound/v0/plans", params)

    def create_inbound_shipment(self, params: dict) -> Any:
        """
        Create a shipment from a plan.

        params: shipmentId, inboundShipmentHeader, inboundShipmentItems,
        marketplaceId
        """
        return self._put(f"/fba/inbound/v0/shipments/{params['shipmentId']}", params)

    def update_inbound_shipment(self, shipment_id: str, params: dict) -> Any:
        return self._put(f"/fba/inbound/v0/shipments/{shipment_id}", params)

    def get_shipments(self, params: Optional[dict] = None) -> Any:
        """
        List inbound shipments.

        params: shipmentStatusList, shipmentIdList, lastUpdatedAfter,
        lastUpdatedBefore, queryType (SHIPMENT / DATE_RANGE / NEXT_TOKEN),
        nextToken, marketplaceId
        """
        return self._get("/fba/inbound/v0/shipments", params=params)

    def get_shipment_items(self, params: dict) -> Any:
        """params: shipmentId, marketplaceId"""
        return self._get(
            f"/fba/inbound/v0/shipments/{params['shipmentId']}/items",
            params={"marketplaceId": params["marketplaceId"]}
        )

    def get_labels(self, params: dict) -> Any:
        """
        Get package/pallet labels.

        params: shipmentId, pageType, labelType, numberOfPackages,
        packageLabelsToPrint, numberOfPallets, pageSize, pageStartIndex
        """
        return self._get(
            f"/fba/inbound/v0/shipments/{params['shipmentId']}/labels",
            params=params
        )

    def get_prep_instructions(self, params: dict) -> Any:
        """params: shipToCountryCode, sellerSKUList and/or asinList"""
        return self._get("/fba/inbound/v0/prepInstructions", params=params)

    # ===================
    # REPORTS
    # ===================

    def create_report(self, params: dict) -> Any:
        """
        Request a report.

        params: reportType, marketplaceIds, optional dataStartTime,
        dataEndTime, reportOptions
        """
        return self._post("/reports/2021-06-30/reports", params)

    def get_report(self, report_id: str) -> Any:
        return self._get(f"/reports/2021-06-30/reports/{report_id}")

    def get_report_document(self, report_document_id: str) -> Any:
        return self._get(f"/reports/2021-06-30/documents/{report_document_id}")

    def download_report_document(self, url: str) -> str:
        """
        Download a report document from its pre-signed URL.

        Paced like any other call but sent without the access token and
        never retried.
        """
        self.rate_limiter.wait()
        response = self.http.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    # ===================
    # HELPERS
    # ===================

    def import_product_from_amazon(self, asin: str, marketplace_id: str) -> ProductCreate:
        """
        Build a local product draft from a catalog lookup.

        Fields missing from the catalog item get defaults. seller_sku is
        left empty for the user and user_id is left for the caller.
        """
        item = self.get_catalog_item(asin, [marketplace_id]) or {}

        product = ProductCreate(
            user_id=None,
            asin=item.get("asin") or asin,
            seller_sku="",
            product_name=item.get("itemName") or "",
            description=item.get("itemDescription") or "",
            condition=ProductCondition.NEW,
            price=(item.get("price") or {}).get("amount") or 0,
            image_urls=[image["link"] for image in item.get("images") or [] if image.get("link")],
            marketplace_id=marketplace_id,
            fnsku=item.get("fnsku") or "",
        )

        logger.info("product_imported_from_amazon", asin=product.asin)
        return product

    def validate_shipment_plan(self, plan: ShipmentPlan) -> bool:
        """
        Check every plan item has prep instructions without errors.

        Items are checked in order; returns False at the first item whose
        response carries errors.
        """
        for item in plan.items:
            response = self.get_prep_instructions({
                "shipToCountryCode": self.ship_to_country_code,
                "sellerSKUList": [item.seller_sku],
            })

            errors = (response or {}).get("errors")
            if errors:
                logger.error(
                    "prep_instruction_errors",
                    seller_sku=item.seller_sku,
                    errors=errors
                )
                return False

        return True


# Singleton instance
_sp_api_client: Optional[AmazonSpApiClient] = None


def get_sp_api_client() -> AmazonSpApiClient:
    """Get or create the SP-API client configured from settings."""
    global _sp_api_client
    if _sp_api_client is None:
        settings = get_settings()
        _sp_api_client = AmazonSpApiClient(
            base_url=settings.sp_api_base_url,
            rate_limiter=RateLimiter(settings.sp_api_rate_limit_seconds),
            timeout=settings.sp_api_timeout_seconds,
            ship_to_country_code=settings.sp_api_ship_to_country_code,
        )
    return _sp_api_client
