"""
Managed Backend Client

HTTP client for the managed backend's REST interface (tables under
/rest/v1, server functions under /rest/v1/rpc). Implements the same
collaborator methods as InMemoryBackend.
"""

import logging
from datetime import date
from typing import Any, Callable, Optional, TypeVar

import httpx

from ..core.errors import BackendError
from ..models.catalog import CatalogItem
from ..models.order import OrderItemsUpdate, OrderPayload, OrderReceipt, StoredOrder
from ..models.promotion import Promotion
from ..models.settlement import DetectedReservation, GuestContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

MENU_COLUMNS = "id,name,price,category,is_available"
PROMOTION_COLUMNS = "id,name,promotion_code,discount_percentage,discount_amount,description"
ORDER_COLUMNS = "id,status,items,total,payment_method,order_type,source,created_at,updated_at"


class BackendClient:
    """
    Client for the managed backend.

    Any failed call, including a 2xx body that does not decode to the
    expected rows, is raised as BackendError so the POS core can turn it
    into a recoverable outcome.
    """

    def __init__(
        self,
        backend_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize backend client.

        Args:
            backend_url: Base URL of the managed backend
            api_key: Service key sent as apikey and bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = backend_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )
        self._api_key = api_key

        if not api_key:
            logger.warning("No backend API key provided - requests will be anonymous")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _generate_headers(self, return_representation: bool = False) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        if return_representation:
            headers["Prefer"] = "return=representation"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        params: Optional[dict[str, str]] = None,
        return_representation: bool = False,
    ) -> Any:
        """Make an HTTP request and decode the JSON body"""
        try:
            response = await self._http_client.request(
                method=method,
                url=path,
                headers=self._generate_headers(return_representation),
                json=body,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise BackendError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise BackendError(f"{method} {path} returned {response.status_code}")

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Non-JSON response: {method} {path} - {response.text[:200]}")
            raise BackendError(f"{method} {path} returned a non-JSON body") from e

    @staticmethod
    def _parse(what: str, build: Callable[[], T]) -> T:
        """Map decoded rows to models, raising BackendError on bad shapes"""
        try:
            return build()
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Malformed {what} response: {e}")
            raise BackendError(f"Malformed {what} response") from e

    async def _rpc(self, function: str, args: dict[str, Any]) -> Any:
        """Call a server-side function; it runs in a single transaction"""
        return await self._request("POST", f"/rest/v1/rpc/{function}", body=args)

    @staticmethod
    def _single(result: Any) -> Any:
        """RPC functions may answer with one row or a one-row list"""
        if isinstance(result, list):
            return result[0] if result else None
        return result

    # ==================== Catalog ====================

    async def search_catalog(self, query: Optional[str] = None) -> list[CatalogItem]:
        """Search available menu items by name"""
        params = {
            "select": MENU_COLUMNS,
            "is_available": "eq.true",
            "order": "name.asc",
        }
        if query:
            params["name"] = f"ilike.*{query.strip()}*"

        rows = await self._request("GET", "/rest/v1/menu_items", params=params)
        return self._parse("menu_items", lambda: [CatalogItem(**row) for row in rows or []])

    async def get_catalog_item(self, item_id: str) -> Optional[CatalogItem]:
        rows = await self._request(
            "GET",
            "/rest/v1/menu_items",
            params={"select": MENU_COLUMNS, "id": f"eq.{item_id}"},
        )
        return self._parse("menu_items", lambda: CatalogItem(**rows[0]) if rows else None)

    # ==================== Promotions ====================

    @staticmethod
    def _to_promotion(row: dict) -> Promotion:
        # Campaign rows may carry a zero in the unused discount column
        percentage = row.get("discount_percentage") or None
        return Promotion(
            id=row["id"],
            name=row["name"],
            code=row.get("promotion_code") or "",
            discount_percentage=percentage,
            discount_amount=row.get("discount_amount") if percentage is None else None,
            description=row.get("description"),
        )

    def _active_promotion_params(self) -> dict[str, str]:
        today = date.today().isoformat()
        return {
            "select": PROMOTION_COLUMNS,
            "is_active": "eq.true",
            "start_date": f"lte.{today}",
            "end_date": f"gte.{today}",
        }

    async def resolve_promotion(self, code: str) -> Optional[Promotion]:
        """Get an active promotion by code"""
        params = self._active_promotion_params()
        params["promotion_code"] = f"eq.{code}"
        rows = await self._request("GET", "/rest/v1/promotion_campaigns", params=params)
        return self._parse(
            "promotion_campaigns",
            lambda: self._to_promotion(rows[0]) if rows else None,
        )

    async def list_active_promotions(self) -> list[Promotion]:
        rows = await self._request(
            "GET",
            "/rest/v1/promotion_campaigns",
            params=self._active_promotion_params(),
        )
        return self._parse(
            "promotion_campaigns",
            lambda: [self._to_promotion(row) for row in rows or [] if row.get("promotion_code")],
        )

    # ==================== Guests ====================

    async def detect_active_guest(self, context: GuestContext) -> Optional[DetectedReservation]:
        """Find a checked-in guest for a table/room reference or phone"""
        result = self._single(await self._rpc(
            "detect_active_guest",
            {"table_ref": context.table_ref, "phone": context.phone},
        ))
        return self._parse(
            "detect_active_guest",
            lambda: DetectedReservation(**result) if result else None,
        )

    # ==================== Orders ====================

    async def create_order(self, payload: OrderPayload) -> OrderReceipt:
        """Create an order; all lines are written atomically"""
        result = self._single(
            await self._rpc("create_pos_order", {"payload": payload.model_dump(mode="json")})
        )
        if not isinstance(result, dict) or not result.get("order_id"):
            logger.error(f"create_pos_order returned no order id: {result!r}")
            raise BackendError("create_pos_order returned no order id")
        return OrderReceipt(order_id=str(result["order_id"]))

    async def update_order_items(self, order_id: str, update: OrderItemsUpdate) -> None:
        """Apply an order edit as one delete set and one insert set"""
        await self._rpc(
            "update_order_items",
            {"order_id": order_id, **update.model_dump(mode="json")},
        )

    @staticmethod
    def _to_stored_order(row: dict) -> StoredOrder:
        return StoredOrder(
            order_id=row["id"],
            status=row.get("status") or "completed",
            lines=row.get("items") or [],
            total=row["total"],
            payment_method=row.get("payment_method"),
            order_mode=row.get("order_type"),
            source=row.get("source"),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def get_order(self, order_id: str) -> Optional[StoredOrder]:
        rows = await self._request(
            "GET",
            "/rest/v1/orders",
            params={"select": ORDER_COLUMNS, "id": f"eq.{order_id}"},
        )
        if not rows:
            return None
        return self._parse("orders", lambda: self._to_stored_order(rows[0]))
