# api_client.py
import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from config import Settings, get_settings

logger = logging.getLogger(__name__)

# The server folds PM and Evening orders into one query
ORDER_TYPE_PARAMS = {
    "AM": "AM",
    "Evening": "PM + Evening",
}


class ApiError(Exception):
    """Raised when the order-query service can't be reached or rejects a request."""


class ApiClient:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

        if self.settings.token:
            self.session.headers["Authorization"] = f"Bearer {self.settings.token}"

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.settings.base_url}{path}"
        attempts = self.settings.max_retries
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                resp = self.session.get(url, params=params, timeout=self.settings.timeout_seconds)
                resp.raise_for_status()
                return resp.json()
            except requests.HTTPError as e:
                # the server answered; retrying won't change its mind
                raise ApiError(f"GET {path} failed: {e}") from e
            except (requests.RequestException, ValueError) as e:
                last_error = e
                logger.warning("GET %s failed (%d/%d): %s", path, attempt, attempts, e)

        logger.error("Giving up on GET %s: %s", path, last_error)
        raise ApiError(f"GET {path} failed after {attempts} attempts: {last_error}") from last_error

    @staticmethod
    def _unwrap(payload: Any, what: str) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected {what} response: {payload!r}")
        if not payload.get("success"):
            raise ApiError(payload.get("message") or f"Failed to fetch {what}")
        return payload.get("data") or {}

    def get_brand_report(self, from_date: str, to_date: str, order_type: str, brand: str) -> Dict[str, Any]:
        """
        Returns the `data` part of the brand report response:
          {"orders": [...], "summary": {"total_orders", "total_products", "total_amount"}}
        """
        params = {
            "from_date": from_date,
            "to_date": to_date,
            "order_type": ORDER_TYPE_PARAMS.get(order_type, order_type),
            "brand": brand,
        }
        data = self._unwrap(self._get("/brand_report", params=params), "brand report")
        logger.info(
            "Fetched brand report %s..%s %s %s: %d orders",
            from_date, to_date, order_type, brand, len(data.get("orders") or []),
        )
        return data

    def get_unique_brands(self) -> List[str]:
        data = self._unwrap(self._get("/fetch_unique_brands"), "brands")
        return list(data.get("brands") or [])

    def get_routes(self) -> List[Dict[str, Any]]:
        routes = self._get("/routes_crud")
        if not isinstance(routes, list):
            raise ApiError(f"Unexpected routes response: {routes!r}")
        return sorted(routes, key=lambda r: r.get("id") or 0)

    def get_item_report(
            self,
            from_date: str,
            to_date: str,
            routes: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Item-wise quantities per route. No routes means all routes.
        """
        params = {"from_date": from_date, "to_date": to_date}
        if routes:
            params["route"] = ",".join(routes)

        payload = self._get("/item_report", params=params)
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected item report response: {payload!r}")
        return list(payload.get("itemReportData") or [])

    def get_invoices(self, start_date: str = "", end_date: str = "") -> List[Dict[str, Any]]:
        """
        Tally invoices for a date range. Each invoice carries its line items:
          {"invoice_id", "customer_name", "customer_mobile", "invoice_date",
           "voucher_date", "items": [{"product_description", "hsn", "quantity",
           "rate", "amount", "gst_percentage", ...}]}
        Dates are unix seconds.
        """
        payload = self._get("/fetch-all-invoices", params={"startDate": start_date, "endDate": end_date})
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected invoices response: {payload!r}")
        invoices = list(payload.get("data") or [])
        logger.info("Fetched %d invoices %s..%s", len(invoices), start_date, end_date)
        return invoices

    def get_receipts(self, start_date: str = "", end_date: str = "") -> List[Dict[str, Any]]:
        """
        Customer payments: {"transaction_id", "customer_id", "customer_name",
        "payment_date" (YYYY-MM-DD), "payment_method", "payment_amount"}.
        """
        params = {}
        if start_date:
            params["start_date"] = start_date
        if end_date:
            params["end_date"] = end_date

        payload = self._get("/fetch-all-receipts", params=params)
        receipts = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(receipts, list):
            raise ApiError(f"Unexpected receipts response: {payload!r}")
        logger.info("Fetched %d receipts %s..%s", len(receipts), start_date, end_date)
        return receipts
