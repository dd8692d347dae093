"""
BigCommerce REST repository.

The store is the record of truth for customers, their group membership and
the qualification-date attribute. This repository is the only code that talks
to it; services depend on the methods below and tests swap in a fake.
"""

from __future__ import annotations

import time
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from models.customer import Customer, QualificationRecord
from models.order import LineItem, Order
from utils.error_handling import DirectoryError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class BigCommerceRepository:
    """Customer directory and order source backed by the BigCommerce API."""

    MAX_RATE_LIMIT_RETRIES = 3
    RETRY_BACKOFF_SECONDS = 1.5
    PAGE_LIMIT = 250
    V2_PAGE_LIMIT = 250

    def __init__(
        self,
        store_hash: str,
        api_token: str,
        date_attribute_id: int,
        *,
        base_url: str = "https://api.bigcommerce.com",
        timeout_seconds: float = 20,
        session: Optional[requests.Session] = None,
    ):
        if not store_hash or not api_token:
            raise ValueError("BigCommerceRepository requires store_hash and api_token")

        self.date_attribute_id = int(date_attribute_id)
        self.base_url = f"{base_url.rstrip('/')}/stores/{store_hash.strip()}"
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.headers = {
            "X-Auth-Token": api_token.strip(),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @classmethod
    def from_config(cls, config) -> "BigCommerceRepository":
        return cls(
            config.store_hash,
            config.api_token,
            config.date_attribute_id,
            base_url=config.api_base_url,
            timeout_seconds=config.http_timeout_seconds,
        )

    # ---------------------------------------------------------
    # Low-level request handler
    # ---------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        allow_not_found: bool = False,
    ) -> Any:
        """
        Perform one REST call and return the decoded body.

        429 responses are retried after ``Retry-After``; any other failure
        raises DirectoryError. With ``allow_not_found`` a 404 returns None.
        """
        url = f"{self.base_url}{path}"

        for attempt in range(1, self.MAX_RATE_LIMIT_RETRIES + 1):
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    params=params,
                    json=json,
                    timeout=self.timeout_seconds,
                )
            except requests.RequestException as exc:
                raise DirectoryError(f"{method} {path} failed: {exc}") from exc

            if response.status_code == 429 and attempt < self.MAX_RATE_LIMIT_RETRIES:
                sleep_for = self._retry_delay(response, attempt)
                logger.warning(
                    "Rate limited by store API",
                    extra={"path": path, "attempt": attempt, "sleep_seconds": sleep_for},
                )
                time.sleep(sleep_for)
                continue

            if response.status_code == 404 and allow_not_found:
                return None

            if response.status_code >= 400:
                raise DirectoryError(
                    f"{method} {path} returned {response.status_code}",
                    status_code=response.status_code,
                    detail=(response.text or "")[:300],
                )

            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise DirectoryError(
                    f"{method} {path} returned a body that is not JSON",
                    status_code=response.status_code,
                    detail=(response.text or "")[:300],
                ) from exc

        raise DirectoryError(f"{method} {path} still rate limited", status_code=429)

    def _retry_delay(self, response, attempt: int) -> float:
        """
        Seconds to wait before retrying a 429.

        BigCommerce sends ``X-Rate-Limit-Time-Reset-Ms``; ``Retry-After`` in
        seconds is honoured too. Unparseable values fall back to backoff.
        """
        reset_ms = response.headers.get("X-Rate-Limit-Time-Reset-Ms")
        retry_after = response.headers.get("Retry-After")
        try:
            if reset_ms:
                return max(0.0, float(reset_ms) / 1000)
            if retry_after:
                return max(0.0, float(retry_after))
        except ValueError:
            logger.warning(
                "Unreadable rate limit header",
                extra={"reset_ms": reset_ms, "retry_after": retry_after},
            )
        return self.RETRY_BACKOFF_SECONDS * attempt

    # ---------------------------------------------------------
    # Customers
    # ---------------------------------------------------------
    def fetch_customer(self, customer_id: int) -> Optional[Customer]:
        body = self._request("GET", "/v3/customers", params={"id:in": customer_id}) or {}
        rows = body.get("data") or []
        return Customer.model_validate(rows[0]) if rows else None

    def set_customer_group(self, customer_id: int, group_id: int) -> None:
        """Move a customer into ``group_id``; 0 removes any group."""
        self._request(
            "PUT",
            "/v3/customers",
            json=[{"id": customer_id, "customer_group_id": group_id}],
        )

    # ---------------------------------------------------------
    # Orders
    # ---------------------------------------------------------
    def fetch_order(self, order_id: int) -> Optional[Order]:
        body = self._request("GET", f"/v2/orders/{order_id}", allow_not_found=True)
        if not body:
            return None
        return Order(id=body.get("id", order_id), customer_id=body.get("customer_id") or None)

    def fetch_order_line_items(self, order_id: int) -> List[LineItem]:
        """All product lines of an order, following v2 page numbers."""
        items: List[LineItem] = []
        page = 1
        while True:
            rows = self._request(
                "GET",
                f"/v2/orders/{order_id}/products",
                params={"page": page, "limit": self.V2_PAGE_LIMIT},
                allow_not_found=True,
            ) or []
            items.extend(LineItem.model_validate(row) for row in rows)
            if len(rows) < self.V2_PAGE_LIMIT:
                return items
            page += 1

    # ---------------------------------------------------------
    # Qualification attribute
    # ---------------------------------------------------------
    def fetch_qualification_attribute(self, customer_id: int) -> Optional[QualificationRecord]:
        body = self._request(
            "GET",
            "/v3/customers/attribute-values",
            params={"customer_id:in": customer_id, "attribute_id:in": self.date_attribute_id},
        ) or {}
        for row in body.get("data") or []:
            if row.get("customer_id") == customer_id and row.get("attribute_id") == self.date_attribute_id:
                return QualificationRecord.model_validate(row)
        return None

    def upsert_qualification_attribute(self, customer_id: int, qualified_on: date) -> None:
        """Write the date; the store upserts on customer + attribute."""
        self._request(
            "PUT",
            "/v3/customers/attribute-values",
            json=[
                {
                    "customer_id": customer_id,
                    "attribute_id": self.date_attribute_id,
                    "value": qualified_on.isoformat(),
                }
            ],
        )

    def delete_qualification_attribute(self, record_id: int) -> None:
        self._request("DELETE", "/v3/customers/attribute-values", params={"id:in": record_id})

    def fetch_all_qualification_attributes(self) -> List[QualificationRecord]:
        """Every stored value of the qualification attribute, across all pages."""
        records: List[QualificationRecord] = []
        page = 1
        while True:
            body = self._request(
                "GET",
                "/v3/customers/attribute-values",
                params={
                    "attribute_id:in": self.date_attribute_id,
                    "page": page,
                    "limit": self.PAGE_LIMIT,
                },
            ) or {}
            for row in body.get("data") or []:
                if row.get("attribute_id") == self.date_attribute_id:
                    records.append(QualificationRecord.model_validate(row))

            pagination = (body.get("meta") or {}).get("pagination") or {}
            if page >= int(pagination.get("total_pages") or 1):
                return records
            page += 1

    # ---------------------------------------------------------
    # Store setup
    # ---------------------------------------------------------
    def create_customer_attribute(self, name: str, display_name: str, attr_type: str = "date") -> Optional[int]:
        """Create a global customer attribute and return its id."""
        body = self._request(
            "PUT",
            "/v3/customers/attributes",
            json=[{"name": name, "display_name": display_name, "type": attr_type, "resource": "global"}],
        ) or {}
        rows = body.get("data") or []
        return rows[0].get("id") if rows else None

    def create_webhook(self, scope: str, destination: str, headers: Optional[Dict[str, str]] = None) -> dict:
        body = self._request(
            "POST",
            "/v3/hooks",
            json={"scope": scope, "destination": destination, "is_active": True, "headers": headers or {}},
        ) or {}
        return body.get("data") or {}
