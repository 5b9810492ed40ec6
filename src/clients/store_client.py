# src/clients/store_client.py

"""Client for the store webservice (products and stock_availables)."""

import logging
from enum import Enum
from typing import Any

from curl_cffi import requests as curl_requests

from src.clients.stock_xml import replace_quantity_field
from src.config.settings import Settings, SyncConfig
from src.models.product import ProductIndex, StockRecord, StoreProduct
from src.models.quantity import to_int


class StoreRequestError(Exception):
    """A store call answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code


class UpdateOutcome(Enum):
    """Result of a single stock quantity update."""

    UPDATED = "updated"
    SKIPPED_NO_FIELD = "skipped_no_field"


class StoreClient:
    """Paginated reads and single-record writes against the store API.

    Lists are requested as JSON (``output_format=JSON``); single stock
    records are read and written back as raw XML.  Every call carries
    the API key as the basic-auth username with an empty password.
    """

    PRODUCTS = "products"
    STOCK_AVAILABLES = "stock_availables"

    def __init__(
        self,
        config: SyncConfig,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.logger = logging.getLogger("stock_sync.store")
        self.settings = Settings()
        self.base_url = config.api_base
        self.session = session or curl_requests.Session()
        self._auth = (config.api_key, "")

    # ── Transport ────────────────────────────────────────

    def _check(self, resp: Any, what: str) -> None:
        if not 200 <= resp.status_code < 300:
            raise StoreRequestError(
                resp.status_code, f"{what} failed: {resp.text[:200]}"
            )

    def _get_json(self, resource: str, params: dict[str, str]) -> Any:
        resp = self.session.get(
            f"{self.base_url}/{resource}",
            params={"output_format": "JSON", **params},
            auth=self._auth,
            timeout=self.settings.STORE_TIMEOUT,
        )
        self._check(resp, f"GET {resource}")
        return resp.json()

    def _list(
        self, resource: str, params: dict[str, str],
    ) -> list[dict[str, Any]]:
        """Rows under the top-level *resource* key (empty bodies → [])."""
        data = self._get_json(resource, params)
        if not isinstance(data, dict):
            return []
        rows = data.get(resource) or []
        return list(rows)

    def _paginate(
        self, resource: str, display: str,
    ) -> list[dict[str, Any]]:
        """Fetch every page until an empty or short page comes back."""
        page_size = self.settings.STORE_PAGE_SIZE
        start = 0
        rows: list[dict[str, Any]] = []

        while True:
            batch = self._list(
                resource,
                {"display": display, "limit": f"{start},{page_size}"},
            )
            self.logger.debug(
                "GET %s offset=%d returned %d rows",
                resource,
                start,
                len(batch),
            )
            if not batch:
                break
            rows.extend(batch)
            if len(batch) < page_size:
                break
            start += page_size

        self.logger.info("Fetched %d %s", len(rows), resource)
        return rows

    # ── Bulk reads ───────────────────────────────────────

    @staticmethod
    def _to_product(row: dict[str, Any]) -> StoreProduct:
        return StoreProduct(
            id=to_int(row.get("id")),
            ean=str(row.get("ean13") or "").strip(),
        )

    @staticmethod
    def _to_stock(row: dict[str, Any]) -> StockRecord:
        return StockRecord(
            id=to_int(row.get("id")),
            product_id=to_int(row.get("id_product")),
            quantity=to_int(row.get("quantity")),
        )

    def list_products(self) -> list[StoreProduct]:
        """Every catalog product with its EAN (possibly blank)."""
        rows = self._paginate(self.PRODUCTS, "[id,ean13]")
        return [self._to_product(r) for r in rows]

    def list_products_with_ean(self) -> ProductIndex:
        """Index products by EAN; a repeated EAN keeps the later product."""
        index = ProductIndex()
        products = self.list_products()
        index.total = len(products)

        for product in products:
            if not product.ean:
                index.without_ean.append(product.id)
                continue
            if product.ean in index.by_ean:
                index.duplicated_eans.add(product.ean)
            index.by_ean[product.ean] = product.id

        if index.duplicated_eans:
            self.logger.warning(
                "%d EANs are shared by more than one product",
                len(index.duplicated_eans),
            )
        return index

    def list_stock_availables(self) -> list[StockRecord]:
        """Every stock record."""
        rows = self._paginate(
            self.STOCK_AVAILABLES, "[id,id_product,quantity]"
        )
        return [self._to_stock(r) for r in rows]

    def stock_by_product_id(self) -> dict[int, StockRecord]:
        """Stock records keyed by product id."""
        return {s.product_id: s for s in self.list_stock_availables()}

    # ── Single-record read/write ─────────────────────────

    def _record_url(self, stock_id: int) -> str:
        return f"{self.base_url}/{self.STOCK_AVAILABLES}/{stock_id}"

    def get_stock_record_raw(self, stock_id: int) -> str:
        """Raw XML of one stock record."""
        resp = self.session.get(
            self._record_url(stock_id),
            auth=self._auth,
            timeout=self.settings.STORE_TIMEOUT,
        )
        self._check(resp, f"GET stock {stock_id}")
        return resp.text

    def update_stock_quantity(
        self, stock_id: int, raw_record: str, new_qty: int,
    ) -> UpdateOutcome:
        """Write *raw_record* back with only its quantity replaced.

        Nothing is sent when the record has no recognisable
        ``quantity`` field.
        """
        patched = replace_quantity_field(raw_record, new_qty)
        if patched == raw_record:
            self.logger.warning(
                "No <quantity> field to replace in stock %d", stock_id
            )
            return UpdateOutcome.SKIPPED_NO_FIELD

        resp = self.session.put(
            self._record_url(stock_id),
            data=patched.encode("utf-8"),
            headers={"Content-Type": "text/xml"},
            auth=self._auth,
            timeout=self.settings.STORE_TIMEOUT,
        )
        self._check(resp, f"PUT stock {stock_id}")
        return UpdateOutcome.UPDATED

    # ── Single-product lookups (diagnostics) ─────────────

    def find_products_by_ean(self, ean: str) -> list[StoreProduct]:
        """Products whose ``ean13`` equals *ean*."""
        rows = self._list(
            self.PRODUCTS,
            {"display": "[id,ean13]", "filter[ean13]": ean},
        )
        return [self._to_product(r) for r in rows]

    def find_stock_for_product(self, product_id: int) -> StockRecord | None:
        """First stock record of *product_id*, if any."""
        rows = self._list(
            self.STOCK_AVAILABLES,
            {
                "display": "[id,id_product,quantity]",
                "filter[id_product]": str(product_id),
            },
        )
        return self._to_stock(rows[0]) if rows else None
