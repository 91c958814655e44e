# textile_orders/services/catalog_client.py
from typing import List

import requests
from pydantic import ValidationError

from textile_orders.domain.line_item import ProductType
from textile_orders.domain.schemas import CatalogProduct
from textile_orders.utils.retry import http_retry
from textile_orders.utils.settings import CATALOG_SERVICE_URL, CATALOG_TIMEOUT_SECONDS
from textile_orders.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogClient:
    """
    Read-only client of the external product catalog (thread purchases, fabric production).
    Responses are a point-in-time snapshot, stock is checked again only when an item is added.
    """

    def __init__(self, base_url: str | None = None, timeout: int | None = None):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout or CATALOG_TIMEOUT_SECONDS

    @http_retry()
    def _get(self, path: str):
        url = f"{self.base_url}{path}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def fetch_products(self, product_type: ProductType) -> List[CatalogProduct]:
        raw = self._get(f"/catalog/{product_type.value.lower()}")
        if not isinstance(raw, list):
            raise ValueError(f"Unexpected catalog response for {product_type.value}")

        products = []
        for entry in raw:
            if not isinstance(entry, dict):
                logger.warning(f"Skipping malformed catalog entry: {entry!r}")
                continue
            try:
                products.append(CatalogProduct.model_validate({**entry, "product_type": product_type}))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {product_type.value} catalog entry {entry.get('id')}: {e}")
        return products

    def fetch_product(self, product_type: ProductType, product_id: int) -> CatalogProduct:
        for product in self.fetch_products(product_type):
            if product.id == product_id:
                return product
        raise LookupError(f"{product_type.value} product {product_id} not found in catalog")
