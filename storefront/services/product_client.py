# storefront/services/product_client.py
from typing import Protocol

import requests

from storefront.domain.schemas import Product
from storefront.utils.retry import http_retry
from storefront.utils.settings import PRODUCT_SERVICE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductCatalog(Protocol):
    def get_by_id(self, product_id: str) -> Product | None: ...


class ProductClient:
    """Katalog produktow po HTTP (product-service), tylko odczyt."""

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def fetch_product(self, product_id: str) -> dict | None:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def get_by_id(self, product_id: str) -> Product | None:
        pdata = self.fetch_product(product_id)
        if pdata is None:
            return None
        return Product.model_validate(pdata)
