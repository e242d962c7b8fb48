from .base import BaseClient
from .products_client import ProductsClient
from .resource_client import TOTAL_COUNT_HEADER, ResourceClient, parse_total_count

__all__ = [
    "BaseClient",
    "ProductsClient",
    "ResourceClient",
    "TOTAL_COUNT_HEADER",
    "parse_total_count",
]
