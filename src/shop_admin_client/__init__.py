from .clients import ProductsClient, ResourceClient
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .models import (
    Category,
    CategorySearch,
    Customer,
    CustomerSearch,
    ExportFormat,
    Order,
    OrderSearch,
    PageRequest,
    PageResult,
    Product,
    ProductSearch,
    SortOrder,
)
from .resources import CATEGORY, CUSTOMER, ORDER, PRODUCT, RESOURCES, ResourceSpec, get_resource
from .session import AdminSession
from .store import EntityState, EntityStore
from .tracing import TraceContext
from .validation import ClientValidationError, FieldRule, ValidationIssue

__all__ = [
    "AdminSession",
    "ApiError",
    "AuthError",
    "CATEGORY",
    "CUSTOMER",
    "Category",
    "CategorySearch",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "ConflictError",
    "Customer",
    "CustomerSearch",
    "EntityState",
    "EntityStore",
    "ExportFormat",
    "FieldRule",
    "ForbiddenError",
    "HttpClient",
    "NotFoundError",
    "ORDER",
    "Order",
    "OrderSearch",
    "PRODUCT",
    "PageRequest",
    "PageResult",
    "Product",
    "ProductSearch",
    "ProductsClient",
    "RESOURCES",
    "RateLimitError",
    "ResourceClient",
    "ResourceSpec",
    "ServerError",
    "SortOrder",
    "TraceContext",
    "TransportError",
    "ValidationError",
    "ValidationIssue",
    "get_resource",
    "load_config",
]
