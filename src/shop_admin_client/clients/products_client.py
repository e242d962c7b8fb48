from __future__ import annotations

from dataclasses import dataclass, field

from ..models import ExportFormat, Product
from ..resources import PRODUCT, ResourceSpec
from .resource_client import ResourceClient


@dataclass
class ProductsClient(ResourceClient[Product]):
    resource: ResourceSpec[Product] | None = field(default=PRODUCT, kw_only=True)

    def export(self, export_format: ExportFormat | str = ExportFormat.TXT) -> bytes:
        resolved = ExportFormat(export_format)
        return self._download(
            f"{self.path}/export",
            params={"format": resolved.value},
            module=self.spec.name,
            operation="export",
        )
