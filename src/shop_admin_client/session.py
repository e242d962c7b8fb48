"""Wiring for one signed-in admin session.

One :class:`HttpClient` is shared by every resource. Each resource gets its own
client and :class:`EntityStore`, created on first use and reused afterwards, so
a product list and the category lookup it needs observe independent state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .clients import ProductsClient, ResourceClient
from .config import ClientConfig
from .http_client import HttpClient
from .resources import get_resource
from .store import EntityStore
from .tracing import TraceContext
from .ui.detail_views import DeleteDialog, EntityDetailView, EntityEditView
from .ui.list_controller import Confirm, ListViewController, deny_all
from .ui.location import Location
from .ui.notifications import NotificationCenter


@dataclass
class AdminSession:
    config: ClientConfig
    access_token: str | None = None
    trace: TraceContext = field(default_factory=TraceContext)
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    http: HttpClient = field(init=False)
    _clients: dict[str, ResourceClient[Any]] = field(default_factory=dict, init=False, repr=False)
    _stores: dict[str, EntityStore[Any]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.http = HttpClient(config=self.config, trace=self.trace)

    def client(self, name: str) -> ResourceClient[Any]:
        if name not in self._clients:
            spec = get_resource(name)
            if spec.exportable:
                self._clients[name] = ProductsClient(self.http, self.access_token)
            else:
                self._clients[name] = ResourceClient(self.http, self.access_token, resource=spec)
        return self._clients[name]

    def store(self, name: str) -> EntityStore[Any]:
        if name not in self._stores:
            self._stores[name] = EntityStore(self.client(name))
        return self._stores[name]

    def _lookup_store(self, resource: str | None) -> EntityStore[Any] | None:
        return self.store(resource) if resource else None

    def list_controller(
        self,
        name: str,
        *,
        location: Location | None = None,
        confirm: Confirm = deny_all,
    ) -> ListViewController[Any]:
        spec = get_resource(name)
        return ListViewController(
            store=self.store(name),
            location=location or Location(pathname=f"/{spec.name}"),
            notifications=self.notifications,
            confirm=confirm,
            lookup_store=self._lookup_store(spec.list_lookup.resource if spec.list_lookup else None),
            export_dir=self.config.export_dir,
            items_per_page=self.config.page_size,
        )

    def detail_view(self, name: str) -> EntityDetailView[Any]:
        return EntityDetailView(store=self.store(name))

    def edit_view(self, name: str) -> EntityEditView[Any]:
        spec = get_resource(name)
        return EntityEditView(
            store=self.store(name),
            lookup_store=self._lookup_store(spec.edit_lookup.resource if spec.edit_lookup else None),
            notifications=self.notifications,
        )

    def delete_dialog(self, name: str) -> DeleteDialog[Any]:
        return DeleteDialog(store=self.store(name), notifications=self.notifications)
