from .detail_views import DeleteDialog, EntityDetailView, EntityEditView
from .inline_edit import InlineEditSession
from .list_controller import ListPhase, ListViewController
from .location import Location
from .notifications import Notification, NotificationCenter, NotificationLevel
from .pagination import PaginationState, pagination_from_query, sort_by

__all__ = [
    "DeleteDialog",
    "EntityDetailView",
    "EntityEditView",
    "InlineEditSession",
    "ListPhase",
    "ListViewController",
    "Location",
    "Notification",
    "NotificationCenter",
    "NotificationLevel",
    "PaginationState",
    "pagination_from_query",
    "sort_by",
]
