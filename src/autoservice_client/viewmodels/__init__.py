from .appointments import AdminAppointmentsViewModel
from .base import ScreenViewModel
from .booking import BookingViewModel, combine_date_and_time
from .catalog import TireCatalogViewModel
from .news import AdminNewsViewModel, NewsViewModel
from .orders import AdminOrdersViewModel
from .state import RemoteCollectionState, ScreenState, ViewStatus, resolve_view_status

__all__ = [
    "AdminAppointmentsViewModel",
    "AdminNewsViewModel",
    "AdminOrdersViewModel",
    "BookingViewModel",
    "NewsViewModel",
    "RemoteCollectionState",
    "ScreenState",
    "ScreenViewModel",
    "TireCatalogViewModel",
    "ViewStatus",
    "combine_date_and_time",
    "resolve_view_status",
]
