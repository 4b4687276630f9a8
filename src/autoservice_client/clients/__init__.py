from .base import BaseClient
from .booking_client import BookingClient
from .news_client import NewsClient
from .orders_client import OrdersClient
from .tires_client import TiresClient

__all__ = ["BaseClient", "BookingClient", "NewsClient", "OrdersClient", "TiresClient"]
