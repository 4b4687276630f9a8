from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .clients.booking_client import BookingClient
from .clients.news_client import NewsClient
from .clients.orders_client import OrdersClient
from .clients.tires_client import TiresClient
from .config import ClientConfig
from .http_client import HttpClient, TraceContext
from .identity import IdentityStore
from .viewmodels import (
    AdminAppointmentsViewModel,
    AdminNewsViewModel,
    AdminOrdersViewModel,
    BookingViewModel,
    NewsViewModel,
    TireCatalogViewModel,
)


@dataclass
class ApiSession:
    """Wires one HTTP client and the signed-in identity into clients and screens."""

    config: ClientConfig
    identity_store: IdentityStore | None = None
    trace: TraceContext | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        self.identity_store = self.identity_store or IdentityStore()
        self.trace = self.trace or TraceContext()
        self.http = self.http or HttpClient(config=self.config, trace=self.trace)

    @property
    def token(self) -> str | None:
        return self.identity_store.current.token

    def tires_client(self) -> TiresClient:
        return TiresClient(http=self.http, access_token=self.token)

    def booking_client(self) -> BookingClient:
        return BookingClient(http=self.http, access_token=self.token)

    def news_client(self) -> NewsClient:
        return NewsClient(http=self.http, access_token=self.token)

    def orders_client(self) -> OrdersClient:
        return OrdersClient(http=self.http, access_token=self.token)

    def tire_catalog(self) -> TireCatalogViewModel:
        return TireCatalogViewModel(self.tires_client(), self.identity_store.current, self.config)

    def booking(self, service_id: int, service_name: str, selected_date: date | None = None) -> BookingViewModel:
        return BookingViewModel(
            self.booking_client(),
            service_id,
            service_name,
            identity=self.identity_store.current,
            config=self.config,
            selected_date=selected_date,
        )

    def news(self) -> NewsViewModel:
        return NewsViewModel(self.news_client(), self.identity_store.current)

    def admin_news(self) -> AdminNewsViewModel:
        return AdminNewsViewModel(self.news_client(), self.identity_store.current)

    def admin_appointments(self, selected_date: date | None = None) -> AdminAppointmentsViewModel:
        return AdminAppointmentsViewModel(self.booking_client(), self.identity_store.current, selected_date)

    def admin_orders(self) -> AdminOrdersViewModel:
        return AdminOrdersViewModel(self.orders_client(), self.identity_store.current)

    async def aclose(self) -> None:
        await self.http.aclose()
