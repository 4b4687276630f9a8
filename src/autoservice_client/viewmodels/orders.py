from __future__ import annotations

from typing import Sequence

from ..clients.orders_client import OrdersClient
from ..identity import Identity
from ..models import AdminOrder
from .base import ScreenViewModel


class AdminOrdersViewModel(ScreenViewModel[AdminOrder]):
    screen_name = "admin_orders"
    load_key = "load_orders"
    requires_admin = True

    def __init__(self, client: OrdersClient, identity: Identity) -> None:
        super().__init__(identity)
        self.client = client

    async def _fetch(self) -> Sequence[AdminOrder]:
        return await self.client.list_admin_orders()
