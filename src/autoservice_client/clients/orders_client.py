from __future__ import annotations

from dataclasses import dataclass

from ..models import AdminOrder
from .base import BaseClient, expect_list


@dataclass
class OrdersClient(BaseClient):
    async def list_admin_orders(self) -> list[AdminOrder]:
        payload = await self._request("GET", "/api/admin/orders", module="admin", operation="list_admin_orders")
        return [AdminOrder.model_validate(item) for item in expect_list(payload, "orders")]
