from __future__ import annotations

from dataclasses import dataclass

from ..idempotency import idempotency_headers, new_idempotency_key
from ..models import CreateOrderRequest, CreateOrderResponse, Tire
from .base import BaseClient, expect_list


@dataclass
class TiresClient(BaseClient):
    async def list_tires(self) -> list[Tire]:
        payload = await self._request("GET", "/api/tires", module="tires", operation="list_tires")
        return [Tire.model_validate(item) for item in expect_list(payload, "tires")]

    async def create_order(
        self,
        item_id: int,
        quantity: int,
        idempotency_key: str | None = None,
    ) -> CreateOrderResponse:
        request = CreateOrderRequest.for_item(item_id, quantity)
        data = await self._request(
            "POST",
            "/api/orders",
            json_body=request.model_dump(mode="json", by_alias=True),
            headers=idempotency_headers(idempotency_key or new_idempotency_key("order-create")),
            module="tires",
            operation="create_order",
        )
        # The shop answers with the bare order id.
        if isinstance(data, int):
            return CreateOrderResponse(order_id=data)
        return CreateOrderResponse.model_validate(data or {})
