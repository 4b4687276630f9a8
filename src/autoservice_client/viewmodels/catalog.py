from __future__ import annotations

from typing import Any, Sequence

from ..clients.tires_client import TiresClient
from ..config import ClientConfig
from ..filtering import FilterEngine
from ..identity import ANONYMOUS, Identity
from ..models import Tire
from ..purchase import PurchaseAttempt, PurchaseCoordinator, PurchaseState
from ..tasks import TaskHandle
from .base import ScreenViewModel


class TireCatalogViewModel(ScreenViewModel[Tire]):
    screen_name = "tire_catalog"
    load_key = "load_tires"

    def __init__(
        self,
        client: TiresClient,
        identity: Identity = ANONYMOUS,
        config: ClientConfig | None = None,
    ) -> None:
        super().__init__(identity)
        config = config or ClientConfig()
        self.client = client
        self.filters: FilterEngine[Tire] = FilterEngine(
            debounce_seconds=config.filter_debounce_seconds,
            on_update=lambda _visible: self._notify(),
        )
        self.purchases = PurchaseCoordinator(
            client,
            reload=self._reload_after_purchase,
            set_size=config.purchase_set_size,
            stock_conflict_statuses=config.stock_conflict_statuses,
        )
        self.last_purchased_name: str | None = None

    @property
    def derived_items(self) -> list[Tire]:
        return list(self.filters.visible)

    @property
    def available_brands(self) -> list[str]:
        return self.filters.available_brands

    @property
    def price_range(self) -> tuple[float, float]:
        # Bounds for the price sliders.
        return self.filters.price_range

    def get_tire(self, item_id: int) -> Tire | None:
        return next((tire for tire in self.state.items if tire.id == item_id), None)

    def is_in_stock(self, tire: Tire) -> bool:
        return self.purchases.has_local_stock(tire)

    def set_filter_field(self, name: str, value: Any) -> None:
        self.filters.set_field(name, value)

    def toggle_brand(self, brand: str) -> None:
        self.filters.toggle_brand(brand)

    def reset_filters(self) -> None:
        self.filters.reset()

    async def purchase(self, item_id: int) -> PurchaseAttempt | None:
        """Buy one set of ``item_id``; returns ``None`` once the screen is closed."""
        tire = self.get_tire(item_id)
        if tire is None:
            attempt = self.purchases.reject(item_id, "Item not found")
            self._set_message(attempt.message)
            return attempt
        if self.purchases.is_submitting(item_id):
            # Rejected without a round trip; the running commit keeps its handle.
            attempt = await self.purchases.purchase(tire)
            self._set_message(attempt.message)
            return attempt

        task = self.tasks.schedule(f"purchase:{item_id}", lambda handle: self._purchase(handle, tire))
        if task is None:
            return None
        self.last_purchased_name = None
        self._set_message(None)
        return await task

    async def _purchase(self, handle: TaskHandle, tire: Tire) -> PurchaseAttempt:
        attempt = await self.purchases.purchase(tire)

        def show_outcome() -> None:
            if attempt.state is PurchaseState.COMMITTED:
                self.last_purchased_name = tire.display_name
                self._message = None
                self._notify()
            elif attempt.message is not None:
                self._set_message(attempt.message)

        self.tasks.apply(handle, show_outcome)
        return attempt

    def acknowledge_purchase(self, item_id: int) -> None:
        self.purchases.acknowledge(item_id)
        self.last_purchased_name = None
        self._notify()

    def close(self) -> None:
        self.filters.close()
        super().close()

    async def _fetch(self) -> Sequence[Tire]:
        return await self.client.list_tires()

    def _on_items_loaded(self, items: list[Tire]) -> None:
        self.filters.set_source(items)

    async def _reload_after_purchase(self) -> None:
        task = self.load()
        if task is not None:
            await task
