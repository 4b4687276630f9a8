from __future__ import annotations

from dataclasses import dataclass

from ..models import NewsItem
from .base import BaseClient, expect_list


@dataclass
class NewsClient(BaseClient):
    async def list_news(self) -> list[NewsItem]:
        payload = await self._request("GET", "/api/news", module="news", operation="list_news")
        return [NewsItem.model_validate(item) for item in expect_list(payload, "news")]

    async def create_news(self, item: NewsItem) -> None:
        await self._request(
            "POST",
            "/api/news",
            json_body=item.model_dump(mode="json", by_alias=True, exclude_none=True),
            module="news",
            operation="create_news",
        )
