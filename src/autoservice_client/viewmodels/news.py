from __future__ import annotations

import asyncio
from typing import Any, Sequence

from ..clients.news_client import NewsClient
from ..errors import classify
from ..identity import ANONYMOUS, Identity
from ..logger import get_logger, log_action
from ..models import NewsItem
from ..tasks import TaskHandle
from .base import ScreenViewModel

logger = get_logger(__name__)


class NewsViewModel(ScreenViewModel[NewsItem]):
    screen_name = "news"
    load_key = "load_news"

    def __init__(self, client: NewsClient, identity: Identity = ANONYMOUS) -> None:
        super().__init__(identity)
        self.client = client

    async def _fetch(self) -> Sequence[NewsItem]:
        return await self.client.list_news()


class AdminNewsViewModel(ScreenViewModel[NewsItem]):
    """Publishing form for news posts. Holds no collection of its own."""

    screen_name = "admin_news"
    load_key = "publish_news"
    requires_admin = True

    def __init__(self, client: NewsClient, identity: Identity) -> None:
        super().__init__(identity)
        self.client = client
        self.title = ""
        self.content = ""
        self.image_url = ""
        self.show_success = False

    @property
    def is_valid(self) -> bool:
        return bool(self.title.strip()) and bool(self.content.strip())

    def load(self) -> None:
        # Nothing to fetch for a form.
        return None

    def publish(self) -> asyncio.Task[Any] | None:
        self._require_admin(self.load_key)
        if not self.is_valid:
            self._set_message("Title and content are required")
            return None
        item = NewsItem(
            title=self.title.strip(),
            content=self.content.strip(),
            image_url=self.image_url.strip() or None,
        )
        return self.tasks.schedule(self.load_key, lambda handle: self._publish(handle, item))

    async def _publish(self, handle: TaskHandle, item: NewsItem) -> bool:
        def start() -> None:
            self.state.is_loading = True
            self.show_success = False
            self._message = None
            self._notify()

        if not self.tasks.apply(handle, start):
            return False
        try:
            await self.client.create_news(item)
        except Exception as exc:
            kind = classify(exc)

            def fail() -> None:
                self.state.is_loading = False
                self._set_error(kind, action="publish")

            self.tasks.apply(handle, fail)
            return False

        def succeed() -> None:
            self.state.is_loading = False
            self.show_success = True
            self.clear_form()
            log_action(logger, module=self.screen_name, action="publish", outcome="success")

        return self.tasks.apply(handle, succeed)

    def clear_form(self) -> None:
        self.title = ""
        self.content = ""
        self.image_url = ""
        self._notify()
