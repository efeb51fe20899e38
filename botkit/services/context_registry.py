"""Registry of bot contexts shared by in-flight webhook requests."""

from threading import Lock

import logfire

from botkit.models.context import BotContext


class ContextRegistry:
    """Thread-safe in-memory store of BotContext objects.

    Every context is indexed twice, by page ID and by webhook URL, so a
    lookup can use either key. Reads are plain dict lookups; writes take
    the lock so both indexes always change together.
    """

    def __init__(self, contexts: list[BotContext] | None = None):
        self._by_page_id: dict[str, BotContext] = {}
        self._by_webhook_url: dict[str, BotContext] = {}
        self._lock = Lock()
        for context in contexts or []:
            self.add(context)

    def get(self, key: str) -> BotContext | None:
        """Look up a context by page ID, then by webhook URL."""
        context = self._by_page_id.get(key)
        if context is None:
            context = self._by_webhook_url.get(key)
        return context

    def __contains__(self, key: str) -> bool:
        return key in self._by_page_id or key in self._by_webhook_url

    def __len__(self) -> int:
        return len(self._by_page_id)

    def add(self, context: BotContext) -> None:
        """Add a context, replacing any context that shares one of its keys."""
        with self._lock:
            self._evict(context)
            self._put(context)
        logfire.info(
            "Bot context registered",
            page_id=context.page_id,
            webhook_url=context.webhook_url,
        )

    def update(self, key: str, context: BotContext) -> bool:
        """Replace the context stored under ``key``.

        Any other context holding the new page ID or webhook URL is dropped
        as well.

        Returns:
            True if a context was replaced, False if ``key`` is unknown
        """
        with self._lock:
            current = self.get(key)
            if current is None:
                return False
            self._drop(current)
            self._evict(context)
            self._put(context)
        logfire.info("Bot context updated", key=key, page_id=context.page_id)
        return True

    def remove(self, key: str) -> BotContext | None:
        """Remove the context stored under ``key`` from both indexes."""
        with self._lock:
            context = self.get(key)
            if context is not None:
                self._drop(context)
        if context is not None:
            logfire.info("Bot context removed", key=key, page_id=context.page_id)
        return context

    def clear(self) -> None:
        with self._lock:
            self._by_page_id.clear()
            self._by_webhook_url.clear()

    def _put(self, context: BotContext) -> None:
        self._by_page_id[context.page_id] = context
        self._by_webhook_url[context.webhook_url] = context

    def _drop(self, context: BotContext) -> None:
        self._by_page_id.pop(context.page_id, None)
        self._by_webhook_url.pop(context.webhook_url, None)

    def _evict(self, context: BotContext) -> None:
        for existing in (
            self._by_page_id.get(context.page_id),
            self._by_webhook_url.get(context.webhook_url),
        ):
            if existing is not None:
                self._drop(existing)
