"""
Category selection state machine.

One SelectionController belongs to one view. It tracks which category or
subcategory the reader has picked, turns that into a ContentFilter, and keeps
exactly one content fetch alive: a new selection cancels the fetch started by
the one it replaced, so a slow response can never overwrite newer results.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from inkwell.client.api import ContentFilter, TaxonomyClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoSelection:
    category_id: None = field(default=None, init=False)
    subcategory_id: None = field(default=None, init=False)


@dataclass(frozen=True)
class CategorySelected:
    category_id: str
    subcategory_id: None = field(default=None, init=False)


@dataclass(frozen=True)
class SubcategorySelected:
    category_id: str
    subcategory_id: str


SelectionState = Union[NoSelection, CategorySelected, SubcategorySelected]

ContentFetcher = Callable[[ContentFilter], Awaitable[list]]
CategoryFetcher = Callable[[], Awaitable[list]]


class SelectionController:
    def __init__(
        self,
        fetch_content: ContentFetcher,
        fetch_categories: Optional[CategoryFetcher] = None,
        on_change: Optional[Callable[["SelectionController"], Any]] = None,
    ):
        self._fetch_content = fetch_content
        self._fetch_categories = fetch_categories
        self._on_change = on_change

        self.state: SelectionState = NoSelection()
        self.categories: list[dict] = []
        self.items: list = []
        self.categories_error: Optional[str] = None
        self.content_error: Optional[str] = None
        self.loading = False

        self._task: Optional[asyncio.Task] = None
        self._active_filter: Optional[ContentFilter] = None

    @classmethod
    def for_client(cls, client: TaxonomyClient, on_change=None) -> "SelectionController":
        return cls(
            fetch_content=client.fetch_content,
            fetch_categories=client.fetch_categories,
            on_change=on_change,
        )

    @property
    def filter(self) -> ContentFilter:
        return ContentFilter(self.state.category_id, self.state.subcategory_id)

    @property
    def error(self) -> Optional[str]:
        """A failed category load outlives any content fetch that lands after it."""
        return self.categories_error or self.content_error

    # Category list

    async def load_categories(self):
        """Fetch the nested category list and apply the initial auto-selection."""
        if self._fetch_categories is None:
            raise RuntimeError("No category fetcher configured")

        try:
            categories = await self._fetch_categories()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Loading categories failed: {e}")
            self._cancel_fetch()
            self._active_filter = None
            self.categories = []
            self.items = []
            self.categories_error = f"Failed to load categories: {e}"
            self._notify()
            return

        self.categories_error = None
        self.on_categories_loaded(categories)
        if self._active_filter is None:
            # Nothing selected automatically; show everything
            self._issue_fetch()

    def on_categories_loaded(self, categories: list[dict]):
        self.categories = sorted(categories, key=lambda c: c.get("order", 0))
        if isinstance(self.state, NoSelection) and self.categories:
            self._transition(CategorySelected(self.categories[0]["id"]))
        else:
            self._notify()

    # Transitions

    def select_category(self, category_id: str):
        if self.state.category_id == category_id:
            self._transition(NoSelection())
        else:
            self._transition(CategorySelected(category_id))

    def select_subcategory(self, category_id: str, subcategory_id: str):
        if self.state.subcategory_id == subcategory_id:
            self._transition(CategorySelected(category_id))
        else:
            self._transition(SubcategorySelected(category_id, subcategory_id))

    def clear_filters(self):
        self._transition(NoSelection())

    def _transition(self, state: SelectionState):
        self.state = state
        if self.filter != self._active_filter:
            self._issue_fetch()
        self._notify()

    # Content fetches

    async def retry(self):
        """Repeat whatever failed last: the category load or the content fetch."""
        if self.categories_error is not None:
            await self.load_categories()
        else:
            self._issue_fetch()
            self._notify()

    def _cancel_fetch(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        # A fetch that swallows the cancel must still find itself superseded
        self._task = None
        self.loading = False

    def _issue_fetch(self):
        self._cancel_fetch()

        self._active_filter = self.filter
        self.loading = True
        self.content_error = None
        self._task = asyncio.create_task(self._run_fetch(self._active_filter))

    async def _run_fetch(self, content_filter: ContentFilter):
        try:
            items = await self._fetch_content(content_filter)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if asyncio.current_task() is not self._task:
                return
            logger.warning(f"Content fetch for {content_filter} failed: {e}")
            self.items = []
            self.content_error = f"Failed to load content: {e}"
        else:
            if asyncio.current_task() is not self._task:
                return
            self.items = list(items)
            self.content_error = None

        self.loading = False
        self._notify()

    async def wait(self):
        """Block until the current fetch, including any that replace it, settles."""
        while self._task is not None and not self._task.done():
            await asyncio.wait([self._task])

    async def close(self):
        """Cancel any in-flight fetch; used on view teardown."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait([task])
        self.loading = False

    def _notify(self):
        if self._on_change is not None:
            self._on_change(self)
