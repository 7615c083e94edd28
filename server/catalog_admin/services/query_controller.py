"""List/search/paginate controller for the product grid."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import ClassVar, Union

from catalog_admin.core.exceptions import CatalogError
from catalog_admin.schemas.product import ProductPage, ProductRecord
from catalog_admin.services.notifier import Notifier
from catalog_admin.services.product_table import ProductTable

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 9
FETCH_FAILED_MESSAGE = "Failed to fetch products"
NO_MATCHES_MESSAGE = "No products found matching your search."
NO_PRODUCTS_MESSAGE = "No products found. Add your first product above."


@dataclass(frozen=True)
class Idle:
    kind: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Loading:
    kind: ClassVar[str] = "loading"

    search_text: str
    page: int


@dataclass(frozen=True)
class Ready:
    kind: ClassVar[str] = "ready"

    result: ProductPage


@dataclass(frozen=True)
class Failed:
    kind: ClassVar[str] = "error"

    reason: str


ViewState = Union[Idle, Loading, Ready, Failed]


@dataclass(frozen=True)
class PaginationView:
    """What the prev/next controls need to render."""

    page: int
    total_pages: int
    total_count: int
    has_prev: bool
    has_next: bool
    show_controls: bool


class QueryController:
    """Keeps the displayed product page consistent with the search text and page number.

    Each refresh issues a count call and a page call against the same
    ``(search_text, page)`` snapshot. Refreshes are numbered; a response is
    applied only if no newer refresh was issued while it was in flight, so
    the last issued request always wins.

    ``search_text`` and ``page`` are what the operator last asked for. The
    displayed page, and the search text and page number it was fetched for,
    change only when a refresh fully succeeds; pagination and the empty-state
    message are derived from that displayed snapshot.
    """

    def __init__(
        self,
        table: ProductTable,
        notifier: Notifier,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._table = table
        self._notifier = notifier
        self.page_size = page_size
        self.search_text = ""
        self.page = 1
        self.state: ViewState = Idle()
        self.displayed = ProductPage()
        self.displayed_search = ""
        self.displayed_page = 1
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def products(self) -> list[ProductRecord]:
        return self.displayed.items

    @property
    def total_count(self) -> int:
        return self.displayed.total

    @property
    def total_pages(self) -> int:
        """Number of pages for the displayed total; never less than one."""
        return max(1, math.ceil(self.total_count / self.page_size))

    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def pagination(self) -> PaginationView:
        total_pages = self.total_pages
        return PaginationView(
            page=self.displayed_page,
            total_pages=total_pages,
            total_count=self.total_count,
            has_prev=self.displayed_page > 1,
            has_next=self.displayed_page < total_pages,
            show_controls=total_pages > 1,
        )

    @property
    def empty_message(self) -> str | None:
        if self.products:
            return None
        return NO_MATCHES_MESSAGE if self.displayed_search else NO_PRODUCTS_MESSAGE

    def find_displayed(self, product_id) -> ProductRecord | None:
        """Look up a product on the currently displayed page."""
        for product in self.products:
            if product.product_id == product_id:
                return product
        return None

    async def refresh(self) -> bool:
        """Reload count and page for the current search text and page.

        Returns:
            True if this refresh's result was applied to the display
        """
        self._generation += 1
        generation = self._generation
        search_text, page = self.search_text, self.page
        offset = (page - 1) * self.page_size
        self.state = Loading(search_text=search_text, page=page)

        try:
            total = await self._table.count(search_text)
            items = await self._table.page(search_text, offset=offset, limit=self.page_size)
        except CatalogError as e:
            if generation != self._generation:
                logger.debug(f"Ignoring failure of superseded refresh #{generation}: {e}")
                return False
            logger.error(f"Error fetching products (search={search_text!r}, page={page}): {e}")
            self.state = Failed(reason=e.message)
            self._notifier.error(FETCH_FAILED_MESSAGE)
            return False

        if generation != self._generation:
            logger.debug(f"Discarding stale refresh #{generation} (current #{self._generation})")
            return False

        result = ProductPage(items=items, total=total)
        self.displayed = result
        self.displayed_search, self.displayed_page = search_text, page
        self.state = Ready(result=result)
        return True

    async def set_search(self, text: str) -> bool:
        """Apply a new search text; always restarts from the first page."""
        self.search_text = text
        self.page = 1
        return await self.refresh()

    async def next_page(self) -> bool:
        """Advance one page. Returns False without refreshing on the last page."""
        if self.displayed_page >= self.total_pages:
            return False
        self.page = self.displayed_page + 1
        await self.refresh()
        return True

    async def prev_page(self) -> bool:
        """Go back one page. Returns False without refreshing on the first page."""
        if self.displayed_page <= 1:
            return False
        self.page = self.displayed_page - 1
        await self.refresh()
        return True

    async def go_to_page(self, page: int) -> bool:
        self.page = min(max(page, 1), self.total_pages)
        return await self.refresh()
