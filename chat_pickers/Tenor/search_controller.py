# chat_pickers/Tenor/search_controller.py
# Description: Cursor-paginated featured/search feed controller for the GIF picker
#
# The controller owns a PaginationState snapshot and replaces it wholesale on
# every transition. Each load_featured/search/reset starts a new generation;
# a response (or its cleanup) is only applied while its generation is current,
# so late answers from an abandoned feed never reach the state.
#
# Imports
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
#
# 3rd-party Libraries
from loguru import logger
#
# Local Imports
from ..config import get_picker_setting
from ..state.gif_search_state import FeedMode, PaginationState, SearchResultItem
from .result_mapping import parse_page
from .tenor_client import TenorClient
#
#######################################################################################################################
#
# Classes:

logger = logger.bind(module="gif_search_controller")

DEFAULT_FEATURED_LIMIT = 24
DEFAULT_SEARCH_LIMIT = 48

Transport = Callable[[str, Dict[str, str]], Awaitable[Any]]
StateListener = Callable[[PaginationState], None]


def describe_error(error: BaseException) -> str:
    """Single display message for a failed request."""
    return str(error) or error.__class__.__name__


class SearchPaginationController:
    """Drives the featured and keyword-search GIF feeds.

    Args:
        transport: Async callable ``(endpoint, params) -> dict``. Defaults to a
            TenorClient created on first use.
        featured_limit: Page size for the featured feed
        search_limit: Page size for the search feed
        on_change: Called with the new state after every applied transition
    """

    def __init__(self,
                 transport: Optional[Transport] = None,
                 featured_limit: Optional[int] = None,
                 search_limit: Optional[int] = None,
                 on_change: Optional[StateListener] = None):
        self._transport = transport
        self._owns_transport = transport is None
        if featured_limit is None:
            featured_limit = get_picker_setting("gif_picker", "featured_limit", DEFAULT_FEATURED_LIMIT)
        if search_limit is None:
            search_limit = get_picker_setting("gif_picker", "search_limit", DEFAULT_SEARCH_LIMIT)
        self.featured_limit = int(featured_limit)
        self.search_limit = int(search_limit)
        self.on_change = on_change
        self._state = PaginationState()
        self._generation = 0

    # --- Read access ---

    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def items(self) -> Tuple[SearchResultItem, ...]:
        return self._state.items

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def loading_more(self) -> bool:
        return self._state.loading_more

    @property
    def has_more(self) -> bool:
        return self._state.has_more

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def mode(self) -> FeedMode:
        return self._state.mode

    @property
    def query(self) -> str:
        return self._state.query

    @property
    def generation(self) -> int:
        return self._generation

    # --- Internals ---

    def _apply(self, state: PaginationState) -> None:
        self._state = state
        if self.on_change is not None:
            self.on_change(state)

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _get_transport(self) -> Transport:
        if self._transport is None:
            self._transport = TenorClient()
        return self._transport

    async def _fetch_page(self, endpoint: str, params: Dict[str, str]) -> Tuple[List[SearchResultItem], Optional[str]]:
        data = await self._get_transport()(endpoint, params)
        return parse_page(data)

    async def _load_first_page(self, generation: int, mode: FeedMode, query: str, params: Dict[str, str]) -> None:
        """Shared body of load_featured and search: replaces the feed."""
        self._apply(replace(self._state, loading=True, loading_more=False, error=None))
        try:
            items, cursor = await self._fetch_page(mode.value, params)
        except Exception as e:
            message = describe_error(e)
            logger.error(f"GIF {mode.value} request failed: {message}")
            if self._is_current(generation):
                # The failed feed becomes the current one, so a failed search still shows what was searched
                self._apply(replace(
                    self._state,
                    items=(),
                    mode=mode,
                    query=query,
                    cursor=None,
                    has_more=False,
                    error=message,
                    loading=False,
                ))
        else:
            if self._is_current(generation):
                logger.debug(f"GIF {mode.value} page loaded: {len(items)} items, more={cursor is not None}")
                self._apply(PaginationState(
                    items=tuple(items),
                    mode=mode,
                    query=query,
                    cursor=cursor,
                    has_more=cursor is not None,
                ))
            else:
                logger.debug(f"Discarding stale GIF {mode.value} page (generation {generation} < {self._generation})")
        finally:
            if self._is_current(generation) and self._state.loading:
                self._apply(replace(self._state, loading=False))

    # --- Operations ---

    async def load_featured(self) -> None:
        """Replace the items with the first page of the featured feed."""
        generation = self._next_generation()
        await self._load_first_page(
            generation, FeedMode.FEATURED, "", {"limit": str(self.featured_limit)}
        )

    async def search(self, term: str) -> None:
        """Replace the items with the first page of results for ``term``. Blank terms are ignored."""
        trimmed = (term or "").strip()
        if not trimmed:
            return
        generation = self._next_generation()
        await self._load_first_page(
            generation, FeedMode.SEARCH, trimmed, {"limit": str(self.search_limit), "q": trimmed}
        )

    async def load_more(self) -> None:
        """Append the next page of the current feed, if there is one and nothing else is loading."""
        state = self._state
        if state.loading or state.loading_more:
            return
        if not state.has_more or not state.cursor:
            return

        generation = self._generation
        mode = state.mode
        params = {
            "limit": str(self.featured_limit if mode is FeedMode.FEATURED else self.search_limit),
            "pos": state.cursor,
        }
        if mode is FeedMode.SEARCH and state.query:
            params["q"] = state.query

        self._apply(replace(state, loading_more=True, error=None))
        try:
            items, cursor = await self._fetch_page(mode.value, params)
        except Exception as e:
            message = describe_error(e)
            logger.error(f"Loading more GIFs ({mode.value}) failed: {message}")
            if self._is_current(generation):
                # Keep what we have; stop paging until the feed is reloaded
                self._apply(replace(self._state, error=message, has_more=False, loading_more=False))
        else:
            if self._is_current(generation):
                current = self._state
                self._apply(replace(
                    current,
                    items=current.items + tuple(items),
                    cursor=cursor,
                    has_more=cursor is not None,
                    loading_more=False,
                ))
            else:
                logger.debug(f"Discarding stale GIF continuation page (generation {generation} < {self._generation})")
        finally:
            if self._is_current(generation) and self._state.loading_more:
                self._apply(replace(self._state, loading_more=False))

    def reset(self) -> None:
        """Back to the idle featured state. In-flight responses are ignored from now on."""
        self._next_generation()
        self._apply(PaginationState())

    async def aclose(self) -> None:
        """Invalidate in-flight requests and close the transport if the controller created it."""
        self._next_generation()
        if self._owns_transport and isinstance(self._transport, TenorClient):
            await self._transport.close()
            self._transport = None

#
# End of search_controller.py
#######################################################################################################################
