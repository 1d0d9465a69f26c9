# gif_picker.py
#
# Imports
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional
#
# 3rd-party Libraries
from loguru import logger
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static
#
# Local Imports
from ..config import get_picker_setting
from ..state.gif_search_state import FeedMode, PaginationState, SearchResultItem
from ..Tenor.search_controller import SearchPaginationController, Transport
from ..Tenor.variant_picker import DEFAULT_MAX_BYTES, GifPickResult, build_pick_result
from ..Utils.layered_options import join_classes, resolve_layers
#
########################################################################################################################
#
# Classes:

logger = logger.bind(module="gif_picker")

# Rows from the bottom of the result list at which the next page is requested
LOAD_MORE_THRESHOLD = 3


@dataclass(frozen=True)
class GifPickerLabels:
    title: str = "Search GIFs (Tenor)"
    search_placeholder: str = "Search term"
    search_button: str = "Search"
    close_button: str = "Close"
    loading: str = "Loading GIFs…"
    empty_featured: str = "No GIFs available."
    empty_search: str = "No GIFs found. Try a different search term."
    loading_more: str = "Loading more GIFs…"
    load_more_hint: str = "Scroll down to load more GIFs."
    end_of_feed: str = "No more GIFs available."
    error_prefix: str = "Error"


@dataclass(frozen=True)
class GifPickerClasses:
    """Extra CSS classes added to each part of the picker."""

    panel: str = ""
    header: str = ""
    title: str = ""
    search_bar: str = ""
    input: str = ""
    button: str = ""
    button_primary: str = ""
    content: str = ""
    grid: str = ""
    item_button: str = ""
    status_text: str = ""
    footer: str = ""
    error: str = ""


def describe_status(state: PaginationState, labels: GifPickerLabels) -> str:
    """The status line under the result grid."""
    if state.loading and state.is_empty:
        return labels.loading
    if not state.loading and state.is_empty:
        return labels.empty_search if state.mode is FeedMode.SEARCH else labels.empty_featured
    if state.loading_more:
        return labels.loading_more
    if not state.is_busy and state.has_more:
        return labels.load_more_hint
    return ""


def describe_footer(state: PaginationState, labels: GifPickerLabels) -> str:
    if not state.is_busy and not state.has_more and not state.is_empty:
        return labels.end_of_feed
    return ""


class GifButton(Button):
    def __init__(self, item: SearchResultItem, **kwargs):
        super().__init__(label=f"GIF {item.id}", **kwargs)
        self.item = item
        self.tooltip = item.preview_url or ""


class GifPickerScreen(ModalScreen[Optional[GifPickResult]]):
    """Modal GIF browser. Dismisses with a GifPickResult, or None when closed."""

    BINDINGS = [
        Binding("escape", "close_picker", "Close Picker"),
    ]
    CSS = """
    GifPickerScreen { align: center middle; }
    #gif-dialog {
        width: 92%;
        max-width: 100;
        height: 82%;
        border: thick $primary;
        background: $surface;
        padding: 1;
    }
    .gif-title {
        width: 100%;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }
    #gif-search-bar { height: auto; width: 100%; }
    #gif-search-input { width: 1fr; }
    #gif-results { height: 1fr; }
    #gif-grid { height: auto; layout: grid; grid-size: 4; grid-gutter: 1; }
    GifButton { width: 100%; }
    .gif-status { color: $text-muted; text-style: italic; }
    .gif-error { color: $error; }
    #gif-footer { dock: bottom; height: auto; text-align: right; color: $text-muted; }
    """

    def __init__(self,
                 controller: Optional[SearchPaginationController] = None,
                 transport: Optional[Transport] = None,
                 max_bytes: Optional[int] = None,
                 featured_limit: Optional[int] = None,
                 search_limit: Optional[int] = None,
                 labels: Optional[Mapping[str, Any]] = None,
                 class_names: Optional[Mapping[str, Any]] = None,
                 name: str | None = None, id: str | None = None, classes: str | None = None) -> None:
        super().__init__(name, id, classes)
        self._owns_controller = controller is None
        self.controller = controller or SearchPaginationController(
            transport=transport, featured_limit=featured_limit, search_limit=search_limit
        )
        self.controller.on_change = self._on_state_change
        if max_bytes is None:
            max_bytes = get_picker_setting("gif_picker", "max_bytes", DEFAULT_MAX_BYTES)
        self.max_bytes = int(max_bytes)
        self.labels = resolve_layers(GifPickerLabels(), labels)
        self.class_names = resolve_layers(GifPickerClasses(), class_names)

    def compose(self) -> ComposeResult:
        c = self.class_names
        with Vertical(id="gif-dialog", classes=c.panel):
            with Vertical(id="gif-header", classes=join_classes("gif-header", c.header)):
                yield Static(self.labels.title, classes=join_classes("gif-title", c.title))
                with Horizontal(id="gif-search-bar", classes=c.search_bar):
                    yield Input(placeholder=self.labels.search_placeholder, id="gif-search-input", classes=c.input)
                    yield Button(self.labels.search_button, variant="primary", id="gif-search-button",
                                 classes=c.button_primary)
                    yield Button(self.labels.close_button, id="gif-close-button", classes=c.button)
            with VerticalScroll(id="gif-results", classes=c.content):
                yield Static("", id="gif-error", classes=join_classes("gif-error", c.error))
                yield Vertical(id="gif-grid", classes=c.grid)
                yield Static("", id="gif-status", classes=join_classes("gif-status", c.status_text))
            yield Static("", id="gif-footer", classes=c.footer)

    def on_mount(self) -> None:
        self.query_one("#gif-search-input", Input).focus()
        self.watch(self.query_one("#gif-results", VerticalScroll), "scroll_y", self._on_results_scrolled, init=False)
        self._update_status(self.controller.state)
        self._run_feed_operation(self.controller.load_featured)

    async def on_unmount(self) -> None:
        # Reopening always starts from a clean featured view
        self.controller.on_change = None
        self.controller.reset()
        if self._owns_controller:
            await self.controller.aclose()

    # --- Feed operations ---

    def _run_feed_operation(self, operation: Callable[[], Awaitable[None]]) -> None:
        self.run_worker(self._perform(operation), group="gif-feed", exclusive=True)

    async def _perform(self, operation: Callable[[], Awaitable[None]]) -> None:
        await operation()
        await self._sync_grid()
        self.call_after_refresh(self._maybe_fill_viewport)

    def _load_more(self) -> None:
        state = self.controller.state
        if state.is_busy or not state.has_more:
            return
        self.run_worker(self._perform(self.controller.load_more), group="gif-more")

    def _submit_search(self) -> None:
        term = self.query_one("#gif-search-input", Input).value.strip()
        if not term:
            return
        self.query_one("#gif-results", VerticalScroll).scroll_home(animate=False)
        self._run_feed_operation(lambda: self.controller.search(term))

    def _on_results_scrolled(self, old_value: float, new_value: float) -> None:
        results = self.query_one("#gif-results", VerticalScroll)
        if results.max_scroll_y - new_value <= LOAD_MORE_THRESHOLD:
            self._load_more()

    def _maybe_fill_viewport(self) -> None:
        # Keep paging while the results do not fill the view, there is nothing to scroll
        if not self.is_mounted:
            return
        results = self.query_one("#gif-results", VerticalScroll)
        if results.max_scroll_y <= 0:
            self._load_more()

    # --- Rendering ---

    def _on_state_change(self, state: PaginationState) -> None:
        if self.is_mounted:
            self._update_status(state)

    def _update_status(self, state: PaginationState) -> None:
        error_text = f"{self.labels.error_prefix}: {state.error}" if state.error else ""
        error = self.query_one("#gif-error", Static)
        error.update(error_text)
        error.display = bool(error_text)
        self.query_one("#gif-status", Static).update(describe_status(state, self.labels))
        footer_text = describe_footer(state, self.labels)
        footer = self.query_one("#gif-footer", Static)
        footer.update(footer_text)
        footer.display = bool(footer_text)
        self.query_one("#gif-search-button", Button).disabled = state.loading

    async def _sync_grid(self) -> None:
        """Mount buttons for new items; rebuild the grid when the feed was replaced."""
        if not self.is_mounted:
            return
        items = self.controller.items
        grid = self.query_one("#gif-grid", Vertical)
        rendered = [button.item for button in grid.query(GifButton)]
        appended = len(rendered) <= len(items) and all(
            shown is current for shown, current in zip(rendered, items)
        )
        if appended:
            new_items = items[len(rendered):]
        else:
            await grid.remove_children()
            new_items = items
        if new_items:
            item_classes = join_classes("gif-item", self.class_names.item_button)
            await grid.mount_all([GifButton(item, classes=item_classes) for item in new_items])
        logger.debug(f"GIF grid shows {len(items)} items ({len(new_items)} newly mounted)")

    # --- Events ---

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "gif-search-input":
            self._submit_search()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, GifButton):
            result = build_pick_result(event.button.item, self.max_bytes)
            if result is None:
                logger.warning(f"GIF {event.button.item.id} has no deliverable variant")
                return
            self.dismiss(result)
        elif event.button.id == "gif-search-button":
            self._submit_search()
        elif event.button.id == "gif-close-button":
            self.action_close_picker()

    def action_close_picker(self) -> None:
        self.dismiss(None)

#
# End of gif_picker.py
########################################################################################################################
