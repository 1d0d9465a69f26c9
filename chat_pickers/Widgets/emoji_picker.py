# emoji_picker.py
#
# Imports
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
#
# 3rd-party Libraries
from emoji import EMOJI_DATA
from loguru import logger
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Button, Input, Static
from textual.timer import Timer
#
# Local Imports
from ..Utils.layered_options import join_classes, resolve_layers
from ..Utils.overlay_positioning import (
    AnchoredOverlayPositioner,
    OverlayOptions,
    Rect,
    VerticalAlign,
    ViewportEventHub,
)
#
########################################################################################################################
#
# Classes:

logger = logger.bind(module="emoji_picker")

ProcessedEmoji = Dict[str, Any]  # {'char': str, 'name': str, 'aliases': List[str]}


def _load_emojis() -> List[ProcessedEmoji]:
    emojis: List[ProcessedEmoji] = []
    for char, data in EMOJI_DATA.items():
        raw_name = data.get('en', '')
        # Skin tone variants would multiply the grid; the base glyph is enough here
        if not raw_name or 'skin_tone' in raw_name:
            continue
        aliases = data.get('alias', [])
        if isinstance(aliases, str):
            aliases = [aliases]
        emojis.append({
            'char': char,
            'name': raw_name.strip(':').replace('_', ' ').title(),
            'aliases': [a.strip(':') for a in aliases],
        })
    emojis.sort(key=lambda e: e['name'])
    return emojis


# Lazy loading - will be initialized on first use
_EMOJI_DATA_CACHE: Optional[List[ProcessedEmoji]] = None


def get_emoji_data() -> List[ProcessedEmoji]:
    """Get emoji data, loading it lazily on first access."""
    global _EMOJI_DATA_CACHE
    if _EMOJI_DATA_CACHE is None:
        _EMOJI_DATA_CACHE = _load_emojis()
        logger.debug(f"Loaded {len(_EMOJI_DATA_CACHE)} emojis")
    return _EMOJI_DATA_CACHE


def filter_emojis(emojis: List[ProcessedEmoji], query: str) -> List[ProcessedEmoji]:
    query = query.strip().lower().strip(':')
    if not query:
        return list(emojis)
    # Names are stored with spaces, short codes with underscores
    spaced = query.replace('_', ' ')
    return [
        e for e in emojis
        if spaced in e['name'].lower()
        or any(query in alias.lower() for alias in e['aliases'])
        or query == e['char']
    ]


def region_to_rect(widget: Optional[Widget]) -> Optional[Rect]:
    """The widget's on-screen box, or None while it is not laid out."""
    if widget is None or not widget.is_mounted:
        return None
    region = widget.region
    if not region.width and not region.height:
        return None
    return Rect(top=region.y, left=region.x, width=region.width, height=region.height)


@dataclass(frozen=True)
class EmojiPickerClasses:
    overlay: str = ""
    panel: str = ""


class EmojiButton(Button):
    def __init__(self, emoji_data: ProcessedEmoji, **kwargs):
        super().__init__(label=emoji_data['char'], **kwargs)
        self.emoji_data = emoji_data
        self.tooltip = emoji_data['name']


class EmojiGrid(VerticalScroll):
    COLUMN_COUNT = 8
    MAX_DISPLAY = 160  # Limit display for performance

    async def populate_grid(self, emojis: List[ProcessedEmoji]) -> None:
        await self.remove_children()
        shown = emojis[:self.MAX_DISPLAY]
        if not shown:
            await self.mount(Static("No emojis found.", classes="no_emojis_message"))
            return
        rows = []
        for start in range(0, len(shown), self.COLUMN_COUNT):
            buttons = [EmojiButton(e, classes="emoji_button") for e in shown[start:start + self.COLUMN_COUNT]]
            rows.append(Horizontal(*buttons, classes="emoji_row"))
        await self.mount_all(rows)


class EmojiPickerScreen(ModalScreen[str]):
    """Emoji popover anchored to a trigger widget.

    Dismisses with the picked glyph, or an empty string when cancelled.
    """

    BINDINGS = [
        Binding("escape", "dismiss_picker", "Close Picker"),
    ]
    CSS = """
    EmojiPickerScreen { align: left top; background: transparent; }
    #emoji-panel {
        border: round $primary;
        background: $surface;
        padding: 0 1;
        offset: -9999 -9999;
    }
    #emoji-search-input { width: 100%; }
    EmojiGrid { height: 1fr; }
    .emoji_row { width: 100%; height: auto; }
    EmojiButton.emoji_button {
        width: 4;
        min-width: 4;
        height: 1;
        border: none;
        background: transparent;
        padding: 0;
    }
    EmojiButton.emoji_button:hover { background: $primary-background; }
    .no_emojis_message { color: $text-muted; text-style: italic; }
    """

    def __init__(self,
                 anchor: Optional[Widget] = None,
                 options: Optional[OverlayOptions] = None,
                 margin: Optional[int] = None,
                 max_width: Optional[int] = None,
                 max_height: Optional[int] = None,
                 vertical_align: Optional[str] = None,
                 class_names: Optional[Mapping[str, Any]] = None,
                 name: str | None = None, id: str | None = None, classes: str | None = None) -> None:
        self.class_names = resolve_layers(EmojiPickerClasses(), class_names)
        super().__init__(name, id, join_classes(classes, self.class_names.overlay) or None)
        self.anchor = anchor
        self.options = resolve_layers(options or OverlayOptions.from_config(), {
            'margin': margin,
            'max_width': max_width,
            'max_height': max_height,
            'vertical_align': VerticalAlign(vertical_align) if vertical_align else None,
        })
        self.viewport_events = ViewportEventHub()
        self.positioner = AnchoredOverlayPositioner(
            anchor_provider=lambda: region_to_rect(self.anchor),
            viewport_provider=self._viewport_size,
            options=self.options,
            events=self.viewport_events,
        )
        self._search_timer: Optional[Timer] = None

    def _viewport_size(self) -> Optional[Tuple[int, int]]:
        if not self.is_mounted:
            return None
        size = self.app.size
        return size.width, size.height

    def compose(self) -> ComposeResult:
        with Vertical(id="emoji-panel", classes=self.class_names.panel):
            yield Input(placeholder="Search emojis (e.g. smile, cat, :thumbsup:)", id="emoji-search-input")
            yield EmojiGrid(id="emoji-grid")

    async def on_mount(self) -> None:
        self.call_after_refresh(self._show_panel)
        self._watch_anchor_scrolling()
        self.query_one("#emoji-search-input", Input).focus()
        await self.query_one(EmojiGrid).populate_grid(get_emoji_data())

    def _watch_anchor_scrolling(self) -> None:
        """Forward scrolling of the anchor's containers as "scroll" viewport events."""
        if self.anchor is None or not self.anchor.is_mounted:
            return
        for container in self.anchor.ancestors:
            if isinstance(container, ScrollableContainer):
                self.watch(container, "scroll_y", self._on_anchor_scrolled, init=False)
                self.watch(container, "scroll_x", self._on_anchor_scrolled, init=False)

    def _on_anchor_scrolled(self, old_value: float, new_value: float) -> None:
        self.call_after_refresh(self._on_viewport_changed, "scroll")

    def _show_panel(self) -> None:
        self.positioner.set_visible(True)
        self._apply_placement()

    def on_unmount(self) -> None:
        self.positioner.close()

    def on_resize(self, event: events.Resize) -> None:
        # Anchor geometry settles after the next layout pass
        self.call_after_refresh(self._on_viewport_changed, "resize")

    def _on_viewport_changed(self, reason: str) -> None:
        self.viewport_events.emit(reason)
        self._apply_placement()

    def _apply_placement(self) -> None:
        size = self.positioner.panel_size()
        if size is None:
            return
        panel = self.query_one("#emoji-panel", Vertical)
        width, height = size
        top, left = self.positioner.placement
        panel.styles.width = int(width)
        panel.styles.height = int(height)
        panel.styles.offset = (int(round(left)), int(round(top)))

    def on_input_changed(self, event: Input.Changed) -> None:
        """Debounced filtering of the grid."""
        if self._search_timer:
            self._search_timer.stop()
        self._search_timer = self.set_timer(0.3, self._perform_search)

    async def _perform_search(self) -> None:
        query = self.query_one("#emoji-search-input", Input).value
        await self.query_one(EmojiGrid).populate_grid(filter_emojis(get_emoji_data(), query))

    def on_click(self, event: events.Click) -> None:
        panel = self.query_one("#emoji-panel", Vertical)
        if not panel.region.contains(event.screen_x, event.screen_y):
            self.action_dismiss_picker()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, EmojiButton):
            self.dismiss(event.button.emoji_data['char'])

    def action_dismiss_picker(self) -> None:
        self.dismiss("")  # Dismiss with empty string for cancellation

#
# End of emoji_picker.py
########################################################################################################################
