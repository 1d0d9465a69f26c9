"""
Tests for the emoji picker popover.
"""

import pytest
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Button, Input, Static

from chat_pickers.Utils.overlay_positioning import (
    OFFSCREEN_PLACEMENT,
    OverlayOptions,
    VerticalAlign,
    compute_overlay_placement,
)
from chat_pickers.Widgets.emoji_picker import (
    EmojiButton,
    EmojiPickerScreen,
    filter_emojis,
    get_emoji_data,
    region_to_rect,
)


class TestEmojiCatalog:

    def test_catalog_is_sorted_and_has_no_skin_tones(self):
        emojis = get_emoji_data()

        assert emojis
        names = [e['name'] for e in emojis]
        assert names == sorted(names)
        assert not any('Skin Tone' in name for name in names)

    def test_catalog_is_cached(self):
        assert get_emoji_data() is get_emoji_data()

    @pytest.mark.parametrize("query", ["thumbs up", "THUMBS", ":thumbs_up:", "👍"])
    def test_filter_finds_thumbs_up(self, query):
        chars = [e['char'] for e in filter_emojis(get_emoji_data(), query)]
        assert "👍" in chars

    def test_blank_filter_returns_everything(self):
        emojis = get_emoji_data()
        assert len(filter_emojis(emojis, "   ")) == len(emojis)

    def test_filter_without_matches(self):
        assert filter_emojis(get_emoji_data(), "zzzz-no-such-emoji") == []

    def test_region_to_rect_for_missing_widget(self):
        assert region_to_rect(None) is None
        assert region_to_rect(Button("x")) is None


class EmojiHostApp(App):
    """A trigger docked at the bottom, like a message composer."""

    CSS = "#trigger { dock: bottom; }"

    def __init__(self, **picker_options):
        super().__init__()
        self.picker_options = picker_options
        self.picker = None
        self.results = []

    def compose(self) -> ComposeResult:
        yield Button("😀", id="trigger")

    def open_picker(self) -> EmojiPickerScreen:
        self.picker = EmojiPickerScreen(anchor=self.query_one("#trigger"), **self.picker_options)
        self.push_screen(self.picker, self.results.append)
        return self.picker


class ScrollingHostApp(EmojiHostApp):
    """The trigger sits inside a scrollable message log."""

    CSS = "#log { height: 1fr; }"

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="log"):
            for index in range(5):
                yield Static(f"line {index}")
            yield Button("😀", id="trigger")
            for index in range(40):
                yield Static(f"more {index}")


async def settle(pilot, rounds=3):
    for _ in range(rounds):
        await pilot.pause()


@pytest.mark.ui
class TestEmojiPickerScreen:

    def test_options_layering(self):
        picker = EmojiPickerScreen(
            options=OverlayOptions(margin=4, max_width=50),
            max_width=30,
            vertical_align="center",
        )

        assert picker.options == OverlayOptions(
            margin=4, max_width=30, max_height=520, vertical_align=VerticalAlign.CENTER
        )

    def test_unknown_class_name_is_rejected(self):
        with pytest.raises(TypeError):
            EmojiPickerScreen(class_names={"pannel": "x"})

    @pytest.mark.asyncio
    async def test_panel_is_placed_next_to_the_anchor(self):
        app = EmojiHostApp(margin=1, max_width=30, max_height=10)

        async with app.run_test(size=(80, 24)) as pilot:
            picker = app.open_picker()
            await settle(pilot)

            anchor = region_to_rect(app.query_one("#trigger"))
            expected = compute_overlay_placement(anchor, 80, 24, picker.options)

            assert picker.positioner.is_listening is True
            assert picker.positioner.placement == expected
            assert picker.positioner.placement != OFFSCREEN_PLACEMENT
            # No room below a bottom-docked trigger, so the panel sits above it
            assert expected.top + 10 <= anchor.top - 1

    @pytest.mark.asyncio
    async def test_resize_repositions(self):
        app = EmojiHostApp(margin=1, max_width=30, max_height=10)

        async with app.run_test(size=(80, 24)) as pilot:
            picker = app.open_picker()
            await settle(pilot)

            await pilot.resize_terminal(120, 40)
            await settle(pilot)

            anchor = region_to_rect(app.query_one("#trigger"))
            assert picker.positioner.placement == compute_overlay_placement(anchor, 120, 40, picker.options)

    @pytest.mark.asyncio
    async def test_scrolling_the_anchor_container_repositions(self):
        app = ScrollingHostApp(margin=1, max_width=30, max_height=10)

        async with app.run_test(size=(80, 24)) as pilot:
            picker = app.open_picker()
            await settle(pilot)
            reasons = []
            picker.viewport_events.subscribe(reasons.append)

            app.query_one("#log", VerticalScroll).scroll_to(y=3, animate=False)
            await settle(pilot)

            anchor = region_to_rect(app.query_one("#trigger"))
            assert "scroll" in reasons
            assert picker.positioner.placement == compute_overlay_placement(anchor, 80, 24, picker.options)

    @pytest.mark.asyncio
    async def test_pick_returns_glyph_and_releases_listeners(self):
        app = EmojiHostApp(margin=1, max_width=30, max_height=10)

        async with app.run_test(size=(80, 24)) as pilot:
            picker = app.open_picker()
            await settle(pilot)
            first = picker.query(EmojiButton).first()

            first.press()
            await settle(pilot)

            assert app.results == [first.emoji_data['char']]
            assert picker.positioner.is_listening is False
            assert picker.viewport_events.listener_count == 0

    @pytest.mark.asyncio
    async def test_escape_cancels(self):
        app = EmojiHostApp(margin=1, max_width=30, max_height=10)

        async with app.run_test(size=(80, 24)) as pilot:
            picker = app.open_picker()
            await settle(pilot)

            await pilot.press("escape")
            await settle(pilot)

            assert app.results == [""]
            assert picker.positioner.is_listening is False

    @pytest.mark.asyncio
    async def test_search_filters_grid(self):
        app = EmojiHostApp(margin=1, max_width=30, max_height=10)

        async with app.run_test(size=(80, 24)) as pilot:
            picker = app.open_picker()
            await settle(pilot)

            picker.query_one("#emoji-search-input", Input).value = "thumbs up"
            await pilot.pause(0.5)
            await settle(pilot)

            chars = [button.emoji_data['char'] for button in picker.query(EmojiButton)]
            assert "👍" in chars
            assert len(chars) < 20
