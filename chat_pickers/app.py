# chat_pickers/app.py
# Description: Minimal message composer demonstrating the emoji and GIF pickers
#
# Imports
from typing import Optional
#
# 3rd-party Libraries
from loguru import logger
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Footer, Input, Static
#
# Local Imports
from .logging_config import configure_logging
from .Tenor.variant_picker import GifPickResult
from .Widgets.emoji_picker import EmojiPickerScreen
from .Widgets.gif_picker import GifPickerScreen
#
########################################################################################################################
#
# Classes:

logger = logger.bind(module="chat_pickers_app")


class ChatPickersApp(App):
    """A message log with a composer row: text input, emoji trigger, GIF trigger, send."""

    TITLE = "chat pickers"
    BINDINGS = [
        Binding("ctrl+e", "open_emoji_picker", "Emoji"),
        Binding("ctrl+g", "open_gif_picker", "GIF"),
        Binding("ctrl+q", "quit", "Quit"),
    ]
    CSS = """
    #message-log { height: 1fr; padding: 0 1; }
    #composer { height: auto; dock: bottom; }
    #message-input { width: 1fr; }
    #emoji-trigger, #gif-trigger { min-width: 6; width: 6; }
    """

    def compose(self) -> ComposeResult:
        yield VerticalScroll(id="message-log")
        with Horizontal(id="composer"):
            yield Input(placeholder="Write a message…", id="message-input")
            yield Button("😀", id="emoji-trigger")
            yield Button("GIF", id="gif-trigger")
            yield Button("Send", variant="primary", id="send-button")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#message-input", Input).focus()

    # --- Composer ---

    def append_message(self, text: str) -> None:
        log = self.query_one("#message-log", VerticalScroll)
        log.mount(Static(text, classes="message"))
        log.scroll_end(animate=False)

    def _send_current_message(self) -> None:
        message_input = self.query_one("#message-input", Input)
        text = message_input.value.strip()
        if not text:
            return
        self.append_message(text)
        message_input.value = ""

    def _insert_emoji(self, emoji_char: Optional[str]) -> None:
        if not emoji_char:
            return
        message_input = self.query_one("#message-input", Input)
        message_input.insert_text_at_cursor(emoji_char)
        message_input.focus()

    def _send_gif(self, result: Optional[GifPickResult]) -> None:
        if result is None:
            return
        logger.info(f"GIF {result.id} picked ({result.variant_key})")
        self.append_message(f"[GIF] {result.download_url}")

    # --- Actions and events ---

    def action_open_emoji_picker(self) -> None:
        anchor = self.query_one("#emoji-trigger", Button)
        self.push_screen(
            EmojiPickerScreen(anchor=anchor, margin=1, max_width=48, max_height=16),
            self._insert_emoji,
        )

    def action_open_gif_picker(self) -> None:
        self.push_screen(GifPickerScreen(), self._send_gif)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "emoji-trigger":
            self.action_open_emoji_picker()
        elif event.button.id == "gif-trigger":
            self.action_open_gif_picker()
        elif event.button.id == "send-button":
            self._send_current_message()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message-input":
            self._send_current_message()


def main() -> None:
    configure_logging()
    ChatPickersApp().run()


if __name__ == "__main__":
    main()

#
# End of app.py
########################################################################################################################
