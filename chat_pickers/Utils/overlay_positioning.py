"""
Anchored overlay positioning.

Places a size-capped panel next to an anchor rectangle so that it stays inside
the viewport whenever that is geometrically possible. Coordinates are
viewport-relative; the unit (pixels, terminal cells) is up to the caller.
"""

import math
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, NamedTuple, Optional, Protocol, Tuple, Union

from loguru import logger

from ..config import get_picker_setting

logger = logger.bind(module="overlay_positioning")

Number = Union[int, float]

# Fractions of the viewport the panel may never exceed
MAX_VIEWPORT_WIDTH_FRACTION = 0.95
MAX_VIEWPORT_HEIGHT_FRACTION = 0.85


class VerticalAlign(str, Enum):
    BOTTOM = "bottom"
    CENTER = "center"


@dataclass(frozen=True)
class Rect:
    """Viewport-relative bounding box."""

    top: Number
    left: Number
    width: Number
    height: Number

    @property
    def bottom(self) -> Number:
        return self.top + self.height

    @property
    def right(self) -> Number:
        return self.left + self.width


class OverlayPlacement(NamedTuple):
    top: Number
    left: Number


# Used until the first successful computation so an unpositioned panel never
# shows up at the viewport origin.
OFFSCREEN_PLACEMENT = OverlayPlacement(top=-9999, left=-9999)


@dataclass(frozen=True)
class OverlayOptions:
    margin: Number = 8
    max_width: Number = 360
    max_height: Number = 520
    vertical_align: VerticalAlign = VerticalAlign.BOTTOM

    @classmethod
    def from_config(cls) -> "OverlayOptions":
        """Options from the [emoji_picker] config section."""
        return cls(
            margin=get_picker_setting("emoji_picker", "margin", cls.margin),
            max_width=get_picker_setting("emoji_picker", "max_width", cls.max_width),
            max_height=get_picker_setting("emoji_picker", "max_height", cls.max_height),
            vertical_align=VerticalAlign(get_picker_setting("emoji_picker", "vertical_align", cls.vertical_align.value)),
        )


def compute_overlay_size(viewport_width: Number, viewport_height: Number,
                         options: OverlayOptions) -> Tuple[Number, Number]:
    """Effective (width, height): the requested caps, bounded by a fixed share of the viewport."""
    width = min(options.max_width, math.floor(viewport_width * MAX_VIEWPORT_WIDTH_FRACTION))
    height = min(options.max_height, math.floor(viewport_height * MAX_VIEWPORT_HEIGHT_FRACTION))
    return width, height


def compute_overlay_placement(anchor: Rect, viewport_width: Number, viewport_height: Number,
                              options: Optional[OverlayOptions] = None) -> OverlayPlacement:
    """
    Origin of the panel for the given anchor and viewport.

    The panel is centered horizontally on the anchor. Bottom alignment puts it
    below the anchor and flips it above when it would run past the bottom
    edge; center alignment centers it vertically on the anchor and only
    clamps. The result never depends on earlier placements.
    """
    options = options or OverlayOptions()
    margin = options.margin
    width, height = compute_overlay_size(viewport_width, viewport_height, options)

    if options.vertical_align is VerticalAlign.CENTER:
        top = anchor.top + anchor.height / 2 - height / 2
    else:
        top = anchor.bottom + margin
    left = anchor.left + anchor.width / 2 - width / 2

    if options.vertical_align is not VerticalAlign.CENTER and top + height > viewport_height - margin:
        top = max(margin, anchor.top - height - margin)

    top = max(margin, top)
    left = max(margin, left)
    if left + width > viewport_width - margin:
        left = max(margin, viewport_width - margin - width)

    return OverlayPlacement(top=top, left=left)


class ViewportEventSource(Protocol):
    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register ``callback``; returns the function that unregisters it."""
        ...


class ViewportEventHub:
    """In-process source of viewport change notifications ("resize", "scroll")."""

    def __init__(self) -> None:
        self._listeners: List[Callable[[str], None]] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def emit(self, reason: str) -> None:
        for callback in list(self._listeners):
            callback(reason)


AnchorProvider = Callable[[], Optional[Rect]]
ViewportProvider = Callable[[], Optional[Tuple[Number, Number]]]


class AnchoredOverlayPositioner:
    """Keeps an overlay placement up to date while the overlay is visible.

    Args:
        anchor_provider: Returns the anchor's current Rect, or None while it is not mounted
        viewport_provider: Returns the current (width, height), or None if unknown
        options: Margin, size caps and vertical alignment
        events: Resize/scroll notifications; only listened to while visible
    """

    def __init__(self,
                 anchor_provider: AnchorProvider,
                 viewport_provider: ViewportProvider,
                 options: Optional[OverlayOptions] = None,
                 events: Optional[ViewportEventSource] = None):
        self.anchor_provider = anchor_provider
        self.viewport_provider = viewport_provider
        self.options = options or OverlayOptions()
        self.events = events
        self.placement: OverlayPlacement = OFFSCREEN_PLACEMENT
        self.visible = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_listening(self) -> bool:
        return self._unsubscribe is not None

    def panel_size(self) -> Optional[Tuple[Number, Number]]:
        """Effective (width, height) for the current viewport."""
        viewport = self.viewport_provider()
        if viewport is None:
            return None
        return compute_overlay_size(viewport[0], viewport[1], self.options)

    def update_position(self) -> OverlayPlacement:
        """Recompute from fresh geometry. A missing anchor or viewport keeps the last placement."""
        anchor = self.anchor_provider()
        viewport = self.viewport_provider()
        if anchor is None or viewport is None:
            logger.trace("Overlay anchor or viewport unavailable; keeping previous placement")
            return self.placement
        self.placement = compute_overlay_placement(anchor, viewport[0], viewport[1], self.options)
        return self.placement

    def _on_viewport_event(self, reason: str) -> None:
        self.update_position()

    def set_visible(self, visible: bool) -> None:
        if visible == self.visible:
            return
        self.visible = visible
        if visible:
            self.update_position()
            if self.events is not None and self._unsubscribe is None:
                self._unsubscribe = self.events.subscribe(self._on_viewport_event)
        else:
            self._stop_listening()

    def _stop_listening(self) -> None:
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def close(self) -> None:
        """Teardown: hide and drop the viewport subscription."""
        self.set_visible(False)

    @contextmanager
    def visible_scope(self) -> Iterator["AnchoredOverlayPositioner"]:
        """Visible for the duration of the block; listeners are always released on exit."""
        self.set_visible(True)
        try:
            yield self
        finally:
            self.set_visible(False)
