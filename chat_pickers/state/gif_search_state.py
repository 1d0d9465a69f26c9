"""
GIF search state management.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class FeedMode(str, Enum):
    """Which logical feed backs the item list."""

    FEATURED = "featured"
    SEARCH = "search"


@dataclass(frozen=True)
class Variant:
    """One encoded rendition of a media item."""

    url: str
    size_bytes: Optional[Union[int, float]] = None
    mime_type: Optional[str] = None

    @property
    def has_url(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class SearchResultItem:
    """A normalized provider record."""

    id: str
    preview_url: Optional[str] = None
    # Insertion order follows the provider's media_formats mapping
    variants: Dict[str, Optional[Variant]] = field(default_factory=dict)


@dataclass(frozen=True)
class PaginationState:
    """Snapshot of a cursor-paginated feed.

    Snapshots are never mutated; every transition builds a complete new one
    with ``dataclasses.replace``.
    """

    items: Tuple[SearchResultItem, ...] = ()
    mode: FeedMode = FeedMode.FEATURED
    query: str = ""
    cursor: Optional[str] = None
    loading: bool = False
    loading_more: bool = False
    has_more: bool = False
    error: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        """True while any request of the active generation is in flight."""
        return self.loading or self.loading_more

    @property
    def is_empty(self) -> bool:
        return not self.items
