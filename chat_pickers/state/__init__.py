"""
State containers for the picker widgets.
"""

from .gif_search_state import FeedMode, PaginationState, SearchResultItem, Variant

__all__ = [
    'FeedMode',
    'PaginationState',
    'SearchResultItem',
    'Variant',
]
