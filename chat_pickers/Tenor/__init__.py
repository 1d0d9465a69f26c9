# Tenor GIF feed: transport, result normalization, pagination and variant selection
from .tenor_client import TenorAPIError, TenorClient, TenorResponseError
from .result_mapping import map_results, parse_page, parse_size
from .search_controller import SearchPaginationController
from .variant_picker import DEFAULT_MAX_BYTES, GifPickResult, build_pick_result, pick_variant

__all__ = [
    'DEFAULT_MAX_BYTES',
    'GifPickResult',
    'SearchPaginationController',
    'TenorAPIError',
    'TenorClient',
    'TenorResponseError',
    'build_pick_result',
    'map_results',
    'parse_page',
    'parse_size',
    'pick_variant',
]
