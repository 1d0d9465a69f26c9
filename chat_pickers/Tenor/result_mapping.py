# chat_pickers/Tenor/result_mapping.py
# Description: Normalizes raw Tenor records into SearchResultItem objects
#
# Imports
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
#
# 3rd-party Libraries
from loguru import logger
#
# Local Imports
from ..state.gif_search_state import SearchResultItem, Variant
from .tenor_client import TenorResponseError
#
#######################################################################################################################
#
# Functions:

logger = logger.bind(module="tenor_result_mapping")

# Thumbnail-oriented formats first; the first one with a usable url becomes the preview.
PREVIEW_PRIORITY: Tuple[str, ...] = ("tinygif", "nanogif", "gif")

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_size(value: Any) -> Optional[Union[int, float]]:
    """
    Best-effort byte size.

    Finite numbers pass through. Strings keep only their digits ("1,024" -> 1024).
    Anything unparseable becomes None (unknown), never 0.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        digits = _NON_DIGITS.sub("", value)
        if not digits:
            return None
        return int(digits)
    return None


def parse_variant(value: Any) -> Optional[Variant]:
    """Maps one media_formats entry. Null, empty or non-object entries become None."""
    if not value or not isinstance(value, Mapping):
        return None
    url = value.get("url")
    return Variant(
        url=url if isinstance(url, str) else "",
        size_bytes=parse_size(value.get("size")),
        mime_type=value.get("mime_type") or None,
    )


def select_preview_url(variants: Mapping[str, Optional[Variant]]) -> Optional[str]:
    for key in PREVIEW_PRIORITY:
        variant = variants.get(key)
        if variant is not None and variant.has_url:
            return variant.url
    return None


def map_result(record: Mapping[str, Any]) -> SearchResultItem:
    formats = record.get("media_formats") or {}
    if not isinstance(formats, Mapping):
        formats = {}
    variants: Dict[str, Optional[Variant]] = {
        str(key): parse_variant(value) for key, value in formats.items()
    }
    return SearchResultItem(
        id=str(record.get("id", "")),
        preview_url=select_preview_url(variants),
        variants=variants,
    )


def map_results(results: Any) -> List[SearchResultItem]:
    """
    Maps the ``results`` array of a Tenor response.

    Raises:
        TenorResponseError: If ``results`` is present but not a list
    """
    if results is None:
        return []
    if not isinstance(results, list):
        raise TenorResponseError("Tenor returned an unexpected response")
    items: List[SearchResultItem] = []
    for record in results:
        if not isinstance(record, Mapping):
            logger.warning(f"Skipping malformed Tenor record of type {type(record).__name__}")
            continue
        items.append(map_result(record))
    return items


def extract_next_cursor(data: Mapping[str, Any]) -> Optional[str]:
    """The continuation token, or None when the feed is exhausted."""
    next_pos = data.get("next")
    if isinstance(next_pos, str) and next_pos:
        return next_pos
    return None


def parse_page(data: Any) -> Tuple[List[SearchResultItem], Optional[str]]:
    """
    Splits a transport response into normalized items and the next cursor.

    A None body is treated as an empty, exhausted page.

    Raises:
        TenorResponseError: If the body is not a JSON object or ``results`` is malformed
    """
    if data is None:
        return [], None
    if not isinstance(data, Mapping):
        raise TenorResponseError("Tenor returned an unexpected response")
    return map_results(data.get("results")), extract_next_cursor(data)

#
# End of result_mapping.py
#######################################################################################################################
