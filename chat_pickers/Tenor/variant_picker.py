# chat_pickers/Tenor/variant_picker.py
# Description: Chooses the deliverable rendition of a GIF under a byte budget
#
# Imports
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Tuple
#
# Local Imports
from ..state.gif_search_state import SearchResultItem, Variant
#
#######################################################################################################################
#
# Classes and Functions:

DEFAULT_MAX_BYTES = 8 * 1024 * 1024

# Smallest rendition first.
VARIANT_PRIORITY: Tuple[str, ...] = ("nanogif", "tinygif", "gif")

VariantPredicate = Callable[[Variant, int], bool]


def _within_budget(variant: Variant, max_bytes: int) -> bool:
    # Unknown sizes are accepted (fail-open). A zero size counts as unknown too.
    size = variant.size_bytes
    return not size or size <= max_bytes


def _any_size(variant: Variant, max_bytes: int) -> bool:
    return True


# Evaluated top to bottom; each pass walks VARIANT_PRIORITY.
SELECTION_PASSES: Tuple[VariantPredicate, ...] = (_within_budget, _any_size)


@dataclass(frozen=True)
class GifPickResult:
    """What the consumer receives when a GIF is picked."""

    id: str
    download_url: str
    preview_url: str
    variant_key: str
    variant: Optional[Variant]


def pick_variant(variants: Mapping[str, Optional[Variant]],
                 max_bytes: int = DEFAULT_MAX_BYTES) -> Tuple[str, Optional[Variant]]:
    """
    Picks ``(variant_key, variant)`` for delivery.

    Prefers the first priority variant that fits ``max_bytes``, then the first
    priority variant regardless of size, then the first variant of any name
    with a usable url. Returns ``("", None)`` if nothing has a url.
    """
    for accepts in SELECTION_PASSES:
        for key in VARIANT_PRIORITY:
            variant = variants.get(key)
            if variant is None or not variant.has_url:
                continue
            if accepts(variant, max_bytes):
                return key, variant

    for key, variant in variants.items():
        if variant is not None and variant.has_url:
            return key, variant
    return "", None


def build_pick_result(item: SearchResultItem,
                      max_bytes: int = DEFAULT_MAX_BYTES) -> Optional[GifPickResult]:
    """The picked-asset payload for ``item``, or None if it has nothing deliverable."""
    variant_key, variant = pick_variant(item.variants, max_bytes)
    if variant is None:
        return None
    return GifPickResult(
        id=item.id,
        download_url=variant.url,
        preview_url=item.preview_url or variant.url,
        variant_key=variant_key,
        variant=variant,
    )

#
# End of variant_picker.py
#######################################################################################################################
