"""
chat_pickers - Emoji and GIF pickers for Textual message composers

Provides two drop-in pickers for a chat input: an emoji popover that anchors
itself to a trigger widget, and a Tenor-backed GIF browser with featured and
keyword-search feeds. The positioning and pagination logic are plain Python
units that can be reused outside of Textual.
"""

__version__ = "0.1.0"
__license__ = "AGPLv3+"

# Version tuple for programmatic comparison
VERSION_TUPLE = (0, 1, 0)

__all__ = [
    "__version__",
    "VERSION_TUPLE",
]
