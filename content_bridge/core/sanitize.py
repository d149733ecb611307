"""Text sanitization for user-supplied fields.

Handlers take any ``Sanitizer`` callable; ``sanitize_text`` is the default.
It strips markup and escapes what is left so the result can be embedded in an
HTML fragment.
"""

import html
import re
from collections.abc import Callable

Sanitizer = Callable[[str], str]

# Tags, comments and unterminated trailing tags. A "<" not followed by a
# letter, "/", "!" or "?" is text and gets escaped.
_TAG_RE = re.compile(r"<!--.*?-->|<[A-Za-z/!?][^>]*>?", re.DOTALL)
# Drop the contents of elements that are never displayable text
_BLOCK_RE = re.compile(
    r"<(script|style)\b[^>]*>.*?</\1\s*>", re.DOTALL | re.IGNORECASE
)


def strip_tags(text: str) -> str:
    """Remove markup, including script and style bodies."""
    text = _BLOCK_RE.sub("", text)
    return _TAG_RE.sub("", text)


def sanitize_text(text: str) -> str:
    """Strip tags, escape HTML special characters and trim whitespace."""
    return html.escape(strip_tags(text), quote=True).strip()
