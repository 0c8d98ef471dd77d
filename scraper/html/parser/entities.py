"""
Character reference decoding and escaping for HTML text and attributes.
"""

import re
from html.entities import name2codepoint

_ENTITY_RE = re.compile(r'&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);')

# name2codepoint is the HTML 4 set; apos is the one XML entity it lacks
_NAMED_ENTITIES = dict(name2codepoint, apos=0x27)

REPLACEMENT_CHARACTER = '\ufffd'


def _decode_reference(match: 're.Match') -> str:
    ref = match.group(1)
    if ref[0] != '#':
        codepoint = _NAMED_ENTITIES.get(ref)
        if codepoint is None:
            # Unknown entity, keep it as written
            return match.group(0)
        return chr(codepoint)

    is_hex = ref[1] in 'xX'
    digits = ref[2:] if is_hex else ref[1:]
    if len(digits.lstrip('0')) > 8:
        # Far out of range, and too long for int()
        return REPLACEMENT_CHARACTER
    codepoint = int(digits, 16 if is_hex else 10)

    if codepoint == 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return REPLACEMENT_CHARACTER
    return chr(codepoint)


def unescape(text: str) -> str:
    """
    Decode character references in text or an attribute value.

    Args:
        text: Raw text as it appears in the source

    Returns:
        The text with named and numeric references decoded
    """
    if '&' not in text:
        return text
    return _ENTITY_RE.sub(_decode_reference, text)


def escape_text(text: str) -> str:
    """Escape text content for serialization."""
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def escape_attribute(value: str) -> str:
    """Escape an attribute value for a double-quoted serialization."""
    return value.replace('&', '&amp;').replace('"', '&quot;')
