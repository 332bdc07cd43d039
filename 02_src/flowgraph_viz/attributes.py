"""Permissive tag/attribute scraping for quasi-XML flow graph lines."""

import re
from typing import Dict

# Letters only, terminated by a space: `<Node id=...` -> `Node`.
TAG_PATTERN = re.compile(r"<([A-Za-z]*?) ")

# Values are restricted to a safe class. A quoted value holding any other
# character (quotes, `!`, `'`, `#`, non-ASCII, ...) yields no pair at all.
ATTRIBUTE_PATTERN = re.compile(r'([A-Za-z_]*?)="([A-Za-z0-9@&;,\-./:_ ]*?)"')

UNSIGNED_64_MODULUS = 1 << 64


def extract_tag(line: str) -> str:
    match = TAG_PATTERN.search(line)
    if match:
        return match.group(1)
    return ""


def extract_attributes(line: str) -> Dict[str, str]:
    """Return every `key="value"` pair of the line with lowercased keys.

    Duplicate keys keep the last value seen on the line.
    """
    attributes: Dict[str, str] = {}
    for match in ATTRIBUTE_PATTERN.finditer(line):
        attributes[match.group(1).lower()] = match.group(2)
    return attributes


def signed_to_unsigned(value: str) -> str:
    """Reinterpret a negative signed 64-bit decimal as its unsigned form.

    Non-negative and non-numeric values are returned unchanged.
    """
    if not value.startswith("-"):
        return value
    try:
        number = int(value)
    except ValueError:
        return value
    return str(number % UNSIGNED_64_MODULUS)
