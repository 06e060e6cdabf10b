"""
Response header classification and ordering.

Headers print in a fixed order: ``Server`` first, then end-to-end
headers, then hop-by-hop headers, names compared ordinally within each
class.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from enum import IntEnum
from functools import cmp_to_key
from typing import Iterable

import httpx

# https://www.w3.org/Protocols/rfc2616/rfc2616-sec13.html#sec13.5.1
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
})

HeaderSet = dict[str, list[str]]


class HeaderClass(IntEnum):
    """Ordering class of a header name; lower values print first."""
    SERVER = 0
    END_TO_END = 1
    CONNECTION = 2


def classify_header(name: str) -> HeaderClass:
    """Classify a header name. Case-insensitive."""
    lowered = name.lower()
    if lowered == "server":
        return HeaderClass.SERVER
    if lowered in HOP_BY_HOP_HEADERS:
        return HeaderClass.CONNECTION
    return HeaderClass.END_TO_END


def canonical_header_name(name: str) -> str:
    """Canonical MIME form of a header name, e.g. ``content-type`` -> ``Content-Type``."""
    if not name or any(c.isspace() for c in name):
        return name
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def compare_header_names(a: str, b: str) -> int:
    """Three-way comparison of two header names in print order."""
    class_a, class_b = classify_header(a), classify_header(b)
    if class_a != class_b:
        return -1 if class_a < class_b else 1
    if a == b:
        return 0
    return -1 if a < b else 1


def sort_header_names(names: Iterable[str]) -> list[str]:
    """Sort header names into print order."""
    return sorted(names, key=cmp_to_key(compare_header_names))


def collect_headers(headers: httpx.Headers) -> HeaderSet:
    """Group response headers by canonical name, keeping every value in arrival order."""
    grouped: HeaderSet = {}
    for name, value in headers.multi_items():
        grouped.setdefault(canonical_header_name(name), []).append(value)
    return grouped
