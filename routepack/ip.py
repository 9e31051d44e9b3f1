"""
IPv4 helpers.
"""
from __future__ import annotations

import re
from typing import Optional

IPV4_SEGMENT_COUNT = 4

_DIGITS = re.compile(r"[0-9]+")


def ip_to_number(ip: str) -> Optional[int]:
    """
    Dotted quad -> unsigned 32-bit int (segment 0 is the most significant byte).
    Returns None for anything that is not 4 decimal octets in [0, 255].
    Masks go through the same function, no netmask checks.
    """
    segments = ip.split(".")
    if len(segments) != IPV4_SEGMENT_COUNT:
        return None

    value = 0
    for segment in segments:
        if not _DIGITS.fullmatch(segment):
            return None
        octet = int(segment, 10)
        if octet > 255:
            return None
        value = (value << 8) | octet

    return value & 0xFFFFFFFF
