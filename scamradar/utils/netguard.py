# scamradar/utils/netguard.py
# Refuse to probe private/reserved network locations.
from __future__ import annotations

import ipaddress
import re
from typing import Optional

_RESERVED_HOSTS = {"localhost", "0.0.0.0", "[::1]", "[::0]", "169.254.169.254"}
_PART_RE = re.compile(r"^(0x[0-9a-f]+|0[0-7]*|[1-9][0-9]*)$")


def _part_value(p: str) -> int:
    if p.startswith("0x"):
        return int(p, 16)
    if p.startswith("0") and len(p) > 1:
        return int(p, 8)
    return int(p)


def parse_ipv4(host: str) -> Optional[ipaddress.IPv4Address]:
    """
    Parse an IPv4 literal the way inet_aton does: one to four parts, each
    decimal, octal (leading 0) or hex (0x). Every part but the last is one
    byte; the last part fills the remaining bytes, so ``127.1`` is
    127.0.0.1 and ``10.65535`` is 10.0.255.255. Returns None otherwise.
    """
    parts = host.lower().split(".")
    if not 1 <= len(parts) <= 4 or not all(_PART_RE.match(p) for p in parts):
        return None
    values = [_part_value(p) for p in parts]
    *head, last = values
    if any(v > 0xFF for v in head) or last >= 1 << (8 * (4 - len(head))):
        return None
    n = last
    for i, v in enumerate(head):
        n |= v << (8 * (3 - i))
    return ipaddress.IPv4Address(n)


def is_private_ipv4(ip: ipaddress.IPv4Address) -> bool:
    return (ip.is_private or ip.is_loopback or ip.is_link_local
            or ip.is_unspecified or ip.is_reserved or ip.is_multicast
            or ip in ipaddress.IPv4Network("0.0.0.0/8"))


def is_private_or_reserved_host(hostname: str) -> bool:
    """
    True for localhost, any bracketed IPv6 literal, and IPv4 literals in a
    private/reserved range whatever notation they are written in.
    """
    h = (hostname or "").strip().lower().rstrip(".")
    if not h:
        return False
    if h in _RESERVED_HOSTS or h.endswith(".localhost"):
        return True
    if h.startswith("[") and h.endswith("]"):
        return True
    if ":" in h:
        # bare IPv6 literal
        try:
            ipaddress.IPv6Address(h)
            return True
        except ValueError:
            pass
    ip = parse_ipv4(h)
    return ip is not None and is_private_ipv4(ip)


__all__ = ["parse_ipv4", "is_private_ipv4", "is_private_or_reserved_host"]
