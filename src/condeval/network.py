"""IP address and email pattern matching.

IP patterns:
    - Exact literal: ``203.0.113.7``, ``2001:db8::1``
    - CIDR block: ``192.168.1.0/24``, ``2001:db8::/32``
    - Wildcard: ``10.0.0.*``; ``*`` matches one segment, and a trailing ``*``
      matches all remaining segments

Email patterns:
    - Full address: ``jane@example.com``
    - Domain: ``@example.com``
    - TLD suffix: ``.edu``
    - Domain fragment: ``example`` (substring of the domain)
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Any

import structlog

from .values import to_list, to_str

logger = structlog.get_logger(__name__)

_EMAIL = re.compile(r"^([^@\s]+)@([^@\s]+\.[^@\s.]+)$")


def normalize_patterns(value: Any) -> list[str]:
    """Wrap ``value`` into a list of trimmed, non-empty pattern strings."""
    patterns = (to_str(item).strip() for item in to_list(value))
    return [p for p in patterns if p]


def ip_matches(address: str, patterns: list[str]) -> bool:
    """Return whether ``address`` matches any of ``patterns``.

    Args:
        address: The IP address being tested.
        patterns: Pattern strings (exact, CIDR, or wildcard).

    Returns:
        ``True`` if any pattern matches. An unparseable ``address`` never
        matches; malformed patterns are skipped.
    """
    address = address.strip()
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        logger.debug("ip_address_unparseable", address=address)
        return False

    for pattern in patterns:
        if "*" in pattern:
            if _wildcard_match(ip, pattern):
                return True
        elif "/" in pattern:
            try:
                network = ipaddress.ip_network(pattern, strict=False)
            except ValueError:
                logger.debug("ip_pattern_invalid", pattern=pattern)
                continue
            if network.version == ip.version and ip in network:
                return True
        else:
            try:
                if ipaddress.ip_address(pattern) == ip:
                    return True
            except ValueError:
                logger.debug("ip_pattern_invalid", pattern=pattern)
    return False


def _wildcard_match(ip: ipaddress.IPv4Address | ipaddress.IPv6Address, pattern: str) -> bool:
    if ip.version == 4:
        sep, segments = ".", str(ip).split(".")
    else:
        sep, segments = ":", ip.exploded.split(":")
        # Compare IPv6 segments in their zero-padded form.
        pattern = ":".join(p if p == "*" else p.zfill(4) for p in pattern.lower().split(":"))

    parts = pattern.split(sep)
    for index, part in enumerate(parts):
        if part == "*" and index == len(parts) - 1:
            return index < len(segments)
        if index >= len(segments):
            return False
        if part != "*" and part != segments[index]:
            return False
    return len(parts) == len(segments)


@dataclass(frozen=True)
class EmailAddress:
    """A parsed, lower-cased email address."""

    local: str
    domain: str

    @property
    def address(self) -> str:
        return f"{self.local}@{self.domain}"

    @classmethod
    def parse(cls, value: Any) -> EmailAddress | None:
        """Parse ``value`` into an ``EmailAddress``.

        Returns:
            The parsed address, or ``None`` if ``value`` does not look like
            ``local@domain.tld``.
        """
        match = _EMAIL.match(to_str(value).strip().lower())
        if not match:
            return None
        return cls(local=match.group(1), domain=match.group(2))

    def matches(self, pattern: str) -> bool:
        pattern = pattern.strip().lower()
        if not pattern:
            return False
        if pattern.startswith("@"):
            return self.domain == pattern[1:]
        if "@" in pattern:
            return self.address == pattern
        if pattern.startswith("."):
            return self.domain.endswith(pattern)
        return pattern in self.domain

    def matches_any(self, patterns: list[str]) -> bool:
        return any(self.matches(p) for p in patterns)
