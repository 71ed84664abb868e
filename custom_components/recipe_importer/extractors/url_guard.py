"""
URL safety checks for outbound page fetches.

A URL is only fetched when it uses http(s) and every address its host
resolves to is publicly routable, so a recipe link cannot be used to reach
the Home Assistant host or the local network.
"""
from __future__ import annotations

import ipaddress
import logging
import socket
from dataclasses import dataclass
from urllib.parse import urlsplit

_LOGGER = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")

BLOCKED_HOSTNAMES = frozenset({
    "localhost",
    "localhost.localdomain",
    "broadcasthost",
})

# Ranges not covered by the ipaddress is_* properties
_BLOCKED_NETWORKS = (
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("100.64.0.0/10"),
    ipaddress.ip_network("255.255.255.255/32"),
)


@dataclass(frozen=True)
class UrlValidation:
    """Outcome of a URL check.

    Attributes:
        valid: Whether the URL may be fetched
        url: The normalized URL when valid
        reason: Why the URL was rejected when not valid
    """

    valid: bool
    url: str | None = None
    reason: str | None = None


def is_blocked_address(address: str) -> bool:
    """Check whether an IP address is private, local or otherwise non-public.

    IPv4-mapped IPv6 addresses are rejected outright.
    """
    try:
        ip = ipaddress.ip_address(address.split("%", 1)[0])
    except ValueError:
        return True

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return True

    if (ip.is_private or ip.is_loopback or ip.is_link_local
            or ip.is_multicast or ip.is_reserved or ip.is_unspecified):
        return True

    return isinstance(ip, ipaddress.IPv4Address) and any(
        ip in network for network in _BLOCKED_NETWORKS)


def _resolve(hostname: str) -> list[str]:
    infos = socket.getaddrinfo(hostname, None, proto=socket.IPPROTO_TCP)
    return [info[4][0] for info in infos]


def validate_url(url: str) -> UrlValidation:
    """Check that a URL is safe to fetch.

    Args:
        url: The URL supplied by the user or a redirect

    Returns:
        UrlValidation with ``valid`` set, and either the normalized URL or
        the reason it was rejected
    """
    if not url or not url.strip():
        return UrlValidation(valid=False, reason="URL cannot be empty")

    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except ValueError as e:
        return UrlValidation(valid=False, reason=f"Malformed URL: {e}")

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return UrlValidation(
            valid=False,
            reason=f"Only HTTP and HTTPS URLs are allowed, got '{parts.scheme}'")

    if not hostname:
        return UrlValidation(valid=False, reason="URL has no hostname")

    hostname = hostname.rstrip(".").lower()
    if hostname in BLOCKED_HOSTNAMES:
        return UrlValidation(
            valid=False, reason=f"Hostname '{hostname}' is not allowed")

    try:
        ipaddress.ip_address(hostname)
        addresses = [hostname]
    except ValueError:
        try:
            addresses = _resolve(hostname)
        except (socket.gaierror, UnicodeError) as e:
            _LOGGER.debug("Could not resolve %s: %s", hostname, e)
            return UrlValidation(
                valid=False, reason=f"Could not resolve hostname '{hostname}'")

    if not addresses:
        return UrlValidation(
            valid=False, reason=f"Hostname '{hostname}' did not resolve")

    for address in addresses:
        if is_blocked_address(address):
            _LOGGER.warning(
                "Blocked URL %s: %s resolves to non-public address %s",
                url, hostname, address)
            return UrlValidation(
                valid=False,
                reason=f"Hostname '{hostname}' resolves to a non-public address")

    return UrlValidation(valid=True, url=parts.geturl())
