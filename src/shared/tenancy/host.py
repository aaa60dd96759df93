"""Host header parsing for subdomain-based tenant resolution."""

import ipaddress
import re

from src.features.rto.exceptions import MalformedHost

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9_-]{0,61}[a-z0-9])?$")


def effective_host(host: str | None, forwarded_host: str | None) -> str | None:
    """Pick the host the client addressed.

    A forwarded-host header set by a proxy wins over the Host header. When a
    chain of proxies appended several values, the first one is the original.
    """
    if forwarded_host:
        first = forwarded_host.split(",")[0].strip()
        if first:
            return first
    return host


def strip_port(host: str) -> str:
    """Remove a trailing :port and the brackets around an IPv6 literal."""
    if host.startswith("["):
        closing = host.find("]")
        return host[1:closing] if closing != -1 else host
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def extract_subdomain(host: str | None) -> str:
    """Return the leftmost label of a host, lower-cased.

    Examples:
        acme.example.com      -> "acme"
        Acme.Example.com:8000 -> "acme"
        localhost             -> "localhost"

    Raises:
        MalformedHost: Empty host, IP literal, or a leftmost label that is not
            a valid DNS label.

    """
    if host is None or not host.strip():
        raise MalformedHost(host)

    hostname = strip_port(host.strip()).rstrip(".").lower()
    if not hostname:
        raise MalformedHost(host)

    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        pass
    else:
        raise MalformedHost(host)

    label = hostname.split(".")[0]
    if not _LABEL_RE.match(label):
        raise MalformedHost(host)
    return label
