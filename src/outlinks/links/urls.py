"""URL checks used to classify anchors."""

import ipaddress
import re
from urllib.parse import urlsplit

from outlinks.config.models import UrlPolicy

# ASCII control characters and whitespace never appear in a well-formed URL
_FORBIDDEN_CHARS_RE = re.compile(r"[\x00-\x20\x7f]")

DEFAULT_URL_POLICY = UrlPolicy()


def is_absolute_url(href: str, policy: UrlPolicy | None = None) -> bool:
    """
    Check that ``href`` is a syntactically valid, absolute HTTP(S) URL.

    The check is purely lexical: no DNS lookups are made. Besides a scheme
    and host it rejects credentials in the authority, IPv6 literals,
    IPv4 literals in loopback and private ranges (unless the policy allows
    them), and explicit ports outside the allowed set.

    Args:
        href: Candidate URL, typically an anchor's ``href`` value
        policy: Acceptance rules; defaults to ``DEFAULT_URL_POLICY``

    Returns:
        True if the URL is absolute and acceptable
    """
    policy = policy or DEFAULT_URL_POLICY

    if not isinstance(href, str) or not href:
        return False
    if _FORBIDDEN_CHARS_RE.search(href):
        return False

    try:
        parts = urlsplit(href)
        port = parts.port
    except ValueError:
        # Bad IPv6 brackets or an out-of-range port
        return False

    if parts.scheme.lower() not in policy.schemes:
        return False
    if not parts.hostname or "[" in parts.netloc:
        return False
    if parts.username is not None or parts.password is not None:
        return False

    host = parts.hostname.strip(".")
    if not host or any(char in host for char in ":#?[]"):
        return False

    if not policy.allow_private_hosts and _is_private_ipv4(host):
        return False

    if port is not None and port not in policy.allowed_ports:
        return False

    return True


def get_host(url: str) -> str:
    """Return the host of ``url``, or an empty string when it has none."""
    if not url:
        return ""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def resolve_site_host(value: str | None) -> str:
    """
    Normalise a site host given either as a bare host or as a home URL.

    ``"https://example.com/blog"`` and ``"example.com"`` both resolve to
    ``"example.com"``. Unusable input resolves to an empty string, which
    disables rewriting.
    """
    value = (value or "").strip()
    if not value:
        return ""
    if "://" in value:
        return get_host(value)
    return get_host(f"//{value}")


def _is_private_ipv4(host: str) -> bool:
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    if address.version != 4:
        return False
    return any(address in network for network in _PRIVATE_IPV4_NETWORKS)


_PRIVATE_IPV4_NETWORKS = tuple(
    ipaddress.ip_network(network)
    for network in (
        "0.0.0.0/8",
        "10.0.0.0/8",
        "127.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
    )
)
