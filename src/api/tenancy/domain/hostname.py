"""Hostname classification.

Turns the raw ``Host`` value of a request into one of three shapes before any
directory lookup happens:

- ``BaseDomainHost``: the platform itself (root domain, development roots,
  reserved labels such as ``www``, IP literals and anything malformed).
- ``SubdomainHost``: ``{label}.{root}`` with a single valid DNS label.
- ``CustomDomainCandidate``: any other well-formed hostname; it may be a
  store's custom domain.

Everything here is pure and total: no I/O, and no string input raises.
Malformed input falls back to ``BaseDomainHost`` so a bad header can never
select a tenant.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from infrastructure.settings import TenancySettings

MAX_LABEL_LENGTH = 63
MAX_HOSTNAME_LENGTH = 253

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


@dataclass(frozen=True)
class BaseDomainHost:
    """The platform's own surface; never a tenant."""

    host: str


@dataclass(frozen=True)
class SubdomainHost:
    """``{label}.{root}``; resolved by subdomain label."""

    host: str
    label: str


@dataclass(frozen=True)
class CustomDomainCandidate:
    """A hostname outside the platform roots; resolved by custom domain."""

    host: str


NormalizedHost = BaseDomainHost | SubdomainHost | CustomDomainCandidate


@dataclass(frozen=True)
class HostnameRules:
    """Root domains and reserved labels hostnames are classified against."""

    root_domain: str
    dev_root_domains: tuple[str, ...] = ("localhost",)
    reserved_labels: frozenset[str] = frozenset({"www", "localhost"})

    @classmethod
    def from_settings(cls, settings: TenancySettings) -> HostnameRules:
        return cls(
            root_domain=settings.root_domain,
            dev_root_domains=tuple(settings.dev_root_domains),
            reserved_labels=frozenset(settings.reserved_labels),
        )

    @property
    def roots(self) -> tuple[str, ...]:
        """Production root first, then the development roots."""
        return (self.root_domain, *self.dev_root_domains)


def is_valid_label(label: str) -> bool:
    """Whether ``label`` is a single lowercase DNS label."""
    return bool(_LABEL_RE.match(label))


def is_valid_hostname(host: str) -> bool:
    """Whether ``host`` is a lowercase, dot-separated sequence of valid labels."""
    if not host or len(host) > MAX_HOSTNAME_LENGTH:
        return False
    return all(is_valid_label(label) for label in host.split("."))


def clean_host(raw_host: str) -> str | None:
    """Strip whitespace, port and trailing root dot; lowercase.

    Returns None when nothing usable remains: IP literals (bracketed or
    bare IPv6, IPv4), a non-numeric port, or an empty host.
    """
    host = raw_host.strip().lower()
    if host.startswith("["):
        # [::1]:8000
        return None
    if host.count(":") > 1:
        return None
    if ":" in host:
        host, _, port = host.partition(":")
        if not port.isdigit():
            return None
    if host.endswith("."):
        host = host[:-1]
    if not host or _is_ip_literal(host):
        return None
    return host


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def normalize(raw_host: str | None, rules: HostnameRules) -> NormalizedHost:
    """Classify a raw hostname.

    Args:
        raw_host: The ``Host`` header (or client hostname) as received.
        rules: Root domains and reserved labels.

    Returns:
        The classified host. Never raises.
    """
    if not isinstance(raw_host, str):
        return BaseDomainHost(host="")

    host = clean_host(raw_host)
    if host is None or not is_valid_hostname(host):
        return BaseDomainHost(host=host or "")

    for root in rules.roots:
        if host == root:
            return BaseDomainHost(host=host)
        suffix = f".{root}"
        if not host.endswith(suffix):
            continue
        prefix = host[: -len(suffix)]
        if "." in prefix:
            # Nested under a root; only the directory can say what it is.
            break
        if prefix in rules.reserved_labels:
            return BaseDomainHost(host=host)
        return SubdomainHost(host=host, label=prefix)

    return CustomDomainCandidate(host=host)


def leftmost_label(host: str, reserved_labels: Iterable[str]) -> str | None:
    """The leftmost label of a host with three or more labels.

    Used by the legacy fallback that treats ``shop1.example.net`` as the
    ``shop1`` store when no custom domain matches. Reserved labels are never
    returned.
    """
    labels = host.split(".")
    if len(labels) < 3:
        return None
    label = labels[0]
    if label in set(reserved_labels) or not is_valid_label(label):
        return None
    return label


def check_custom_domain(domain: str, rules: HostnameRules) -> str:
    """Normalize a custom domain a store owner wants to bind.

    Raises:
        ValueError: If the domain is malformed, an IP literal, a single
            label, or equal to or under one of the platform roots.
    """
    host = clean_host(domain) if isinstance(domain, str) else None
    if host is None or not is_valid_hostname(host) or "." not in host:
        raise ValueError(f"Invalid custom domain '{domain}'")
    for root in rules.roots:
        if host == root or host.endswith(f".{root}"):
            raise ValueError(
                f"Custom domain '{domain}' must not be under the platform domain"
            )
    return host
