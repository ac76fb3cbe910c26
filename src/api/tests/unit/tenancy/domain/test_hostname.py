"""Unit tests for hostname classification."""

import pytest

from tenancy.domain.hostname import (
    BaseDomainHost,
    CustomDomainCandidate,
    HostnameRules,
    SubdomainHost,
    check_custom_domain,
    clean_host,
    is_valid_label,
    leftmost_label,
    normalize,
)

RULES = HostnameRules(root_domain="codeopx.com")


class TestCleanHost:
    """Tests for stripping ports, case and the trailing dot."""

    def test_lowercases_and_strips_whitespace(self):
        assert clean_host("  Shop1.CodeOpx.COM ") == "shop1.codeopx.com"

    def test_strips_port(self):
        assert clean_host("shop1.codeopx.com:8443") == "shop1.codeopx.com"

    def test_strips_trailing_root_dot(self):
        assert clean_host("shop1.codeopx.com.") == "shop1.codeopx.com"

    @pytest.mark.parametrize("raw", ["shop1.codeopx.com:http", "", "   ", ":8000", "."])
    def test_unusable_hosts_are_none(self, raw):
        assert clean_host(raw) is None

    @pytest.mark.parametrize(
        "raw", ["127.0.0.1", "127.0.0.1:8000", "[::1]:8000", "::1", "2001:db8::1"]
    )
    def test_ip_literals_are_rejected(self, raw):
        assert clean_host(raw) is None


class TestNormalize:
    """Tests for the three-way classification of a raw Host value."""

    def test_store_subdomain(self):
        assert normalize("shop1.codeopx.com", RULES) == SubdomainHost(
            host="shop1.codeopx.com", label="shop1"
        )

    def test_subdomain_with_port_and_caps(self):
        result = normalize("SHOP1.codeopx.com:443", RULES)
        assert isinstance(result, SubdomainHost)
        assert result.label == "shop1"

    def test_root_domain_is_base(self):
        assert normalize("codeopx.com", RULES) == BaseDomainHost(host="codeopx.com")

    def test_www_is_base(self):
        assert normalize("www.codeopx.com", RULES) == BaseDomainHost(
            host="www.codeopx.com"
        )

    def test_localhost_is_base(self):
        assert normalize("localhost:5173", RULES) == BaseDomainHost(host="localhost")

    def test_subdomain_of_dev_root(self):
        assert normalize("shop1.localhost:5173", RULES) == SubdomainHost(
            host="shop1.localhost", label="shop1"
        )

    def test_admin_label_is_a_subdomain_before_lookup(self):
        # Whether "admin" is a store or the platform is the directory's call.
        assert isinstance(normalize("admin.codeopx.com", RULES), SubdomainHost)

    def test_other_domain_is_custom_candidate(self):
        assert normalize("shop.example.com", RULES) == CustomDomainCandidate(
            host="shop.example.com"
        )

    def test_nested_label_under_root_is_custom_candidate(self):
        assert normalize("a.b.codeopx.com", RULES) == CustomDomainCandidate(
            host="a.b.codeopx.com"
        )

    def test_suffix_lookalike_is_not_under_root(self):
        assert normalize("evilcodeopx.com", RULES) == CustomDomainCandidate(
            host="evilcodeopx.com"
        )

    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "10.0.0.1", "[::1]", "shop_1.codeopx.com", "-a.codeopx.com"],
    )
    def test_malformed_and_ip_hosts_are_base(self, raw):
        assert isinstance(normalize(raw, RULES), BaseDomainHost)

    def test_overlong_host_is_base(self):
        host = ".".join(["a" * 63] * 4) + ".com"
        assert isinstance(normalize(host, RULES), BaseDomainHost)

    def test_custom_reserved_labels(self):
        rules = HostnameRules(
            root_domain="codeopx.com", reserved_labels=frozenset({"www", "api"})
        )
        assert isinstance(normalize("api.codeopx.com", rules), BaseDomainHost)


class TestLabels:
    def test_valid_labels(self):
        assert is_valid_label("shop1")
        assert is_valid_label("a")
        assert is_valid_label("my-shop")
        assert is_valid_label("a" * 63)

    def test_invalid_labels(self):
        assert not is_valid_label("")
        assert not is_valid_label("-shop")
        assert not is_valid_label("shop-")
        assert not is_valid_label("Shop")
        assert not is_valid_label("a" * 64)

    def test_leftmost_label_needs_three_labels(self):
        assert leftmost_label("shop1.example.net", {"www"}) == "shop1"
        assert leftmost_label("example.net", {"www"}) is None

    def test_leftmost_label_skips_reserved(self):
        assert leftmost_label("www.example.net", {"www"}) is None


class TestCheckCustomDomain:
    """Tests for validating a domain an owner wants to bind."""

    def test_normalizes(self):
        assert check_custom_domain("Shop.Example.com.", RULES) == "shop.example.com"

    @pytest.mark.parametrize(
        "domain",
        ["codeopx.com", "shop.codeopx.com", "x.localhost", "localhost"],
    )
    def test_rejects_platform_domains(self, domain):
        with pytest.raises(ValueError):
            check_custom_domain(domain, RULES)

    @pytest.mark.parametrize("domain", ["10.0.0.1", "shop", "bad_domain.com", ""])
    def test_rejects_malformed(self, domain):
        with pytest.raises(ValueError):
            check_custom_domain(domain, RULES)
