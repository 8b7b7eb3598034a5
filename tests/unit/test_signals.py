"""Unit tests for the request signal extractors."""

from __future__ import annotations

import pytest

from tenantscope.tenancy.signals import (
    from_headers,
    from_hostname,
    from_url,
    header_value,
    organization_from_headers,
)


@pytest.mark.unit
class TestFromHostname:
    def test_subdomain_of_base_domain(self) -> None:
        assert from_hostname("acme.example.com", base_domain="example.com") == "acme"

    def test_port_is_stripped(self) -> None:
        assert from_hostname("acme.example.com:8443", base_domain="example.com") == "acme"

    def test_case_is_normalised(self) -> None:
        assert from_hostname("ACME.Example.COM", base_domain="example.com") == "acme"

    def test_leftmost_label_of_nested_subdomain(self) -> None:
        assert from_hostname("acme.eu.example.com", base_domain="example.com") == "acme"

    def test_bare_base_domain_has_no_tenant(self) -> None:
        assert from_hostname("example.com", base_domain="example.com") is None

    def test_foreign_domain_has_no_tenant(self) -> None:
        assert from_hostname("acme.other.org", base_domain="example.com") is None

    def test_lookalike_suffix_is_not_a_subdomain(self) -> None:
        assert from_hostname("acme.notexample.com", base_domain="example.com") is None

    @pytest.mark.parametrize("label", ["www", "admin", "app", "api", "mail"])
    def test_reserved_labels_never_match(self, label: str) -> None:
        assert from_hostname(f"{label}.example.com", base_domain="example.com") is None

    def test_custom_reserved_labels(self) -> None:
        host = "status.example.com"
        assert from_hostname(host, base_domain="example.com") == "status"
        assert from_hostname(host, base_domain="example.com", reserved={"status"}) is None

    def test_without_base_domain_three_labels_match(self) -> None:
        assert from_hostname("tenant1.saas.io.example") == "tenant1"
        assert from_hostname("tenant1.saas.io") == "tenant1"

    def test_without_base_domain_two_labels_do_not_match(self) -> None:
        assert from_hostname("saas.io") is None

    @pytest.mark.parametrize(
        "host",
        ["localhost", "localhost:3000", "127.0.0.1", "10.0.0.12:8080", "[::1]:8000", "", None],
    )
    def test_local_and_ip_hosts_never_match(self, host: str | None) -> None:
        assert from_hostname(host) is None
        assert from_hostname(host, base_domain="example.com") is None


@pytest.mark.unit
class TestFromUrl:
    def test_absolute_url(self) -> None:
        assert from_url("https://example.com/crm?tenant_id=t-acme") == "t-acme"

    def test_relative_url(self) -> None:
        assert from_url("/crm/contacts?page=2&tenant_id=t-acme") == "t-acme"

    def test_first_value_wins(self) -> None:
        assert from_url("/x?tenant_id=t-one&tenant_id=t-two") == "t-one"

    def test_missing_param(self) -> None:
        assert from_url("https://example.com/crm?tenant=t-acme") is None

    def test_blank_param(self) -> None:
        assert from_url("/crm?tenant_id=%20") is None

    def test_no_url(self) -> None:
        assert from_url(None) is None
        assert from_url("") is None


@pytest.mark.unit
class TestHeaders:
    def test_tenant_header(self) -> None:
        assert from_headers({"x-tenant-id": "t-acme"}) == "t-acme"

    def test_tenant_header_case_insensitive(self) -> None:
        assert from_headers({"X-Tenant-ID": "t-acme"}) == "t-acme"

    def test_tenant_header_blank(self) -> None:
        assert from_headers({"x-tenant-id": "  "}) is None

    def test_tenant_header_missing(self) -> None:
        assert from_headers({"x-organization-id": "org-1"}) is None
        assert from_headers({}) is None
        assert from_headers(None) is None

    def test_organization_header(self) -> None:
        assert organization_from_headers({"X-Organization-Id": " org-1 "}) == "org-1"
        assert organization_from_headers({"x-tenant-id": "t-acme"}) is None

    def test_header_value_prefers_exact_key(self) -> None:
        assert header_value({"x-custom": "a", "X-Custom": "b"}, "x-custom") == "a"
