"""Unit tests for the capability catalog and wildcard matching."""

from __future__ import annotations

import pytest

from tenantscope.authz.permissions import (
    ALL_PERMISSIONS,
    PERMISSION_CATEGORIES,
    Permission,
    expand_permissions,
    matches_permission,
    permission_category,
    permissions_in_category,
)


@pytest.mark.unit
class TestMatching:
    @pytest.mark.parametrize(
        ("permission", "pattern", "expected"),
        [
            ("users.read", "users.read", True),
            ("users.read", "users.*", True),
            ("users.read", "*", True),
            ("users.read", "*.read", True),
            ("users.read", "tenants.*", False),
            ("users.read", "users.write", False),
            ("users.read", "users", False),
            ("usersXread", "users.*", False),
        ],
    )
    def test_matches_permission(self, permission: str, pattern: str, expected: bool) -> None:
        assert matches_permission(permission, pattern) is expected


@pytest.mark.unit
class TestExpand:
    def test_wildcard_expands_against_catalog(self) -> None:
        assert expand_permissions(["billing.*"]) == {"billing.read", "billing.write"}

    def test_star_is_everything(self) -> None:
        assert expand_permissions(["*"]) == ALL_PERMISSIONS

    def test_literals_kept_and_blanks_dropped(self) -> None:
        assert expand_permissions(["users.read", " ", "custom.thing"]) == {
            "users.read",
            "custom.thing",
        }

    def test_unmatched_wildcard_adds_nothing(self) -> None:
        assert expand_permissions(["nothing.*"]) == frozenset()


@pytest.mark.unit
class TestCatalog:
    def test_all_permissions_mirrors_enum(self) -> None:
        assert len(ALL_PERMISSIONS) == len(Permission)
        assert Permission.API_ACCESS in ALL_PERMISSIONS

    def test_every_permission_has_a_category(self) -> None:
        assert all(permission_category(p) is not None for p in ALL_PERMISSIONS)

    def test_categories_partition_the_catalog(self) -> None:
        groups = [permissions_in_category(c) for c in PERMISSION_CATEGORIES]
        assert sum(len(g) for g in groups) == len(ALL_PERMISSIONS)
        assert frozenset().union(*groups) == ALL_PERMISSIONS

    def test_category_lookup(self) -> None:
        assert permission_category("webhooks.write") == "INTEGRATIONS"
        assert permission_category("roles.delete") == "ADMIN"
        assert permission_category("reports.beta") is None

    def test_category_name_is_case_insensitive(self) -> None:
        assert permissions_in_category("billing") == {"billing.read", "billing.write"}
        assert permissions_in_category("unknown") == frozenset()
