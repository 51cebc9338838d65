"""Unit tests for the registry sweep."""

import sys
from unittest.mock import patch

import pytest
from appsweep.models.outcome import DeletionOutcome
from appsweep.models.principal import PrincipalKind
from appsweep.registry import get_system_registry
from appsweep.registry.base import Hive, format_key
from appsweep.registry.sweep import RegistrySweep, is_user_hive
from fakes import FakeRegistry

KEY = "Software\\Asshurt"


class TestIsUserHive:
    """Tests for is_user_hive function."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("S-1-5-21-AAA", True),
            ("S-1-5-18", True),
            (".DEFAULT", False),
            ("S-1-5-21-AAA_Classes", False),
        ],
    )
    def test_filter(self, name: str, expected: bool) -> None:
        """The default and class-registration hives are skipped."""
        assert is_user_hive(name) is expected


class TestHive:
    """Tests for Hive display names."""

    def test_display_names(self) -> None:
        """Every hive carries its conventional name."""
        assert Hive.CURRENT_USER.display_name == "HKEY_CURRENT_USER"
        assert Hive.OTHER.display_name == "<other hive>"
        assert format_key(Hive.USERS, "S-1\\Software") == "HKEY_USERS\\S-1\\Software"
        assert format_key(Hive.USERS, "") == "HKEY_USERS"


class TestDeleteKey:
    """Tests for RegistrySweep.delete_key."""

    def test_missing_key(self, registry: FakeRegistry) -> None:
        """A missing key is already absent."""
        result = RegistrySweep(registry).delete_key(Hive.CURRENT_USER, KEY)

        assert result.outcome == DeletionOutcome.ALREADY_ABSENT
        assert result.target == "HKEY_CURRENT_USER\\Software\\Asshurt"

    def test_deletes_subtree(self, registry: FakeRegistry) -> None:
        """A present key is deleted together with its children."""
        registry.add(Hive.CURRENT_USER, KEY + "\\Settings")
        registry.add(Hive.CURRENT_USER, "Software\\Other")

        result = RegistrySweep(registry).delete_key(Hive.CURRENT_USER, KEY)

        assert result.outcome == DeletionOutcome.DELETED
        assert registry.keys[Hive.CURRENT_USER] == ["Software\\Other"]

    def test_access_denied(self, registry: FakeRegistry) -> None:
        """Access denied is reported as an error, never raised."""
        registry.add(Hive.CURRENT_USER, KEY)
        registry.denied.add(KEY)

        result = RegistrySweep(registry).delete_key(Hive.CURRENT_USER, KEY)

        assert result.outcome == DeletionOutcome.ERROR
        assert registry.key_exists(Hive.CURRENT_USER, KEY)


class TestSweepAllPrincipals:
    """Tests for RegistrySweep.sweep_all_principals."""

    def test_hive_filter(self, registry: FakeRegistry) -> None:
        """Only real per-user hives are processed."""
        for sid in ("S-1-5-21-AAA", ".DEFAULT", "S-1-5-21-AAA_Classes", "S-1-5-21-BBB"):
            registry.add(Hive.USERS, f"{sid}\\{KEY}")

        results = RegistrySweep(registry).sweep_all_principals(KEY)

        assert [r.target for r in results] == [
            "HKEY_USERS\\S-1-5-21-AAA\\Software\\Asshurt",
            "HKEY_USERS\\S-1-5-21-BBB\\Software\\Asshurt",
        ]
        assert all(r.outcome == DeletionOutcome.DELETED for r in results)
        assert registry.key_exists(Hive.USERS, f".DEFAULT\\{KEY}")
        assert registry.key_exists(Hive.USERS, f"S-1-5-21-AAA_Classes\\{KEY}")

    def test_principals(self, registry: FakeRegistry) -> None:
        """Principals are registry hives named by SID."""
        registry.add(Hive.USERS, "S-1-5-21-AAA\\Software")
        registry.add(Hive.USERS, ".DEFAULT\\Software")

        principals = RegistrySweep(registry).principals()

        assert [(p.kind, p.name) for p in principals] == [
            (PrincipalKind.REGISTRY_HIVE, "S-1-5-21-AAA")
        ]

    def test_enumeration_failure(self, registry: FakeRegistry) -> None:
        """An unreadable HKEY_USERS yields no results and does not raise."""
        registry.enumeration_error = PermissionError("denied")

        assert RegistrySweep(registry).sweep_all_principals(KEY) == []

    def test_one_hive_failure_does_not_stop_sweep(self, registry: FakeRegistry) -> None:
        """An unexpected error in one hive skips only that hive."""
        registry.add(Hive.USERS, f"S-1-5-21-AAA\\{KEY}")
        registry.add(Hive.USERS, f"S-1-5-21-BBB\\{KEY}")
        sweep = RegistrySweep(registry)
        real_delete = sweep.delete_key

        def flaky(hive: Hive, key_path: str):  # type: ignore[no-untyped-def]
            if key_path.startswith("S-1-5-21-AAA"):
                raise RuntimeError("hive unloaded")
            return real_delete(hive, key_path)

        with patch.object(sweep, "delete_key", side_effect=flaky):
            results = sweep.sweep_all_principals(KEY)

        assert [r.target for r in results] == ["HKEY_USERS\\S-1-5-21-BBB\\Software\\Asshurt"]


class TestGetSystemRegistry:
    """Tests for get_system_registry function."""

    def test_none_off_windows(self) -> None:
        """No registry is available outside Windows."""
        with patch.object(sys, "platform", "linux"):
            assert get_system_registry() is None
