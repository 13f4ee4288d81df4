from __future__ import annotations

import asyncio

import pytest

from hr_portal.core.enums import Role
from hr_portal.listing.screen import ListScreen
from hr_portal.screens import ScreenRegistry, admin, default_registry, employee
from hr_portal.screens.dashboard import build_dashboard


def test_every_screen_is_reachable_by_role_and_key():
    registry = default_registry()

    for role, screens in ((Role.ADMIN, admin.SCREENS), (Role.EMPLOYEE, employee.SCREENS)):
        assert registry.for_role(role) == list(screens)
        for config in screens:
            assert registry.get(role, config.key) is config

    assert registry.get(Role.EMPLOYEE, "materiel").resource == "material"
    assert registry.get(Role.EMPLOYEE, "employes") is None


def test_registry_refuses_role_mismatch_and_duplicates():
    with pytest.raises(ValueError):
        ScreenRegistry({Role.EMPLOYEE: (admin.leaves,)})
    with pytest.raises(ValueError):
        ScreenRegistry({Role.ADMIN: (admin.leaves, admin.leaves)})


def test_action_names_are_unique_per_screen():
    for config in admin.SCREENS + employee.SCREENS:
        names = [a.name for a in config.actions]
        assert len(names) == len(set(names)), config.key
        for action in config.actions:
            assert "{id}" in action.path, (config.key, action.name)


def test_dashboard_screens_belong_to_their_role():
    registry = default_registry()

    assert all(s.role is Role.ADMIN for s in registry.dashboard(Role.ADMIN))
    assert all(s.role is Role.EMPLOYEE for s in registry.dashboard(Role.EMPLOYEE))


def test_dashboard_failure_only_marks_its_tile(transport, client, channel):
    transport.on("GET", "admin/conges", payload=[{"id": 1, "statut": "en_attente"}, {"id": 2, "statut": "approuve"}])
    transport.on("GET", "admin/material", status=500, payload={"message": "Server Error"})
    screens = [ListScreen(admin.leaves, client, channel), ListScreen(admin.materials, client, channel)]

    tiles = asyncio.run(build_dashboard(screens))

    assert [(t.key, t.total, t.pending, t.error) for t in tiles] == [
        ("conges", 2, 1, None),
        ("materiel", 0, 0, "Server Error"),
    ]
