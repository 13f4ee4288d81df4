from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..core.enums import Role
from ..listing.screen import ScreenConfig
from . import admin, employee


class ScreenRegistry:
    """Lookup of screen declarations by (role, key)."""

    def __init__(self, screens: Dict[Role, Tuple[ScreenConfig, ...]], dashboards: Optional[Dict[Role, Tuple[ScreenConfig, ...]]] = None):
        self._by_key: Dict[Tuple[Role, str], ScreenConfig] = {}
        self._order: Dict[Role, List[ScreenConfig]] = {}
        for role, configs in screens.items():
            for config in configs:
                if config.role is not role:
                    raise ValueError(f"screen {config.key} declared for {config.role.value}, registered under {role.value}")
                if (role, config.key) in self._by_key:
                    raise ValueError(f"duplicate screen {role.value}/{config.key}")
                self._by_key[(role, config.key)] = config
                self._order.setdefault(role, []).append(config)
        self._dashboards = dict(dashboards or {})

    def get(self, role: Role, key: str) -> Optional[ScreenConfig]:
        return self._by_key.get((role, key))

    def for_role(self, role: Role) -> List[ScreenConfig]:
        return list(self._order.get(role, []))

    def dashboard(self, role: Role) -> Tuple[ScreenConfig, ...]:
        return self._dashboards.get(role, ())


def default_registry() -> ScreenRegistry:
    return ScreenRegistry(
        {Role.ADMIN: admin.SCREENS, Role.EMPLOYEE: employee.SCREENS},
        {Role.ADMIN: admin.DASHBOARD, Role.EMPLOYEE: employee.DASHBOARD},
    )
