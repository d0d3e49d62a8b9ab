"""
pipelines/router.py

Role-based navigation:
- one RoleMenu per role (menu items, default tab, tab -> view)
- ProfileRouter keeps the active tab for the signed-in identity

Unknown roles get an empty menu and the "unknown_role" view; nothing here
raises on bad input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_TAB = "dashboard"
UNKNOWN_VIEW = "unknown_role"


@dataclass(frozen=True)
class MenuItem:
    id: str
    label: str
    view: str


@dataclass(frozen=True)
class ViewDescriptor:
    role: Optional[str]
    tab_id: Optional[str]
    view: str
    title: str


class RoleMenu:
    role: Optional[str] = None
    items: tuple[MenuItem, ...] = ()

    def menu(self) -> list[MenuItem]:
        return list(self.items)

    def default_tab(self) -> Optional[str]:
        ids = [item.id for item in self.items]
        if DEFAULT_TAB in ids:
            return DEFAULT_TAB
        return ids[0] if ids else None

    def resolve(self, tab_id: Optional[str]) -> ViewDescriptor:
        by_id = {item.id: item for item in self.items}
        item = by_id.get(tab_id) or by_id.get(self.default_tab())
        if item is None:
            return ViewDescriptor(role=self.role, tab_id=None, view=UNKNOWN_VIEW, title="Unknown role")
        return ViewDescriptor(role=self.role, tab_id=item.id, view=item.view, title=item.label)


class PatientMenu(RoleMenu):
    role = "patient"
    items = (
        MenuItem("dashboard", "Dashboard", "patient_dashboard"),
        MenuItem("appointments", "Appointments", "appointments"),
        MenuItem("find-surgeon", "Find Surgeon", "find_surgeon"),
        MenuItem("health-profile", "Health Profile", "health_profile"),
    )


class SurgeonMenu(RoleMenu):
    role = "surgeon"
    items = (
        MenuItem("dashboard", "Dashboard", "surgeon_dashboard"),
        MenuItem("patients", "My Patients", "surgeon_patients"),
        MenuItem("schedule", "My Schedule", "surgeon_schedule"),
        MenuItem("profile", "Profile", "surgeon_profile"),
    )


class AdminMenu(RoleMenu):
    role = "admin"
    items = (
        MenuItem("dashboard", "SurgiCast", "surgicast"),
        MenuItem("analytics", "Analytics", "admin_analytics"),
        MenuItem("reports", "Reports", "admin_reports"),
    )


class UnknownRoleMenu(RoleMenu):
    def __init__(self, role: Optional[str] = None):
        self.role = role


_MENUS: dict[str, RoleMenu] = {
    m.role: m for m in (PatientMenu(), SurgeonMenu(), AdminMenu())  # type: ignore[misc]
}


def menu_class_for(role: Optional[str]) -> RoleMenu:
    menu = _MENUS.get(role or "")
    if menu is None:
        return UnknownRoleMenu(role)
    return menu


def menu_for(role: Optional[str]) -> list[MenuItem]:
    return menu_class_for(role).menu()


def resolve_view(role: Optional[str], tab_id: Optional[str]) -> ViewDescriptor:
    return menu_class_for(role).resolve(tab_id)


class ProfileRouter:
    """Active-tab state for one session; any tab is reachable from any other."""

    def __init__(self) -> None:
        self.identity_id: Optional[str] = None
        self.role: Optional[str] = None
        self.menu: RoleMenu = UnknownRoleMenu()
        self.active_tab: Optional[str] = None

    def bind(self, identity_id: Optional[str], role: Optional[str]) -> None:
        """Attach the router to a (possibly new) identity/role."""
        if identity_id == self.identity_id and role == self.role:
            return
        self.identity_id = identity_id
        self.role = role
        self.menu = menu_class_for(role)
        self.active_tab = self.menu.default_tab()
        logger.info("Router bound to role=%s, tab reset to %s", role, self.active_tab)

    def select_tab(self, tab_id: str) -> None:
        self.active_tab = tab_id

    def current_view(self) -> ViewDescriptor:
        return self.menu.resolve(self.active_tab)
