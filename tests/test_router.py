"""Tests for role-based menus and the active-tab router."""

import pytest

from pipelines.router import (
    AdminMenu,
    PatientMenu,
    ProfileRouter,
    UNKNOWN_VIEW,
    menu_class_for,
    menu_for,
    resolve_view,
)


class TestMenus:
    def test_patient_menu_order(self):
        assert [i.id for i in menu_for("patient")] == [
            "dashboard",
            "appointments",
            "find-surgeon",
            "health-profile",
        ]

    def test_admin_dashboard_is_surgicast(self):
        items = menu_for("admin")
        assert items[0].id == "dashboard"
        assert items[0].label == "SurgiCast"

    @pytest.mark.parametrize("role", ["nurse", "", None, "PATIENT"])
    def test_unknown_role_has_empty_menu_and_resolves(self, role):
        assert menu_for(role) == []
        view = resolve_view(role, "dashboard")
        assert view.view == UNKNOWN_VIEW

    def test_menu_class_selected_once_per_role(self):
        assert isinstance(menu_class_for("patient"), PatientMenu)
        assert isinstance(menu_class_for("admin"), AdminMenu)
        assert menu_class_for("patient") is menu_class_for("patient")

    @pytest.mark.parametrize("role", ["patient", "surgeon", "admin"])
    def test_default_tab_is_dashboard(self, role):
        assert menu_class_for(role).default_tab() == "dashboard"


class TestResolveView:
    def test_known_tab(self):
        view = resolve_view("patient", "health-profile")
        assert view.view == "health_profile"
        assert view.tab_id == "health-profile"

    @pytest.mark.parametrize("role", ["patient", "surgeon", "admin"])
    @pytest.mark.parametrize("tab", ["nope", "", None, "reports-old"])
    def test_invalid_tab_falls_back_to_default(self, role, tab):
        assert resolve_view(role, tab) == resolve_view(role, "dashboard")

    def test_tab_of_another_role_is_not_leaked(self):
        # "health-profile" exists for patients only
        assert resolve_view("admin", "health-profile").view == "surgicast"


class TestProfileRouter:
    def test_initial_state_is_role_default(self):
        router = ProfileRouter()
        router.bind("u1", "surgeon")
        assert router.active_tab == "dashboard"
        assert router.current_view().view == "surgeon_dashboard"

    def test_select_tab_is_unconditional(self):
        router = ProfileRouter()
        router.bind("u1", "patient")
        router.select_tab("find-surgeon")
        router.select_tab("appointments")
        assert router.current_view().view == "appointments"

    def test_select_unknown_tab_resolves_to_default(self):
        router = ProfileRouter()
        router.bind("u1", "patient")
        router.select_tab("bogus")
        assert router.current_view().view == "patient_dashboard"

    def test_role_switch_resets_tab(self):
        router = ProfileRouter()
        router.bind("u1", "patient")
        router.select_tab("health-profile")
        router.bind("u2", "admin")
        assert router.active_tab == "dashboard"
        assert router.current_view().view == "surgicast"

    def test_role_switch_resets_even_on_colliding_tab_id(self):
        router = ProfileRouter()
        router.bind("u1", "surgeon")
        router.select_tab("profile")
        router.bind("u1", "patient")
        assert router.active_tab == "dashboard"

    def test_new_identity_same_role_resets(self):
        router = ProfileRouter()
        router.bind("u1", "patient")
        router.select_tab("appointments")
        router.bind("u2", "patient")
        assert router.active_tab == "dashboard"

    def test_rebinding_same_identity_keeps_tab(self):
        router = ProfileRouter()
        router.bind("u1", "patient")
        router.select_tab("appointments")
        router.bind("u1", "patient")
        assert router.active_tab == "appointments"

    def test_signed_out_router_never_raises(self):
        router = ProfileRouter()
        router.bind(None, None)
        assert router.menu.menu() == []
        assert router.current_view().view == UNKNOWN_VIEW
