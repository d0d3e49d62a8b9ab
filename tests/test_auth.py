"""Tests for the local demo identity provider."""

from unittest.mock import Mock

import pytest

from storage.auth import DEMO_PASSWORD, AuthError, LocalSessionStore


class TestLocalSessionStore:
    def test_demo_accounts_seeded_once(self, store):
        LocalSessionStore(store)
        LocalSessionStore(store)
        roles = sorted(p["role"] for p in store.select("profiles"))
        assert roles == ["admin", "patient", "surgeon"]
        assert len(store.select("surgeon_details")) == 1
        assert len(store.select("surgical_cases")) == 2

    def test_passwords_are_not_stored_in_clear(self, sessions, store):
        blobs = [c["password_blob"] for c in store.select("credentials")]
        assert blobs and all(DEMO_PASSWORD not in b for b in blobs)

    def test_sign_in_notifies_subscribers(self, sessions):
        listener = Mock()
        sessions.subscribe(listener)
        listener.assert_called_once_with(None)  # current state on subscribe

        identity = sessions.sign_in("Patient@Demo.com ", DEMO_PASSWORD)

        assert identity.email == "patient@demo.com"
        listener.assert_called_with(identity)
        assert sessions.get_profile(identity.id).role == "patient"

    def test_wrong_password(self, sessions):
        with pytest.raises(AuthError) as exc:
            sessions.sign_in("patient@demo.com", "nope")
        assert exc.value.code == "wrong-password"

    def test_unknown_user(self, sessions):
        with pytest.raises(AuthError) as exc:
            sessions.sign_in("ghost@demo.com", "whatever")
        assert exc.value.code == "user-not-found"

    def test_create_registers_and_signs_in(self, sessions):
        listener = Mock()
        sessions.subscribe(listener)
        identity = sessions.create("new@x.org", "secret1", "Ada Lovelace", "surgeon")

        profile = sessions.get_profile(identity.id)
        assert profile.full_name == "Ada Lovelace"
        assert profile.first_name == "Ada"
        assert profile.role == "surgeon"
        listener.assert_called_with(identity)
        assert sessions.sign_in("new@x.org", "secret1").id == identity.id

    @pytest.mark.parametrize(
        "email,password,role,code",
        [
            ("patient@demo.com", "secret1", "patient", "email-already-in-use"),
            ("a@b.c", "secret1", "admin", "invalid-role"),
            ("not-an-email", "secret1", "patient", "invalid-email"),
            ("a@b.c", "123", "patient", "weak-password"),
        ],
    )
    def test_create_rejections(self, sessions, email, password, role, code):
        with pytest.raises(AuthError) as exc:
            sessions.create(email, password, "Someone", role)
        assert exc.value.code == code

    def test_destroy_session(self, sessions):
        listener = Mock()
        sessions.sign_in("admin@demo.com", DEMO_PASSWORD)
        unsubscribe = sessions.subscribe(listener)
        sessions.destroy_session()
        listener.assert_called_with(None)

        unsubscribe()
        sessions.sign_in("admin@demo.com", DEMO_PASSWORD)
        assert listener.call_count == 2

    def test_missing_profile(self, sessions):
        assert sessions.get_profile("nobody") is None
