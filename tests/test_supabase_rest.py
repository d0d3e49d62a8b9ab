"""Tests for the Supabase REST backend with a mocked HTTP session."""

from unittest.mock import Mock

import pytest
import requests

from storage.auth import AuthError, SessionUnavailableError
from storage.records import RecordStoreError
from storage.supabase_rest import SupabaseClient, SupabaseRecordStore, SupabaseSessionStore

URL = "https://abc.supabase.co"


def _response(status=200, body=None):
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.content = b"" if body is None else b"x"
    response.json.return_value = body
    response.text = ""
    return response


@pytest.fixture
def http():
    return Mock()


@pytest.fixture
def client(http):
    return SupabaseClient(URL + "/", "anon", http=http)


@pytest.fixture
def records(client):
    return SupabaseRecordStore(client)


@pytest.fixture
def auth(client, records):
    return SupabaseSessionStore(client, records)


class TestSupabaseRecordStore:
    def test_select_builds_postgrest_query(self, http, records):
        http.request.return_value = _response(200, [{"id": "v1"}])
        rows = records.select("vital_signs", {"patient_id": "p1"}, order=("created_at", True))

        assert rows == [{"id": "v1"}]
        method, url = http.request.call_args.args
        kwargs = http.request.call_args.kwargs
        assert method == "GET"
        assert url == f"{URL}/rest/v1/vital_signs"
        assert kwargs["params"] == {"select": "*", "patient_id": "eq.p1", "order": "created_at.desc"}
        assert kwargs["headers"]["apikey"] == "anon"
        assert kwargs["headers"]["Authorization"] == "Bearer anon"

    def test_insert_asks_for_representation(self, http, records):
        http.request.return_value = _response(201, [{"id": "new", "heart_rate": 70}])
        row = records.insert("vital_signs", {"heart_rate": 70})

        assert row == {"id": "new", "heart_rate": 70}
        kwargs = http.request.call_args.kwargs
        assert kwargs["json"] == {"heart_rate": 70}
        assert kwargs["headers"]["Prefer"] == "return=representation"

    def test_update_filters_by_match(self, http, records):
        http.request.return_value = _response(200, [{"id": "s1"}])
        records.update("surgical_history", {"notes": "x"}, {"id": "s1"})
        assert http.request.call_args.args[0] == "PATCH"
        assert http.request.call_args.kwargs["params"] == {"id": "eq.s1"}

    def test_update_requires_match(self, http, records):
        with pytest.raises(RecordStoreError):
            records.update("surgical_history", {"notes": "x"}, {})
        http.request.assert_not_called()

    def test_rejected_request(self, http, records):
        http.request.return_value = _response(403, {"message": "permission denied"})
        with pytest.raises(RecordStoreError, match="permission denied"):
            records.insert("vital_signs", {})

    def test_transport_error(self, http, records):
        http.request.side_effect = requests.ConnectionError("down")
        with pytest.raises(RecordStoreError):
            records.select("profiles")


class TestSupabaseSessionStore:
    def test_sign_in_stores_token_and_emits(self, http, client, auth):
        http.post.return_value = _response(
            200, {"access_token": "tok", "user": {"id": "u1", "email": "a@b.c"}}
        )
        seen = []
        auth.subscribe(seen.append)

        identity = auth.sign_in("a@b.c", "secret1")

        assert identity.id == "u1"
        assert seen == [None, identity]
        assert client.access_token == "tok"
        assert client.headers()["Authorization"] == "Bearer tok"
        assert http.post.call_args.kwargs["params"] == {"grant_type": "password"}

    def test_bad_credentials_map_to_code(self, http, auth):
        http.post.return_value = _response(400, {"error_description": "Invalid login credentials"})
        with pytest.raises(AuthError) as exc:
            auth.sign_in("a@b.c", "nope")
        assert exc.value.code == "wrong-password"

    def test_unreachable(self, http, auth):
        http.post.side_effect = requests.Timeout("slow")
        with pytest.raises(SessionUnavailableError):
            auth.sign_in("a@b.c", "secret1")

    def test_sign_up_creates_profile(self, http, auth):
        http.post.return_value = _response(
            200, {"access_token": "tok", "user": {"id": "u9", "email": "n@x.org"}}
        )
        http.request.return_value = _response(201, [{"id": "u9"}])

        identity = auth.create("n@x.org", "secret1", "New Person", "surgeon")

        assert identity.id == "u9"
        assert http.request.call_args.kwargs["json"] == {
            "id": "u9",
            "email": "n@x.org",
            "full_name": "New Person",
            "role": "surgeon",
        }

    def test_sign_up_rejects_admin_locally(self, http, auth):
        with pytest.raises(AuthError):
            auth.create("n@x.org", "secret1", "Boss", "admin")
        http.post.assert_not_called()

    def test_get_profile(self, http, auth):
        http.request.return_value = _response(200, [{"id": "u1", "full_name": "A B", "role": "admin"}])
        assert auth.get_profile("u1").role == "admin"

        http.request.return_value = _response(200, [])
        assert auth.get_profile("u1") is None

        http.request.side_effect = requests.ConnectionError("down")
        with pytest.raises(SessionUnavailableError):
            auth.get_profile("u1")

    def test_sign_out_clears_token_even_if_remote_fails(self, http, client, auth):
        client.access_token = "tok"
        http.post.side_effect = requests.ConnectionError("down")
        seen = []
        auth.subscribe(seen.append)

        auth.destroy_session()

        assert client.access_token is None
        assert seen[-1] is None
