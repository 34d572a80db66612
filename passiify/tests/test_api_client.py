"""
Tests for the role-aware API client.
"""
import httpx
import pytest

from passiify.core.config import settings
from passiify.client.api import ApiClient, is_local_hostname, resolve_base_url
from passiify.client.credentials import CredentialRole, InMemoryCredentialStore
from passiify.client.exceptions import ApiError, UnauthorizedError


def recording_transport(status_code=200, json=None):
    """MockTransport answering every request the same way; requests are kept."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, json=json if json is not None else {})

    return httpx.MockTransport(handler), seen


def make_client(store, transport):
    return ApiClient(store, base_url="http://test", transport=transport)


@pytest.mark.parametrize("hostname", ["localhost", "127.0.0.1", "::1", "studio.local", "192.168.1.20", "10.0.0.4"])
def test_local_hostnames(hostname):
    assert is_local_hostname(hostname)
    assert resolve_base_url(None, hostname) == settings.LOCAL_API_URL


@pytest.mark.parametrize("hostname", ["passiify.in", "www.passiify.in", "8.8.8.8"])
def test_remote_hostnames_use_production(hostname):
    assert not is_local_hostname(hostname)
    assert resolve_base_url(None, hostname) == settings.PRODUCTION_API_URL


def test_configured_base_url_wins():
    assert resolve_base_url("https://staging.passiify.in", "localhost") == "https://staging.passiify.in/api"
    assert resolve_base_url("https://staging.passiify.in/api/", None) == "https://staging.passiify.in/api"


def test_no_hostname_means_local():
    assert resolve_base_url(None, None) == settings.LOCAL_API_URL
    assert resolve_base_url("   ", None) == settings.LOCAL_API_URL


@pytest.mark.asyncio
async def test_bearer_token_follows_path():
    store = InMemoryCredentialStore({"user": "usr", "partner": "prt", "admin": "adm"})
    transport, seen = recording_transport()

    async with make_client(store, transport) as api:
        await api.get("/admin/settlements/overview")
        await api.get("/gyms/me/passes")
        await api.get("/gyms/42")

    assert [str(request.url) for request in seen] == [
        "http://test/api/admin/settlements/overview",
        "http://test/api/gyms/me/passes",
        "http://test/api/gyms/42",
    ]
    assert [request.headers["Authorization"] for request in seen] == [
        "Bearer adm", "Bearer prt", "Bearer usr",
    ]


@pytest.mark.asyncio
async def test_admin_path_never_borrows_other_tokens():
    store = InMemoryCredentialStore({"user": "usr", "partner": "prt"})
    transport, seen = recording_transport()

    async with make_client(store, transport) as api:
        await api.get("/admin/me")

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_token_is_read_at_dispatch_time():
    store = InMemoryCredentialStore()
    transport, seen = recording_transport()

    async with make_client(store, transport) as api:
        await api.get("/bookings/user")
        store.set(CredentialRole.USER, "usr")
        await api.get("/bookings/user")
        store.set(CredentialRole.PARTNER, "prt")
        await api.get("/bookings/user")

    assert [request.headers.get("Authorization") for request in seen] == [None, "Bearer usr", "Bearer prt"]


@pytest.mark.asyncio
async def test_stored_token_replaces_caller_authorization():
    store = InMemoryCredentialStore({"admin": "adm"})
    transport, seen = recording_transport()

    async with make_client(store, transport) as api:
        await api.get("/admin/me", headers={"Authorization": "Bearer explicit"})

    assert seen[0].headers["Authorization"] == "Bearer adm"


@pytest.mark.asyncio
async def test_caller_authorization_kept_when_no_token_applies():
    store = InMemoryCredentialStore({"user": "usr"})
    transport, seen = recording_transport()

    async with make_client(store, transport) as api:
        await api.get("/admin/me", headers={"Authorization": "Bearer explicit"})

    assert seen[0].headers["Authorization"] == "Bearer explicit"


@pytest.mark.asyncio
async def test_error_keeps_backend_message():
    transport, _ = recording_transport(400, {"message": "Email already registered"})

    async with make_client(InMemoryCredentialStore(), transport) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.post("/auth/register", json={})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Email already registered"
    assert not isinstance(exc_info.value, UnauthorizedError)


@pytest.mark.asyncio
async def test_error_without_json_body():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    async with make_client(InMemoryCredentialStore(), httpx.MockTransport(handler)) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.get("/gyms")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message is None
    assert str(exc_info.value) == "HTTP 502"


@pytest.mark.asyncio
async def test_401_raises_unauthorized_without_touching_store():
    store = InMemoryCredentialStore({"admin": "adm"})
    transport, _ = recording_transport(401, {"message": "Invalid or expired admin token"})

    async with make_client(store, transport) as api:
        with pytest.raises(UnauthorizedError) as exc_info:
            await api.get("/admin/settlements/overview")

    assert exc_info.value.message == "Invalid or expired admin token"
    assert store.get(CredentialRole.ADMIN) == "adm"


@pytest.mark.asyncio
async def test_login_stores_user_and_partner_tokens():
    store = InMemoryCredentialStore()
    transport, _ = recording_transport(json={"token": "jwt", "user": {"id": 1, "role": "partner"}})

    async with make_client(store, transport) as api:
        await api.login("owner@irongym.in", "partner-secret")

    assert store.get(CredentialRole.USER) == "jwt"
    assert store.get(CredentialRole.PARTNER) == "jwt"
    assert store.get(CredentialRole.ADMIN) is None


@pytest.mark.asyncio
async def test_login_admin_and_logout():
    store = InMemoryCredentialStore({"user": "usr"})
    transport, _ = recording_transport(json={"_id": 1, "email": "admin@passiify.in", "role": "admin", "token": "adm"})

    async with make_client(store, transport) as api:
        await api.login_admin("admin@passiify.in", "admin-secret")
        assert store.get(CredentialRole.ADMIN) == "adm"

        api.logout()
        assert store.get(CredentialRole.USER) is None
        assert store.get(CredentialRole.ADMIN) == "adm"

        api.logout(CredentialRole.ADMIN)
        assert store.get(CredentialRole.ADMIN) is None


def test_handle_unauthorized_clears_the_credential_that_was_sent():
    store = InMemoryCredentialStore({"user": "usr", "admin": "adm"})
    visited = []
    api = ApiClient(store, base_url="http://test", navigate=visited.append)

    # The partner path fell back to the user token, so that is the one to drop.
    assert api.handle_unauthorized("/gyms/me/passes") == "/login"
    assert store.get(CredentialRole.USER) is None
    assert store.get(CredentialRole.ADMIN) == "adm"

    assert api.handle_unauthorized("/admin/settlements/overview") == "/admin/login"
    assert store.get(CredentialRole.ADMIN) is None
    assert visited == ["/login", "/admin/login"]


def test_handle_unauthorized_without_credential_uses_preferred_role():
    api = ApiClient(InMemoryCredentialStore(), base_url="http://test")
    assert api.handle_unauthorized("/events/host/me") == "/login?redirect=/partner/dashboard"
