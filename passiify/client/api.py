"""
Role-aware HTTP client for the Passiify REST backend.

One `httpx.AsyncClient` is shared by the user, partner and admin flows. The
`RoleBearerAuth` flow picks the credential for every outgoing request from the
routing table in `passiify.client.routing`, reading the credential store at
dispatch time.
"""
import ipaddress
import logging
from typing import Callable, Optional, Tuple
import httpx
from passiify.core.config import settings
from passiify.client.credentials import CredentialRole, CredentialStore, handle_unauthorized
from passiify.client.exceptions import ApiError
from passiify.client.routing import CREDENTIAL_RULES, CredentialRule, classify_path, select_credential

logger = logging.getLogger(__name__)


def is_local_hostname(hostname: str) -> bool:
    """True for loopback, private-network and mDNS (`.local`) hosts."""
    host = (hostname or "").strip().strip("[]").lower()
    if host in ("localhost", "127.0.0.1", "::1") or host.endswith(".local"):
        return True
    if host.startswith("192.168."):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return address.is_private or address.is_loopback


def resolve_base_url(configured: Optional[str] = None, hostname: Optional[str] = None) -> str:
    """
    Backend base URL, resolved once per client.

    An explicitly configured root wins (with `/api` appended when missing);
    otherwise local hosts talk to the local backend and everything else to
    production. With no hostname at all the local backend is used.
    """
    if configured and configured.strip():
        base = configured.strip().rstrip("/")
        if not base.endswith("/api"):
            base += "/api"
        return base

    if hostname is None or is_local_hostname(hostname):
        return settings.LOCAL_API_URL
    return settings.PRODUCTION_API_URL


class RoleBearerAuth(httpx.Auth):
    """Attach `Authorization: Bearer <token>` for the role the path belongs to."""

    def __init__(
        self,
        store: CredentialStore,
        base_path: str = "",
        rules: Tuple[CredentialRule, ...] = CREDENTIAL_RULES
    ):
        self.store = store
        self.base_path = base_path.rstrip("/")
        self.rules = rules

    def relative_path(self, url: httpx.URL) -> str:
        """Request path with the client's base path (e.g. `/api`) removed."""
        path = url.path
        if self.base_path and (path == self.base_path or path.startswith(self.base_path + "/")):
            path = path[len(self.base_path):] or "/"
        return path

    def auth_flow(self, request: httpx.Request):
        # A selected token replaces any caller header; otherwise the caller's header is kept.
        selected = select_credential(self.relative_path(request.url), self.store, self.rules)
        if selected is not None:
            _, token = selected
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


class ApiClient:
    """
    Async client for the Passiify API.

    Non-2xx responses raise `ApiError` (`UnauthorizedError` for 401). The
    client itself never clears credentials or redirects; callers decide,
    usually via `handle_unauthorized`.
    """

    def __init__(
        self,
        store: CredentialStore,
        base_url: Optional[str] = None,
        hostname: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        navigate: Optional[Callable[[str], None]] = None
    ):
        self.store = store
        self.navigate = navigate
        self.base_url = resolve_base_url(
            base_url or settings.API_BASE_URL,
            hostname if hostname is not None else settings.CLIENT_HOSTNAME
        )
        logger.info(f"[Passiify] API baseURL = {self.base_url}")

        self.auth = RoleBearerAuth(store, base_path=httpx.URL(self.base_url).path)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT,
            transport=transport
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def role_for(self, path: str) -> CredentialRole:
        """Preferred role of the rule `path` falls under."""
        rule = classify_path(path, self.auth.rules)
        return rule.roles[0]

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send one request; raise `ApiError` on a non-2xx response."""
        response = await self._client.request(method, url, **kwargs)
        if response.is_error:
            error = ApiError.from_response(response)
            logger.warning(f"{method} {url} failed with {response.status_code}: {error.message}")
            raise error
        return response

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def login_admin(self, email: str, password: str) -> dict:
        """Admin login; stores the admin token on success."""
        response = await self.post("/admin/login", json={"email": email, "password": password})
        data = response.json()
        self.store.set(CredentialRole.ADMIN, data["token"])
        return data

    async def login(self, email: str, password: str) -> dict:
        """
        User login; stores the user token, and the partner token as well when
        the account is a partner.
        """
        response = await self.post("/auth/login", json={"email": email, "password": password})
        data = response.json()
        self.store.set(CredentialRole.USER, data["token"])
        if (data.get("user") or {}).get("role") == CredentialRole.PARTNER.value:
            self.store.set(CredentialRole.PARTNER, data["token"])
        return data

    def logout(self, *roles: CredentialRole) -> None:
        """Clear the given roles' tokens (user and partner when none given)."""
        for role in roles or (CredentialRole.USER, CredentialRole.PARTNER):
            self.store.clear(role)

    def handle_unauthorized(self, path: str) -> str:
        """
        After a 401 on `path`: clear the credential that was sent for it (the
        role's preferred one when none was) and redirect to that role's login.
        """
        selected = select_credential(path, self.store, self.auth.rules)
        role = selected[0] if selected is not None else self.role_for(path)
        return handle_unauthorized(role, self.store, self.navigate)
