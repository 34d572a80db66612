"""Client package - role-aware API client and settlement console view model."""
from passiify.client.credentials import (
    CredentialRole, CredentialStore, InMemoryCredentialStore, FileCredentialStore, handle_unauthorized
)
from passiify.client.api import ApiClient, RoleBearerAuth, resolve_base_url
from passiify.client.exceptions import ApiError, UnauthorizedError, PayoutValidationError, PassiifyClientError
from passiify.client.settlement_view import SettlementsView, fetch_partner_settlement

__all__ = [
    "CredentialRole",
    "CredentialStore",
    "InMemoryCredentialStore",
    "FileCredentialStore",
    "handle_unauthorized",
    "ApiClient",
    "RoleBearerAuth",
    "resolve_base_url",
    "ApiError",
    "UnauthorizedError",
    "PayoutValidationError",
    "PassiifyClientError",
    "SettlementsView",
    "fetch_partner_settlement",
]
