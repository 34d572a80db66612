"""
Credential storage for the three roles sharing one API client.

Tokens live under the same keys the web console uses in browser storage
(`token`, `partnerToken`, `adminToken`). Stores are read on every request,
so a logout performed elsewhere takes effect on the next call.
"""
import enum
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Optional, Union
from passiify.core.config import settings

logger = logging.getLogger(__name__)


class CredentialRole(str, enum.Enum):
    """Acting role of a bearer credential."""
    USER = "user"
    PARTNER = "partner"
    ADMIN = "admin"


STORAGE_KEYS: Dict[CredentialRole, str] = {
    CredentialRole.USER: "token",
    CredentialRole.PARTNER: "partnerToken",
    CredentialRole.ADMIN: "adminToken",
}

LOGIN_ENTRY_POINTS: Dict[CredentialRole, str] = {
    CredentialRole.USER: "/login",
    CredentialRole.PARTNER: "/login?redirect=/partner/dashboard",
    CredentialRole.ADMIN: "/admin/login",
}


class CredentialStore(ABC):
    """Key/value store of bearer tokens, one per role."""

    @abstractmethod
    def get(self, role: CredentialRole) -> Optional[str]:
        """Current token for `role`, or None."""

    @abstractmethod
    def set(self, role: CredentialRole, token: str) -> None:
        """Store the token issued on a successful login."""

    @abstractmethod
    def clear(self, role: CredentialRole) -> None:
        """Forget the token of one role only."""


class InMemoryCredentialStore(CredentialStore):
    """Process-local store, used by tests and embedded callers."""

    def __init__(self, tokens: Optional[Dict[CredentialRole, str]] = None):
        self._tokens: Dict[CredentialRole, str] = {}
        for role, token in (tokens or {}).items():
            self.set(CredentialRole(role), token)

    def get(self, role: CredentialRole) -> Optional[str]:
        return self._tokens.get(CredentialRole(role)) or None

    def set(self, role: CredentialRole, token: str) -> None:
        self._tokens[CredentialRole(role)] = token

    def clear(self, role: CredentialRole) -> None:
        self._tokens.pop(CredentialRole(role), None)


class FileCredentialStore(CredentialStore):
    """
    JSON file store keyed by the browser storage keys.

    The file is re-read on every `get`, so another process clearing a token
    is honoured on the very next request. Empty strings count as absent.
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(os.path.expanduser(str(path or settings.CREDENTIALS_FILE)))

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable credentials file {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, role: CredentialRole) -> Optional[str]:
        token = self._load().get(STORAGE_KEYS[CredentialRole(role)])
        return token if isinstance(token, str) and token else None

    def set(self, role: CredentialRole, token: str) -> None:
        data = self._load()
        data[STORAGE_KEYS[CredentialRole(role)]] = token
        self._save(data)

    def clear(self, role: CredentialRole) -> None:
        data = self._load()
        if data.pop(STORAGE_KEYS[CredentialRole(role)], None) is not None:
            self._save(data)


def handle_unauthorized(
    role: CredentialRole,
    store: CredentialStore,
    navigate: Optional[Callable[[str], None]] = None
) -> str:
    """
    React to a 401 on a protected route of `role`.

    Clears that role's credential only and sends the caller to the role's
    login entry point. Returns the entry point.
    """
    role = CredentialRole(role)
    store.clear(role)
    destination = LOGIN_ENTRY_POINTS[role]
    logger.warning(f"{role.value} credential rejected; cleared and redirecting to {destination}")
    if navigate is not None:
        navigate(destination)
    return destination
