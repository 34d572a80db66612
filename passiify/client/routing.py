"""
Which bearer credential a request path receives.

Rules are evaluated top to bottom and the first matching rule wins. Each rule
lists the roles it accepts in order of preference; the first role with a
stored token supplies the Authorization header. Admin paths accept only the
admin token, so an admin path without one goes out unauthenticated.
"""
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
from passiify.client.credentials import CredentialRole, CredentialStore


def with_and_without_slash(*prefixes: str) -> Tuple[str, ...]:
    """Every prefix in both `/x` and `x` spellings."""
    variants = []
    for prefix in prefixes:
        bare = prefix.lstrip("/")
        variants.extend(["/" + bare, bare])
    return tuple(variants)


def starts_with_any(prefixes: Tuple[str, ...]) -> Callable[[str], bool]:
    return lambda path: path.startswith(prefixes)


ADMIN_PREFIXES = with_and_without_slash("/admin")
PARTNER_PREFIXES = with_and_without_slash(
    "/gyms/me",
    "/bookings",
    "/events/host",
    "/events/my",
    "/event-bookings",
)


@dataclass(frozen=True)
class CredentialRule:
    """One row of the routing table."""
    name: str
    matches: Callable[[str], bool]
    roles: Tuple[CredentialRole, ...]


CREDENTIAL_RULES: Tuple[CredentialRule, ...] = (
    CredentialRule("admin", starts_with_any(ADMIN_PREFIXES), (CredentialRole.ADMIN,)),
    # A signed-in user may stand in for a partner on these routes (e.g. own bookings).
    CredentialRule("partner", starts_with_any(PARTNER_PREFIXES), (CredentialRole.PARTNER, CredentialRole.USER)),
    CredentialRule("general", lambda path: True, (CredentialRole.USER,)),
)


def classify_path(path: str, rules: Tuple[CredentialRule, ...] = CREDENTIAL_RULES) -> CredentialRule:
    """First rule whose predicate accepts `path`."""
    path = path or ""
    for rule in rules:
        if rule.matches(path):
            return rule
    raise LookupError(f"No credential rule matches {path!r}")


def select_credential(
    path: str,
    store: CredentialStore,
    rules: Tuple[CredentialRule, ...] = CREDENTIAL_RULES
) -> Optional[Tuple[CredentialRole, str]]:
    """
    The (role, token) to attach to a request for `path`, or None.

    Tokens are read from `store` on every call.
    """
    rule = classify_path(path, rules)
    for role in rule.roles:
        token = store.get(role)
        if token:
            return role, token
    return None
