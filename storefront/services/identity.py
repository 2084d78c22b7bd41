# storefront/services/identity.py
from typing import Protocol

GUEST_SCOPE = "guest"


class IdentityProvider(Protocol):
    def current_scope_key(self) -> str: ...


class StaticIdentity:
    """Scope z id uzytkownika, bez zalogowania "guest"."""

    def __init__(self, user_id: str | int | None = None):
        self.user_id = user_id

    def current_scope_key(self) -> str:
        if self.user_id is None or str(self.user_id).strip() == "":
            return GUEST_SCOPE
        return str(self.user_id)
