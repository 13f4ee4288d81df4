from __future__ import annotations

from typing import MutableMapping, Optional, Protocol

from ..core.constants import TOKEN_KEYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError


class CredentialProvider(Protocol):
    def get_token(self) -> Optional[str]:
        raise NotImplementedError


class StaticCredentials:
    """Fixed token, mostly for scripts and tests."""

    def __init__(self, token: Optional[str]):
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token or None


class MappingCredentials:
    """Token kept in a mapping (the Flask session) under the role's key."""

    def __init__(self, storage: MutableMapping, role: Role):
        self._storage = storage
        self._role = role

    @property
    def key(self) -> str:
        return TOKEN_KEYS[self._role]

    def get_token(self) -> Optional[str]:
        token = self._storage.get(self.key)
        return str(token) if token else None

    def save(self, token: str) -> None:
        self._storage[self.key] = token

    def clear(self) -> None:
        self._storage.pop(self.key, None)


def require_token(credentials: CredentialProvider) -> str:
    token = credentials.get_token()
    if not token:
        raise AuthenticationError("Token non trouvé. Veuillez vous reconnecter.")
    return token
