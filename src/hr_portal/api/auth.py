from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import ApiError, AuthenticationError
from .client import ApiClient
from .credentials import StaticCredentials
from .transport import Transport

logger = logging.getLogger(__name__)

LOGIN_FAILED = {
    Role.ADMIN: "Email ou mot de passe administrateur incorrect.",
    Role.EMPLOYEE: "Nom d'utilisateur ou mot de passe employé incorrect.",
}


@dataclass(frozen=True)
class LoginResult:
    """What we store into the Flask session after login."""

    role: Role
    token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    display_name: Optional[str] = None


class AuthService:
    """Use case: obtain and drop bearer tokens. Issuance itself belongs to the backend."""

    def __init__(self, transport: Transport):
        self._transport = transport

    def login(self, role: Role, email: str, password: str) -> LoginResult:
        email = require_non_empty(email, "L'email")
        password = require_non_empty(password, "Le mot de passe")

        client = ApiClient(self._transport, StaticCredentials(None))
        try:
            payload = client.call(
                "POST",
                f"{role.value}/login",
                require_auth=False,
                json={"email": email, "password": password},
                fallback_error=LOGIN_FAILED[role],
            )
        except ApiError as e:
            if e.status in (0, 500, 502, 503):
                raise AuthenticationError("Une erreur est survenue. Veuillez réessayer plus tard.")
            raise AuthenticationError(e.message)

        token = _token_from(payload)
        if not token:
            raise AuthenticationError(LOGIN_FAILED[role])

        logger.info("login ok role=%s", role.value)
        return LoginResult(
            role=role,
            token=token,
            token_type=str(payload.get("token_type") or "Bearer"),
            expires_in=_as_int(payload.get("expires_in")),
            display_name=_display_name(payload),
        )

    def logout(self, role: Role, token: Optional[str]) -> None:
        """Best effort: the local token is dropped whatever the server says."""
        if not token:
            return
        client = ApiClient(self._transport, StaticCredentials(token))
        try:
            client.call("POST", f"{role.value}/logout")
        except ApiError as e:
            logger.warning("logout failed role=%s status=%s: %s", role.value, e.status, e.message)


def _token_from(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    token = payload.get("access_token") or payload.get("token")
    return str(token) if token else None


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _display_name(payload: Mapping) -> Optional[str]:
    for key in ("admin", "employe", "user"):
        who = payload.get(key)
        if isinstance(who, Mapping):
            name = " ".join(str(who[k]) for k in ("prenom", "nom") if who.get(k))
            return name or who.get("name") or who.get("email")
    return None
