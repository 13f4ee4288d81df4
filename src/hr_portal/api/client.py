from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from ..core.constants import DEFAULT_ACTION_TIMEOUT_SECONDS, METHOD_OVERRIDE_FIELD
from ..core.exceptions import ApiError, RequestTimeout
from .credentials import CredentialProvider, require_token
from .errors import normalize_error
from .transport import Attachment, Transport

logger = logging.getLogger(__name__)


def form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class ApiClient:
    """Authenticated access to the remote API.

    Sync methods do the work; the `a*` variants run them in a worker thread
    under a time budget so the event loop stays free for other rows.
    """

    def __init__(
        self,
        transport: Transport,
        credentials: CredentialProvider,
        *,
        timeout: float = DEFAULT_ACTION_TIMEOUT_SECONDS,
    ):
        self._transport = transport
        self._credentials = credentials
        self._timeout = float(timeout)

    @property
    def credentials(self) -> CredentialProvider:
        return self._credentials

    @property
    def timeout(self) -> float:
        return self._timeout

    def has_token(self) -> bool:
        return bool(self._credentials.get_token())

    def _token(self, require_auth: bool) -> Optional[str]:
        if require_auth:
            return require_token(self._credentials)
        return self._credentials.get_token()

    def _send(
        self,
        token: Optional[str],
        method: str,
        path: str,
        *,
        json: Any = None,
        form: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Attachment]] = None,
        fallback_error: Optional[str] = None,
    ) -> Any:
        method = method.upper()
        data: Optional[Dict[str, str]] = None
        if form is not None or files:
            data = {k: form_value(v) for k, v in (form or {}).items() if v is not None}
            if method in {"PUT", "PATCH"}:
                data[METHOD_OVERRIDE_FIELD] = method
                method = "POST"

        response = self._transport.request(
            method,
            path,
            token=token,
            json=json if data is None else None,
            data=data,
            files=files or None,
            timeout=self._timeout,
        )
        if not response.ok:
            payload = response.payload
            errors = payload.get("errors") if isinstance(payload, Mapping) else None
            raise ApiError(
                normalize_error(payload, status=response.status, fallback=fallback_error),
                status=response.status,
                errors=errors if isinstance(errors, Mapping) else None,
                payload=payload,
            )
        return response.payload

    def call(self, method: str, path: str, *, require_auth: bool = True, **kwargs) -> Any:
        return self._send(self._token(require_auth), method, path, **kwargs)

    async def acall(
        self,
        method: str,
        path: str,
        *,
        require_auth: bool = True,
        timeout: Optional[float] = None,
        **kwargs,
    ) -> Any:
        # Token is resolved here, on the loop thread, before handing off.
        token = self._token(require_auth)
        budget = self._timeout if timeout is None else float(timeout)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._send, token, method, path, **kwargs),
                timeout=budget,
            )
        except asyncio.TimeoutError:
            logger.warning("%s %s timed out after %.1fs", method.upper(), path, budget)
            raise RequestTimeout("Le serveur n'a pas répondu à temps.")
