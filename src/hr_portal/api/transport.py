from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol

import requests

from ..core.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS
from ..core.exceptions import ApiError, RequestTimeout


@dataclass(frozen=True)
class Attachment:
    """A user-supplied file, detached from the web framework."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ApiResponse:
    status: int
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str],
        json: Any = None,
        data: Optional[Mapping[str, str]] = None,
        files: Optional[Mapping[str, Attachment]] = None,
        timeout: Optional[float] = None,
    ) -> ApiResponse:
        raise NotImplementedError


class RequestsTransport:
    """HTTP transport over `requests`.

    Note: Without an injected session every call uses a short-lived
    connection, which keeps worker threads independent.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout)
        self._session = session

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str],
        json: Any = None,
        data: Optional[Mapping[str, str]] = None,
        files: Optional[Mapping[str, Attachment]] = None,
        timeout: Optional[float] = None,
    ) -> ApiResponse:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        files_arg: Optional[Dict[str, tuple]] = None
        if files:
            files_arg = {name: (a.filename, a.content, a.content_type) for name, a in files.items()}

        send = self._session.request if self._session is not None else requests.request
        try:
            r = send(
                method.upper(),
                self.url(path),
                headers=headers,
                json=json,
                data=dict(data) if data else None,
                files=files_arg,
                timeout=timeout or self._timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeout("Le serveur n'a pas répondu à temps.", payload=str(e))
        except requests.exceptions.RequestException as e:
            raise ApiError("Erreur réseau : serveur injoignable.", payload=str(e))

        return ApiResponse(status=r.status_code, payload=_decode(r))


def _decode(r: requests.Response) -> Any:
    if r.status_code == 204 or not r.content:
        return None
    try:
        return r.json()
    except ValueError:
        return r.text
