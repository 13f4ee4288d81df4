from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from hr_portal.api.client import ApiClient
from hr_portal.api.credentials import StaticCredentials
from hr_portal.api.transport import ApiResponse
from hr_portal.listing.notifications import NotificationChannel


@dataclass
class Call:
    method: str
    path: str
    token: Optional[str]
    json: Any = None
    data: Optional[dict] = None
    files: Optional[dict] = None


@dataclass
class Route:
    status: int = 200
    payload: Any = None
    raises: Optional[Exception] = None
    gate: Optional[threading.Event] = None
    handler: Optional[Callable[[Call], ApiResponse]] = None
    started: threading.Event = field(default_factory=threading.Event)


class FakeTransport:
    """In-memory API: routes keyed by (METHOD, path), every call recorded."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.calls: List[Call] = []
        self._lock = threading.Lock()

    def on(self, method: str, path: str, status: int = 200, payload: Any = None, **kwargs) -> Route:
        route = Route(status=status, payload=payload, **kwargs)
        self.routes[(method.upper(), path)] = route
        return route

    def calls_to(self, method: str, path: str) -> List[Call]:
        return [c for c in self.calls if c.method == method.upper() and c.path == path]

    def request(self, method, path, *, token, json=None, data=None, files=None, timeout=None):
        call = Call(method.upper(), path, token, json, dict(data) if data else None, dict(files) if files else None)
        with self._lock:
            self.calls.append(call)
        route = self.routes.get((call.method, path))
        if route is None:
            return ApiResponse(404, {"message": "Route introuvable."})
        route.started.set()
        if route.gate is not None:
            route.gate.wait(5)
        if route.raises is not None:
            raise route.raises
        if route.handler is not None:
            return route.handler(call)
        return ApiResponse(route.status, route.payload)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return ApiClient(transport, StaticCredentials("tok-123"), timeout=2.0)


@pytest.fixture
def channel():
    return NotificationChannel(4.0)
