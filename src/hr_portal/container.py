from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api.auth import AuthService
from .api.client import ApiClient
from .api.credentials import CredentialProvider
from .api.transport import RequestsTransport, Transport
from .core.constants import (
    DEFAULT_ACTION_TIMEOUT_SECONDS,
    DEFAULT_NOTIFICATION_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from .listing.dispatcher import InFlightRegistry
from .listing.notifications import NotificationChannel
from .listing.screen import ListScreen, ScreenConfig
from .screens import ScreenRegistry, default_registry


@dataclass(frozen=True)
class Container:
    transport: Transport
    auth_service: AuthService
    screens: ScreenRegistry

    storage_base_url: str
    action_timeout: float
    notification_seconds: float
    in_flight: InFlightRegistry

    def api_client(self, credentials: CredentialProvider) -> ApiClient:
        return ApiClient(self.transport, credentials, timeout=self.action_timeout)

    def notification_channel(self) -> NotificationChannel:
        return NotificationChannel(self.notification_seconds)

    def list_screen(self, config: ScreenConfig, credentials: CredentialProvider, channel: NotificationChannel) -> ListScreen:
        return ListScreen(
            config,
            self.api_client(credentials),
            channel,
            action_timeout=self.action_timeout,
            registry=self.in_flight,
        )


def build_container(
    *,
    api_base_url: str,
    storage_base_url: str,
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    action_timeout: float = DEFAULT_ACTION_TIMEOUT_SECONDS,
    notification_seconds: float = DEFAULT_NOTIFICATION_SECONDS,
    transport: Optional[Transport] = None,
    screens: Optional[ScreenRegistry] = None,
) -> Container:
    transport = transport or RequestsTransport(api_base_url, timeout=request_timeout)

    return Container(
        transport=transport,
        auth_service=AuthService(transport),
        screens=screens or default_registry(),
        storage_base_url=storage_base_url,
        action_timeout=float(action_timeout),
        notification_seconds=float(notification_seconds),
        in_flight=InFlightRegistry(),
    )
