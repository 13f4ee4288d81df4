from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..api.client import ApiClient
from ..api.errors import extract_entity, success_message
from ..api.transport import Attachment
from ..core.enums import Role
from ..core.exceptions import ApiError, AuthenticationError, ValidationError
from .actions import RowAction, validate_form
from .dispatcher import DispatchResult, InFlightRegistry, RowActionDispatcher
from .model import CollectionCommand, Column, FormField, StatusSet
from .notifications import NotificationChannel
from .projection import ViewState, project
from .store import RemoteCollectionStore

logger = logging.getLogger(__name__)

NO_TOKEN = "Token non trouvé. Veuillez vous reconnecter."


@dataclass(frozen=True)
class ScreenConfig:
    """Declarative description of one list screen."""

    key: str
    role: Role
    title: str
    resource: str
    columns: Tuple[Column, ...]
    search_fields: Tuple[str, ...] = ()
    statuses: Optional[StatusSet] = None
    date_fields: Tuple[str, ...] = ()
    numeric_fields: Tuple[str, ...] = ()
    default_sort: Optional[str] = None
    actions: Tuple[RowAction, ...] = ()
    create_path: Optional[str] = None
    create_fields: Tuple[FormField, ...] = ()
    create_multipart: bool = False
    create_label: str = "Ajouter"
    create_success: str = "Élément ajouté avec succès."
    create_error: str = "Erreur lors de l'ajout."
    commands: Tuple[CollectionCommand, ...] = ()
    attachment_fields: Tuple[str, ...] = ()
    load_error: str = "Erreur lors du chargement des données."
    empty_message: str = "Aucun élément trouvé."

    @property
    def can_create(self) -> bool:
        return bool(self.create_path)

    def action(self, name: str) -> Optional[RowAction]:
        return next((a for a in self.actions if a.name == name), None)

    def command(self, name: str) -> Optional[CollectionCommand]:
        return next((c for c in self.commands if c.name == name), None)


@dataclass
class RowState:
    entity_id: Any
    in_flight: List[str] = field(default_factory=list)
    available: List[str] = field(default_factory=list)

    @property
    def busy(self) -> bool:
        return bool(self.in_flight)


class ListScreen:
    """Runtime binding of a ScreenConfig to a store, a dispatcher and a channel."""

    def __init__(
        self,
        config: ScreenConfig,
        client: ApiClient,
        channel: NotificationChannel,
        *,
        action_timeout: Optional[float] = None,
        registry: Optional[InFlightRegistry] = None,
    ):
        self.config = config
        self.client = client
        self.channel = channel
        self.store = RemoteCollectionStore(client, config.resource, load_error=config.load_error)
        self.dispatcher = RowActionDispatcher(
            client,
            self.store,
            channel,
            actions=config.actions,
            statuses=config.statuses,
            timeout=action_timeout,
            registry=registry,
            scope=f"{config.role.value}/{config.key}",
        )

    async def open(self) -> "ListScreen":
        if not self.client.has_token():
            raise AuthenticationError(NO_TOKEN)
        await self.store.load()
        return self

    async def refresh(self) -> "ListScreen":
        await self.store.load()
        return self

    @property
    def error(self) -> Optional[str]:
        return self.store.error

    def rows(self, view: ViewState) -> List[Mapping[str, Any]]:
        return project(
            self.store.items,
            view,
            search_fields=self.config.search_fields,
            status_field=self.config.statuses.field if self.config.statuses else None,
            date_fields=self.config.date_fields,
            numeric_fields=self.config.numeric_fields,
        )

    def default_view(self) -> ViewState:
        return ViewState(sort_field=self.config.default_sort)

    def row_state(self, entity_id: Any) -> RowState:
        entity = self.store.get(entity_id)
        available = [a.name for a in self.dispatcher.available_actions(entity)] if entity else []
        return RowState(entity_id, sorted(self.dispatcher.in_flight(entity_id)), available)

    def pending_count(self) -> int:
        statuses = self.config.statuses
        if statuses is None:
            return len(self.store)
        return sum(1 for e in self.store.items if statuses.is_pending(e))

    async def dispatch(self, entity_id: Any, action_name: str, payload: Optional[Mapping[str, Any]] = None) -> DispatchResult:
        return await self.dispatcher.dispatch(entity_id, action_name, payload)

    async def dispatch_many(self, entity_ids: Sequence[Any], action_name: str, payload: Optional[Mapping[str, Any]] = None) -> List[DispatchResult]:
        return await self.dispatcher.dispatch_many(entity_ids, action_name, payload)

    async def create(self, fields: Mapping[str, Any], files: Optional[Mapping[str, Attachment]] = None) -> bool:
        config = self.config
        if not config.create_path:
            self.channel.warning("La création n'est pas disponible sur cet écran.")
            return False

        values = {k: v for k, v in dict(fields).items() if v is not None}
        attachments = {k: v for k, v in (files or {}).items() if isinstance(v, Attachment)}
        try:
            validate_form(config.create_fields, {**values, **attachments})
        except ValidationError as e:
            self.channel.warning(e.message)
            return False

        known = {f.name for f in config.create_fields if not f.is_file}
        body = {k: v for k, v in values.items() if k in known and (v != "" or _required(config, k))}
        multipart = config.create_multipart or bool(attachments)
        try:
            response = await self.client.acall(
                "POST",
                config.create_path,
                json=None if multipart else body,
                form=body if multipart else None,
                files=attachments or None,
                fallback_error=config.create_error,
            )
        except ApiError as e:
            logger.warning("create on %s failed status=%s: %s", config.key, e.status, e.message)
            self.channel.error(e.message or config.create_error)
            return False

        entity = extract_entity(response)
        if entity and entity.get("id") is not None:
            self.store.add_one(entity)
        else:
            await self.store.load()
        self.channel.success(success_message(response, config.create_success))
        return True

    async def run_command(self, name: str, payload: Optional[Mapping[str, Any]] = None) -> bool:
        command = self.config.command(name)
        if command is None:
            self.channel.warning("Commande inconnue.")
            return False
        payload = dict(payload or {})
        try:
            validate_form(command.fields, payload)
        except ValidationError as e:
            self.channel.warning(e.message)
            return False
        try:
            response = await self.client.acall(
                command.method,
                command.path,
                json=command.body(payload) or None,
                fallback_error=command.error_message,
            )
        except ApiError as e:
            logger.warning("command %s on %s failed: %s", name, self.config.key, e.message)
            self.channel.error(e.message or command.error_message)
            return False
        if command.reload:
            await self.store.load()
        self.channel.success(success_message(response, command.success_message))
        return True


def _required(config: ScreenConfig, name: str) -> bool:
    return any(f.name == name and f.required for f in config.create_fields)
