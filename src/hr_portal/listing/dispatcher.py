from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ..api.client import ApiClient
from ..api.errors import success_message
from ..core.enums import DispatchStatus
from ..core.exceptions import ApiError, ValidationError
from .actions import RowAction
from .model import StatusSet
from .notifications import NotificationChannel
from .store import RemoteCollectionStore, entity_key

logger = logging.getLogger(__name__)

UNKNOWN_ACTION = "Action inconnue."
UNKNOWN_ROW = "Élément introuvable. Actualisez la liste."
CANCELLED = "Action annulée."
UNEXPECTED = "Une erreur inattendue est survenue."

Marker = Tuple[str, str]


class InFlightRegistry:
    """Process-wide set of running (scope, row, action) invocations.

    Every request builds its own dispatcher, each on its own event loop, so
    the markers live here behind a thread lock rather than on the dispatcher.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._running: Set[Tuple[str, str, str]] = set()

    def acquire(self, scope: str, marker: Marker) -> bool:
        slot = (scope,) + marker
        with self._lock:
            if slot in self._running:
                return False
            self._running.add(slot)
            return True

    def release(self, scope: str, marker: Marker) -> None:
        with self._lock:
            self._running.discard((scope,) + marker)

    def names(self, scope: str, key: str) -> Set[str]:
        with self._lock:
            return {name for (s, k, name) in self._running if s == scope and k == key}


@dataclass(frozen=True)
class DispatchResult:
    entity_id: Any
    action: str
    status: DispatchStatus
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is DispatchStatus.SUCCEEDED

    def to_dict(self) -> dict:
        return {"id": self.entity_id, "action": self.action, "status": self.status.value, "message": self.message}


class RowActionDispatcher:
    """Runs row actions with independent per-row in-flight state.

    The dispatcher is the only component that turns an action into a network
    call. Precondition failures never mark a row in flight and never reach
    the API.
    """

    def __init__(
        self,
        client: ApiClient,
        store: RemoteCollectionStore,
        channel: NotificationChannel,
        *,
        actions: Iterable[RowAction],
        statuses: Optional[StatusSet] = None,
        timeout: Optional[float] = None,
        registry: Optional[InFlightRegistry] = None,
        scope: str = "",
    ):
        self._client = client
        self._store = store
        self._channel = channel
        self._actions: Dict[str, RowAction] = {a.name: a for a in actions}
        self._statuses = statuses
        self._timeout = client.timeout if timeout is None else float(timeout)
        self._in_flight: Dict[Marker, asyncio.Task] = {}
        self._cancelled: Set[Marker] = set()
        self._registry = registry or InFlightRegistry()
        self._scope = scope

    @property
    def actions(self) -> Dict[str, RowAction]:
        return dict(self._actions)

    def in_flight(self, entity_id: Any) -> Set[str]:
        return self._registry.names(self._scope, entity_key(entity_id))

    def available_actions(self, entity: Mapping[str, Any]) -> List[RowAction]:
        return [a for a in self._actions.values() if a.is_available(entity, self._statuses)]

    def cancel(self, entity_id: Any, action_name: Optional[str] = None) -> int:
        """Cancel pending invocations for a row; returns how many were cancelled."""
        key = entity_key(entity_id)
        count = 0
        for marker, task in list(self._in_flight.items()):
            if marker[0] != key or (action_name is not None and marker[1] != action_name):
                continue
            self._cancelled.add(marker)
            task.cancel()
            count += 1
        return count

    async def dispatch(
        self,
        entity_id: Any,
        action_name: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        notify: bool = True,
    ) -> DispatchResult:
        payload = dict(payload or {})
        action = self._actions.get(action_name)
        if action is None:
            return self._reject(entity_id, action_name, UNKNOWN_ACTION, notify)

        entity = self._store.get(entity_id)
        if entity is None:
            return self._reject(entity_id, action_name, UNKNOWN_ROW, notify)

        marker = (entity_key(entity_id), action_name)
        if not self._registry.acquire(self._scope, marker):
            return DispatchResult(entity_id, action_name, DispatchStatus.BUSY)

        try:
            action.validate(entity, payload, self._statuses)
            request = action.build_request(entity, payload)
        except ValidationError as e:
            self._registry.release(self._scope, marker)
            return self._reject(entity_id, action_name, e.message, notify)

        task = asyncio.create_task(
            self._client.acall(
                request.method,
                request.path,
                json=request.json,
                form=request.form,
                files=request.files,
                fallback_error=action.error_message,
                timeout=self._timeout,
            )
        )
        self._in_flight[marker] = task
        started = time.monotonic()
        try:
            response = await task
        except asyncio.CancelledError:
            if marker not in self._cancelled:
                raise
            logger.info("dispatch %s id=%s cancelled", action_name, entity_id)
            return self._finish(entity_id, action_name, DispatchStatus.FAILED, CANCELLED, notify, warn=True)
        except ApiError as e:
            logger.warning(
                "dispatch %s id=%s failed status=%s in %.2fs: %s",
                action_name, entity_id, e.status, time.monotonic() - started, e.message,
            )
            return self._finish(entity_id, action_name, DispatchStatus.FAILED, e.message or action.error_message, notify)
        except Exception:
            logger.exception("dispatch %s id=%s crashed", action_name, entity_id)
            return self._finish(entity_id, action_name, DispatchStatus.FAILED, UNEXPECTED, notify)
        finally:
            self._in_flight.pop(marker, None)
            self._registry.release(self._scope, marker)
            self._cancelled.discard(marker)

        outcome = action.outcome(entity, payload, response)
        if outcome.removed:
            self._store.remove_one(entity_id)
        elif outcome.patch:
            self._store.patch_one(entity_id, outcome.patch)

        logger.info("dispatch %s id=%s ok in %.2fs", action_name, entity_id, time.monotonic() - started)
        message = success_message(response, action.success_message)
        return self._finish(entity_id, action_name, DispatchStatus.SUCCEEDED, message, notify)

    async def dispatch_many(
        self,
        entity_ids: Sequence[Any],
        action_name: str,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> List[DispatchResult]:
        results = await asyncio.gather(
            *(self.dispatch(i, action_name, payload, notify=False) for i in entity_ids)
        )
        done = sum(1 for r in results if r.ok)
        failed = len(results) - done
        if not results:
            self._channel.warning("Aucun élément sélectionné.")
        elif failed == 0:
            self._channel.success(f"{done} élément(s) traité(s) avec succès.")
        elif done == 0:
            first = next((r.message for r in results if r.message), None)
            self._channel.error(first or f"Échec du traitement de {failed} élément(s).")
        else:
            self._channel.warning(f"{done} élément(s) traité(s), {failed} échec(s).")
        return list(results)

    def _reject(self, entity_id: Any, action_name: str, message: str, notify: bool) -> DispatchResult:
        logger.info("dispatch %s id=%s rejected: %s", action_name, entity_id, message)
        if notify:
            self._channel.warning(message)
        return DispatchResult(entity_id, action_name, DispatchStatus.REJECTED, message)

    def _finish(
        self,
        entity_id: Any,
        action_name: str,
        status: DispatchStatus,
        message: str,
        notify: bool,
        *,
        warn: bool = False,
    ) -> DispatchResult:
        if notify:
            if status is DispatchStatus.SUCCEEDED:
                self._channel.success(message)
            elif warn:
                self._channel.warning(message)
            else:
                self._channel.error(message)
        return DispatchResult(entity_id, action_name, status, message)
