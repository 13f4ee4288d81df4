from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..api.client import ApiClient
from ..api.errors import extract_items
from ..core.exceptions import PortalError

logger = logging.getLogger(__name__)

Entity = Dict[str, Any]


def entity_key(entity_id: Any) -> str:
    return str(entity_id)


def normalize_items(items: Any) -> List[Entity]:
    """Keep objects with an id; a repeated id keeps its first slot and last payload."""
    order: List[str] = []
    by_id: Dict[str, Entity] = {}
    for item in items or []:
        if not isinstance(item, Mapping) or item.get("id") is None:
            continue
        key = entity_key(item["id"])
        if key not in by_id:
            order.append(key)
        by_id[key] = dict(item)
    return [by_id[k] for k in order]


class RemoteCollectionStore:
    """Client-side copy of one remote resource.

    Only the methods below mutate the collection; entities are replaced,
    never edited in place, so earlier projections stay valid.
    """

    def __init__(self, client: ApiClient, resource: str, *, load_error: str = "Erreur lors du chargement des données."):
        self._client = client
        self._resource = resource
        self._load_error = load_error
        self._items: List[Entity] = []
        self._loaded = False
        self.loading = False
        self.error: Optional[str] = None

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> List[Entity]:
        self.loading = True
        started = time.monotonic()
        try:
            payload = await self._client.acall("GET", self._resource, fallback_error=self._load_error)
        except PortalError as e:
            self.error = e.message or self._load_error
            if not self._loaded:
                self._items = []
            logger.warning("load %s failed: %s", self._resource, self.error)
        except Exception:
            logger.exception("load %s crashed", self._resource)
            self.error = self._load_error
            if not self._loaded:
                self._items = []
        else:
            self._items = normalize_items(extract_items(payload))
            self._loaded = True
            self.error = None
            logger.info("load %s: %d items in %.2fs", self._resource, len(self._items), time.monotonic() - started)
        finally:
            self.loading = False
        return self.items

    def replace(self, items: Any) -> None:
        self._items = normalize_items(items)
        self._loaded = True
        self.error = None

    def patch_one(self, entity_id: Any, fields: Mapping[str, Any]) -> bool:
        key = entity_key(entity_id)
        for i, entity in enumerate(self._items):
            if entity_key(entity["id"]) == key:
                merged = dict(entity)
                merged.update(fields)
                # The row keeps its identity even if the server echoes another id.
                merged["id"] = entity["id"]
                self._items[i] = merged
                return True
        return False

    def remove_one(self, entity_id: Any) -> bool:
        key = entity_key(entity_id)
        before = len(self._items)
        self._items = [e for e in self._items if entity_key(e["id"]) != key]
        return len(self._items) != before

    def add_one(self, entity: Mapping[str, Any]) -> bool:
        if not isinstance(entity, Mapping) or entity.get("id") is None:
            return False
        if self.patch_one(entity["id"], entity):
            return True
        self._items.append(dict(entity))
        return True

    def get(self, entity_id: Any) -> Optional[Entity]:
        key = entity_key(entity_id)
        for entity in self._items:
            if entity_key(entity["id"]) == key:
                return entity
        return None

    @property
    def items(self) -> List[Entity]:
        return list(self._items)

    @property
    def ids(self) -> List[Any]:
        return [e["id"] for e in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: Any) -> bool:
        return self.get(entity_id) is not None

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._items))
