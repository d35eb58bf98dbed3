"""Read access to the declarative-state store.

The engine only needs ``get``; listing, watching and writing belong to the
reconciliation loop. ``InMemoryStore`` backs the CLI and tests.
"""
from __future__ import annotations

import copy
import threading
from typing import Dict, Iterable, List, Protocol, Tuple

from ..apis.meta import ObjectReference
from ..context import ReconcileContext
from ..exceptions import NotFoundError
from ..resource import Composed, Unstructured

_Key = Tuple[str, str, str, str]


class ResourceReader(Protocol):
    """Fetch a composed resource by reference.

    Implementations raise ``NotFoundError`` when the object does not exist
    and any other exception for communication failures.
    """

    def get(self, ctx: ReconcileContext, ref: ObjectReference) -> Composed: ...


def _key(api_version: str, kind: str, namespace: str, name: str) -> _Key:
    return (api_version, kind, namespace, name)


class InMemoryStore:
    """Thread-safe in-memory ``ResourceReader``.

    Objects are copied on the way in and on the way out so callers never
    share state with the store.
    """

    def __init__(self, objects: Iterable[Unstructured] = ()) -> None:
        self._lock = threading.Lock()
        self._objects: Dict[_Key, Dict] = {}
        for obj in objects:
            self.add(obj)

    def add(self, obj: Unstructured) -> None:
        ref = obj.reference()
        with self._lock:
            self._objects[_key(ref.api_version, ref.kind, ref.namespace, ref.name)] = copy.deepcopy(obj.obj)

    def get(self, ctx: ReconcileContext, ref: ObjectReference) -> Composed:
        ctx.check()
        with self._lock:
            raw = self._objects.get(_key(ref.api_version, ref.kind, ref.namespace, ref.name))
        if raw is None:
            raise NotFoundError(f"{ref} not found", context={"reference": ref.to_dict()})
        return Composed(copy.deepcopy(raw))

    def list(self) -> List[Composed]:
        with self._lock:
            return [Composed(copy.deepcopy(o)) for o in self._objects.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)


__all__ = ["ResourceReader", "InMemoryStore"]
