"""Composer contract.

A ``Composer`` turns a composite resource plus a composition revision into
the set of composed resources, connection details and events the caller
should apply. Implementations must be safe to call concurrently for
different composites and must not perform external writes themselves.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..apis.composition import CompositionRevision
from ..context import ReconcileContext
from ..resource import Composite


@dataclass(frozen=True)
class CompositionRequest:
    """Inputs to a single ``compose()`` call. Callees must not mutate it.

    Attributes:
        revision: Composition revision snapshot selected for the composite.
        environment: Resolved environment data, if any.
    """

    revision: CompositionRevision
    environment: Optional[Dict[str, Any]] = None


@dataclass
class ComposedResource:
    """Outcome for one composed resource template."""

    resource_name: str
    ready: bool = False
    synced: bool = False


@dataclass
class Event:
    type: str = "Normal"
    reason: str = ""
    message: str = ""


@dataclass
class CompositionResult:
    """Output of a ``compose()`` call, owned by the caller.

    Attributes:
        composed: Desired composed resources.
        connection_details: Connection secret values keyed by name.
        events: Events the caller should record against the composite.
    """

    composed: List[ComposedResource] = field(default_factory=list)
    connection_details: Dict[str, bytes] = field(default_factory=dict)
    events: List[Event] = field(default_factory=list)


class Composer(ABC):
    """Resolve a composite resource into composed resources."""

    @abstractmethod
    def compose(
        self,
        ctx: ReconcileContext,
        xr: Composite,
        req: CompositionRequest,
    ) -> CompositionResult:
        """Compose resources for ``xr``.

        Raises:
            ComposeCancelledError: ``ctx`` was cancelled; no partial result
                is returned.
            XComposeError: Composition failed.
        """
        ...


__all__ = [
    "CompositionRequest",
    "ComposedResource",
    "Event",
    "CompositionResult",
    "Composer",
]
