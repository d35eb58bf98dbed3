"""Composite resource composition.

- composer: Composer contract, CompositionRequest and CompositionResult
- fallback: FallbackComposer and the anonymous-template trigger
- store: ResourceReader protocol and InMemoryStore
"""
from .composer import (
    ComposedResource,
    Composer,
    CompositionRequest,
    CompositionResult,
    Event,
)
from .fallback import (
    FallbackComposer,
    TriggerFn,
    fall_back_for_anonymous_templates,
    new_composer,
)
from .store import InMemoryStore, ResourceReader

__all__ = [
    "ComposedResource",
    "Composer",
    "CompositionRequest",
    "CompositionResult",
    "Event",
    "FallbackComposer",
    "TriggerFn",
    "fall_back_for_anonymous_templates",
    "new_composer",
    "InMemoryStore",
    "ResourceReader",
]
