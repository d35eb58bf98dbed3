"""Fallback composer and the legacy-shape trigger.

During the migration window from the built-in patch-and-transform engine to
function pipelines, ``FallbackComposer`` picks one of two composers per call.
``fall_back_for_anonymous_templates`` keeps composites that the new engine
cannot safely resume on the legacy composer.
"""
from __future__ import annotations

import logging
from typing import Callable

from ..context import ReconcileContext, ensure_context
from ..exceptions import (
    ComposeCancelledError,
    GetComposedResourceError,
    NotFoundError,
    TriggerEvaluationError,
)
from ..features import Flag, Flags
from ..resource import Composite, get_composition_resource_name
from .composer import Composer, CompositionRequest, CompositionResult
from .store import ResourceReader

logger = logging.getLogger(__name__)

ERR_TRIGGER_FN = "cannot determine whether to fall back to the legacy composer"
ERR_GET_COMPOSED = "cannot get composed resource"

TriggerFn = Callable[[ReconcileContext, Composite, CompositionRequest], bool]


class FallbackComposer(Composer):
    """Run the fallback composer when the trigger says so, else the preferred one.

    Exactly one of the two composers runs per call. Their results and errors
    are returned verbatim.
    """

    def __init__(self, preferred: Composer, fallback: Composer, trigger: TriggerFn) -> None:
        self.preferred = preferred
        self.fallback = fallback
        self.trigger = trigger

    def compose(
        self,
        ctx: ReconcileContext,
        xr: Composite,
        req: CompositionRequest,
    ) -> CompositionResult:
        ctx = ensure_context(ctx)
        ctx.check()

        try:
            use_fallback = self.trigger(ctx, xr, req)
        except ComposeCancelledError:
            raise
        except Exception as exc:
            raise TriggerEvaluationError(
                ERR_TRIGGER_FN,
                context={"composite": xr.name if xr is not None else ""},
            ) from exc

        if use_fallback:
            logger.debug("Composing %r with fallback composer %s", xr, type(self.fallback).__name__)
            return self.fallback.compose(ctx, xr, req)

        logger.debug("Composing %r with preferred composer %s", xr, type(self.preferred).__name__)
        return self.preferred.compose(ctx, xr, req)


def fall_back_for_anonymous_templates(reader: ResourceReader) -> TriggerFn:
    """Build a trigger that falls back for compositions with anonymous templates.

    The trigger returns True when the revision has a resource template with
    no name, or when the composite references a composed resource that lacks
    the composition-resource-name annotation (it predates named templates).
    Referenced resources that no longer exist are ignored.

    Args:
        reader: Store used to fetch the composite's composed resources.

    Returns:
        A ``TriggerFn``. It raises ``GetComposedResourceError`` when a fetch
        fails for any reason other than not-found, and propagates
        cancellation of the context as ``ComposeCancelledError``.
    """

    def trigger(ctx: ReconcileContext, xr: Composite, req: CompositionRequest) -> bool:
        ctx = ensure_context(ctx)

        for template in req.revision.spec.resources:
            if not template.name:
                return True

        refs = xr.get_resource_references() if xr is not None else []
        for ref in refs:
            ctx.check()
            try:
                composed = reader.get(ctx, ref)
            except NotFoundError:
                continue
            except ComposeCancelledError:
                raise
            except Exception as exc:
                raise GetComposedResourceError(
                    ERR_GET_COMPOSED,
                    context={"reference": ref.to_dict()},
                ) from exc

            if not get_composition_resource_name(composed):
                logger.debug("%s has no composition resource name; falling back", ref)
                return True

        return False

    return trigger


def new_composer(
    flags: Flags,
    *,
    preferred: Composer,
    fallback: Composer,
    reader: ResourceReader,
) -> Composer:
    """Wire the composer a reconciler should use given the enabled flags.

    With composition functions enabled, the function pipeline composer is
    preferred and the legacy composer is kept for composites that need it.
    Otherwise only the legacy composer is used.
    """
    if not flags.enabled(Flag.ENABLE_ALPHA_COMPOSITION_FUNCTIONS):
        return fallback
    return FallbackComposer(preferred, fallback, fall_back_for_anonymous_templates(reader))


__all__ = [
    "ERR_TRIGGER_FN",
    "ERR_GET_COMPOSED",
    "TriggerFn",
    "FallbackComposer",
    "fall_back_for_anonymous_templates",
    "new_composer",
]
