"""
Per-item failure isolation.

Batch stages call `attempt()` around each athlete/platform unit so that one
bad record produces a Diagnostic instead of aborting the whole batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from sponsor_watch.exceptions import MalformedInputError
from sponsor_watch.models import Diagnostic

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the diagnostic explaining why there is none."""
    value: T | None = None
    diagnostic: Diagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None


def attempt(stage: str, source: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Outcome[T]:
    """Run `fn`, converting any exception into a logged Diagnostic."""
    try:
        return Outcome(value=fn(*args, **kwargs))
    except MalformedInputError as exc:
        logger.warning("[%s] Skipping malformed input %s: %s", stage.upper(), source, exc)
        return Outcome(diagnostic=Diagnostic(stage=stage, error_type="MALFORMED", message=str(exc), source=source))
    except Exception as exc:
        logger.error("[%s] Failed on %s: %s", stage.upper(), source, exc)
        return Outcome(
            diagnostic=Diagnostic(
                stage=stage,
                error_type=type(exc).__name__,
                message=str(exc),
                source=source,
            )
        )


def collect(outcomes: list[Outcome[T]]) -> tuple[list[T], list[Diagnostic]]:
    """Split outcomes into successful values and diagnostics, keeping order."""
    values: list[T] = []
    diagnostics: list[Diagnostic] = []
    for outcome in outcomes:
        if outcome.ok:
            values.append(outcome.value)
        else:
            diagnostics.append(outcome.diagnostic)
    return values, diagnostics
