"""
Per-stage outcomes for the analysis pipeline. A stage either yields ``Ok``
with its value or ``Failed`` with the error and the predictions it knocks
out; diagnostics are collected from the outcomes once the pipeline is done.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

from engine.errors import AnalysisError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failed:
    error: AnalysisError
    affected: Tuple[str, ...]


Outcome = Union[Ok[T], Failed]


@dataclass(frozen=True)
class Diagnostic:
    type: str
    message: str
    affected_predictions: Tuple[str, ...]


def attempt(fn: Callable[[], T], affected: Iterable[str]) -> Outcome:
    try:
        return Ok(fn())
    except AnalysisError as exc:
        return Failed(exc, tuple(affected))


def then(outcome: Outcome, fn: Callable[[T], U], affected: Iterable[str]) -> Outcome:
    """Chain a stage onto a prior outcome, re-scoping an upstream failure to
    the predictions of the dependent stage."""
    if isinstance(outcome, Failed):
        return Failed(outcome.error, tuple(affected))
    return attempt(lambda: fn(outcome.value), affected)


def value_of(outcome: Outcome) -> Optional[T]:
    return outcome.value if isinstance(outcome, Ok) else None


def collect(outcomes: Iterable[Outcome], extra: Iterable[Diagnostic] = ()) -> List[Diagnostic]:
    merged: dict[Tuple[str, str], List[str]] = {}
    for outcome in outcomes:
        if not isinstance(outcome, Failed):
            continue
        bucket = merged.setdefault((outcome.error.code, str(outcome.error)), [])
        bucket.extend(a for a in outcome.affected if a not in bucket)
    for diag in extra:
        bucket = merged.setdefault((diag.type, diag.message), [])
        bucket.extend(a for a in diag.affected_predictions if a not in bucket)
    return [
        Diagnostic(type=code, message=message, affected_predictions=tuple(affected))
        for (code, message), affected in merged.items()
    ]
