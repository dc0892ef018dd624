"""Tagged outcomes returned by the upstream gateways.

Every gateway call resolves to either ``Ok(value)`` or ``Fallback(reason)``;
nothing raised by the transport crosses the gateway boundary. Enrichment folds
a sequence of outcomes over a synthetic baseline with :func:`merge_outcomes`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

T = TypeVar("T")
R = TypeVar("R")


class FallbackReason(str, Enum):
    UPSTREAM_UNAVAILABLE = "upstream-unavailable"
    NO_CREDENTIAL = "no-credential"
    DIRECTORY_UNAVAILABLE = "directory-unavailable"
    BASE_CURRENCY = "base-currency"
    MISSING_RATE = "missing-rate"
    NOT_REQUESTED = "not-requested"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Fallback:
    reason: FallbackReason
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Ok[T], Fallback]


def merge_outcomes(
    record: R,
    steps: Iterable[Tuple[Any, Callable[[R, Any], R]]],
) -> Tuple[R, List[Fallback]]:
    """Apply each successful outcome to ``record`` left to right.

    ``steps`` pairs an outcome with the function that writes its value into
    the record. Fallbacks leave the record untouched and are collected so the
    caller can report which fields stayed synthetic.
    """
    fallbacks: List[Fallback] = []
    for outcome, apply in steps:
        if isinstance(outcome, Ok):
            record = apply(record, outcome.value)
        else:
            fallbacks.append(outcome)
    return record, fallbacks
