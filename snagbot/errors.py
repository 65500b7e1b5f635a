"""Error kinds and exception hierarchy shared by the core and the stores.

WHY: Users should see the specific reason a command failed ("missing price
value") while operators should be able to tell validation noise apart from
real faults such as Redis being down. Carrying an explicit kind next to the
human-readable detail gives both without string matching.

HOW: ErrorKind is a str enum whose values are the user-facing reasons.
SnagbotError stores a kind and an optional detail; subclasses exist per
failure family so callers can catch exactly what they handle.

RULES:
- str(error) is "<reason>" or "<reason>: <detail>"
- ValidationError and CommandError are user errors, never logged as faults
- InvalidInput signals an upstream invariant violation (negative total,
  non-positive price reaching the converter)
- StoreUnavailable wraps backend connectivity failures
"""

from __future__ import annotations

import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    """Closed set of failure reasons.

    Values double as the user-facing reason text.
    """

    INVALID_COMMAND = "invalid command syntax"
    MISSING_ITEM = "missing item name"
    MISSING_PRICE = "missing price value"
    INVALID_PRICE = "price must be a positive number"
    VALIDATION = "invalid configuration"
    INVALID_INPUT = "invalid dollar value"
    STORE_UNAVAILABLE = "storage operation failed"


class SnagbotError(Exception):
    """Base error carrying an ErrorKind and a free-text detail."""

    default_kind = ErrorKind.INVALID_INPUT

    def __init__(self, kind: Optional[ErrorKind] = None, detail: str = "") -> None:
        self.kind = kind or self.default_kind
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.detail:
            return "{}: {}".format(self.kind.value, self.detail)
        return self.kind.value


class ValidationError(SnagbotError):
    """A configuration write was rejected (empty name, price <= 0)."""

    default_kind = ErrorKind.VALIDATION


class InvalidInput(SnagbotError):
    """The converter received a negative total or a non-positive price."""

    default_kind = ErrorKind.INVALID_INPUT


class StoreUnavailable(SnagbotError):
    """The configuration backend could not be reached."""

    default_kind = ErrorKind.STORE_UNAVAILABLE


class CommandError(SnagbotError):
    """The slash-command text could not be parsed."""

    default_kind = ErrorKind.INVALID_COMMAND
