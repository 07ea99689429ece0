"""Exception protocol for cantor domains and the structures built on them."""

from __future__ import annotations

from typing import Mapping


class CantorError(Exception):
    """Root of the recoverable errors raised by cantor."""


class NotFiniteError(CantorError, TypeError):
    """Raised when a type has no registered or derivable finite domain."""


class DomainMismatchError(CantorError, TypeError):
    """Raised when a compressed value, set or map belongs to another domain."""


class ValueOutsideDomainError(CantorError, ValueError):
    """Raised when ``index_of`` receives a value its domain cannot encode."""


class CountOverflowError(CantorError, OverflowError):
    """Raised when a domain's cardinality exceeds the supported index range."""


class WidthOverflowError(CantorError, OverflowError):
    """Raised when no registered unsigned width can hold the requested bits."""


class NeverRaise(RuntimeError):
    """Sentinel exception that should be statically unreachable.

    Raising this exception signals a defect in a finite domain: an index that
    was produced by the same process failed to decode. Callers should not
    catch it to recover.
    """

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env: dict[str, object] = dict(env or {})

    @property
    def payload(self) -> dict[str, object]:
        return {
            "reason": self.reason,
            "env": {key: repr(value) for key, value in sorted(self.env.items())},
        }


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""
