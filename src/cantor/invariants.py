"""Invariant markers for cantor domains."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, NoReturn, TypeVar

from cantor.absent import OUT_OF_RANGE, OutOfRange
from cantor.exceptions import NeverThrown

if TYPE_CHECKING:
    from cantor.finite import Finite

logger = logging.getLogger(__name__)

_CHECKED_MODE_OVERRIDE: ContextVar[bool | None] = ContextVar(
    "cantor_checked_mode_override",
    default=None,
)


@dataclass(frozen=True)
class CheckedModeConfig:
    enabled: bool = False


_CHECKED_MODE_CONFIG: ContextVar[CheckedModeConfig] = ContextVar(
    "cantor_checked_mode_config",
    default=CheckedModeConfig(),
)

T = TypeVar("T")


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is carried on the raised exception for diagnostics only.
    """
    logger.error("invariant violated: %s %r", reason, env)
    raise NeverThrown(reason or "never() marker reached", env=env)


def checked_mode() -> bool:
    override = _CHECKED_MODE_OVERRIDE.get()
    if override is not None:
        return bool(override)
    return bool(_CHECKED_MODE_CONFIG.get().enabled)


def set_checked_mode_config(config: CheckedModeConfig) -> Token[CheckedModeConfig]:
    return _CHECKED_MODE_CONFIG.set(config)


def reset_checked_mode_config(token: Token[CheckedModeConfig]) -> None:
    _CHECKED_MODE_CONFIG.reset(token)


@contextmanager
def checked_mode_config_scope(config: CheckedModeConfig) -> Iterator[None]:
    token = set_checked_mode_config(config)
    try:
        yield
    finally:
        reset_checked_mode_config(token)


@contextmanager
def checked_mode_scope(enabled: bool) -> Iterator[None]:
    token = _CHECKED_MODE_OVERRIDE.set(bool(enabled))
    try:
        yield
    finally:
        _CHECKED_MODE_OVERRIDE.reset(token)


def require_present(
    value: T | OutOfRange,
    *,
    reason: str = "",
    strict: bool | None = None,
    **env: object,
) -> T | OutOfRange:
    if value is OUT_OF_RANGE:
        if strict is None:
            strict = checked_mode()
        if strict:
            never(reason or "required value is absent", **env)
    return value


def require_index(domain: Finite[T], index: int) -> T:
    """Decode an index this process produced itself.

    The index came from ``index_of`` on a live value, a stored compressed index,
    or a set bit below ``domain.count``, so a correct domain never answers
    ``OUT_OF_RANGE``. The result is only re-checked in checked mode.
    """
    value = require_present(
        domain.nth(index),
        reason="self-produced index failed to decode",
        domain=domain,
        index=index,
    )
    return value  # type: ignore[return-value]
