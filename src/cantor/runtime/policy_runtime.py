from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from cantor.config import checked_mode_config, invariants_defaults
from cantor.invariants import CheckedModeConfig, checked_mode_config_scope


_STRICT_VALUES = {"1", "true", "yes", "on", "strict"}
_CHECKED_ENV = "CANTOR_CHECKED"


@dataclass(frozen=True)
class RuntimePolicyConfig:
    checked_mode_enabled: bool = False


def _env_flag(name: str) -> bool:
    value = os.getenv(name, "")
    return value.strip().lower() in _STRICT_VALUES


def runtime_policy_from_env() -> RuntimePolicyConfig:
    return RuntimePolicyConfig(checked_mode_enabled=_env_flag(_CHECKED_ENV))


def runtime_policy_from_config(
    root: Path | None = None, config_path: Path | None = None
) -> RuntimePolicyConfig:
    """Combine ``[invariants]`` from ``cantor.toml`` with environment overrides."""
    configured = checked_mode_config(
        invariants_defaults(root=root, config_path=config_path)
    )
    from_env = runtime_policy_from_env()
    return RuntimePolicyConfig(
        checked_mode_enabled=configured.enabled or from_env.checked_mode_enabled,
    )


@contextmanager
def runtime_policy_scope(config: RuntimePolicyConfig) -> Iterator[None]:
    with checked_mode_config_scope(
        CheckedModeConfig(enabled=config.checked_mode_enabled)
    ):
        yield


@contextmanager
def apply_runtime_policy_from_env() -> Iterator[None]:
    with runtime_policy_scope(runtime_policy_from_env()):
        yield
