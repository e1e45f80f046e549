# uiauto_finders/config.py
"""
@file config.py
@brief Timeout presets and the effective timing config for resolver waits.

Timeouts are applied around whole find() calls; a single find never
waits or polls on its own.

Effective config for the calling thread, highest first:
  installed run config -> innermost override() -> process default
A run config is itself built as preset -> overrides -> app defaults.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

# (timeout_s, interval_s) per wait kind
PRESETS: Dict[str, Dict[str, Tuple[float, float]]] = {
    "default": {
        "resolve_window": (10.0, 0.2),
        "resolve_element": (10.0, 0.2),
        "exists_wait": (2.0, 0.1),
        "disappear_wait": (60.0, 0.5),
    },
    "fast": {
        "resolve_window": (5.0, 0.1),
        "resolve_element": (5.0, 0.1),
        "exists_wait": (1.0, 0.05),
        "disappear_wait": (30.0, 0.3),
    },
    "slow": {
        "resolve_window": (20.0, 0.3),
        "resolve_element": (20.0, 0.3),
        "exists_wait": (4.0, 0.2),
        "disappear_wait": (90.0, 0.7),
    },
    "ci": {
        "resolve_window": (30.0, 0.5),
        "resolve_element": (20.0, 0.3),
        "exists_wait": (5.0, 0.3),
        "disappear_wait": (120.0, 1.0),
    },
}


@dataclass(frozen=True)
class TimeoutSettings:
    """Timeout and polling interval for one kind of wait."""
    timeout: float
    interval: float

    def merged(self, value: Any) -> TimeoutSettings:
        """Apply a TimeoutSettings or a partial {"timeout", "interval"} mapping."""
        if isinstance(value, TimeoutSettings):
            return value
        if not isinstance(value, Mapping):
            raise ValueError(f"Invalid timeout setting: {value!r}")
        unknown = set(value) - {"timeout", "interval"}
        if unknown:
            raise ValueError(f"Unknown timeout setting keys: {sorted(unknown)}")
        return TimeoutSettings(
            timeout=float(value.get("timeout", self.timeout)),
            interval=float(value.get("interval", self.interval)),
        )


@dataclass(frozen=True)
class TimeConfig:
    """Immutable set of wait timeouts; derive variants with updated()."""
    resolve_window: TimeoutSettings
    resolve_element: TimeoutSettings
    exists_wait: TimeoutSettings
    disappear_wait: TimeoutSettings

    @classmethod
    def from_preset(cls, preset: str = "default") -> TimeConfig:
        values = PRESETS.get((preset or "default").lower())
        if values is None:
            raise ValueError(f"Unknown timing preset: {preset}. Available: {available_presets()}")
        return cls(**{kind: TimeoutSettings(*pair) for kind, pair in values.items()})

    def updated(self, overrides: Mapping[str, Any]) -> TimeConfig:
        changes = {}
        for kind, value in overrides.items():
            if kind not in WAIT_KINDS:
                raise ValueError(f"Unknown TimeConfig field: {kind}")
            changes[kind] = getattr(self, kind).merged(value)
        return replace(self, **changes)

    def with_app_defaults(self, default_timeout: float, polling_interval: float) -> TimeConfig:
        """Apply an object map's app section to the resolve and exists waits."""
        return self.updated({
            "resolve_window": TimeoutSettings(default_timeout, polling_interval),
            "resolve_element": TimeoutSettings(default_timeout, polling_interval),
            "exists_wait": TimeoutSettings(max(default_timeout / 5, polling_interval), polling_interval),
        })

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            kind: {"timeout": getattr(self, kind).timeout, "interval": getattr(self, kind).interval}
            for kind in WAIT_KINDS
        }

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Mapping[str, Any]] = None,
        app_defaults: Optional[Mapping[str, float]] = None,
    ) -> TimeConfig:
        """
        Build a run config.

        App defaults only apply on the default preset: an explicit --fast,
        --slow or --ci choice is not overridden by the object map.
        """
        cfg = cls.from_preset(preset).updated(overrides or {})
        if app_defaults and preset == "default":
            cfg = cfg.with_app_defaults(
                float(app_defaults["default_timeout"]),
                float(app_defaults["polling_interval"]),
            )
        return cfg

    # ---- per-thread effective config ----

    @classmethod
    def default(cls) -> TimeConfig:
        return _DEFAULT

    @classmethod
    def current(cls) -> TimeConfig:
        run_config = getattr(_scope, "run_config", None)
        if run_config is not None:
            return run_config
        stack = _override_stack()
        return stack[-1] if stack else _DEFAULT

    @classmethod
    def install_run_config(cls, config: TimeConfig) -> None:
        _scope.run_config = config

    @classmethod
    def clear_run_config(cls) -> None:
        _scope.run_config = None

    @classmethod
    @contextmanager
    def override(cls, **overrides: Any) -> Iterator[TimeConfig]:
        """Temporarily layer overrides on the current config for this thread."""
        config = cls.current().updated(overrides)
        stack = _override_stack()
        stack.append(config)
        try:
            yield config
        finally:
            stack.pop()

    @classmethod
    def reset_to_defaults(cls) -> None:
        """Drop this thread's run config and overrides."""
        _scope.run_config = None
        _scope.overrides = []


WAIT_KINDS = tuple(f.name for f in fields(TimeConfig))

_DEFAULT = TimeConfig.from_preset("default")
_scope = threading.local()


def _override_stack() -> List[TimeConfig]:
    stack = getattr(_scope, "overrides", None)
    if stack is None:
        stack = _scope.overrides = []
    return stack


def timeout_overrides(timeout: float) -> Dict[str, Dict[str, float]]:
    """Override mapping that scales every wait from one base timeout."""
    return {
        "resolve_window": {"timeout": timeout},
        "resolve_element": {"timeout": timeout},
        "exists_wait": {"timeout": max(timeout / 5, 0.1)},
        "disappear_wait": {"timeout": timeout * 2},
    }


def available_presets() -> List[str]:
    return sorted(PRESETS)
