"""Runtime settings shared by the hub, producer and overlay processes."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

_LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "CHESSMIRROR_"


# ── Settings data class ──────────────────────────────────────────────────────


@dataclass
class MirrorSettings:
    """All user-configurable settings."""

    # Hub
    host: str = "127.0.0.1"
    port: int = 3000

    # Producer
    debounce_ms: int = 50
    poll_interval_ms: int = 1000
    mutation_check_ms: int = 100
    move_list_limit: int = 10
    producer_reconnect_ms: int = 3000

    # Overlay
    renderer_reconnect_ms: int = 2000
    animate_moves: bool = True
    animation_ms: int = 150
    show_coordinates: bool = True
    low_time_seconds: float = 30.0

    # Analyzer
    engine_path: str = ""
    engine_movetime_ms: int = 500

    log_level: str = "INFO"

    @property
    def producer_url(self) -> str:
        return f"ws://{self.host}:{self.port}/extension"

    @property
    def renderer_url(self) -> str:
        return f"ws://{self.host}:{self.port}/overlay"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MirrorSettings:
        """Build settings from ``CHESSMIRROR_*`` variables.

        Unparseable values are logged and the default is kept.
        """
        env = os.environ if environ is None else environ
        settings = cls()
        updates: dict[str, object] = {}
        for field in fields(cls):
            raw = env.get(ENV_PREFIX + field.name.upper())
            if raw is None:
                continue
            default = getattr(settings, field.name)
            try:
                updates[field.name] = _coerce(raw, default)
            except ValueError:
                _LOGGER.warning(
                    "Ignoring invalid %s%s=%r", ENV_PREFIX, field.name.upper(), raw
                )
        return replace(settings, **updates)

    def with_overrides(self, **overrides: object) -> MirrorSettings:
        """Copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def _coerce(raw: str, default: object) -> object:
    text = raw.strip()
    if isinstance(default, bool):
        lowered = text.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ValueError(raw)
    if isinstance(default, int):
        return int(text)
    if isinstance(default, float):
        return float(text)
    return text
