from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().casefold() not in {"0", "false", "no", "off"}


def _env_float(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return max(0.0, float(value))
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class QueueConfig:
    # Delay between two normal entries of a timed queue. Instant entries skip it.
    tick_delay_s: float = 0.0
    # How often a timed queue re-checks an entry it is waiting on.
    poll_interval_s: float = 0.05
    # Emit command reports to the debug logger.
    debug: bool = True


def load_queue_config(environ: Mapping[str, str] | None = None) -> QueueConfig:
    """Read queue settings from the environment.

    SCRIPTCORE_TICK_DELAY_S, SCRIPTCORE_POLL_INTERVAL_S, SCRIPTCORE_DEBUG
    """

    env = os.environ if environ is None else environ
    defaults = QueueConfig()
    return QueueConfig(
        tick_delay_s=_env_float(env.get("SCRIPTCORE_TICK_DELAY_S"), defaults.tick_delay_s),
        poll_interval_s=_env_float(env.get("SCRIPTCORE_POLL_INTERVAL_S"), defaults.poll_interval_s),
        debug=_env_bool(env.get("SCRIPTCORE_DEBUG"), defaults.debug),
    )
