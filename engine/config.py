"""
config.py — Engine Timing Configuration
========================================
Speed (0–100) → delay (ms) curves, one per algorithm family, plus the
knobs a host application may override.

Each curve is linear and strictly decreasing over integer speeds:

    delay_ms(speed) = floor(slowest - speed/100 * (slowest - fastest))

so speed 0 is the slowest delay and speed 100 the fastest.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class DelayCurve:
    slowest_ms: int
    fastest_ms: int

    def delay_ms(self, speed: float) -> int:
        speed = min(100.0, max(0.0, float(speed)))
        return math.floor(self.slowest_ms - speed / 100 * (self.slowest_ms - self.fastest_ms))


# ---------------------------------------------------------------------------
# Per-family calibration
# ---------------------------------------------------------------------------
DELAY_CURVES: Dict[str, DelayCurve] = {
    "sorting":      DelayCurve(1000, 50),
    "searching":    DelayCurve(1000, 50),
    "graph":        DelayCurve(800, 50),
    "dp":           DelayCurve(800, 50),
    "greedy":       DelayCurve(800, 50),
    "backtracking": DelayCurve(800, 20),
    "tree":         DelayCurve(1000, 100),
    "math":         DelayCurve(800, 50),
}

DEFAULT_CURVE = DelayCurve(800, 50)

POLL_INTERVAL_MS = 50          # how often a paused run re-checks the running flag
DEFAULT_SPEED    = 50
HISTORY_LIMIT    = 10_000      # snapshots a RunHandle keeps for late observers
JOIN_TIMEOUT_S   = 5.0         # how long Session waits for a cancelled run to unwind


def curve_for(family: str) -> DelayCurve:
    return DELAY_CURVES.get(family, DEFAULT_CURVE)


@dataclass(frozen=True)
class EngineConfig:
    """
    Attributes:
        poll_interval_ms : Pause polling interval.
        default_speed    : Speed used when a run request names none.
        delay_scale      : Multiplier on every step delay.  0 disables
                           delays entirely (tests, batch recording).
        history_limit    : Snapshots kept per run (oldest dropped first);
                           also the cap on a Recorder run.
        join_timeout_s   : Wait for a superseded run's thread to exit.
    """

    poll_interval_ms: int   = POLL_INTERVAL_MS
    default_speed:    int   = DEFAULT_SPEED
    delay_scale:      float = 1.0
    history_limit:    int   = HISTORY_LIMIT
    join_timeout_s:   float = JOIN_TIMEOUT_S

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "EngineConfig":
        """Build from a flat mapping such as Flask's app.config (upper- or lower-case keys)."""
        def pick(name: str, default: Any) -> Any:
            for key in (name.upper(), name):
                if key in mapping:
                    return mapping[key]
            return default

        return cls(
            poll_interval_ms=int(pick("poll_interval_ms", POLL_INTERVAL_MS)),
            default_speed=int(pick("default_speed", DEFAULT_SPEED)),
            delay_scale=float(pick("delay_scale", 1.0)),
            history_limit=int(pick("history_limit", HISTORY_LIMIT)),
            join_timeout_s=float(pick("join_timeout_s", JOIN_TIMEOUT_S)),
        )
