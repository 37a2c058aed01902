"""
stepper.py — Cooperative Stepper
==================================
The suspension primitive every algorithm step passes through.

    stepper = Stepper(curve_for("sorting"))
    stepper.step(lambda: control.is_running, control.speed)

`step()` either waits out the speed-derived delay, or, when the run is
paused, polls the running flag every `poll_interval_ms` until it flips
back.  It is called BETWEEN state mutations, so a paused run always shows
a consistent state.

The stepper is pure control flow: it never raises.  `sleep` is injectable
so tests can run without real time passing.
"""

import time
from typing import Callable, Optional

from engine.config import DEFAULT_CURVE, POLL_INTERVAL_MS, DelayCurve


def compute_delay(speed: float, curve: DelayCurve = DEFAULT_CURVE) -> int:
    """Milliseconds to wait after a step at `speed` (0–100)."""
    return curve.delay_ms(speed)


class Stepper:
    """
    Attributes:
        curve            : Speed → delay mapping for this run's family.
        poll_interval_ms : Pause polling interval.
        delay_scale      : Multiplier on every delay (0 = no waiting).
        polls            : Total pause polls so far (observability / tests).
    """

    def __init__(
        self,
        curve: DelayCurve = DEFAULT_CURVE,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        delay_scale: float = 1.0,
        sleep: Optional[Callable[[float], object]] = None,
    ):
        self.curve:            DelayCurve = curve
        self.poll_interval_ms: int        = poll_interval_ms
        self.delay_scale:      float      = delay_scale
        self.polls:            int        = 0
        self._sleep = sleep or time.sleep

    def compute_delay(self, speed: float) -> int:
        return compute_delay(speed, self.curve)

    def await_resumed(
        self,
        is_running: Callable[[], bool],
        cancelled: Optional[Callable[[], bool]] = None,
    ) -> int:
        """Block until is_running() (or cancelled()) is true.  Returns the poll count."""
        polls = 0
        while not is_running():
            if cancelled is not None and cancelled():
                break
            self._sleep(self.poll_interval_ms / 1000)
            polls += 1
        self.polls += polls
        return polls

    def step(
        self,
        is_running: Callable[[], bool],
        speed: float,
        factor: float = 1.0,
        cancelled: Optional[Callable[[], bool]] = None,
    ) -> float:
        """One suspension point.  Returns the delay waited, in ms (0 after a pause)."""
        if not is_running():
            self.await_resumed(is_running, cancelled)
            return 0.0
        delay = self.compute_delay(speed) * factor * self.delay_scale
        if delay > 0:
            self._sleep(delay / 1000)
        return delay
