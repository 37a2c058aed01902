"""
controls.py — Playback Control Channels
========================================
The three channels a caller uses to steer a run:

    PlaybackControl.is_running  – flip to False to pause, True to resume
    PlaybackControl.speed       – 0 (slowest) .. 100 (fastest)
    CancelToken                 – one-way "abandon this run" signal

Only the caller mutates these; the engine only reads them.  Reads are of
plain scalars (or a threading.Event), so no extra locking is needed.
"""

import threading

from algorithms.validation import validate_speed
from engine.config import DEFAULT_SPEED


class PlaybackControl:

    def __init__(self, speed: int = DEFAULT_SPEED, running: bool = True):
        self.speed:      int  = validate_speed(speed)
        self.is_running: bool = running

    def pause(self) -> None:
        self.is_running = False

    def resume(self) -> None:
        self.is_running = True

    def set_speed(self, speed: int) -> None:
        self.speed = validate_speed(speed)

    def __repr__(self) -> str:
        return f"PlaybackControl(running={self.is_running}, speed={self.speed})"


class CancelToken:
    """Backed by a threading.Event so a sleeping stepper can wake early."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds; True if cancelled meanwhile."""
        return self._event.wait(timeout)

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self.cancelled})"
