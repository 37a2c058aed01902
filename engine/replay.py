"""
replay.py — Step Navigation over a Recorded Run
================================================
Replay lets an observer walk back and forth through snapshots that were
already emitted (a Recorder's `steps`, or a RunHandle's `history`),
without re-running the algorithm.

State machine:
    IDLE    →  load()     →  PAUSED   (positioned on step 0)
    PAUSED  →  play()     →  PLAYING
    PLAYING →  pause()    →  PAUSED
    PLAYING →  (last step reached by tick) → FINISHED
    any     →  reset()    →  IDLE

Auto-play is driven by the caller: call `tick(now)` from a timer; it
advances at most one step per `interval_s`.
"""

import time
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class ReplayState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Replay
# ---------------------------------------------------------------------------
class Replay:
    """
    Attributes:
        state       : Current ReplayState.
        steps       : The snapshots being replayed.
        current_idx : Index into `steps` that is currently shown.
        interval_s  : Seconds between auto-advance ticks.
        on_step     : Optional callback(snapshot) fired whenever the
                      current step changes.
    """

    def __init__(
        self,
        steps: Optional[Sequence[Any]] = None,
        interval_s: float = 0.4,
        on_step: Optional[Callable[[Any], None]] = None,
    ):
        self.steps:       List[Any]   = []
        self.current_idx: int         = -1
        self.state:       ReplayState = ReplayState.IDLE
        self.interval_s:  float       = interval_s
        self.on_step = on_step

        self._last_tick: float = 0.0
        if steps is not None:
            self.load(steps)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, steps: Sequence[Any]) -> None:
        self.steps       = list(steps)
        self.current_idx = -1
        self.state       = ReplayState.PAUSED
        if self.steps:
            self._goto(0)

    def reset(self) -> None:
        self.steps       = []
        self.current_idx = -1
        self.state       = ReplayState.IDLE

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_step(self) -> bool:
        """Advance one step.  Returns False if already at the end."""
        if self.current_idx + 1 >= len(self.steps):
            self.state = ReplayState.FINISHED
            return False
        self._goto(self.current_idx + 1)
        return True

    def prev_step(self) -> bool:
        """Rewind one step.  Returns False if already at the start."""
        if self.current_idx <= 0:
            return False
        self._goto(self.current_idx - 1)
        if self.state is ReplayState.FINISHED:
            self.state = ReplayState.PAUSED
        return True

    def goto_step(self, idx: int) -> bool:
        if 0 <= idx < len(self.steps):
            self._goto(idx)
            if self.state is ReplayState.FINISHED and idx < len(self.steps) - 1:
                self.state = ReplayState.PAUSED
            return True
        return False

    def rewind(self) -> None:
        self.goto_step(0)

    def jump_to_end(self) -> None:
        if self.steps:
            self._goto(len(self.steps) - 1)
        self.state = ReplayState.FINISHED

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self, now: Optional[float] = None) -> None:
        if self.state in (ReplayState.FINISHED, ReplayState.IDLE):
            return
        self.state      = ReplayState.PLAYING
        self._last_tick = time.monotonic() if now is None else now

    def pause(self) -> None:
        if self.state is ReplayState.PLAYING:
            self.state = ReplayState.PAUSED

    def toggle_play(self) -> None:
        if self.state is ReplayState.PLAYING:
            self.pause()
        else:
            self.play()

    def tick(self, now: Optional[float] = None) -> bool:
        """Advance one step if playing and `interval_s` has elapsed."""
        if self.state is not ReplayState.PLAYING:
            return False
        now = time.monotonic() if now is None else now
        if now - self._last_tick < self.interval_s:
            return False
        self._last_tick = now
        advanced = self.next_step()
        if advanced and self.current_idx == len(self.steps) - 1:
            self.state = ReplayState.FINISHED
        return advanced

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Optional[Any]:
        if 0 <= self.current_idx < len(self.steps):
            return self.steps[self.current_idx]
        return None

    @property
    def is_finished(self) -> bool:
        return self.state is ReplayState.FINISHED

    @property
    def is_playing(self) -> bool:
        return self.state is ReplayState.PLAYING

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _goto(self, idx: int) -> None:
        self.current_idx = idx
        if self.on_step is not None:
            self.on_step(self.steps[idx])
