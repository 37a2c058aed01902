"""
runner.py — Synchronous Algorithm Runner
=========================================
Drives one algorithm generator to completion, honouring the three
control channels between every state mutation:

    run = AlgorithmRun("quick-sort", [5, 2, 9], {"ascending": True})
    runner = Runner.create(run, control=PlaybackControl(speed=80))
    runner.run()              # blocks; returns the algorithm's result

Loop, per iteration:
    1. cancel token fired?     → unwind (status CANCELLED)
    2. running flag false?     → status PAUSED, poll until resumed
    3. next(generator)         → one state mutation, one snapshot
    4. on_snapshot(snapshot)   → observers see it before the delay
    5. stepper.step(...)       → speed-derived delay (Tick: delay only)

Design decisions:
  - The live algorithm state never leaves the generator frame.  The run
    only ever holds the last frozen snapshot.
  - Input validation happens in `Runner.create` (via the registry's
    prepare function), so bad input raises before the run exists.
  - Anything the generator raises other than RunCancelled marks the run
    ABORTED, is logged, and propagates.
"""

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generator, Optional

from algorithms import AlgoInfo, create_generator, require_algorithm
from algorithms.errors import RunCancelled
from algorithms.step import Tick
from engine.config import EngineConfig, curve_for
from engine.controls import CancelToken, PlaybackControl
from engine.stepper import Stepper

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Run record
# ---------------------------------------------------------------------------
class RunStatus(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ABORTED   = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.CANCELLED, RunStatus.ABORTED)


@dataclass
class AlgorithmRun:
    """
    Attributes:
        kind          : Registry key of the algorithm.
        input         : The caller's input (a private deep copy).
        options       : Algorithm options (ascending, directed, start, …).
        status        : Current RunStatus.
        snapshot      : Latest snapshot emitted (None before the first).
        result        : The generator's return value once COMPLETED.
        error         : The exception that ABORTED the run, if any.
        steps_emitted : Number of snapshots emitted so far.
    """

    kind:          str
    input:         Any                     = None
    options:       Dict[str, Any]          = field(default_factory=dict)
    status:        RunStatus               = RunStatus.IDLE
    snapshot:      Any                     = None
    result:        Any                     = None
    error:         Optional[BaseException] = None
    steps_emitted: int                     = 0

    def __post_init__(self):
        self.kind    = require_algorithm(self.kind).key
        self.input   = copy.deepcopy(self.input)
        self.options = dict(self.options or {})

    @property
    def cursor(self) -> Any:
        return getattr(self.snapshot, "cursor", None)

    @property
    def info(self) -> AlgoInfo:
        return require_algorithm(self.kind)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------
class Runner:

    def __init__(
        self,
        run: AlgorithmRun,
        generator: Generator,
        control: PlaybackControl,
        cancel_token: CancelToken,
        stepper: Stepper,
        on_snapshot: Optional[Callable[[Any], None]] = None,
    ):
        self.run_state:    AlgorithmRun    = run
        self.control:      PlaybackControl = control
        self.cancel_token: CancelToken     = cancel_token
        self.stepper:      Stepper         = stepper
        self.on_snapshot = on_snapshot
        self._generator  = generator

    @classmethod
    def create(
        cls,
        run: AlgorithmRun,
        control: Optional[PlaybackControl] = None,
        cancel_token: Optional[CancelToken] = None,
        config: Optional[EngineConfig] = None,
        on_snapshot: Optional[Callable[[Any], None]] = None,
        stepper: Optional[Stepper] = None,
    ) -> "Runner":
        """Validate the run's input and wire up a ready-to-run Runner."""
        config       = config or EngineConfig()
        control      = control or PlaybackControl(speed=config.default_speed)
        cancel_token = cancel_token or CancelToken()
        generator    = create_generator(run.kind, run.input, run.options, cancel_token)
        if stepper is None:
            stepper = Stepper(
                curve_for(run.info.family),
                poll_interval_ms=config.poll_interval_ms,
                delay_scale=config.delay_scale,
                sleep=cancel_token.wait,
            )
        return cls(run, generator, control, cancel_token, stepper, on_snapshot)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> Any:
        run = self.run_state
        run.status = RunStatus.RUNNING
        logger.info("run started: %s (speed=%s)", run.kind, self.control.speed)
        try:
            while True:
                self._check_cancelled()
                if not self.control.is_running:
                    self._suspend()
                try:
                    item = next(self._generator)
                except StopIteration as stop:
                    run.result = stop.value
                    break
                if isinstance(item, Tick):
                    self._pause_point(item.delay_factor)
                    continue
                run.snapshot = item
                run.steps_emitted += 1
                if self.on_snapshot is not None:
                    self.on_snapshot(item)
                self._pause_point(getattr(item, "delay_factor", 1.0))
        except RunCancelled:
            run.status = RunStatus.CANCELLED
            self._generator.close()
            logger.info("run cancelled: %s after %d steps", run.kind, run.steps_emitted)
            raise
        except Exception as exc:
            run.status = RunStatus.ABORTED
            run.error  = exc
            self._generator.close()
            logger.exception("run aborted: %s after %d steps", run.kind, run.steps_emitted)
            raise

        run.status = RunStatus.COMPLETED
        logger.info("run completed: %s in %d steps", run.kind, run.steps_emitted)
        return run.result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _is_running(self) -> bool:
        return self.control.is_running

    def _is_cancelled(self) -> bool:
        return self.cancel_token.cancelled

    def _check_cancelled(self) -> None:
        if self.cancel_token.cancelled:
            raise RunCancelled()

    def _suspend(self) -> None:
        run = self.run_state
        run.status = RunStatus.PAUSED
        logger.debug("run paused: %s at step %d", run.kind, run.steps_emitted)
        self.stepper.await_resumed(self._is_running, self._is_cancelled)
        self._check_cancelled()
        run.status = RunStatus.RUNNING
        logger.debug("run resumed: %s", run.kind)

    def _pause_point(self, factor: float) -> None:
        if not self.control.is_running:
            self._suspend()
            return
        self.stepper.step(self._is_running, self.control.speed, factor, self._is_cancelled)
