"""
session.py — Threaded Runs & One-Run-per-Session
=================================================
RunHandle runs a Runner on a daemon thread and exposes the caller-side
API: controls, observation, and a Future for the result.

    session = Session()
    handle  = session.start_run("dijkstra", graph_input, {"start": "A"})
    handle.subscribe(print)          # called from the worker thread
    handle.pause(); handle.resume(); handle.set_speed(90)
    result  = handle.result(timeout=10)

Session owns at most one active run.  Starting a new run validates the
new input first (so a bad request leaves the old run alone), then
cancels the previous run, waits for its thread, and bumps a generation
counter.  A snapshot published by a superseded generation is dropped.
"""

import logging
import threading
import uuid
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional

from algorithms.errors import RunCancelled
from algorithms.validation import validate_speed
from engine.config import EngineConfig
from engine.controls import CancelToken, PlaybackControl
from engine.runner import AlgorithmRun, Runner, RunStatus

logger = logging.getLogger(__name__)

Subscriber = Callable[[Any], None]

# Options consumed by the session itself rather than the algorithm.
PLAYBACK_OPTIONS = ("speed", "paused")


# ---------------------------------------------------------------------------
# RunHandle
# ---------------------------------------------------------------------------
class RunHandle:
    """
    Attributes:
        id         : Opaque run id (hex string).
        generation : Session generation this run belongs to.
        future     : Resolves to the algorithm's result; cancelled when the
                     run is cancelled; carries the exception when aborted.
    """

    def __init__(
        self,
        runner: Runner,
        generation: int = 0,
        is_current: Optional[Callable[[int], bool]] = None,
        history_limit: Optional[int] = None,
    ):
        self.id:         str    = uuid.uuid4().hex
        self.generation: int    = generation
        self.future:     Future = Future()
        self.runner:     Runner = runner

        self._is_current  = is_current or (lambda _generation: True)
        self._lock        = threading.Lock()
        self._history:     Deque[Any]       = deque(maxlen=history_limit)
        self._subscribers: List[Subscriber] = []
        self._published:   int              = 0

        runner.on_snapshot = self._publish
        self._thread = threading.Thread(
            target=self._work,
            name=f"run-{runner.run_state.kind}-{generation}",
            daemon=True,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> "RunHandle":
        self._thread.start()
        return self

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker thread.  True if it has exited."""
        if self._thread.ident is not None:
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def result(self, timeout: Optional[float] = None) -> Any:
        return self.future.result(timeout)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def pause(self) -> None:
        logger.debug("pause requested: %s", self.id)
        self.runner.control.pause()

    def resume(self) -> None:
        logger.debug("resume requested: %s", self.id)
        self.runner.control.resume()

    def set_speed(self, speed: Any) -> None:
        self.runner.control.set_speed(speed)

    def cancel(self) -> None:
        logger.info("cancel requested: %s (%s)", self.id, self.kind)
        self.runner.cancel_token.cancel()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot callback.  Returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def history(self) -> List[Any]:
        with self._lock:
            return list(self._history)

    def steps_since(self, index: int) -> List[Any]:
        """Snapshots with absolute index ≥ `index` that are still retained."""
        with self._lock:
            offset = self._published - len(self._history)
            start  = max(0, index - offset)
            return list(self._history)[start:]

    @property
    def run(self) -> AlgorithmRun:
        return self.runner.run_state

    @property
    def kind(self) -> str:
        return self.run.kind

    @property
    def snapshot(self) -> Any:
        return self.run.snapshot

    @property
    def status(self) -> RunStatus:
        return self.run.status

    @property
    def done(self) -> bool:
        return self.future.done()

    def describe(self) -> Dict[str, Any]:
        run = self.run
        return {
            "id":            self.id,
            "algorithm":     run.kind,
            "status":        run.status.value,
            "steps_emitted": run.steps_emitted,
            "cursor":        run.cursor,
            "speed":         self.runner.control.speed,
            "running":       self.runner.control.is_running,
            "generation":    self.generation,
            "error":         str(run.error) if run.error else None,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _publish(self, snapshot: Any) -> None:
        if not self._is_current(self.generation):
            return
        with self._lock:
            self._history.append(snapshot)
            self._published += 1
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(snapshot)

    def _work(self) -> None:
        try:
            result = self.runner.run()
        except RunCancelled:
            self.future.cancel()
        except Exception as exc:
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
class Session:

    def __init__(self, config: Optional[EngineConfig] = None, session_id: Optional[str] = None):
        self.config: EngineConfig = config or EngineConfig()
        self.id:     str          = session_id or uuid.uuid4().hex
        self._lock       = threading.Lock()
        self._generation = 0
        self._handle: Optional[RunHandle] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current(self) -> Optional[RunHandle]:
        return self._handle

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def start_run(
        self,
        algorithm_id: str,
        input: Any,
        options: Optional[Mapping[str, Any]] = None,
    ) -> RunHandle:
        """Validate, supersede the active run (if any), and start a new one."""
        options = dict(options or {})
        speed   = validate_speed(options.pop("speed", self.config.default_speed))
        paused  = bool(options.pop("paused", False))

        run    = AlgorithmRun(algorithm_id, input, options)
        runner = Runner.create(
            run,
            control=PlaybackControl(speed=speed, running=not paused),
            cancel_token=CancelToken(),
            config=self.config,
        )

        with self._lock:
            self._stop_current()
            self._generation += 1
            handle = RunHandle(
                runner,
                generation=self._generation,
                is_current=self.is_current,
                history_limit=self.config.history_limit,
            )
            self._handle = handle
        logger.info("session %s: generation %d runs %s", self.id, handle.generation, run.kind)
        return handle.start()

    def reset(self) -> None:
        """Cancel the active run and forget it."""
        with self._lock:
            self._stop_current()
            self._generation += 1
            self._handle = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _stop_current(self) -> None:
        handle = self._handle
        if handle is None:
            return
        handle.cancel()
        if not handle.join(self.config.join_timeout_s):
            logger.warning("run %s did not stop within %.1fs", handle.id, self.config.join_timeout_s)
