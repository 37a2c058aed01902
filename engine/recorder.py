"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete algorithm run (every snapshot) with no delays, then
computes the analytics metrics used by the comparison ("race") mode.

Usage:
    rec = Recorder()
    rec.start("merge-sort", [5, 1, 4], {"ascending": True})
    rec.run_to_completion()          # exhausts the generator
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # JSON-safe dump for save / replay

Comparison Mode:
    Two Recorders run on the SAME input, then compare(rec1, rec2) →
    ComparisonResult.  `race()` does all of that in one call.
"""

import logging
import sys
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from algorithms.errors import RunCancelled
from algorithms.step import GraphStep
from engine.config import HISTORY_LIMIT, EngineConfig
from engine.controls import CancelToken, PlaybackControl
from engine.runner import AlgorithmRun, Runner, RunStatus
from engine.serialize import to_jsonable
from engine.stepper import Stepper

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass: what the analytics card renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algorithm:     str            = ""
    label:         str            = ""
    family:        str            = ""
    status:        str            = ""
    total_steps:   int            = 0          # number of snapshots emitted
    truncated:     bool           = False      # stopped at the recording cap
    wall_time_ms:  float          = 0.0        # wall-clock time to run to completion
    memory_bytes:  int            = 0          # approx size of the snapshot buffer
    actions:       Dict[str, int] = field(default_factory=dict)   # snapshot action → count
    nodes_visited: int            = 0          # graph runs only
    edges_examined: int           = 0          # graph runs only


# ---------------------------------------------------------------------------
# ComparisonResult: side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_steps:   str  = ""   # which algorithm needed fewer snapshots
    winner_time:    str  = ""
    results_agree:  bool = False


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Recording stops once more than `max_steps` snapshots arrive: the run is
    cancelled and `truncated` is set.
    Metrics then describe the recorded prefix only.

    Attributes:
        steps     : Snapshots from the run, oldest first (at most max_steps).
        truncated : True when the run was stopped at the cap.
        metrics   : Computed RunMetrics (available after run_to_completion).
        result    : The algorithm's return value (None when truncated).
        run       : The AlgorithmRun record.
    """

    def __init__(self, max_steps: int = HISTORY_LIMIT):
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self.max_steps                       = max_steps
        self.steps:   List[Any]              = []
        self.truncated                       = False
        self.metrics: Optional[RunMetrics]   = None
        self.result:  Any                    = None
        self.run:     Optional[AlgorithmRun] = None

        self._runner: Optional[Runner]      = None
        self._cancel: Optional[CancelToken] = None
        self._actions: Counter              = Counter()

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algorithm_id: str, input: Any, options: Optional[Mapping[str, Any]] = None) -> None:
        """Validate the input and prepare a delay-free runner."""
        options = {k: v for k, v in dict(options or {}).items() if k not in ("speed", "paused")}
        self.run     = AlgorithmRun(algorithm_id, input, options)
        self.steps     = []
        self.truncated = False
        self.metrics   = None
        self.result    = None
        self._actions  = Counter()
        self._cancel   = CancelToken()
        self._runner   = Runner.create(
            self.run,
            control=PlaybackControl(speed=100),
            cancel_token=self._cancel,
            config=EngineConfig(delay_scale=0.0),
            on_snapshot=self.record_step,
            stepper=Stepper(delay_scale=0.0),
        )

    def run_to_completion(self) -> RunMetrics:
        """Exhaust the generator, record every step, compute metrics."""
        if self._runner is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        try:
            self.result = self._runner.run()
        except RunCancelled:
            if not self.truncated:
                raise
            logger.warning("recording of %s stopped after %d steps", self.run.kind, self.max_steps)
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        logger.debug("recorded %s: %d steps in %.2f ms", self.run.kind, len(self.steps), wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    def record_step(self, step: Any) -> None:
        if len(self.steps) >= self.max_steps:
            self.truncated = True
            self._cancel.cancel()
            return
        self.steps.append(step)
        action = getattr(step, "action", "")
        if action:
            self._actions[action] += 1

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        run = self.run
        return {
            "algorithm": run.kind if run else "",
            "input":     to_jsonable(run.input) if run else None,
            "options":   to_jsonable(run.options) if run else {},
            "truncated": self.truncated,
            "metrics":   to_jsonable(self.metrics) if self.metrics else {},
            "result":    to_jsonable(self.result),
            "steps":     [to_jsonable(s) for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        run  = self.run
        info = run.info
        last = self.steps[-1] if self.steps else None

        nodes_visited = edges_examined = 0
        if isinstance(last, GraphStep):
            nodes_visited  = len(last.visited)
            edges_examined = sum(1 for e in last.explored if e.kind == "examining")

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(self.steps)
        for s in self.steps:
            mem += sys.getsizeof(s)

        return RunMetrics(
            algorithm=info.key,
            label=info.label,
            family=info.family,
            status=run.status.value,
            total_steps=len(self.steps),
            truncated=self.truncated,
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
            actions=dict(self._actions),
            nodes_visited=nodes_visited,
            edges_examined=edges_examined,
        )


# ---------------------------------------------------------------------------
# Comparison helpers
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val):
        # lower wins; a truncated run never beats a finished one
        l_val, r_val = (l.truncated, l_val), (r.truncated, r_val)
        if l_val == r_val:
            return "tie"
        return l.algorithm if l_val < r_val else r.algorithm

    both_done = (
        left.run is not None and right.run is not None
        and left.run.status is RunStatus.COMPLETED
        and right.run.status is RunStatus.COMPLETED
    )
    return ComparisonResult(
        left=l,
        right=r,
        winner_steps=winner(l.total_steps, r.total_steps),
        winner_time=winner(l.wall_time_ms, r.wall_time_ms),
        results_agree=both_done and _answer(left.result) == _answer(right.result),
    )


def race(
    left_id: str,
    right_id: str,
    input: Any,
    options: Optional[Mapping[str, Any]] = None,
    max_steps: int = HISTORY_LIMIT,
) -> ComparisonResult:
    """Record two algorithms on the same input and compare them."""
    recorders = []
    for algorithm_id in (left_id, right_id):
        rec = Recorder(max_steps)
        rec.start(algorithm_id, input, options)
        rec.run_to_completion()
        recorders.append(rec)
    return compare(*recorders)


def _answer(result: Any) -> Any:
    """The part of a result two different algorithms should agree on."""
    for attr in ("value", "solutions", "total_weight", "answer"):
        if hasattr(result, attr):
            return to_jsonable(getattr(result, attr))
    return to_jsonable(result)
