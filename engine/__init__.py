"""
engine/
-------
Execution, control & recording layer.

    from engine import Session, Runner, Recorder, compare
"""

from engine.config   import EngineConfig, DelayCurve, DELAY_CURVES, curve_for
from engine.controls import PlaybackControl, CancelToken
from engine.stepper  import Stepper, compute_delay
from engine.runner   import AlgorithmRun, Runner, RunStatus
from engine.session  import RunHandle, Session
from engine.recorder import Recorder, RunMetrics, ComparisonResult, compare, race
from engine.replay   import Replay, ReplayState
from engine.serialize import to_jsonable

__all__ = [
    "EngineConfig",
    "DelayCurve",
    "DELAY_CURVES",
    "curve_for",
    "PlaybackControl",
    "CancelToken",
    "Stepper",
    "compute_delay",
    "AlgorithmRun",
    "Runner",
    "RunStatus",
    "RunHandle",
    "Session",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "race",
    "Replay",
    "ReplayState",
    "to_jsonable",
]
