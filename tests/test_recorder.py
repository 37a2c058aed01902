"""Tests for recording, comparison, replay and JSON conversion."""

import json
import math

import pytest

from algorithms.step import ArrayStep, GraphStep
from engine.recorder import Recorder, compare, race
from engine.replay import Replay, ReplayState
from engine.runner import RunStatus
from engine.serialize import to_jsonable

MST_INPUT = {
    "nodes": ["A", "B", "C", "D", "E"],
    "edges": [
        {"source": "A", "target": "B", "weight": 2},
        {"source": "A", "target": "D", "weight": 6},
        {"source": "B", "target": "C", "weight": 3},
        {"source": "B", "target": "D", "weight": 8},
        {"source": "B", "target": "E", "weight": 5},
        {"source": "C", "target": "E", "weight": 7},
        {"source": "D", "target": "E", "weight": 9},
    ],
}


def record(algorithm_id, input, options=None):
    rec = Recorder()
    rec.start(algorithm_id, input, options)
    rec.run_to_completion()
    return rec


class TestRecorder:
    """Delay-free recording and metrics."""

    def test_records_every_step(self):
        """steps and metrics agree on the count."""
        rec = record("bubble-sort", [3, 1, 2])
        assert rec.result == [1, 2, 3]
        assert rec.metrics.total_steps == len(rec.steps) == rec.run.steps_emitted
        assert rec.metrics.status == "completed"
        assert rec.metrics.family == "sorting"
        assert rec.get_metrics() is rec.metrics

    def test_action_counts(self):
        """actions tallies snapshot actions."""
        rec = record("bubble-sort", [2, 1])
        assert rec.metrics.actions == {"init": 1, "compare": 1, "swap": 1}

    def test_playback_options_ignored(self):
        """speed and paused never reach the algorithm and never block."""
        rec = record("bubble-sort", [2, 1], {"speed": 0, "paused": True})
        assert rec.run.status is RunStatus.COMPLETED
        assert rec.run.options == {}

    def test_graph_metrics(self):
        """Graph runs report nodes visited from the last snapshot."""
        rec = record("bfs", MST_INPUT, {"start": "A"})
        assert isinstance(rec.steps[-1], GraphStep)
        assert rec.metrics.nodes_visited == 5

    def test_run_before_start(self):
        """run_to_completion requires start()."""
        with pytest.raises(RuntimeError):
            Recorder().run_to_completion()

    def test_export_is_json_safe(self):
        """Dijkstra's infinite distances export as null."""
        data = {"nodes": ["A", "B", "Z"], "edges": [{"source": "A", "target": "B", "weight": 1}]}
        rec = record("dijkstra", data, {"start": "A"})
        dump = rec.export()
        json.dumps(dump)
        assert dump["algorithm"] == "dijkstra"
        assert dump["result"]["distances"]["Z"] is None
        assert dump["steps"][0]["type"] == "GraphStep"
        assert "cursor" in dump["steps"][0]
        assert dump["metrics"]["total_steps"] == len(dump["steps"])


class TestComparison:
    """Race mode."""

    def test_mst_algorithms_agree(self):
        """Kruskal and Prim find spanning trees of equal weight."""
        result = race("kruskal", "prim", MST_INPUT, {"start": "A"})
        assert result.results_agree
        assert result.left.algorithm == "kruskal"
        assert result.right.algorithm == "prim"

    def test_sorts_agree_and_step_winner(self):
        """Bubble sort wins on already-sorted input."""
        result = race("bubble-sort", "merge-sort", [1, 2, 3, 4])
        assert result.results_agree
        assert result.winner_steps == "bubble-sort"

    def test_different_answers_disagree(self):
        """Different inputs' results do not agree."""
        left = record("fibonacci", 10)
        right = record("fibonacci", 11)
        assert not compare(left, right).results_agree

    def test_tie(self):
        """Identical step counts are a tie."""
        result = race("linear-search", "linear-search", {"array": [1, 2], "target": 2})
        assert result.winner_steps == "tie"
        assert result.results_agree


class TestRecordingCap:
    """Recorder stops a run that outgrows max_steps."""

    def test_stops_past_the_cap(self):
        """Only max_steps snapshots are kept and the run is cancelled."""
        rec = Recorder(max_steps=5)
        rec.start("bubble-sort", [5, 4, 3, 2, 1])
        metrics = rec.run_to_completion()
        assert rec.truncated
        assert len(rec.steps) == 5
        assert rec.run.status is RunStatus.CANCELLED
        assert rec.result is None
        assert metrics.truncated
        assert metrics.total_steps == 5
        assert sum(metrics.actions.values()) == 5
        assert rec.export()["truncated"] is True

    def test_exactly_at_the_cap_completes(self):
        """A run whose last snapshot fills the cap is not truncated."""
        rec = Recorder(max_steps=3)
        rec.start("bubble-sort", [2, 1])
        rec.run_to_completion()
        assert not rec.truncated
        assert rec.run.status is RunStatus.COMPLETED
        assert rec.result == [1, 2]

    def test_stops_a_cancellable_search(self):
        """A backtracking search is cut off early instead of exhausted."""
        rec = Recorder(max_steps=50)
        rec.start("sudoku-solver", None, {"difficulty": "hard"})
        rec.run_to_completion()
        assert rec.truncated
        assert rec.run.steps_emitted <= 51
        assert len(rec.steps) == 50

    def test_truncated_run_never_wins(self):
        """A cut-off run loses on steps and its result is not compared."""
        left = Recorder(max_steps=2)
        left.start("bubble-sort", [5, 4, 3, 2, 1])
        left.run_to_completion()
        right = record("merge-sort", [5, 4, 3, 2, 1])
        result = compare(left, right)
        assert result.winner_steps == "merge-sort"
        assert result.winner_time == "merge-sort"
        assert not result.results_agree

    def test_race_passes_the_cap(self):
        """race() applies max_steps to both sides."""
        result = race("bubble-sort", "insertion-sort", [4, 3, 2, 1], max_steps=4)
        assert result.left.truncated and result.right.truncated
        assert result.left.total_steps == result.right.total_steps == 4

    def test_cap_must_be_positive(self):
        """max_steps below 1 is rejected."""
        with pytest.raises(ValueError):
            Recorder(max_steps=0)


class TestReplay:
    """Navigation over recorded snapshots."""

    STEPS = ["s0", "s1", "s2", "s3"]

    def test_load_positions_on_first_step(self):
        """Loading goes to PAUSED on step 0."""
        seen = []
        replay = Replay(self.STEPS, on_step=seen.append)
        assert replay.state is ReplayState.PAUSED
        assert replay.current_step == "s0"
        assert seen == ["s0"]

    def test_next_and_prev(self):
        """Stepping forward past the end finishes; stepping back resumes."""
        replay = Replay(self.STEPS)
        assert replay.prev_step() is False
        for _ in range(3):
            assert replay.next_step()
        assert replay.next_step() is False
        assert replay.is_finished
        assert replay.prev_step()
        assert replay.state is ReplayState.PAUSED
        assert replay.current_step == "s2"

    def test_goto_and_jumps(self):
        """goto_step bounds-checks; rewind and jump_to_end go to the ends."""
        replay = Replay(self.STEPS)
        assert replay.goto_step(2)
        assert replay.goto_step(9) is False
        replay.jump_to_end()
        assert replay.current_step == "s3"
        assert replay.is_finished
        replay.rewind()
        assert replay.current_step == "s0"
        assert replay.state is ReplayState.PAUSED

    def test_tick_respects_interval(self):
        """Auto-play advances one step per interval and stops at the end."""
        replay = Replay(self.STEPS, interval_s=1.0)
        replay.play(now=0.0)
        assert replay.is_playing
        assert replay.tick(now=0.5) is False
        assert replay.tick(now=1.0)
        assert replay.tick(now=2.0)
        assert replay.tick(now=3.0)
        assert replay.current_step == "s3"
        assert replay.is_finished
        assert replay.tick(now=4.0) is False

    def test_toggle_and_reset(self):
        """toggle_play flips PLAYING/PAUSED; reset empties."""
        replay = Replay(self.STEPS)
        replay.toggle_play()
        assert replay.is_playing
        replay.toggle_play()
        assert replay.state is ReplayState.PAUSED
        replay.reset()
        assert replay.state is ReplayState.IDLE
        assert replay.current_step is None
        replay.play()
        assert replay.state is ReplayState.IDLE

    def test_replays_recorded_run(self):
        """A Recorder's steps can be replayed."""
        rec = record("bubble-sort", [2, 1])
        replay = Replay(rec.steps)
        replay.jump_to_end()
        assert replay.current_step.array == (1, 2)


class TestToJsonable:
    """Snapshot and result conversion."""

    def test_snapshot_dataclass(self):
        """Dataclasses become dicts with type and cursor."""
        out = to_jsonable(ArrayStep((3, 1), 0, 1, "swap"))
        assert out == {
            "type": "ArrayStep", "array": [3, 1], "current": 0, "compare": 1,
            "action": "swap", "delay_factor": 1.0, "cursor": [0, 1],
        }

    def test_scalars(self):
        """inf and nan become None; enums become values."""
        assert to_jsonable(math.inf) is None
        assert to_jsonable(float("nan")) is None
        assert to_jsonable(RunStatus.PAUSED) == "paused"
        assert to_jsonable(2.5) == 2.5

    def test_containers(self):
        """Tuples and sets become lists; dict keys become strings."""
        assert to_jsonable((1, (2, 3))) == [1, [2, 3]]
        assert to_jsonable({3, 1, 2}) == [1, 2, 3]
        assert to_jsonable({1: math.inf}) == {"1": None}

    def test_fallback_to_str(self):
        """Unknown objects are stringified."""
        assert to_jsonable(object).startswith("<class")
