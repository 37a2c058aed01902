"""
main.py — Algorithm Step Engine Flask App
==========================================
JSON API over the execution engine.

Routes:
  GET  /api/algorithms            – registry listing (?family= filter)
  GET  /api/algorithms/<key>      – one entry, with pseudocode
  POST /api/run                   – start a run {algorithm, input, options}
  POST /api/run/pause             – pause the active run
  POST /api/run/resume            – resume it
  POST /api/run/speed             – {speed: 0..100}
  POST /api/run/cancel            – cancel it
  POST /api/run/reset             – cancel and forget it
  GET  /api/run/state             – status, latest snapshot, result when done
  GET  /api/run/steps             – snapshots since ?since=N (for polling)
  POST /api/record                – run to completion without delays, return the steps
                                    (stops at HISTORY_LIMIT, reported as "truncated")
  POST /api/compare               – race two algorithms on the same input

State management:
  Each browser session (Flask `session["sid"]`) owns one engine Session,
  kept in memory in this process.  Starting a run supersedes the
  session's previous run.  At most MAX_SESSIONS are kept; the least
  recently used are evicted, idle ones first.

Configuration:
  app.config defaults below, overridable from the environment with the
  ALGOSTEP_ prefix, e.g. ALGOSTEP_DELAY_SCALE=0 or
  ALGOSTEP_POLL_INTERVAL_MS=20.
"""

import logging
import secrets
import threading
from collections import OrderedDict
from typing import Dict, List

from flask import Flask, jsonify, request, session

from algorithms import get_algorithm, list_algorithms, algorithms_by_family, AlgoInfo
from algorithms.errors import EngineError, InvalidInputError
from engine import EngineConfig, RunStatus, Recorder, Session, race, to_jsonable
from engine.config import DEFAULT_SPEED, HISTORY_LIMIT, JOIN_TIMEOUT_S, POLL_INTERVAL_MS

MAX_SESSIONS = 256   # engine sessions kept before the least recently used are evicted

logger = logging.getLogger(__name__)


app = Flask(__name__)
app.secret_key = secrets.token_hex(32)
app.config.update(
    POLL_INTERVAL_MS=POLL_INTERVAL_MS,
    DEFAULT_SPEED=DEFAULT_SPEED,
    DELAY_SCALE=1.0,
    HISTORY_LIMIT=HISTORY_LIMIT,
    MAX_SESSIONS=MAX_SESSIONS,
    JOIN_TIMEOUT_S=JOIN_TIMEOUT_S,
)
app.config.from_prefixed_env("ALGOSTEP")

# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
_SESSIONS: Dict[str, Session] = OrderedDict()   # least recently used first
_SESSIONS_LOCK = threading.Lock()


def get_engine_session() -> Session:
    """The engine Session bound to this browser session, created on first use."""
    sid = session.get("sid")
    if sid is None:
        sid = secrets.token_hex(16)
        session["sid"] = sid
    with _SESSIONS_LOCK:
        engine_session = _SESSIONS.get(sid)
        if engine_session is None:
            engine_session = Session(EngineConfig.from_mapping(app.config), session_id=sid)
            _SESSIONS[sid] = engine_session
            evicted = _pick_evictions(int(app.config["MAX_SESSIONS"]))
        else:
            _SESSIONS.move_to_end(sid)
            evicted = []
    for old in evicted:
        old.reset()
    return engine_session


def _pick_evictions(limit: int) -> List[Session]:
    """
    Drop sessions past `limit`, oldest first.  Idle sessions (no run, or a
    finished one) go before sessions with a live run.  Caller holds the lock.
    """
    excess = len(_SESSIONS) - limit
    if excess <= 0:
        return []
    candidates = list(_SESSIONS.items())[:-1]   # never the session just created
    idle = [sid for sid, s in candidates if s.current is None or s.current.done]
    busy = [sid for sid, s in candidates if sid not in idle]
    evicted = [_SESSIONS.pop(sid) for sid in (idle + busy)[:excess]]
    logger.info("evicted %d engine session(s)", len(evicted))
    return evicted


def recording_limit() -> int:
    return EngineConfig.from_mapping(app.config).history_limit


def current_handle():
    return get_engine_session().current


def no_run():
    return jsonify({"error": "no active run"}), 404


def read_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidInputError("request body must be a JSON object")
    return body


def describe_algorithm(info: AlgoInfo, full: bool = False) -> dict:
    data = {
        "key":              info.key,
        "label":            info.label,
        "family":           info.family,
        "tags":             info.tags,
        "cancellable":      info.cancellable,
        "complexity_time":  info.complexity_time,
        "complexity_space": info.complexity_space,
        "description":      info.description,
    }
    if full:
        data["pseudocode"] = info.pseudocode
    return data


def describe_handle(handle, include_snapshot: bool = True) -> dict:
    state = handle.describe()
    if include_snapshot:
        state["snapshot"] = to_jsonable(handle.snapshot)
    if handle.status is RunStatus.COMPLETED:
        state["result"] = to_jsonable(handle.run.result)
    return state


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
@app.errorhandler(InvalidInputError)
def handle_invalid_input(exc):
    return jsonify({"error": str(exc), "kind": type(exc).__name__}), 400


@app.errorhandler(EngineError)
def handle_engine_error(exc):
    logger.error("engine error: %s", exc)
    return jsonify({"error": str(exc), "kind": type(exc).__name__}), 500


# ---------------------------------------------------------------------------
# API: Registry
# ---------------------------------------------------------------------------
@app.route("/api/algorithms")
def api_algorithms():
    family = request.args.get("family")
    infos  = algorithms_by_family(family) if family else list_algorithms()
    return jsonify({"algorithms": [describe_algorithm(info) for info in infos]})


@app.route("/api/algorithms/<key>")
def api_algorithm(key):
    info = get_algorithm(key)
    if info is None:
        return jsonify({"error": f"unknown algorithm {key!r}"}), 404
    return jsonify(describe_algorithm(info, full=True))


# ---------------------------------------------------------------------------
# API: Run lifecycle
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    body = read_body()
    algorithm = body.get("algorithm")
    if not algorithm:
        raise InvalidInputError("'algorithm' is required")

    handle = get_engine_session().start_run(algorithm, body.get("input"), body.get("options") or {})
    return jsonify(describe_handle(handle, include_snapshot=False)), 202


@app.route("/api/run/pause", methods=["POST"])
def api_run_pause():
    handle = current_handle()
    if handle is None:
        return no_run()
    handle.pause()
    return jsonify(describe_handle(handle, include_snapshot=False))


@app.route("/api/run/resume", methods=["POST"])
def api_run_resume():
    handle = current_handle()
    if handle is None:
        return no_run()
    handle.resume()
    return jsonify(describe_handle(handle, include_snapshot=False))


@app.route("/api/run/speed", methods=["POST"])
def api_run_speed():
    handle = current_handle()
    if handle is None:
        return no_run()
    handle.set_speed(read_body().get("speed"))
    return jsonify(describe_handle(handle, include_snapshot=False))


@app.route("/api/run/cancel", methods=["POST"])
def api_run_cancel():
    handle = current_handle()
    if handle is None:
        return no_run()
    handle.cancel()
    handle.join(get_engine_session().config.join_timeout_s)
    return jsonify(describe_handle(handle, include_snapshot=False))


@app.route("/api/run/reset", methods=["POST"])
def api_run_reset():
    get_engine_session().reset()
    return jsonify({"status": RunStatus.IDLE.value})


# ---------------------------------------------------------------------------
# API: Observation
# ---------------------------------------------------------------------------
@app.route("/api/run/state")
def api_run_state():
    handle = current_handle()
    if handle is None:
        return no_run()
    return jsonify(describe_handle(handle))


@app.route("/api/run/steps")
def api_run_steps():
    handle = current_handle()
    if handle is None:
        return no_run()
    since = request.args.get("since", 0, type=int)
    steps = handle.steps_since(since)
    return jsonify({
        "since":  since,
        "steps":  [to_jsonable(s) for s in steps],
        "status": handle.status.value,
    })


# ---------------------------------------------------------------------------
# API: Recording & comparison
# ---------------------------------------------------------------------------
@app.route("/api/record", methods=["POST"])
def api_record():
    body = read_body()
    algorithm = body.get("algorithm")
    if not algorithm:
        raise InvalidInputError("'algorithm' is required")

    rec = Recorder(recording_limit())
    rec.start(algorithm, body.get("input"), body.get("options") or {})
    rec.run_to_completion()
    return jsonify(rec.export())


@app.route("/api/compare", methods=["POST"])
def api_compare():
    body = read_body()
    algorithms = body.get("algorithms")
    if not isinstance(algorithms, list) or len(algorithms) != 2:
        raise InvalidInputError("'algorithms' must name exactly two algorithms")

    result = race(algorithms[0], algorithms[1], body.get("input"), body.get("options") or {}, recording_limit())
    return jsonify(to_jsonable(result))


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print("=" * 60)
    print("  Algorithm Step Engine")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000/api/algorithms")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000, threaded=True)
