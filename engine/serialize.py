"""
serialize.py — JSON-safe conversion of snapshots and results
=============================================================
Snapshots and results are frozen dataclasses full of tuples, enums and
the occasional float('inf') (unreached Dijkstra distances).  Flask's
jsonify handles none of those the way an observer wants, so everything
goes through `to_jsonable` first:

    dataclass  → dict (fields + "type", + "cursor" for snapshots)
    tuple/set  → list
    Enum       → its value
    inf / nan  → None
"""

import dataclasses
import math
from enum import Enum
from typing import Any


def to_jsonable(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        return None if math.isinf(obj) or math.isnan(obj) else obj
    if isinstance(obj, Enum):
        return obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out = {"type": type(obj).__name__}
        for f in dataclasses.fields(obj):
            out[f.name] = to_jsonable(getattr(obj, f.name))
        if "cursor" not in out and hasattr(type(obj), "cursor"):
            out["cursor"] = to_jsonable(obj.cursor)
        return out
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, (set, frozenset)):
        return [to_jsonable(v) for v in sorted(obj, key=repr)]
    return str(obj)
